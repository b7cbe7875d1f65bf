from __future__ import annotations

from typing import List

import pytest

from curriculum.pipeline.measure import wrap_words


class FixedMeasurer:
    """Every character is 0.2 x font size millimetres wide, bold or not."""

    def width(self, text: str, size: float, bold: bool = False) -> float:  # noqa: ARG002 - matches TextMeasurer
        return len(text or "") * size * 0.2

    def wrap(self, text: str, max_width: float, size: float, bold: bool = False) -> List[str]:
        return wrap_words(self, text, max_width, size, bold)


@pytest.fixture
def measurer() -> FixedMeasurer:
    return FixedMeasurer()
