from __future__ import annotations

from typing import List, Protocol

from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics


FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"


def font_name(bold: bool = False) -> str:
    return FONT_BOLD if bold else FONT_REGULAR


class TextMeasurer(Protocol):
    def width(self, text: str, size: float, bold: bool = False) -> float:
        ...

    def wrap(self, text: str, max_width: float, size: float, bold: bool = False) -> List[str]:
        ...


def wrap_words(measurer: TextMeasurer, text: str, max_width: float, size: float, bold: bool = False) -> List[str]:
    """
    Greedy word wrap. Hard newlines always break, and a single word wider than
    the line is split by characters so nothing runs past the cell edge.
    """
    lines: List[str] = []
    for paragraph in (text or "").split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        cur = ""
        for w in words:
            test = f"{cur} {w}" if cur else w
            if measurer.width(test, size, bold) <= max_width:
                cur = test
                continue

            if cur:
                lines.append(cur)
            cur = ""
            # 단어 하나가 너무 긴 경우: 글자 단위로 자른다
            while measurer.width(w, size, bold) > max_width and len(w) > 1:
                cut = len(w) - 1
                while cut > 1 and measurer.width(w[:cut], size, bold) > max_width:
                    cut -= 1
                lines.append(w[:cut])
                w = w[cut:]
            cur = w

        lines.append(cur)

    return lines or [""]


class ReportLabMeasurer:
    """Helvetica metrics from reportlab, in millimetres."""

    def width(self, text: str, size: float, bold: bool = False) -> float:
        return pdfmetrics.stringWidth(text or "", font_name(bold), size) / mm

    def wrap(self, text: str, max_width: float, size: float, bold: bool = False) -> List[str]:
        return wrap_words(self, text, max_width, size, bold)
