from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Tuple

RGB = Tuple[int, int, int]

NEUTRAL_GREY: RGB = (200, 200, 200)
WHITE: RGB = (255, 255, 255)

WHITE_BELT_BAR: RGB = (180, 180, 180)
WHITE_BELT_TINT: RGB = (228, 228, 228)
BLACK_BELT_BAR: RGB = (25, 25, 25)
BLACK_BELT_TINT: RGB = (220, 220, 220)
TINT_AMOUNT = 0.78

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)


@dataclass(frozen=True)
class Theme:
    bar: RGB
    tint: RGB
    light_text: bool

    @property
    def bar_text(self) -> RGB:
        return WHITE if self.light_text else (0, 0, 0)

    def row_fill(self, index: int) -> RGB:
        return self.tint if index % 2 == 0 else WHITE


def parse_hex(value: str) -> RGB:
    match = _HEX_RE.match(str(value or "").strip())
    if not match:
        return NEUTRAL_GREY
    return tuple(int(part, 16) for part in match.groups())  # type: ignore[return-value]


def lighten(rgb: RGB, amount: float) -> RGB:
    return tuple(int(math.floor(c + (255 - c) * amount + 0.5)) for c in rgb)  # type: ignore[return-value]


def luminance(rgb: RGB) -> float:
    return (0.299 * rgb[0] + 0.587 * rgb[1] + 0.114 * rgb[2]) / 255


def is_near_white(rgb: RGB) -> bool:
    return all(c > 240 for c in rgb)


def is_near_black(rgb: RGB) -> bool:
    return all(c < 30 for c in rgb)


def resolve_theme(color: str) -> Theme:
    """
    Derive title-bar colour, alternating row tint and bar text contrast from a
    single belt colour. White belts get grey bars so the title text stays visible.
    """
    rgb = parse_hex(color)
    if is_near_white(rgb):
        return Theme(bar=WHITE_BELT_BAR, tint=WHITE_BELT_TINT, light_text=False)
    if is_near_black(rgb):
        return Theme(bar=BLACK_BELT_BAR, tint=BLACK_BELT_TINT, light_text=True)
    return Theme(bar=rgb, tint=lighten(rgb, TINT_AMOUNT), light_text=luminance(rgb) <= 0.5)
