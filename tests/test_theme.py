from __future__ import annotations

import unittest

from curriculum.pipeline.theme import (
    NEUTRAL_GREY,
    WHITE,
    is_near_black,
    is_near_white,
    lighten,
    parse_hex,
    resolve_theme,
)


class ThemeTests(unittest.TestCase):
    def test_parse_hex_accepts_optional_hash_and_any_case(self) -> None:
        self.assertEqual(parse_hex("#FF8000"), (255, 128, 0))
        self.assertEqual(parse_hex("ff8000"), (255, 128, 0))
        self.assertEqual(parse_hex("#Ff8000"), (255, 128, 0))

    def test_malformed_color_falls_back_to_grey(self) -> None:
        for value in ["", "red", "#fff", "#12345g", None]:
            self.assertEqual(parse_hex(value), NEUTRAL_GREY)
        theme = resolve_theme("not-a-color")
        self.assertEqual(theme.bar, NEUTRAL_GREY)
        self.assertFalse(theme.light_text)

    def test_white_belt_gets_grey_bar_and_dark_text(self) -> None:
        theme = resolve_theme("#FFFFFF")
        self.assertEqual(theme.bar, (180, 180, 180))
        self.assertEqual(theme.tint, (228, 228, 228))
        self.assertFalse(theme.light_text)

    def test_black_belt_gets_near_black_bar_and_light_text(self) -> None:
        theme = resolve_theme("#000000")
        self.assertEqual(theme.bar, (25, 25, 25))
        self.assertEqual(theme.tint, (220, 220, 220))
        self.assertTrue(theme.light_text)
        self.assertEqual(theme.bar_text, WHITE)

    def test_regular_color_uses_tint_and_luminance(self) -> None:
        red = resolve_theme("#FF0000")
        self.assertEqual(red.bar, (255, 0, 0))
        self.assertEqual(red.tint, (255, 199, 199))
        self.assertTrue(red.light_text)

        yellow = resolve_theme("#FFFF00")
        self.assertFalse(yellow.light_text)

    def test_near_white_and_near_black_boundaries(self) -> None:
        self.assertTrue(is_near_white((241, 241, 241)))
        self.assertFalse(is_near_white((240, 255, 255)))
        self.assertTrue(is_near_black((29, 29, 29)))
        self.assertFalse(is_near_black((30, 0, 0)))
        self.assertEqual(resolve_theme("#F0F0F0").bar, (240, 240, 240))

    def test_classifications_never_overlap(self) -> None:
        for value in range(0, 256, 5):
            rgb = (value, value, value)
            self.assertFalse(is_near_white(rgb) and is_near_black(rgb))

    def test_resolve_is_deterministic(self) -> None:
        self.assertEqual(resolve_theme("#3366cc"), resolve_theme("#3366CC"))

    def test_lighten_rounds_half_up(self) -> None:
        self.assertEqual(lighten((0, 0, 0), 0.5), (128, 128, 128))
        self.assertEqual(lighten((255, 255, 255), 0.78), (255, 255, 255))

    def test_row_fill_alternates_tint_and_white(self) -> None:
        theme = resolve_theme("#3366CC")
        self.assertEqual(theme.row_fill(0), theme.tint)
        self.assertEqual(theme.row_fill(1), WHITE)
        self.assertEqual(theme.row_fill(2), theme.tint)


if __name__ == "__main__":
    unittest.main()
