"""Unit normalization tests."""

import unittest

from deckflow.ingest.units import (
    DEFAULT_SLIDE_HEIGHT,
    DEFAULT_SLIDE_WIDTH,
    UnitNormalizer,
    emu_to_percent,
    emu_to_points,
)


class TestUnits(unittest.TestCase):
    def test_full_width_is_one_hundred(self) -> None:
        normalizer = UnitNormalizer()
        self.assertAlmostEqual(normalizer.x(DEFAULT_SLIDE_WIDTH), 100.0)
        self.assertAlmostEqual(normalizer.y(DEFAULT_SLIDE_HEIGHT), 100.0)

    def test_zero_extent_is_zero(self) -> None:
        self.assertEqual(UnitNormalizer().x(0), 0.0)

    def test_independent_axes(self) -> None:
        normalizer = UnitNormalizer(slide_width=12192000, slide_height=6858000)
        x, y, width, height = normalizer.box(1219200, 685800, 6096000, 3429000)
        self.assertEqual((x, y, width, height), (10.0, 10.0, 50.0, 50.0))

    def test_overflow_is_clamped(self) -> None:
        self.assertEqual(emu_to_percent(-500, 1000), 0.0)
        self.assertEqual(emu_to_percent(1500, 1000), 100.0)

    def test_rounded_to_four_places(self) -> None:
        self.assertEqual(emu_to_percent(1, 3), 33.3333)

    def test_invalid_dimension(self) -> None:
        with self.assertRaises(ValueError):
            emu_to_percent(10, 0)
        with self.assertRaises(ValueError):
            UnitNormalizer(slide_width=0, slide_height=100)

    def test_points(self) -> None:
        self.assertEqual(emu_to_points(12700), 1.0)
        self.assertEqual(emu_to_points(25400), 2.0)


if __name__ == "__main__":
    unittest.main()
