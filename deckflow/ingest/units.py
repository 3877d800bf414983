"""EMU to percentage-of-canvas conversion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

EMU_PER_POINT = 12700
DEFAULT_SLIDE_WIDTH = 9144000
DEFAULT_SLIDE_HEIGHT = 6858000


def emu_to_percent(value: int, dimension: int) -> float:
    """Express ``value`` as a percentage of ``dimension``, clamped to [0, 100]."""
    if dimension <= 0:
        raise ValueError(f"Slide dimension must be positive, got {dimension}")
    pct = value / dimension * 100
    return round(min(100.0, max(0.0, pct)), 4)


def emu_to_points(value: int) -> float:
    return round(value / EMU_PER_POINT, 2)


@dataclass(frozen=True)
class UnitNormalizer:
    """Converts absolute shape extents to coordinates independent of aspect ratio."""

    slide_width: int = DEFAULT_SLIDE_WIDTH
    slide_height: int = DEFAULT_SLIDE_HEIGHT

    def __post_init__(self) -> None:
        if self.slide_width <= 0 or self.slide_height <= 0:
            raise ValueError(
                f"Invalid slide size {self.slide_width}x{self.slide_height}"
            )

    def x(self, value: int) -> float:
        return emu_to_percent(value, self.slide_width)

    def y(self, value: int) -> float:
        return emu_to_percent(value, self.slide_height)

    def box(self, left: int, top: int, width: int, height: int) -> Tuple[float, float, float, float]:
        """Return (x, y, width, height) percentages."""
        return self.x(left), self.y(top), self.x(width), self.y(height)
