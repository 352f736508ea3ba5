from dataclasses import dataclass
from functools import cached_property


def area_rectangular(width, height):
    """Cross-sectional area [m^2], never negative."""
    return max(0.0, width * height)


def perimeter_rectangular(width, height):
    return 2 * (width + height)


def hydraulic_diameter(area, perimeter):
    """4 A / P, or 0 for a collapsed section (zero area or perimeter)."""
    if area <= 0 or perimeter <= 0:
        return 0.0
    return 4 * area / perimeter


@dataclass(frozen=True)
class RectangularDuct:
    """Rectangular duct cross-section. Width and height in metres."""

    width: float
    height: float

    @classmethod
    def from_mm(cls, width_mm: float, height_mm: float) -> "RectangularDuct":
        return cls(width=width_mm / 1000, height=height_mm / 1000)

    @cached_property
    def area(self) -> float:
        return area_rectangular(self.width, self.height)

    @cached_property
    def perimeter(self) -> float:
        return perimeter_rectangular(self.width, self.height)

    @cached_property
    def hydraulic_diameter(self) -> float:
        return hydraulic_diameter(self.area, self.perimeter)

    @cached_property
    def aspect_ratio(self) -> float:
        """Long side over short side (>= 1), inf when one side is zero."""
        short, long = sorted((self.width, self.height))
        if short <= 0:
            return float("inf")
        return long / short
