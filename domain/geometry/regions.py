"""Service-area region with its exclusion zones.

Binds one service area, the exclusion polygons, and a PolygonTester so the
lattice and sampling stages share a single placement predicate.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from .ports import PolygonTester, RayCastingTester
from .services import polygon_area, polygon_bounds
from .value_objects import BoundingBox, Polygon

# Absorbs float drift when a lattice step lands exactly on the far bound
GRID_EPSILON = 1e-9


def axis_steps(start: float, stop: float, step: float) -> Iterator[float]:
    """Yield ``start + i * step`` for every value not beyond ``stop``."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    i = 0
    while True:
        value = start + i * step
        if value > stop + GRID_EPSILON:
            return
        yield value
        i += 1


@dataclass(frozen=True)
class AreaRegion:
    """A service area minus its exclusion zones."""

    area: Polygon
    exclusions: Sequence[Polygon] = ()
    tester: PolygonTester = field(default_factory=RayCastingTester)

    def __post_init__(self) -> None:
        # Degenerate exclusions exclude nothing
        object.__setattr__(
            self,
            "exclusions",
            tuple(ex for ex in self.exclusions if not ex.is_degenerate),
        )

    @property
    def is_degenerate(self) -> bool:
        return self.area.is_degenerate

    @property
    def bounds(self) -> BoundingBox:
        return polygon_bounds(self.area)

    @property
    def area_px(self) -> float:
        """Service-area size in squared pixels (exclusions not subtracted)."""
        return polygon_area(self.area)

    def is_excluded(self, x: float, y: float) -> bool:
        return any(self.tester.contains(x, y, ex) for ex in self.exclusions)

    def is_placeable(self, x: float, y: float) -> bool:
        """Inside the service area and outside every exclusion zone."""
        if self.is_degenerate:
            return False
        if not self.tester.contains(x, y, self.area):
            return False
        return not self.is_excluded(x, y)
