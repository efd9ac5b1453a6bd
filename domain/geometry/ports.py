"""Domain Port(s) for polygon membership.

The point-in-polygon predicate is injected once into the seeding and
sampling stages so the kernel can be swapped (e.g. a prepared-geometry
adapter from infrastructure) without touching the optimization logic.
"""

from __future__ import annotations

from typing import Protocol

from .services import point_in_polygon
from .value_objects import Polygon


class PolygonTester(Protocol):
    """Port for deciding whether a point lies inside a polygon.

    Implementations must be deterministic: the same point against the same
    polygon always yields the same answer, including on edges.
    """

    def contains(self, x: float, y: float, polygon: Polygon) -> bool:
        """Return True if ``(x, y)`` is inside ``polygon``."""
        ...


class RayCastingTester:
    """Default pure-Python tester backed by the ray-casting kernel."""

    def contains(self, x: float, y: float, polygon: Polygon) -> bool:
        return point_in_polygon(x, y, polygon)
