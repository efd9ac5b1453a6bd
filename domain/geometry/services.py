"""Geometry Bounded Context - Domain Services.

Total functions over polygons and points: malformed (degenerate) polygons
yield trivial results (False, 0.0) rather than errors.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from domain.geometry.value_objects import BoundingBox, Polygon

Vertex = tuple[float, float]


# ---------------------------------------------------------------------------
# Point in Polygon
# ---------------------------------------------------------------------------
def point_in_polygon(x: float, y: float, polygon: Polygon) -> bool:
    """Ray-casting point-in-polygon test.

    A point exactly on an edge may resolve either way, but the same point
    always resolves the same way for a fixed polygon.
    """
    if polygon.is_degenerate:
        return False
    return point_in_ring(x, y, polygon.vertices())


def point_in_ring(x: float, y: float, ring: Sequence[Vertex]) -> bool:
    """Ray-casting test over raw ``(x, y)`` vertices."""
    n = len(ring)
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = ring[i]
        xj, yj = ring[j]
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside
        j = i
    return inside


# ---------------------------------------------------------------------------
# Area and Extent
# ---------------------------------------------------------------------------
def polygon_area(polygon: Polygon) -> float:
    """Absolute shoelace area in squared pixels (0.0 when degenerate)."""
    if polygon.is_degenerate:
        return 0.0
    ring = polygon.vertices()
    n = len(ring)
    area = 0.0
    for i in range(n):
        x0, y0 = ring[i]
        x1, y1 = ring[(i + 1) % n]
        area += x0 * y1 - x1 * y0
    return abs(area / 2.0)


def polygon_bounds(polygon: Polygon) -> BoundingBox:
    """Return the axis-aligned bounding box of a non-empty polygon."""
    if not polygon.points:
        raise ValueError("Cannot compute bounds of an empty polygon")
    xs = [p.x for p in polygon.points]
    ys = [p.y for p in polygon.points]
    return BoundingBox(min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys))


# ---------------------------------------------------------------------------
# Distance Predicates
# ---------------------------------------------------------------------------
def squared_distance(ax: float, ay: float, bx: float, by: float) -> float:
    dx = ax - bx
    dy = ay - by
    return dx * dx + dy * dy


def within_radius(ax: float, ay: float, bx: float, by: float, radius: float) -> bool:
    """True if the points are at most ``radius`` apart (no square root)."""
    return squared_distance(ax, ay, bx, by) <= radius * radius


def point_to_segment_distance(x: float, y: float, a: Vertex, b: Vertex) -> float:
    """Euclidean distance from a point to the closed segment ``a``-``b``."""
    abx = b[0] - a[0]
    aby = b[1] - a[1]
    length_sq = abx * abx + aby * aby
    if length_sq == 0:
        return math.hypot(x - a[0], y - a[1])
    t = max(0.0, min(1.0, ((x - a[0]) * abx + (y - a[1]) * aby) / length_sq))
    return math.hypot(x - (a[0] + t * abx), y - (a[1] + t * aby))


def min_distance_to_edges(x: float, y: float, polygon: Polygon) -> float:
    """Distance to the nearest polygon edge (``inf`` for fewer than 2 points)."""
    ring = polygon.vertices()
    if len(ring) < 2:
        return math.inf
    return min(
        point_to_segment_distance(x, y, ring[i], ring[(i + 1) % len(ring)])
        for i in range(len(ring))
    )
