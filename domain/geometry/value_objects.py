"""Geometry Bounded Context - Value Objects.

Immutable planar primitives in pixel space. Coordinates are plain Cartesian
values; no screen or canvas convention is assumed beyond consistency across
every polygon and output position of a single call.

All validation occurs at construction time via Pydantic. Non-finite
coordinates (NaN, +/-Inf) are rejected here so they never reach a distance
comparison.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, FiniteFloat, model_validator

# ---------------------------------------------------------------------------
# Numeric Constants
# ---------------------------------------------------------------------------
MIN_POLYGON_VERTICES = 3  # Fewer vertices = degenerate polygon


# ---------------------------------------------------------------------------
# Point
# ---------------------------------------------------------------------------
class Point(BaseModel):
    """2-D coordinate in pixel space (Value Object).

    Accepts either ``{"x": .., "y": ..}`` or an ``(x, y)`` pair.

    Invariants:
        PT-1: x is finite
        PT-2: y is finite
    """

    x: FiniteFloat
    y: FiniteFloat

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def coerce_pair(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            if len(value) != 2:
                raise ValueError(f"Point pair must have 2 values, got {len(value)}")
            return {"x": value[0], "y": value[1]}
        return value

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


# ---------------------------------------------------------------------------
# BoundingBox
# ---------------------------------------------------------------------------
class BoundingBox(BaseModel):
    """Axis-aligned extent of a polygon (Value Object).

    Zero-width or zero-height boxes are allowed (collinear polygons).
    """

    min_x: FiniteFloat
    min_y: FiniteFloat
    max_x: FiniteFloat
    max_y: FiniteFloat

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_ordering(self) -> "BoundingBox":
        if self.min_x > self.max_x:
            raise ValueError(
                f"Invalid x ordering: min_x={self.min_x} > max_x={self.max_x}"
            )
        if self.min_y > self.max_y:
            raise ValueError(
                f"Invalid y ordering: min_y={self.min_y} > max_y={self.max_y}"
            )
        return self

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


# ---------------------------------------------------------------------------
# Polygon
# ---------------------------------------------------------------------------
class Polygon(BaseModel):
    """Ordered ring of Points, implicitly closed (Value Object).

    Used both for service areas and exclusion zones. A polygon with fewer
    than three points is still constructible but is degenerate: it contains
    nothing and has zero area.

    Accepts ``{"points": [...]}`` or a bare sequence of points.

    Note on __eq__ and __hash__: frozen Pydantic models compare and hash by
    value, so identical rings can be used as cache keys.
    """

    points: tuple[Point, ...]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def coerce_sequence(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return {"points": value}
        return value

    @classmethod
    def from_coords(cls, coords: Any) -> "Polygon":
        """Build from an iterable of ``(x, y)`` pairs."""
        return cls(points=tuple(Point(x=x, y=y) for x, y in coords))

    @property
    def is_degenerate(self) -> bool:
        return len(self.points) < MIN_POLYGON_VERTICES

    def vertices(self) -> list[tuple[float, float]]:
        """Return vertices as plain ``(x, y)`` tuples."""
        return [(p.x, p.y) for p in self.points]
