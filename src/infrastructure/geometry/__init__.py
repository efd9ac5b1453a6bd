"""Infrastructure adapters for the geometry bounded context."""

from .shapely_tester import ShapelyPolygonTester

__all__ = ["ShapelyPolygonTester"]
