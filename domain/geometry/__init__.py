"""Geometry Bounded Context.

Responsible for planar primitives shared by the other contexts:
- Value Objects: Point, Polygon, BoundingBox
- Ports: PolygonTester (point-in-polygon predicate)
- Services: point_in_polygon, polygon_area, distance predicates
"""
