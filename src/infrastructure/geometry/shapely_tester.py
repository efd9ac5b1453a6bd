"""Shapely-backed PolygonTester.

Builds a prepared geometry once per distinct polygon and reuses it for every
membership query, which pays off for polygons with many vertices. Points on
the boundary are outside (``contains`` semantics), consistently.
"""

from __future__ import annotations

import logging
from typing import Any

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.prepared import prep as shapely_prep

from domain.geometry.value_objects import Polygon

logger = logging.getLogger(__name__)


class ShapelyPolygonTester:
    """Point-in-polygon via prepared shapely geometries.

    Parameters
    ----------
    cache_size: int
        Maximum number of prepared polygons kept; the cache is cleared when
        it fills up.
    """

    def __init__(self, cache_size: int = 256) -> None:
        self.cache_size = cache_size
        self._prepared: dict[Polygon, Any] = {}

    def _prepare(self, polygon: Polygon) -> Any:
        prepared = self._prepared.get(polygon)
        if prepared is None:
            if len(self._prepared) >= self.cache_size:
                self._prepared.clear()
            shape = ShapelyPolygon(polygon.vertices())
            if not shape.is_valid:
                logger.debug(
                    "Polygon with %d vertices is not simple; membership may differ "
                    "from ray casting",
                    len(polygon.points),
                )
            prepared = shapely_prep(shape)
            self._prepared[polygon] = prepared
        return prepared

    def contains(self, x: float, y: float, polygon: Polygon) -> bool:
        if polygon.is_degenerate:
            return False
        return bool(self._prepare(polygon).contains(ShapelyPoint(x, y)))
