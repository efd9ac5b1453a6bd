"""Root pytest configuration for all tests.

Provides shared polygon builders. Domain tests construct value objects
directly (no I/O); adapter tests use ``tmp_path``.
"""

from __future__ import annotations

import pytest

from domain.geometry.value_objects import Polygon


def make_rect(min_x: float, min_y: float, max_x: float, max_y: float) -> Polygon:
    """Axis-aligned rectangle, counter-clockwise from the min corner."""
    return Polygon.from_coords(
        [(min_x, min_y), (max_x, min_y), (max_x, max_y), (min_x, max_y)]
    )


@pytest.fixture
def square() -> Polygon:
    """100 x 100 pixel service area with its min corner at the origin."""
    return make_rect(0, 0, 100, 100)


@pytest.fixture
def l_shape() -> Polygon:
    """Concave L-shaped service area (notch in the upper right)."""
    return Polygon.from_coords(
        [(0, 0), (100, 0), (100, 40), (40, 40), (40, 100), (0, 100)]
    )


@pytest.fixture
def rect():
    """Factory fixture: ``rect(min_x, min_y, max_x, max_y) -> Polygon``."""
    return make_rect
