"""Siting Bounded Context - Hexagonal lattices.

Hex packing is the densest regular circle packing, so seeding on it keeps
redundant devices low before any gap filling. The same generator also
produces the tighter, phase-shifted lattice used by the density escalator.
"""

from __future__ import annotations

import math
from collections.abc import Iterator

from domain.geometry.regions import AreaRegion, axis_steps
from domain.geometry.value_objects import BoundingBox

SQRT3 = math.sqrt(3)


def hex_lattice(
    bounds: BoundingBox,
    dx: float,
    dy: float,
    margin: float,
    shift_odd_rows: bool = True,
) -> Iterator[tuple[float, float]]:
    """Yield lattice nodes over ``bounds`` grown by ``margin`` on every side.

    Rows are ``dy`` apart; nodes within a row are ``dx`` apart. Alternate
    rows shift by ``dx / 2``: odd rows when ``shift_odd_rows`` is set, even
    rows otherwise. The row extent is tested before the shift is applied.
    """
    for row, y in enumerate(axis_steps(bounds.min_y - margin, bounds.max_y + margin, dy)):
        shifted = (row % 2 == 1) if shift_odd_rows else (row % 2 == 0)
        offset = dx / 2 if shifted else 0.0
        for x in axis_steps(bounds.min_x - margin, bounds.max_x + margin, dx):
            yield (x + offset, y)


def hex_spacing(radius: float, overlap: float) -> tuple[float, float]:
    """Horizontal and vertical hex spacing for a radius and overlap factor."""
    return radius * SQRT3 * overlap, radius * 1.5 * overlap


def hex_seed(
    region: AreaRegion, radius: float, overlap: float
) -> list[tuple[float, float]]:
    """Seed positions: hex lattice nodes that are placeable in the region."""
    if region.is_degenerate:
        return []
    dx, dy = hex_spacing(radius, overlap)
    return [
        (x, y)
        for x, y in hex_lattice(region.bounds, dx, dy, margin=radius)
        if region.is_placeable(x, y)
    ]
