"""Siting Bounded Context - Optimization stages.

Gap-Fill Optimizer, Fine Pass, and Density Escalator. Each stage appends to
the caller's position list and updates the caller's coverage array in place;
nothing here is random, so identical inputs give identical layouts.

Scoring is the naive O(samples^2) scan, vectorized with numpy.
"""

from __future__ import annotations

import logging
import math

import numpy as np
from numpy.typing import NDArray

from domain.coverage.services import (
    PointArray,
    as_point_array,
    mark_covered,
    neighbor_counts,
)
from domain.geometry.regions import AreaRegion
from domain.siting.lattice import hex_lattice, hex_spacing
from domain.siting.value_objects import PlacementConfig

logger = logging.getLogger(__name__)

Positions = list[tuple[float, float]]


def _has_neighbor_closer_than(
    positions: Positions, x: float, y: float, distance: float
) -> bool:
    """True if some position is strictly closer than ``distance``."""
    if not positions:
        return False
    diff = as_point_array(positions) - np.array([x, y])
    return bool(((diff * diff).sum(axis=1) < distance * distance).any())


# ---------------------------------------------------------------------------
# Gap-Fill Optimizer
# ---------------------------------------------------------------------------
def gap_fill(
    samples: PointArray,
    covered: NDArray[np.bool_],
    positions: Positions,
    radius: float,
    max_add: int,
) -> int:
    """Greedily promote uncovered samples to device positions.

    Each step scores every uncovered sample by how many uncovered samples
    (itself included) lie within ``radius`` of it, places a device on the
    best one (first in sample order on ties), and marks its disc covered.
    Stops after ``max_add`` placements or when nothing scores positive.

    Returns:
        Number of devices added.
    """
    added = 0
    while added < max_add:
        open_idx = np.flatnonzero(~covered)
        if open_idx.size == 0:
            break
        candidates = samples[open_idx]
        scores = neighbor_counts(candidates, candidates, radius)
        best = int(np.argmax(scores))
        if scores[best] <= 0:
            break
        x, y = float(candidates[best, 0]), float(candidates[best, 1])
        positions.append((x, y))
        mark_covered(samples, covered, x, y, radius)
        added += 1
    return added


# ---------------------------------------------------------------------------
# Fine Pass
# ---------------------------------------------------------------------------
def fine_pass(
    samples: PointArray,
    covered: NDArray[np.bool_],
    positions: Positions,
    radius: float,
    config: PlacementConfig,
) -> tuple[int, bool]:
    """Place devices directly on still-uncovered fine samples.

    Samples are visited first to last. A sample with a device closer than
    ``fine_pass_min_separation * radius`` is marked handled instead of
    receiving a device.

    Returns:
        ``(added, cap_reached)``; ``cap_reached`` is True if the pass stopped
        on its addition bound or the per-area device ceiling.
    """
    separation = config.fine_pass_min_separation * radius
    added = 0
    steps = 0
    while steps < config.fine_pass_max_additions:
        open_idx = np.flatnonzero(~covered)
        if open_idx.size == 0:
            return added, False
        idx = int(open_idx[0])
        x, y = float(samples[idx, 0]), float(samples[idx, 1])
        if _has_neighbor_closer_than(positions, x, y, separation):
            covered[idx] = True
        else:
            positions.append((x, y))
            mark_covered(samples, covered, x, y, radius)
            added += 1
        steps += 1
        if len(positions) > config.max_gap_antennas:
            return added, True
    return added, bool((~covered).any())


# ---------------------------------------------------------------------------
# Density Escalator
# ---------------------------------------------------------------------------
def theoretical_minimum(area_px: float, radius: float) -> float:
    """Service area divided by one device's disc area."""
    return area_px / (math.pi * radius * radius)


def density_floor(theoretical_min: float, config: PlacementConfig) -> int:
    """Minimum plausible device count for the area."""
    return math.ceil(theoretical_min * config.density_multiplier)


def escalate_density(
    region: AreaRegion,
    positions: Positions,
    radius: float,
    floor: int,
    config: PlacementConfig,
) -> int:
    """Top positions up to ``floor`` from a tighter, phase-shifted hex lattice.

    Candidates closer than ``density_min_separation * radius`` to any
    existing position are skipped.

    Returns:
        Number of devices added (may fall short of the floor when the region
        has no room left).
    """
    if len(positions) >= floor or region.is_degenerate:
        return 0
    dx, dy = hex_spacing(radius, config.overlap_factor * config.density_lattice_factor)
    separation = config.density_min_separation * radius
    added = 0
    for x, y in hex_lattice(
        region.bounds,
        dx,
        dy / config.density_row_compression,
        margin=radius / 2,
        shift_odd_rows=False,
    ):
        if len(positions) >= floor:
            break
        if not region.is_placeable(x, y):
            continue
        if _has_neighbor_closer_than(positions, x, y, separation):
            continue
        positions.append((x, y))
        added += 1
    if len(positions) < floor:
        logger.debug(
            "Density escalator stopped at %d of %d devices", len(positions), floor
        )
    return added
