"""Coverage Bounded Context - Domain Services.

Coverage Sampler, Coverage Evaluator, and Report Builder.

Samples are measurement probes only: they are never device positions except
when the optimizer deliberately promotes one. Arrays are ``(n, 2)`` float64
with one ``(x, y)`` row per point.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

import numpy as np
from numpy.typing import NDArray

from domain.coverage.value_objects import (
    SOLVER_MODE_RANK,
    CoverageReport,
    SamplePoint,
    SolverMode,
)
from domain.geometry.regions import AreaRegion, axis_steps

logger = logging.getLogger(__name__)

# Upper bound on the temporaries of one pairwise-distance block
CHUNK_BYTES = 32 * 1024 * 1024

# Per (point, other) pair: float64 diff and its square (x, y), summed d2, mask
_BYTES_PER_PAIR = 2 * 8 + 2 * 8 + 8 + 1

PointArray = NDArray[np.float64]


def as_point_array(points: Iterable[tuple[float, float]]) -> PointArray:
    """Convert ``(x, y)`` pairs to an ``(n, 2)`` float64 array."""
    arr = np.asarray(list(points), dtype=np.float64)
    return arr.reshape(-1, 2)


# ---------------------------------------------------------------------------
# Coverage Sampler
# ---------------------------------------------------------------------------
def build_samples(region: AreaRegion, spacing: float) -> PointArray:
    """Axis-aligned probe grid at ``spacing`` inside the region.

    Columns are scanned left to right and each column bottom to top, so the
    order of the returned rows is fixed for a given region and spacing.
    Degenerate areas yield an empty array.
    """
    if region.is_degenerate:
        return np.empty((0, 2), dtype=np.float64)
    bounds = region.bounds
    out: list[tuple[float, float]] = []
    for x in axis_steps(bounds.min_x, bounds.max_x, spacing):
        for y in axis_steps(bounds.min_y, bounds.max_y, spacing):
            if region.is_placeable(x, y):
                out.append((x, y))
    return as_point_array(out)


# ---------------------------------------------------------------------------
# Coverage Evaluator
# ---------------------------------------------------------------------------
def chunk_rows(n_others: int) -> int:
    """Rows per distance block so one block stays within CHUNK_BYTES."""
    return max(1, CHUNK_BYTES // (max(n_others, 1) * _BYTES_PER_PAIR))


def neighbor_counts(
    points: PointArray, others: PointArray, radius: float
) -> NDArray[np.int64]:
    """For each row of ``points``, count rows of ``others`` within ``radius``."""
    counts = np.zeros(len(points), dtype=np.int64)
    if len(points) == 0 or len(others) == 0:
        return counts
    r2 = radius * radius
    rows = chunk_rows(len(others))
    for start in range(0, len(points), rows):
        block = points[start : start + rows]
        diff = block[:, None, :] - others[None, :, :]
        d2 = (diff * diff).sum(axis=2)
        counts[start : start + len(block)] = (d2 <= r2).sum(axis=1)
    return counts


def evaluate_coverage(
    samples: PointArray, devices: PointArray, radius: float
) -> NDArray[np.bool_]:
    """Covered flag per sample: some device at distance <= radius.

    Compares squared distances; returns a fresh, writable array parallel to
    ``samples``.
    """
    return neighbor_counts(samples, devices, radius) > 0


def mark_covered(
    samples: PointArray,
    covered: NDArray[np.bool_],
    x: float,
    y: float,
    radius: float,
) -> int:
    """Flag samples within ``radius`` of ``(x, y)`` in place.

    Returns the number of samples that flipped from uncovered to covered.
    """
    open_idx = np.flatnonzero(~covered)
    if open_idx.size == 0:
        return 0
    diff = samples[open_idx] - np.array([x, y])
    hit = open_idx[(diff * diff).sum(axis=1) <= radius * radius]
    covered[hit] = True
    return int(hit.size)


def coverage_ratio(covered: NDArray[np.bool_]) -> float:
    """Covered fraction; 1.0 for an empty sample set (nothing to cover)."""
    if covered.size == 0:
        return 1.0
    return float(np.count_nonzero(covered)) / float(covered.size)


def uncovered_sample_points(
    samples: PointArray, covered: NDArray[np.bool_], area_index: int
) -> tuple[SamplePoint, ...]:
    """Materialize the uncovered probes for diagnostics."""
    return tuple(
        SamplePoint(x=float(x), y=float(y), covered=False, area_index=area_index)
        for x, y in samples[~covered]
    )


# ---------------------------------------------------------------------------
# Report Builder
# ---------------------------------------------------------------------------
def resolve_solver_mode(
    *, tightened: bool, fine_pass_added: bool, escalated: bool
) -> SolverMode:
    """Label which escalation paths fired.

    ``hybrid`` when the density escalator added devices, ``adaptive`` when
    re-seeding or fine-pass supplementation did, ``greedy`` otherwise.
    """
    if escalated:
        return "hybrid"
    if tightened or fine_pass_added:
        return "adaptive"
    return "greedy"


def build_area_report(
    *,
    fine_covered: NDArray[np.bool_],
    device_count: int,
    theoretical_min: float,
    baseline_count: int,
    overlap_factor: float,
    cover_threshold: float,
    tightened: bool = False,
    fine_pass_added: bool = False,
    escalated: bool = False,
    cap_reached: bool = False,
) -> CoverageReport:
    """Assemble the report for one service area.

    Coverage is measured against the fine sample set. An area with no
    samples (degenerate or fully excluded) reports 0%.
    """
    sample_count = int(fine_covered.size)
    uncovered = sample_count - int(np.count_nonzero(fine_covered))
    percent = coverage_ratio(fine_covered) * 100.0 if sample_count else 0.0
    return CoverageReport(
        coverage_percent=percent,
        target_percent=cover_threshold * 100.0,
        device_count=device_count,
        theoretical_min=theoretical_min,
        baseline_count=baseline_count,
        overlap_factor=overlap_factor,
        solver=resolve_solver_mode(
            tightened=tightened, fine_pass_added=fine_pass_added, escalated=escalated
        ),
        fallback_applied=escalated or cap_reached,
        alternative_applied=tightened,
        cap_reached=cap_reached,
        uncovered_samples=uncovered,
        sample_count=sample_count,
    )


def empty_report(overlap_factor: float, cover_threshold: float) -> CoverageReport:
    """Zero-coverage report for a call that placed nothing."""
    return CoverageReport(
        coverage_percent=0.0,
        target_percent=cover_threshold * 100.0,
        device_count=0,
        theoretical_min=0.0,
        baseline_count=0,
        overlap_factor=overlap_factor,
    )


def rollup_reports(
    reports: Sequence[CoverageReport], overlap_factor: float, cover_threshold: float
) -> CoverageReport:
    """Aggregate per-area reports into one.

    Coverage is sample-weighted across areas; counts and theoretical minima
    are summed; the solver label is the most escalated one seen.
    """
    if not reports:
        return empty_report(overlap_factor, cover_threshold)

    sample_count = sum(r.sample_count for r in reports)
    uncovered = sum(r.uncovered_samples for r in reports)
    percent = (
        (sample_count - uncovered) / sample_count * 100.0 if sample_count else 0.0
    )
    solver = max((r.solver for r in reports), key=SOLVER_MODE_RANK.__getitem__)

    report = CoverageReport(
        coverage_percent=percent,
        target_percent=cover_threshold * 100.0,
        device_count=sum(r.device_count for r in reports),
        theoretical_min=sum(r.theoretical_min for r in reports),
        baseline_count=sum(r.baseline_count for r in reports),
        overlap_factor=overlap_factor,
        solver=solver,
        fallback_applied=any(r.fallback_applied for r in reports),
        alternative_applied=any(r.alternative_applied for r in reports),
        cap_reached=any(r.cap_reached for r in reports),
        uncovered_samples=uncovered,
        sample_count=sample_count,
    )
    logger.debug(
        "Rolled up %d area reports: %.2f%% coverage, %d devices",
        len(reports),
        report.coverage_percent,
        report.device_count,
    )
    return report
