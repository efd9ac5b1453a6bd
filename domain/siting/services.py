"""Siting Bounded Context - Domain Services.

Automatic device placement. Pure and synchronous: no I/O, no state kept
between calls. Each service area is solved independently and the results
are concatenated.

Pipeline per area:
1) Hex seeding (re-seeded tighter once if seed coverage is pathological)
2) Coarse gap fill until the coverage threshold or a safety cap
3) Fine pass on a denser probe grid to catch missed pockets
4) Density escalation up to a theoretical-minimum-derived floor
5) Report on the fine probe set
"""

from __future__ import annotations

import logging

from domain.coverage.services import (
    as_point_array,
    build_area_report,
    build_samples,
    coverage_ratio,
    empty_report,
    evaluate_coverage,
    rollup_reports,
    uncovered_sample_points,
)
from domain.coverage.value_objects import CoverageDebugInfo, Device, DevicePlacement
from domain.geometry.ports import PolygonTester, RayCastingTester
from domain.geometry.regions import AreaRegion
from domain.geometry.services import min_distance_to_edges
from domain.geometry.value_objects import Point
from domain.siting.lattice import hex_seed
from domain.siting.optimizer import (
    Positions,
    density_floor,
    escalate_density,
    fine_pass,
    gap_fill,
    theoretical_minimum,
)
from domain.siting.value_objects import (
    AreaLayout,
    PlacementConfig,
    PlacementRequest,
    PlacementResult,
)

logger = logging.getLogger(__name__)


def device_id(area_index: int, position_index: int) -> str:
    return f"ant-{area_index}-{position_index}"


# ---------------------------------------------------------------------------
# Single Area
# ---------------------------------------------------------------------------
def place_area(
    region: AreaRegion,
    area_index: int,
    radius: float,
    config: PlacementConfig,
    device_range: float,
    device_power: float | None = None,
) -> AreaLayout:
    """Compute the layout for one service area.

    Args:
        region: Service area with exclusions and the injected tester
        area_index: Position of the area in the request (used in device ids)
        radius: Device coverage radius in pixels
        config: Tuning parameters
        device_range: Real-world radius copied onto each Device
        device_power: Opaque power copied onto each Device

    Returns:
        AreaLayout with devices, per-area report, and diagnostics.
    """
    if region.is_degenerate:
        logger.warning(
            "Service area %d has %d points; skipping degenerate polygon",
            area_index,
            len(region.area.points),
        )
        return AreaLayout(
            area_index=area_index,
            report=empty_report(config.overlap_factor, config.gap_cover_threshold),
        )

    # 1) Seed
    positions: Positions = hex_seed(region, radius, config.overlap_factor)
    samples = build_samples(region, radius * config.gap_sample_factor)
    covered = evaluate_coverage(samples, as_point_array(positions), radius)

    tightened = False
    if coverage_ratio(covered) < config.adaptive_trigger_ratio:
        tighter = config.tightened_overlap
        logger.debug(
            "Area %d: seed coverage %.3f below %.2f, re-seeding at overlap %.3f",
            area_index,
            coverage_ratio(covered),
            config.adaptive_trigger_ratio,
            tighter,
        )
        positions = hex_seed(region, radius, tighter)
        covered = evaluate_coverage(samples, as_point_array(positions), radius)
        tightened = True
    seed_count = len(positions)

    # 2) Coarse gap fill
    ceiling_hit = False
    loops = 0
    batch = min(config.gap_batch_size, config.max_gap_antennas)
    while (
        coverage_ratio(covered) < config.gap_cover_threshold
        and loops < config.max_gap_loops
    ):
        gap_fill(samples, covered, positions, radius, batch)
        loops += 1
        if len(positions) > config.max_gap_antennas:
            ceiling_hit = True
            break
    cap_reached = ceiling_hit or coverage_ratio(covered) < config.gap_cover_threshold

    # 3) Fine pass
    fine_samples = build_samples(region, radius * config.fine_sample_factor)
    fine_covered = evaluate_coverage(fine_samples, as_point_array(positions), radius)
    fine_added = 0
    if not fine_covered.all() and not ceiling_hit:
        fine_added, fine_capped = fine_pass(
            fine_samples, fine_covered, positions, radius, config
        )
        cap_reached = cap_reached or fine_capped

    # 4) Density escalation
    theoretical_min = theoretical_minimum(region.area_px, radius)
    floor = density_floor(theoretical_min, config)
    escalated = escalate_density(region, positions, radius, floor, config) > 0

    if cap_reached:
        logger.warning(
            "Area %d: safety cap reached with %d devices", area_index, len(positions)
        )

    # 5) Report on the fine probes against the final layout
    fine_covered = evaluate_coverage(fine_samples, as_point_array(positions), radius)
    report = build_area_report(
        fine_covered=fine_covered,
        device_count=len(positions),
        theoretical_min=theoretical_min,
        baseline_count=seed_count,
        overlap_factor=config.overlap_factor,
        cover_threshold=config.gap_cover_threshold,
        tightened=tightened,
        fine_pass_added=fine_added > 0,
        escalated=escalated,
        cap_reached=cap_reached,
    )

    devices = tuple(
        Device(
            id=device_id(area_index, i),
            position=Point(x=x, y=y),
            radius=radius,
            range=device_range,
            power=device_power,
        )
        for i, (x, y) in enumerate(positions)
    )
    placements = tuple(
        DevicePlacement(
            id=device.id,
            x=device.position.x,
            y=device.position.y,
            area_index=area_index,
            edge_distance=min_distance_to_edges(
                device.position.x, device.position.y, region.area
            ),
            seed=i < seed_count,
        )
        for i, device in enumerate(devices)
    )
    logger.debug(
        "Area %d: %d seeds, %d coarse / %d fine samples, %d devices (%s)",
        area_index,
        seed_count,
        len(samples),
        len(fine_samples),
        len(devices),
        report.solver,
    )
    return AreaLayout(
        area_index=area_index,
        devices=devices,
        report=report,
        placements=placements,
        uncovered=uncovered_sample_points(fine_samples, fine_covered, area_index),
        candidate_count=len(samples),
        iterations=loops,
    )


# ---------------------------------------------------------------------------
# Main Service: auto_place
# ---------------------------------------------------------------------------
def auto_place(
    request: PlacementRequest, tester: PolygonTester | None = None
) -> PlacementResult:
    """Place devices to cover every service area of ``request``.

    Args:
        request: Areas, exclusions, scale, device defaults, and tuning
        tester: Point-in-polygon predicate; ray casting when omitted

    Returns:
        PlacementResult with all devices (area order), the rolled-up report,
        per-area reports, and debug info. A missing or non-positive scale
        yields no devices and a zero-coverage report.

    Example:
        >>> from domain.geometry.value_objects import Polygon
        >>> square = Polygon.from_coords([(0, 0), (100, 0), (100, 100), (0, 100)])
        >>> result = auto_place(
        ...     PlacementRequest(service_areas=(square,), scale=1.0, device_range=30)
        ... )
        >>> result.report.coverage_percent >= 99.5
        True
    """
    config = request.config
    hard_cap = config.max_gap_antennas

    if not request.has_valid_scale or not request.service_areas:
        logger.info(
            "Nothing to place (scale=%s, %d service areas)",
            request.scale,
            len(request.service_areas),
        )
        return PlacementResult(
            report=empty_report(config.overlap_factor, config.gap_cover_threshold),
            debug=CoverageDebugInfo(
                sample_step=0.0, candidate_count=0, iterations=0, hard_cap=hard_cap
            ),
        )

    tester = tester or RayCastingTester()
    radius = request.radius_px
    layouts = [
        place_area(
            AreaRegion(area=area, exclusions=request.exclusions, tester=tester),
            area_index,
            radius,
            config,
            request.device_range,
            request.device_power,
        )
        for area_index, area in enumerate(request.service_areas)
    ]

    area_reports = tuple(layout.report for layout in layouts)
    report = rollup_reports(area_reports, config.overlap_factor, config.gap_cover_threshold)
    debug = CoverageDebugInfo(
        sample_step=radius * config.gap_sample_factor,
        candidate_count=sum(layout.candidate_count for layout in layouts),
        iterations=sum(layout.iterations for layout in layouts),
        hard_cap=hard_cap,
        placements=tuple(p for layout in layouts for p in layout.placements),
        uncovered_samples=tuple(s for layout in layouts for s in layout.uncovered),
    )
    logger.info(
        "Placed %d devices over %d areas: %.2f%% coverage (target %.2f%%, %s)",
        report.device_count,
        len(layouts),
        report.coverage_percent,
        report.target_percent,
        report.solver,
    )
    return PlacementResult(
        devices=tuple(d for layout in layouts for d in layout.devices),
        report=report,
        area_reports=area_reports,
        debug=debug,
    )
