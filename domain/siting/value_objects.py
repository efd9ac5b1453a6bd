"""Siting Bounded Context - Value Objects.

Inputs (PlacementConfig, PlacementRequest) and outputs (AreaLayout,
PlacementResult) of the automatic placement service.

Inputs accept snake_case or camelCase keys so payloads exported by the
drawing front end (``overlapFactor``, ``gapSampleFactor``, ...) validate
directly.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    FiniteFloat,
    ValidationError,
)
from pydantic.alias_generators import to_camel

from domain.coverage.errors import InvalidPlacementInputError
from domain.coverage.value_objects import (
    CoverageDebugInfo,
    CoverageReport,
    Device,
    DevicePlacement,
    SamplePoint,
)
from domain.geometry.value_objects import Polygon

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_DEVICE_RANGE = 6.0  # Real-world units (e.g. meters)
DEFAULT_OVERLAP_FACTOR = 0.9
DEFAULT_GAP_SAMPLE_FACTOR = 0.6
DEFAULT_FINE_SAMPLE_FACTOR = 0.35
DEFAULT_GAP_COVER_THRESHOLD = 0.995
DEFAULT_MAX_GAP_ANTENNAS = 400

_INPUT_CONFIG = ConfigDict(
    frozen=True, alias_generator=to_camel, populate_by_name=True, extra="forbid"
)


# ---------------------------------------------------------------------------
# PlacementConfig
# ---------------------------------------------------------------------------
class PlacementConfig(BaseModel):
    """Tuning parameters for one placement call.

    Radius-relative fields are multiples of the device radius in pixels.
    Every float field must be finite.
    The density escalator coefficients are empirically tuned heuristics,
    exposed here rather than fixed in code.
    """

    # Seed Generator
    overlap_factor: FiniteFloat = Field(default=DEFAULT_OVERLAP_FACTOR, gt=0, le=1)

    # Coverage Sampler
    gap_sample_factor: FiniteFloat = Field(default=DEFAULT_GAP_SAMPLE_FACTOR, gt=0)
    fine_sample_factor: FiniteFloat = Field(default=DEFAULT_FINE_SAMPLE_FACTOR, gt=0)

    # Gap-Fill Optimizer
    gap_cover_threshold: FiniteFloat = Field(
        default=DEFAULT_GAP_COVER_THRESHOLD, gt=0, le=1
    )
    max_gap_antennas: int = Field(default=DEFAULT_MAX_GAP_ANTENNAS, ge=1)
    gap_batch_size: int = Field(default=25, ge=1)
    max_gap_loops: int = Field(default=10, ge=1)

    # Adaptive tightening
    adaptive_trigger_ratio: FiniteFloat = Field(default=0.6, ge=0, le=1)
    adaptive_tightening: FiniteFloat = Field(default=0.75, gt=0, le=1)
    min_overlap_factor: FiniteFloat = Field(default=0.6, gt=0, le=1)

    # Fine Pass
    fine_pass_max_additions: int = Field(default=150, ge=0)
    fine_pass_min_separation: FiniteFloat = Field(default=0.55, ge=0)

    # Density Escalator
    density_base_multiplier: FiniteFloat = Field(default=0.9, ge=0)
    density_overlap_weight: FiniteFloat = Field(default=0.8, ge=0)
    density_lattice_factor: FiniteFloat = Field(default=0.9, gt=0)
    density_row_compression: FiniteFloat = Field(default=1.2, gt=0)
    density_min_separation: FiniteFloat = Field(default=0.6, ge=0)

    model_config = _INPUT_CONFIG

    @property
    def tightened_overlap(self) -> float:
        """Overlap used when the first seeding covers pathologically little."""
        return max(self.min_overlap_factor, self.overlap_factor * self.adaptive_tightening)

    @property
    def density_multiplier(self) -> float:
        """Expected devices per theoretical minimum; grows as overlap shrinks."""
        return (
            self.density_base_multiplier
            + (1 - self.overlap_factor) * self.density_overlap_weight
        )


# ---------------------------------------------------------------------------
# PlacementRequest
# ---------------------------------------------------------------------------
class PlacementRequest(BaseModel):
    """Everything a single placement call needs.

    ``scale`` is real-world units per pixel. A missing or non-positive scale
    is accepted here and turns the call into a no-op, since the device
    radius cannot be converted to pixels.
    """

    service_areas: tuple[Polygon, ...] = ()
    exclusions: tuple[Polygon, ...] = ()
    scale: FiniteFloat | None = None
    device_range: FiniteFloat = Field(default=DEFAULT_DEVICE_RANGE, gt=0)
    device_power: FiniteFloat | None = None
    config: PlacementConfig = Field(default_factory=PlacementConfig)

    model_config = _INPUT_CONFIG

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PlacementRequest":
        """Validate an untyped payload, raising a domain error on failure."""
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidPlacementInputError(str(e)) from e

    @property
    def has_valid_scale(self) -> bool:
        return self.scale is not None and self.scale > 0

    @property
    def radius_px(self) -> float:
        """Device radius in pixels; only meaningful with a valid scale."""
        if not self.has_valid_scale:
            raise ValueError(f"Cannot convert range with scale={self.scale}")
        return self.device_range / self.scale  # type: ignore[operator]


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------
class AreaLayout(BaseModel):
    """Devices and diagnostics for one service area."""

    area_index: int = Field(ge=0)
    devices: tuple[Device, ...] = ()
    report: CoverageReport
    placements: tuple[DevicePlacement, ...] = ()
    uncovered: tuple[SamplePoint, ...] = ()
    candidate_count: int = Field(default=0, ge=0)  # Coarse probes scored
    iterations: int = Field(default=0, ge=0)  # Gap-fill passes run

    model_config = ConfigDict(frozen=True)


class PlacementResult(BaseModel):
    """Outcome of one call: concatenated devices plus reports."""

    devices: tuple[Device, ...] = ()
    report: CoverageReport
    area_reports: tuple[CoverageReport, ...] = ()
    debug: CoverageDebugInfo | None = None

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    @property
    def device_count(self) -> int:
        return len(self.devices)
