"""Coverage Bounded Context - Value Objects.

Immutable records produced by a placement call: devices, the coverage
report, and optional diagnostics. All validation occurs at construction
time via Pydantic.

Every record serializes with camelCase aliases
(``model_dump(by_alias=True)``) for the persistence and advisory consumers.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, model_validator
from pydantic.alias_generators import to_camel

from domain.geometry.value_objects import Point

SolverMode = Literal["greedy", "adaptive", "hybrid"]

# Escalation order, used when rolling per-area modes up into one report
SOLVER_MODE_RANK: dict[str, int] = {"greedy": 0, "adaptive": 1, "hybrid": 2}

_RECORD_CONFIG = ConfigDict(
    frozen=True, alias_generator=to_camel, populate_by_name=True
)


# ---------------------------------------------------------------------------
# Device
# ---------------------------------------------------------------------------
class Device(BaseModel):
    """A placed antenna (Value Object).

    ``radius`` is in pixels (``range / scale``); ``range`` is the real-world
    radius exactly as supplied. ``power`` is opaque and passed through.
    """

    id: str
    position: Point
    radius: float = Field(gt=0)
    range: float = Field(gt=0)
    power: FiniteFloat | None = None

    model_config = _RECORD_CONFIG


# ---------------------------------------------------------------------------
# SamplePoint
# ---------------------------------------------------------------------------
class SamplePoint(BaseModel):
    """Evaluation probe with its covered flag.

    Probes live in numpy arrays during a call; this record only surfaces the
    ones left uncovered, in CoverageDebugInfo.
    """

    x: float
    y: float
    covered: bool = False
    area_index: int = Field(default=0, ge=0)

    model_config = _RECORD_CONFIG


# ---------------------------------------------------------------------------
# CoverageReport
# ---------------------------------------------------------------------------
class CoverageReport(BaseModel):
    """Quantitative outcome of a placement call, per area or rolled up.

    Invariants:
        CR-1: uncovered_samples <= sample_count
        CR-2: sample_count == 0 implies coverage_percent == 0
        CR-3: cap_reached implies fallback_applied
    """

    coverage_percent: float = Field(ge=0, le=100)  # Against the fine samples
    target_percent: float = Field(ge=0, le=100)
    device_count: int = Field(ge=0)
    theoretical_min: float = Field(ge=0)  # Area / single-disc area
    baseline_count: int = Field(ge=0)  # Seed-lattice devices
    overlap_factor: float = Field(gt=0)
    solver: SolverMode = "greedy"
    fallback_applied: bool = False
    alternative_applied: bool = False
    cap_reached: bool = False
    uncovered_samples: int = Field(default=0, ge=0)
    sample_count: int = Field(default=0, ge=0)

    model_config = _RECORD_CONFIG

    @model_validator(mode="after")
    def validate_counts(self) -> "CoverageReport":
        if self.uncovered_samples > self.sample_count:
            raise ValueError(
                f"uncovered_samples ({self.uncovered_samples}) exceeds "
                f"sample_count ({self.sample_count})"
            )
        if self.sample_count == 0 and self.coverage_percent != 0:
            raise ValueError("coverage_percent must be 0 when there are no samples")
        if self.cap_reached and not self.fallback_applied:
            raise ValueError("cap_reached requires fallback_applied")
        return self

    @property
    def covered_samples(self) -> int:
        return self.sample_count - self.uncovered_samples


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------
class DevicePlacement(BaseModel):
    """Where a device landed and how close it sits to its area's boundary."""

    id: str
    x: float
    y: float
    area_index: int = Field(ge=0)
    edge_distance: float = Field(ge=0)  # Pixels to nearest service-area edge
    seed: bool = False  # True if taken from the seed lattice

    model_config = _RECORD_CONFIG


class CoverageDebugInfo(BaseModel):
    """Optional diagnostics for advisory tooling; never needed for correctness."""

    sample_step: float = Field(ge=0)  # Coarse sample spacing in pixels
    candidate_count: int = Field(ge=0)
    iterations: int = Field(ge=0)
    hard_cap: int = Field(ge=0)
    placements: tuple[DevicePlacement, ...] = ()
    uncovered_samples: tuple[SamplePoint, ...] = ()

    model_config = _RECORD_CONFIG
