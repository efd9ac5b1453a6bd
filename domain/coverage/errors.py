"""Coverage Bounded Context - Error Hierarchy.

Algorithmic conditions (caps reached, no progress, empty areas) degrade
silently and are reported through CoverageReport flags. Only input that
cannot be turned into a valid request raises.
"""

from __future__ import annotations


class CoverageError(Exception):
    """Base error for coverage planning."""


class InvalidPlacementInputError(CoverageError):
    """Placement payload is malformed (e.g. non-finite coordinates)."""


class ScenarioFormatError(CoverageError):
    """Scenario file is not a readable JSON scenario."""
