"""Domain Port(s) for Placement Scenario I/O.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .value_objects import PlacementRequest


class ScenarioRepository(Protocol):
    """Port for obtaining placement requests from external sources.

    Boundary and scale detection (manual tracing or image analysis) hand
    their polygons and scale to the core through implementations of this
    port. Implementations live in infrastructure (e.g., JSON adapter).
    """

    def load_request(self, file_path: Path | str) -> PlacementRequest:
        """Load a scenario and return a validated PlacementRequest."""
        ...
