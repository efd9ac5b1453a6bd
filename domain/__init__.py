"""Coverage Planner Domain Layer.

This package contains the core business logic organized by bounded contexts:
- geometry: Planar primitives, point-in-polygon, area and distance predicates
- coverage: Probe sampling, coverage evaluation, coverage reports
- siting: Device seeding, gap filling, density escalation
"""

# Imports alphabetized per project style (isort)
from domain import coverage, geometry, siting

__all__ = ["coverage", "geometry", "siting"]
