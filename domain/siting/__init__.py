"""Siting Bounded Context.

Responsible for device placement and optimization:
- Value Objects: PlacementConfig, PlacementRequest, PlacementResult
- Services: hex seeding, gap fill, fine pass, density escalation, auto_place
- Ports: ScenarioRepository
"""
