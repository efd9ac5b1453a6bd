"""Coverage Bounded Context.

Responsible for measuring how well a layout covers its service areas:
- Value Objects: Device, SamplePoint, CoverageReport, CoverageDebugInfo
- Services: probe sampling, coverage evaluation, report building
"""
