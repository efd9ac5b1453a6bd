"""Infrastructure adapters for the siting bounded context.

This module provides the infrastructure layer implementations for loading
placement scenarios exported by the boundary/scale detection tooling.
"""

from .json_adapter import JsonScenarioAdapter

__all__ = ["JsonScenarioAdapter"]
