"""JSON adapter for ScenarioRepository.

Loads a placement scenario (service areas, exclusions, scale, device
defaults, tuning) from a JSON document and returns a domain
PlacementRequest.

Expected document (snake_case or camelCase keys)::

    {
      "serviceAreas": [[{"x": 0, "y": 0}, {"x": 100, "y": 0}, ...]],
      "exclusions": [[[40, 40], [60, 40], [60, 60], [40, 60]]],
      "scale": 0.05,
      "deviceRange": 6,
      "devicePower": 50,
      "config": {"overlapFactor": 0.85}
    }

Lifecycle:
1) Validate the path (exists, extension, not a symlink, non-empty, budget)
2) Read and decode UTF-8 JSON
3) Validate into PlacementRequest (domain errors on failure)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from domain.coverage.errors import ScenarioFormatError
from domain.siting.value_objects import PlacementRequest

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

ALLOWED_SUFFIXES = (".json",)


class JsonScenarioAdapter:
    """Infrastructure adapter for loading placement scenarios from JSON files.

    Parameters
    ----------
    max_bytes: int | None
        Optional size budget for the scenario file. Larger files raise
        ScenarioFormatError before being read.
    """

    def __init__(self, max_bytes: int | None = None) -> None:
        self.max_bytes = max_bytes

    def load_request(self, file_path: Path | str) -> PlacementRequest:
        """Load a scenario file and return a validated PlacementRequest.

        Raises:
            FileNotFoundError: The file does not exist
            ScenarioFormatError: Wrong extension, symlink, empty, over
                budget, or not a JSON object
            InvalidPlacementInputError: JSON is well formed but does not
                describe a valid request
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(str(path))

        if path.suffix.lower() not in ALLOWED_SUFFIXES:
            raise ScenarioFormatError(f"Unsupported file extension: {path.suffix}")

        try:
            if path.is_symlink():
                raise ScenarioFormatError("Symlinks are not permitted")
            st = path.stat()
            if st.st_size == 0:
                raise ScenarioFormatError("Empty file")
            if self.max_bytes is not None and st.st_size > self.max_bytes:
                raise ScenarioFormatError(
                    f"File size {st.st_size}B exceeds budget {self.max_bytes}B"
                )
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            # Log only filename, errno, and strerror to avoid leaking absolute paths
            logger.error(
                "Failed to read %s (errno=%s, strerror=%s)",
                path.name,
                getattr(e, "errno", "unknown"),
                getattr(e, "strerror", "unknown"),
            )
            raise

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ScenarioFormatError(f"Invalid JSON in {path.name}: {e.msg}") from e

        if not isinstance(payload, dict):
            raise ScenarioFormatError(
                f"Scenario must be a JSON object, got {type(payload).__name__}"
            )

        request = PlacementRequest.from_payload(payload)
        logger.info(
            "Scenario %s: %d service areas, %d exclusions, scale=%s",
            path.name,
            len(request.service_areas),
            len(request.exclusions),
            request.scale,
        )
        return request
