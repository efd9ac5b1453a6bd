import json
import logging
from pathlib import Path

import pytest

from domain.coverage.errors import InvalidPlacementInputError, ScenarioFormatError
from domain.siting.repositories import ScenarioRepository
from domain.siting.services import auto_place
from infrastructure.scenario.json_adapter import JsonScenarioAdapter

SCENARIO = {
    "serviceAreas": [[{"x": 0, "y": 0}, {"x": 100, "y": 0}, {"x": 100, "y": 100}, {"x": 0, "y": 100}]],
    "exclusions": [[[40, 40], [60, 40], [60, 60], [40, 60]]],
    "scale": 0.05,
    "deviceRange": 6,
    "devicePower": 50,
    "config": {"overlapFactor": 0.85},
}


def write_scenario(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_happy_path(tmp_path, caplog):
    p = write_scenario(tmp_path / "site.json", SCENARIO)

    with caplog.at_level(logging.INFO, logger="infrastructure.scenario.json_adapter"):
        request = JsonScenarioAdapter().load_request(p)

    assert len(request.service_areas) == 1
    assert len(request.exclusions) == 1
    assert request.scale == 0.05
    assert request.radius_px == pytest.approx(120.0)
    assert request.device_power == 50
    assert request.config.overlap_factor == 0.85
    assert "site.json" in caplog.text
    # Absolute paths never reach the log
    assert str(tmp_path) not in caplog.text


def test_accepts_str_path(tmp_path):
    p = write_scenario(tmp_path / "site.json", SCENARIO)

    request = JsonScenarioAdapter().load_request(str(p))

    assert request.device_range == 6


def test_file_not_found_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        JsonScenarioAdapter().load_request(tmp_path / "missing.json")


def test_wrong_extension_raises(tmp_path):
    p = write_scenario(tmp_path / "site.yaml", SCENARIO)

    with pytest.raises(ScenarioFormatError, match="extension"):
        JsonScenarioAdapter().load_request(p)


def test_symlink_rejected(tmp_path):
    target = write_scenario(tmp_path / "real.json", SCENARIO)
    link = tmp_path / "link.json"
    try:
        link.symlink_to(target)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported on this platform")

    with pytest.raises(ScenarioFormatError, match="Symlinks"):
        JsonScenarioAdapter().load_request(link)


def test_empty_file_raises(tmp_path):
    p = tmp_path / "empty.json"
    p.write_bytes(b"")

    with pytest.raises(ScenarioFormatError, match="Empty"):
        JsonScenarioAdapter().load_request(p)


def test_size_budget(tmp_path):
    p = write_scenario(tmp_path / "site.json", SCENARIO)

    with pytest.raises(ScenarioFormatError, match="budget"):
        JsonScenarioAdapter(max_bytes=16).load_request(p)


def test_invalid_json_raises(tmp_path):
    p = tmp_path / "broken.json"
    p.write_text("{not json", encoding="utf-8")

    with pytest.raises(ScenarioFormatError, match="Invalid JSON"):
        JsonScenarioAdapter().load_request(p)


def test_top_level_array_rejected(tmp_path):
    p = write_scenario(tmp_path / "list.json", [SCENARIO])

    with pytest.raises(ScenarioFormatError, match="JSON object"):
        JsonScenarioAdapter().load_request(p)


def test_invalid_request_raises_domain_error(tmp_path):
    payload = dict(SCENARIO, deviceRange=0)
    p = write_scenario(tmp_path / "site.json", payload)

    with pytest.raises(InvalidPlacementInputError):
        JsonScenarioAdapter().load_request(p)


def test_read_error_is_logged_and_reraised(tmp_path, monkeypatch, caplog):
    p = write_scenario(tmp_path / "site.json", SCENARIO)

    def _raise_permission_error(self, *args, **kwargs):
        raise PermissionError(13, "permission denied")

    monkeypatch.setattr(Path, "read_text", _raise_permission_error)

    with caplog.at_level(logging.ERROR, logger="infrastructure.scenario.json_adapter"):
        with pytest.raises(PermissionError):
            JsonScenarioAdapter().load_request(p)

    assert "errno=13" in caplog.text
    assert str(tmp_path) not in caplog.text


def test_adapter_feeds_auto_place_through_port(tmp_path):
    def plan(repository: ScenarioRepository, path: Path):
        return auto_place(repository.load_request(path))

    payload = dict(SCENARIO, scale=0.2)
    p = write_scenario(tmp_path / "site.json", payload)

    result = plan(JsonScenarioAdapter(), p)

    assert result.devices
    assert result.devices[0].range == 6
    assert result.devices[0].radius == pytest.approx(30.0)
    assert result.devices[0].power == 50


def test_infinite_tuning_value_raises_domain_error(tmp_path):
    # json.dumps writes float("inf") as the non-standard Infinity literal
    payload = dict(SCENARIO, config={"densityBaseMultiplier": float("inf")})
    p = write_scenario(tmp_path / "site.json", payload)
    assert "Infinity" in p.read_text(encoding="utf-8")

    with pytest.raises(InvalidPlacementInputError):
        JsonScenarioAdapter().load_request(p)
