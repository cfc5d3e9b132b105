from __future__ import annotations

import json
from typing import Iterable

from cli.config import DEFAULT_INTERFACE, DEFAULT_ROOT_PATH, load_config
from datastore.mock_bus import build_default_bus
from settings import DEFAULT_PROVIDER, get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    fixture = tmp_path / "sensors.json"
    fixture.write_text(
        json.dumps(
            {
                "objects": {
                    "/sensors/temperature/t1": {
                        "svc.fixture": {
                            "xyz.openbmc_project.Sensor.Value": {
                                "Value": {"type": "double", "value": 21.5}
                            }
                        }
                    }
                }
            }
        )
    )

    monkeypatch.setenv("SENSOR_BUS_FIXTURE_PATH", str(fixture))
    monkeypatch.setenv("SENSOR_BUS_PROVIDER", "svc.custom")
    monkeypatch.setenv("LOG_LEVEL", " debug ")

    caches = (get_settings, build_default_bus)
    _clear_caches(caches)

    try:
        settings = get_settings()
        bus = build_default_bus()

        assert settings.log_level == "DEBUG"
        assert bus.default_provider == "svc.custom"
        assert bus.fixture_path == fixture
        assert list(bus.get_subtree("/sensors", [])) == ["/sensors/temperature/t1"]
    finally:
        _clear_caches(caches)


def test_blank_environment_falls_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("SENSOR_BUS_FIXTURE_PATH", "   ")
    monkeypatch.setenv("SENSOR_BUS_PROVIDER", "")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.fixture_path is None
        assert settings.provider == DEFAULT_PROVIDER
        assert settings.log_level == "INFO"
    finally:
        get_settings.cache_clear()


def test_unknown_log_level_falls_back(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    get_settings.cache_clear()

    try:
        assert get_settings().log_level == "INFO"
    finally:
        get_settings.cache_clear()


def test_cli_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("SENSOR_BUS_URL", "http://bmc.local:8080/")
    monkeypatch.setenv("SENSOR_BUS_TIMEOUT", "2.5")
    monkeypatch.setenv("SENSOR_WATCH_INTERVAL", "5")
    monkeypatch.setenv("SENSOR_ROOT_PATH", "/custom/sensors/")
    monkeypatch.setenv("SENSOR_VALUE_INTERFACE", "org.example.Sensor")

    config = load_config()

    assert config.base_url == "http://bmc.local:8080"
    assert config.timeout == 2.5
    assert config.watch_interval == 5
    assert config.root_path == "/custom/sensors"
    assert config.interface == "org.example.Sensor"


def test_cli_config_ignores_invalid_values(monkeypatch) -> None:
    monkeypatch.delenv("SENSOR_BUS_URL", raising=False)
    monkeypatch.setenv("SENSOR_BUS_TIMEOUT", "soon")
    monkeypatch.setenv("SENSOR_WATCH_INTERVAL", "-4")
    monkeypatch.delenv("SENSOR_ROOT_PATH", raising=False)
    monkeypatch.delenv("SENSOR_VALUE_INTERFACE", raising=False)

    config = load_config(base_url="http://explicit:1/", watch_interval=3)

    assert config.base_url == "http://explicit:1"
    assert config.timeout == 10.0
    assert config.watch_interval == 3
    assert config.root_path == DEFAULT_ROOT_PATH
    assert config.interface == DEFAULT_INTERFACE
