from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0
DEFAULT_WATCH_INTERVAL = 1
DEFAULT_ROOT_PATH = "/xyz/openbmc_project/sensors"
DEFAULT_INTERFACE = "xyz.openbmc_project.Sensor.Value"

_BASE_URL_ENV = "SENSOR_BUS_URL"
_TIMEOUT_ENV = "SENSOR_BUS_TIMEOUT"
_WATCH_INTERVAL_ENV = "SENSOR_WATCH_INTERVAL"
_ROOT_PATH_ENV = "SENSOR_ROOT_PATH"
_INTERFACE_ENV = "SENSOR_VALUE_INTERFACE"


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    watch_interval: int = DEFAULT_WATCH_INTERVAL
    root_path: str = DEFAULT_ROOT_PATH
    interface: str = DEFAULT_INTERFACE


def _read_float(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_str(value: Optional[str], default: str) -> str:
    if value is None:
        return default
    return value.strip() or default


def load_config(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    watch_interval: Optional[int] = None,
) -> CLIConfig:
    url = base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL
    if timeout is None:
        timeout = _read_float(os.getenv(_TIMEOUT_ENV), DEFAULT_TIMEOUT)
    if watch_interval is None:
        watch_interval = _read_int(os.getenv(_WATCH_INTERVAL_ENV), DEFAULT_WATCH_INTERVAL)
    return CLIConfig(
        base_url=url.rstrip("/"),
        timeout=timeout,
        watch_interval=watch_interval,
        root_path=_read_str(os.getenv(_ROOT_PATH_ENV), DEFAULT_ROOT_PATH).rstrip("/"),
        interface=_read_str(os.getenv(_INTERFACE_ENV), DEFAULT_INTERFACE),
    )
