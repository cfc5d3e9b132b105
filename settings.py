"""Environment-driven settings for the mock bus gateway and logging."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_FIXTURE_PATH_ENV = "SENSOR_BUS_FIXTURE_PATH"
_PROVIDER_ENV = "SENSOR_BUS_PROVIDER"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_PROVIDER = "xyz.openbmc_project.MockSensors"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    fixture_path: Optional[str]
    provider: str
    log_level: str


def _read_env(name: str) -> Optional[str]:
    """Return the trimmed variable, treating unset and blank alike."""
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def _read_log_level(default: str) -> str:
    candidate = _read_env(_LOG_LEVEL_ENV)
    if candidate is None:
        return default
    level = candidate.upper()
    # Unknown names would make dictConfig fail at startup.
    if not isinstance(logging.getLevelName(level), int):
        return default
    return level


@lru_cache
def get_settings() -> Settings:
    return Settings(
        fixture_path=_read_env(_FIXTURE_PATH_ENV),
        provider=_read_env(_PROVIDER_ENV) or DEFAULT_PROVIDER,
        log_level=_read_log_level(DEFAULT_LOG_LEVEL),
    )
