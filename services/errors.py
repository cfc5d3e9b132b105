"""Failures raised while discovering, fetching, or watching sensors."""

from __future__ import annotations

from typing import Iterable


class SensorError(Exception):
    """Base class for sensor inspection failures."""


class DiscoveryEmptyError(SensorError):
    """No object under the requested root exposes the sensor interface."""

    def __init__(self, root_path: str, detail: str | None = None) -> None:
        self.root_path = root_path
        super().__init__(detail or f"No sensors found under {root_path}.")


class TransportError(SensorError):
    """Discovery or property fetch failed for any other reason."""


class UnresolvedSensorError(SensorError):
    """One or more watch names did not match any discovered sensor."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(names)
        joined = ", ".join(self.names)
        super().__init__(f"Sensor(s) not found: {joined}")
