"""Conversion of raw sensor properties into display values."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from models.sensors import (
    BoolValue,
    FloatValue,
    PropertyValue,
    ScaledInteger,
    SensorReading,
    StringValue,
    category_of,
    instance_name,
)

UNAVAILABLE = "N/A"
NUMBER_WIDTH = 8

THRESHOLD_FIELDS = (
    "CriticalLow",
    "WarningLow",
    "WarningHigh",
    "CriticalHigh",
    "FatalHigh",
)

UNIT_SHORTHANDS = {
    "Volts": "V",
    "DegreesC": "°C",
    "Amperes": "A",
    "RPMS": "RPM",
    "Watts": "W",
    "Joules": "J",
    "Meters": "m",
    "Percent": "%",
    "PercentRH": "%RH",
    "CFM": "CFM",
    "Pascals": "Pa",
}


class SensorStatus(str, Enum):
    """Health classification shown next to each reading."""

    ok = "OK"
    warning = "Warning"
    critical = "Critical"
    fatal = "Fatal"
    fail = "FAIL"
    unavailable = "N/A"


@dataclass(frozen=True, slots=True)
class DisplayRow:
    """Formatted values for one sensor row."""

    path: str
    name: str
    category: str
    status: SensorStatus
    value: str
    unit: str
    critical_low: str
    warning_low: str
    warning_high: str
    critical_high: str
    fatal_high: str

    @property
    def thresholds(self) -> tuple[str, str, str, str, str]:
        return (
            self.critical_low,
            self.warning_low,
            self.warning_high,
            self.critical_high,
            self.fatal_high,
        )


def _flag(reading: SensorReading, name: str) -> Optional[bool]:
    value = reading.get(name)
    if isinstance(value, BoolValue):
        return value.value
    return None


def resolve_status(reading: SensorReading) -> SensorStatus:
    if _flag(reading, "Available") is False:
        return SensorStatus.unavailable
    if _flag(reading, "Functional") is False:
        return SensorStatus.fail
    if _flag(reading, "FatalAlarmHigh"):
        return SensorStatus.fatal
    if _flag(reading, "CriticalAlarmLow") or _flag(reading, "CriticalAlarmHigh"):
        return SensorStatus.critical
    if _flag(reading, "WarningAlarmLow") or _flag(reading, "WarningAlarmHigh"):
        return SensorStatus.warning
    return SensorStatus.ok


def is_operational(reading: SensorReading) -> bool:
    """False when the provider reports the sensor unavailable or failed."""
    return _flag(reading, "Available") is not False and _flag(reading, "Functional") is not False


def resolve_number(value: PropertyValue) -> Optional[float]:
    if isinstance(value, ScaledInteger):
        try:
            return value.mantissa * (10.0 ** value.scale)
        except OverflowError:
            return None
    if isinstance(value, FloatValue):
        return value.value
    return None


def format_number(number: Optional[float], width: int = NUMBER_WIDTH) -> str:
    if number is None or not math.isfinite(number):
        return UNAVAILABLE.rjust(width)
    # Decide on the rounded value so 999.9996 cannot print as "1000.000".
    if abs(round(number, 3)) < 1000:
        return f"{number:{width}.3f}"
    # Halves round away from zero, not to even.
    whole = int(math.copysign(math.floor(abs(number) + 0.5), number))
    return f"{whole:{width}d}"


def unit_shorthand(unit: PropertyValue) -> str:
    if not isinstance(unit, StringValue):
        return ""
    token = unit.value.rsplit(".", 1)[-1]
    return UNIT_SHORTHANDS.get(token, token)


class PropertyNormalizer:
    """Turns a raw reading into the strings shown for one sensor."""

    def __init__(self, width: int = NUMBER_WIDTH) -> None:
        self.width = width

    def normalize_value(self, reading: SensorReading) -> str:
        if not is_operational(reading):
            return UNAVAILABLE.rjust(self.width)
        return format_number(resolve_number(reading.get("Value")), self.width)

    def normalize(self, path: str, reading: SensorReading) -> DisplayRow:
        thresholds = [
            format_number(resolve_number(reading.get(name)), self.width)
            for name in THRESHOLD_FIELDS
        ]
        return DisplayRow(
            path=path,
            name=instance_name(path),
            category=category_of(path),
            status=resolve_status(reading),
            value=self.normalize_value(reading),
            unit=unit_shorthand(reading.get("Unit")),
            critical_low=thresholds[0],
            warning_low=thresholds[1],
            warning_high=thresholds[2],
            critical_high=thresholds[3],
            fatal_high=thresholds[4],
        )
