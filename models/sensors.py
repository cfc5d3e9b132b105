"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union


@dataclass(frozen=True, slots=True)
class ScaledInteger:
    """Integer mantissa with a base-10 exponent applied on read."""

    mantissa: int
    scale: int = 0


@dataclass(frozen=True, slots=True)
class FloatValue:
    value: float


@dataclass(frozen=True, slots=True)
class BoolValue:
    value: bool


@dataclass(frozen=True, slots=True)
class StringValue:
    value: str


@dataclass(frozen=True, slots=True)
class Absent:
    """Marker for a property the provider did not report."""


ABSENT = Absent()

PropertyValue = Union[ScaledInteger, FloatValue, BoolValue, StringValue, Absent]


@dataclass(frozen=True, slots=True)
class SensorReading:
    """Typed properties reported for one sensor instance by a single fetch."""

    properties: Mapping[str, PropertyValue] = field(default_factory=dict)

    def get(self, name: str) -> PropertyValue:
        return self.properties.get(name, ABSENT)

    def __contains__(self, name: object) -> bool:
        return name in self.properties

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "SensorReading":
        """Build a reading from plain Python values.

        Integer properties share the reading's ``Scale`` exponent, which is
        consumed rather than stored. Values of any other type are ignored.
        """
        scale = raw.get("Scale", 0)
        if isinstance(scale, bool) or not isinstance(scale, int):
            scale = 0

        properties: dict[str, PropertyValue] = {}
        for name, value in raw.items():
            if name == "Scale":
                continue
            # bool is a subclass of int, so it must be checked first
            if isinstance(value, bool):
                properties[name] = BoolValue(value)
            elif isinstance(value, int):
                properties[name] = ScaledInteger(mantissa=value, scale=scale)
            elif isinstance(value, float):
                properties[name] = FloatValue(value)
            elif isinstance(value, str):
                properties[name] = StringValue(value)
        return cls(properties=MappingProxyType(properties))


@dataclass(frozen=True, slots=True)
class SensorEndpoint:
    """A sensor object path together with one provider exposing it."""

    path: str
    provider: str

    @property
    def name(self) -> str:
        return instance_name(self.path)

    @property
    def category(self) -> str:
        return category_of(self.path)


def instance_name(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def category_of(path: str) -> str:
    """Return the path segment between the last two slashes."""
    segments = path.split("/")
    if len(segments) < 3:
        return ""
    return segments[-2]
