"""Pydantic schemas for the bus gateway HTTP API."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class PropertyType(str, Enum):
    """Wire type tags for property values."""

    int64 = "int64"
    double = "double"
    boolean = "bool"
    string = "string"


class PropertyValueModel(BaseModel):
    """A single typed property value.

    A ``double`` that JSON cannot represent (NaN, infinity) travels as null.
    """

    type: PropertyType
    value: Optional[Union[bool, int, float, str]] = None


class SubtreeResponse(BaseModel):
    """Objects found under a root path, keyed by path then provider."""

    objects: Dict[str, Dict[str, List[str]]] = Field(default_factory=dict)


class PropertiesResponse(BaseModel):
    """All properties of one object as reported by one provider."""

    properties: Dict[str, PropertyValueModel] = Field(default_factory=dict)


class BusFixture(BaseModel):
    """On-disk layout served by the mock bus: path -> provider -> interface -> properties."""

    objects: Dict[str, Dict[str, Dict[str, Dict[str, PropertyValueModel]]]] = Field(
        default_factory=dict
    )
