"""HTTP route definitions for the bus gateway."""

from __future__ import annotations

import logging
import math
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import PropertiesResponse, PropertyType, PropertyValueModel, SubtreeResponse
from datastore.mock_bus import MockSensorBus, build_default_bus

logger = logging.getLogger(__name__)

router = APIRouter()


def get_bus() -> MockSensorBus:
    return build_default_bus()


def _json_safe(value: PropertyValueModel) -> PropertyValueModel:
    if value.type is PropertyType.double and isinstance(value.value, float):
        if not math.isfinite(value.value):
            return PropertyValueModel(type=PropertyType.double, value=None)
    return value


@router.get(
    "/subtree",
    response_model=SubtreeResponse,
    summary="List objects under a path that expose the given interfaces.",
)
async def get_subtree(
    path: str = Query(..., description="Root object path to search under."),
    interface: List[str] = Query([], description="Interfaces to match."),
    depth: int = Query(0, ge=0, description="Maximum depth below the root; 0 means unlimited."),
    bus: MockSensorBus = Depends(get_bus),
) -> SubtreeResponse:
    objects = bus.get_subtree(path, interface, depth=depth)
    if not objects:
        logger.info("No objects matched", extra={"root_path": path})
    return SubtreeResponse(objects=objects)


@router.get(
    "/properties",
    response_model=PropertiesResponse,
    summary="Fetch all properties of one object from one provider.",
)
async def get_properties(
    provider: str = Query(..., description="Provider owning the object."),
    path: str = Query(..., description="Object path."),
    interface: str = Query("", description="Interface to read; empty reads every interface."),
    bus: MockSensorBus = Depends(get_bus),
) -> PropertiesResponse:
    try:
        properties = bus.get_all(provider, path, interface)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc.args[0]),
        ) from exc
    return PropertiesResponse(
        properties={name: _json_safe(value) for name, value in properties.items()}
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
