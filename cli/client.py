from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import ValidationError

from app.schemas import PropertiesResponse, PropertyType, PropertyValueModel, SubtreeResponse
from cli.config import CLIConfig
from models.sensors import SensorReading
from services.errors import TransportError

logger = logging.getLogger(__name__)


class BusClient:
    """Minimal HTTP client for the sensor bus gateway."""

    def __init__(self, config: CLIConfig, http_client: Optional[httpx.Client] = None) -> None:
        self._config = config
        self._client = http_client or httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def get_subtree(
        self, path: str, interfaces: Sequence[str], depth: int = 0
    ) -> Dict[str, Dict[str, List[str]]]:
        params: List[tuple[str, Any]] = [("path", path), ("depth", depth)]
        params.extend(("interface", interface) for interface in interfaces)
        try:
            response = self._client.get("/subtree", params=params)
            response.raise_for_status()
            payload = SubtreeResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            raise self._status_error("Sensor discovery", exc) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Sensor discovery failed: {exc}") from exc
        except (ValidationError, ValueError) as exc:
            raise TransportError(f"Sensor discovery returned a malformed payload: {exc}") from exc
        return payload.objects

    def get_all(self, provider: str, path: str, interface: str) -> SensorReading:
        params = {"provider": provider, "path": path, "interface": interface}
        try:
            response = self._client.get("/properties", params=params)
            response.raise_for_status()
            payload = PropertiesResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            raise self._status_error(f"Get properties for {path}", exc) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Get properties for {path} failed: {exc}") from exc
        except (ValidationError, ValueError) as exc:
            raise TransportError(
                f"Get properties for {path} returned a malformed payload: {exc}"
            ) from exc
        return SensorReading.from_raw(
            {name: _plain_value(value) for name, value in payload.properties.items()}
        )

    @staticmethod
    def _detail(response: httpx.Response) -> str | None:
        try:
            data = response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = response.text.strip()
        return detail or None

    @classmethod
    def _status_error(cls, action: str, exc: httpx.HTTPStatusError) -> TransportError:
        detail = cls._detail(exc.response)
        logger.warning(
            "Bus request failed",
            extra={"status_code": exc.response.status_code, "reason": detail},
        )
        return TransportError(
            f"{action} failed with status {exc.response.status_code}: "
            f"{detail or 'no detail provided.'}"
        )


def _plain_value(value: PropertyValueModel) -> Any:
    if value.type is PropertyType.double:
        return float("nan") if value.value is None else float(value.value)
    if value.value is None:
        return None
    if value.type is PropertyType.int64:
        return int(value.value)
    if value.type is PropertyType.boolean:
        return bool(value.value)
    return str(value.value)
