from __future__ import annotations
import json
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Dict, List, Optional, Sequence

from app.schemas import BusFixture, PropertyValueModel
from settings import get_settings

InterfaceMap = Dict[str, Dict[str, PropertyValueModel]]


class MockSensorBus:
    """In-memory object bus serving sensor properties by provider and path."""

    def __init__(self, default_provider: str, fixture_path: Optional[Path] = None) -> None:
        self.default_provider = default_provider
        self.fixture_path = fixture_path
        self._objects: Dict[str, Dict[str, InterfaceMap]] = {}
        self._lock = Lock()
        if fixture_path:
            self._load_fixture()

    def add_object(
        self,
        path: str,
        interfaces: InterfaceMap,
        provider: Optional[str] = None,
    ) -> None:
        owner = provider or self.default_provider
        with self._lock:
            providers = self._objects.setdefault(path, {})
            current = providers.setdefault(owner, {})
            for interface, properties in interfaces.items():
                current.setdefault(interface, {}).update(
                    {name: value.model_copy() for name, value in properties.items()}
                )

    def get_subtree(
        self, root: str, interfaces: Sequence[str], depth: int = 0
    ) -> Dict[str, Dict[str, List[str]]]:
        """Objects under ``root`` exposing any of ``interfaces``.

        An empty interface list matches every object. A positive ``depth``
        limits how many path segments below the root are searched.
        """
        prefix = root.rstrip("/") + "/"
        wanted = set(interfaces)
        result: Dict[str, Dict[str, List[str]]] = {}
        with self._lock:
            for path, providers in self._objects.items():
                if not path.startswith(prefix):
                    continue
                if depth > 0 and path[len(prefix):].count("/") >= depth:
                    continue
                for provider, interface_map in providers.items():
                    exposed = sorted(interface_map)
                    if wanted and not wanted.intersection(exposed):
                        continue
                    result.setdefault(path, {})[provider] = exposed
        return result

    def get_all(
        self, provider: str, path: str, interface: str = ""
    ) -> Dict[str, PropertyValueModel]:
        with self._lock:
            interface_map = self._objects.get(path, {}).get(provider)
            if interface_map is None:
                raise KeyError(f"Object {path!r} is not provided by {provider!r}.")
            if interface:
                if interface not in interface_map:
                    raise KeyError(f"Object {path!r} does not implement {interface!r}.")
                selected = [interface_map[interface]]
            else:
                selected = [interface_map[name] for name in sorted(interface_map)]

            properties: Dict[str, PropertyValueModel] = {}
            for group in selected:
                for name, value in group.items():
                    properties[name] = value.model_copy()
            return properties

    def _load_fixture(self) -> None:
        if not self.fixture_path or not self.fixture_path.exists():
            return

        try:
            raw = self.fixture_path.read_text() or "{}"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            data = {}

        fixture = BusFixture.model_validate(data)
        for path, providers in fixture.objects.items():
            for provider, interfaces in providers.items():
                self.add_object(path, interfaces, provider=provider)


@lru_cache
def build_default_bus(
    provider: Optional[str] = None,
    fixture_path: Optional[str] = None,
) -> MockSensorBus:
    settings = get_settings()
    owner = settings.provider if provider is None else provider
    path = settings.fixture_path if fixture_path is None else fixture_path
    fixture = Path(path) if path else None
    return MockSensorBus(default_provider=owner, fixture_path=fixture)
