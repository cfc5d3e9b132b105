"""Discovery and property fetch orchestration over an injected bus transport."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Sequence

from models.sensors import SensorEndpoint, SensorReading
from services.errors import DiscoveryEmptyError
from services.normalizer import DisplayRow, PropertyNormalizer
from services.ordering import natural_key

logger = logging.getLogger(__name__)


class BusTransport(Protocol):
    def get_subtree(
        self, path: str, interfaces: Sequence[str], depth: int = 0
    ) -> Dict[str, Dict[str, List[str]]]:
        ...

    def get_all(self, provider: str, path: str, interface: str) -> SensorReading:
        ...


class SensorService:
    """Coordinates discovery, ordering, fetching, and normalization."""

    def __init__(
        self,
        transport: BusTransport,
        normalizer: PropertyNormalizer,
        root_path: str,
        interface: str,
    ) -> None:
        self.transport = transport
        self.normalizer = normalizer
        self.root_path = root_path.rstrip("/")
        self.interface = interface

    def discover(self, category: Optional[str] = None) -> list[SensorEndpoint]:
        """Return every sensor endpoint under the root, in natural path order."""
        root = f"{self.root_path}/{category}" if category else self.root_path
        subtree = self.transport.get_subtree(root, [self.interface])
        if not subtree:
            raise DiscoveryEmptyError(root)

        endpoints: list[SensorEndpoint] = []
        for path in sorted(subtree, key=natural_key):
            for provider in sorted(subtree[path]):
                endpoints.append(SensorEndpoint(path=path, provider=provider))

        logger.debug(
            "Discovered sensors",
            extra={"root_path": root, "sensor_count": len(endpoints)},
        )
        return endpoints

    def fetch(self, endpoint: SensorEndpoint) -> SensorReading:
        # An empty interface name asks the provider for every property on the
        # object, thresholds and operational status included.
        return self.transport.get_all(endpoint.provider, endpoint.path, "")

    def read_row(self, endpoint: SensorEndpoint) -> DisplayRow:
        return self.normalizer.normalize(endpoint.path, self.fetch(endpoint))

    def iter_rows(self, endpoints: Iterable[SensorEndpoint]) -> Iterator[DisplayRow]:
        for endpoint in endpoints:
            yield self.read_row(endpoint)
