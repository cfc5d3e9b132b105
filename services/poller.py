"""Periodic sampling of a fixed, user-ordered set of sensors."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from models.sensors import SensorEndpoint, SensorReading
from services.errors import UnresolvedSensorError
from services.normalizer import PropertyNormalizer

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class WatchSession:
    """Endpoints sampled on every tick, in the order the user named them."""

    endpoints: tuple[SensorEndpoint, ...]

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(endpoint.name for endpoint in self.endpoints)


def _matches(path: str, name: str) -> bool:
    return path == name or path.endswith(f"/{name}")


def resolve_session(
    names: Sequence[str], endpoints: Iterable[SensorEndpoint]
) -> WatchSession:
    """Resolve watch names against discovered endpoints.

    Every endpoint whose path ends with a name is kept, in discovery order.
    Unresolved names are reported together, before anything is fetched.
    """
    known = list(endpoints)
    resolved: list[SensorEndpoint] = []
    missing: list[str] = []
    for name in names:
        matched = [endpoint for endpoint in known if _matches(endpoint.path, name)]
        if not matched:
            missing.append(name)
            continue
        resolved.extend(matched)
    if missing:
        raise UnresolvedSensorError(missing)
    return WatchSession(endpoints=tuple(resolved))


class SnapshotPoller:
    """Emits one tab-separated row of sensor values per interval."""

    def __init__(
        self,
        fetch: Callable[[SensorEndpoint], SensorReading],
        normalizer: PropertyNormalizer,
        emit: Callable[[str], None],
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.fetch = fetch
        self.normalizer = normalizer
        self.emit = emit
        self.clock = clock

    def sample(self, session: WatchSession) -> str:
        timestamp = self.clock().strftime(TIMESTAMP_FORMAT)
        values = [
            self.normalizer.normalize_value(self.fetch(endpoint)).strip()
            for endpoint in session.endpoints
        ]
        return "\t".join([timestamp, *values])

    def run(
        self,
        session: WatchSession,
        interval: float,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        """Poll until ``stop_event`` is set; a fetch failure ends the session."""
        if interval <= 0:
            raise ValueError("Polling interval must be positive.")
        stop = stop_event or threading.Event()

        logger.info(
            "Starting watch session",
            extra={"sensor_count": len(session.endpoints), "interval": interval},
        )
        self.emit("\t".join(["TIMESTAMP", *session.labels]))
        while not stop.is_set():
            self.emit(self.sample(session))
            stop.wait(interval)
