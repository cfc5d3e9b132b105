from __future__ import annotations

import threading
from datetime import datetime
from typing import Dict, List

import pytest

from models.sensors import SensorEndpoint, SensorReading
from services.errors import TransportError, UnresolvedSensorError
from services.normalizer import PropertyNormalizer
from services.poller import SnapshotPoller, WatchSession, resolve_session

ROOT = "/xyz/openbmc_project/sensors"

ENDPOINTS = [
    SensorEndpoint(f"{ROOT}/fan_tach/f1", "svc.fan"),
    SensorEndpoint(f"{ROOT}/fan_tach/f2", "svc.fan"),
    SensorEndpoint(f"{ROOT}/power/psu1", "svc.a"),
    SensorEndpoint(f"{ROOT}/power/psu1", "svc.b"),
    SensorEndpoint(f"{ROOT}/temperature/t1", "svc.temp"),
]


class FakeFetcher:
    def __init__(self, readings: Dict[str, dict], fail_on_call: int | None = None) -> None:
        self.readings = readings
        self.fail_on_call = fail_on_call
        self.calls: List[SensorEndpoint] = []

    def __call__(self, endpoint: SensorEndpoint) -> SensorReading:
        self.calls.append(endpoint)
        if self.fail_on_call is not None and len(self.calls) >= self.fail_on_call:
            raise TransportError(f"Get properties for {endpoint.path} failed")
        return SensorReading.from_raw(self.readings[endpoint.name])


def _clock() -> datetime:
    return datetime(2024, 1, 1, 12, 30, 5)


def test_resolution_follows_user_order() -> None:
    session = resolve_session(["t1", "f1"], ENDPOINTS)

    assert [endpoint.path for endpoint in session.endpoints] == [
        f"{ROOT}/temperature/t1",
        f"{ROOT}/fan_tach/f1",
    ]
    assert session.labels == ("t1", "f1")


def test_resolution_keeps_every_provider_in_discovery_order() -> None:
    session = resolve_session(["psu1"], ENDPOINTS)

    assert [endpoint.provider for endpoint in session.endpoints] == ["svc.a", "svc.b"]


def test_resolution_matches_whole_segments_only() -> None:
    with pytest.raises(UnresolvedSensorError):
        resolve_session(["1"], ENDPOINTS)

    session = resolve_session(["fan_tach/f2"], ENDPOINTS)
    assert session.labels == ("f2",)


def test_repeated_name_is_sampled_once_per_mention() -> None:
    session = resolve_session(["t1", "f1", "t1"], ENDPOINTS)

    assert session.labels == ("t1", "f1", "t1")
    assert session.endpoints[0] == session.endpoints[2]


def test_unresolved_name_fails_before_any_fetch() -> None:
    fetcher = FakeFetcher({})

    with pytest.raises(UnresolvedSensorError) as excinfo:
        resolve_session(["f1", "missing"], ENDPOINTS)

    assert excinfo.value.names == ("missing",)
    assert "missing" in str(excinfo.value)
    assert fetcher.calls == []


def test_run_emits_header_then_one_row_per_tick() -> None:
    fetcher = FakeFetcher(
        {
            "t1": {"Value": 45250, "Scale": -3},
            "f1": {"Value": 1500.0},
        }
    )
    stop = threading.Event()
    lines: List[str] = []

    def emit(line: str) -> None:
        lines.append(line)
        if len(lines) == 3:
            stop.set()

    poller = SnapshotPoller(fetcher, PropertyNormalizer(), emit, clock=_clock)
    session = resolve_session(["t1", "f1"], ENDPOINTS)

    poller.run(session, interval=0.01, stop_event=stop)

    assert lines == [
        "TIMESTAMP\tt1\tf1",
        "2024-01-01 12:30:05\t45.250\t1500",
        "2024-01-01 12:30:05\t45.250\t1500",
    ]
    assert [endpoint.name for endpoint in fetcher.calls] == ["t1", "f1", "t1", "f1"]


def test_run_returns_immediately_when_already_stopped() -> None:
    fetcher = FakeFetcher({"t1": {"Value": 1.0}})
    stop = threading.Event()
    stop.set()
    lines: List[str] = []

    poller = SnapshotPoller(fetcher, PropertyNormalizer(), lines.append, clock=_clock)
    poller.run(resolve_session(["t1"], ENDPOINTS), interval=5, stop_event=stop)

    assert lines == ["TIMESTAMP\tt1"]
    assert fetcher.calls == []


def test_fetch_failure_aborts_session() -> None:
    fetcher = FakeFetcher({"t1": {"Value": 1.0}, "f1": {"Value": 2.0}}, fail_on_call=2)
    lines: List[str] = []
    poller = SnapshotPoller(fetcher, PropertyNormalizer(), lines.append, clock=_clock)

    with pytest.raises(TransportError):
        poller.run(resolve_session(["t1", "f1"], ENDPOINTS), interval=0.01)

    assert lines == ["TIMESTAMP\tt1\tf1"]
    assert len(fetcher.calls) == 2


def test_sample_marks_failed_sensor_unavailable() -> None:
    fetcher = FakeFetcher({"f2": {"Value": 0.0, "Functional": False}})
    poller = SnapshotPoller(fetcher, PropertyNormalizer(), lambda _line: None, clock=_clock)

    row = poller.sample(WatchSession(endpoints=(ENDPOINTS[1],)))

    assert row == "2024-01-01 12:30:05\tN/A"


def test_non_positive_interval_is_rejected() -> None:
    poller = SnapshotPoller(FakeFetcher({}), PropertyNormalizer(), lambda _line: None)

    with pytest.raises(ValueError):
        poller.run(resolve_session(["t1"], ENDPOINTS), interval=0)
