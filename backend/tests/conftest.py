from __future__ import annotations

from datetime import datetime
from typing import Optional

import httpx
import pytest

from trainfinder.catalog.stations import Station
from trainfinder.core.config import RetryPolicy, Settings
from trainfinder.index.windows import BERLIN

NOW = BERLIN.localize(datetime(2026, 10, 19, 8, 0))

FRANKFURT = Station("8000105", "Frankfurt Hbf")
BERLIN_HBF = Station("8011160", "Berlin Hbf")
MUENCHEN = Station("8000261", "München Hbf")


def make_settings(**overrides) -> Settings:
    fast = RetryPolicy(attempts=3, base_delay=0.01, growth_factor=2.0)
    values = dict(
        base_url="https://transport.test",
        user_agent="trainfinder-tests",
        connect_timeout=1.0,
        read_timeout=1.0,
        write_timeout=1.0,
        pool_timeout=1.0,
        window_count=2,
        window_minutes=360,
        results_per_query=500,
        delay=0.0,
        rebuild_interval=3600.0,
        progress_every=10,
        scheduler_enabled=False,
        index_retry=fast,
        search_retry=fast,
        trip_retry=RetryPolicy(attempts=2, base_delay=0.01, growth_factor=1.5),
        journeys_retry=RetryPolicy(attempts=2, base_delay=0.01, growth_factor=1.5),
        cache_max_entries=50,
        departures_ttl=60.0,
        trip_ttl=60.0,
        journeys_ttl=300.0,
        locations_ttl=3600.0,
        search_cache_ttl=300.0,
        search_cache_max_entries=20,
        log_level="DEBUG",
    )
    values.update(overrides)
    return Settings(**values)


def record(line_name: Optional[str], trip_id: Optional[str], *, direction="München Hbf", when="2026-10-19T09:00:00+02:00", delay=None, fahrt_nr=None) -> dict:
    line = {"name": line_name} if line_name is not None else None
    if line is not None and fahrt_nr is not None:
        line["fahrtNr"] = fahrt_nr
    return {
        "tripId": trip_id,
        "line": line,
        "direction": direction,
        "when": when,
        "plannedWhen": when,
        "delay": delay,
        "platform": "7",
    }


def trip_payload(trip_id: str, line_name: str, stops=("Frankfurt Hbf", "München Hbf")) -> dict:
    return {
        "id": trip_id,
        "direction": stops[-1],
        "line": {"name": line_name, "product": "nationalExpress"},
        "stopovers": [
            {
                "stop": {"id": str(i), "name": name},
                "plannedDeparture": f"2026-10-19T{i + 8:02d}:00:00+02:00",
                "departure": f"2026-10-19T{i + 8:02d}:02:00+02:00",
                "departureDelay": 120,
                "platform": str(i + 1),
            }
            for i, name in enumerate(stops)
        ],
    }


def http_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://transport.test/x")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


class FakeTransport:
    """
    Stands in for TransportClient. Boards are keyed by (kind, station_id, window_index)
    where kind is "dep" or "arr"; window_index is derived from the requested start time.
    """

    def __init__(self, now: datetime = NOW, window_minutes: int = 360) -> None:
        self.now = now
        self.window_minutes = window_minutes
        self.boards: dict[tuple[str, str, int], list[dict]] = {}
        self.board_errors: dict[tuple[str, str, int], Exception] = {}
        self.trips: dict[str, dict] = {}
        self.trip_errors: dict[str, Exception] = {}
        self.journey_results: dict[tuple[str, str], list[dict]] = {}
        self.calls: list[tuple] = []
        self.on_board = None
        self.closed = False

    def _window_index(self, when: Optional[datetime]) -> int:
        if when is None:
            return 0
        return int((when - self.now).total_seconds() // 60 // self.window_minutes)

    def _board(self, kind: str, station_id: str, when: Optional[datetime]) -> list[dict]:
        key = (kind, station_id, self._window_index(when))
        self.calls.append(key)
        if self.on_board is not None:
            self.on_board(key)
        if key in self.board_errors:
            raise self.board_errors[key]
        return list(self.boards.get(key, []))

    def departures(self, station_id, *, when=None, **kwargs):
        return self._board("dep", station_id, when)

    def arrivals(self, station_id, *, when=None, **kwargs):
        return self._board("arr", station_id, when)

    def trip(self, trip_id, *, stopovers=True, **kwargs):
        self.calls.append(("trip", trip_id))
        if trip_id in self.trip_errors:
            raise self.trip_errors[trip_id]
        if trip_id not in self.trips:
            raise http_error(404)
        return self.trips[trip_id]

    def journeys(self, from_id, to_id, **kwargs):
        self.calls.append(("journeys", from_id, to_id))
        return list(self.journey_results.get((from_id, to_id), []))

    def locations(self, query, **kwargs):
        self.calls.append(("locations", query))
        return [{"type": "stop", "id": "8000105", "name": "Frankfurt(Main)Hbf"}]

    def close(self) -> None:
        self.closed = True


class ManualClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()
