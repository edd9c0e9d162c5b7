import logging
import time
from datetime import datetime
from typing import Callable, Optional, Sequence

import httpx

from trainfinder.catalog.stations import MAJOR_STATIONS, RAIL_PRODUCTS, Station
from trainfinder.core.config import Settings
from trainfinder.index.entries import build_entry, file_entry
from trainfinder.index.store import IndexStore
from trainfinder.index.types import IndexEntry, RebuildResult
from trainfinder.index.windows import TimeWindow, berlin_now, time_windows
from trainfinder.upstream.client import TransportClient
from trainfinder.upstream.pacing import Pacer

logger = logging.getLogger(__name__)


class RebuildInProgressError(RuntimeError):
    pass


class IndexBuilder:
    """
    Polls departures and arrivals for every catalog station across the
    configured time windows and publishes the result as one snapshot.
    A failed fetch is logged and skipped; anything else aborts the build and
    leaves the previous snapshot live.
    """

    def __init__(
        self,
        cfg: Settings,
        client: TransportClient,
        store: IndexStore,
        *,
        stations: Sequence[Station] = MAJOR_STATIONS,
        pacer: Optional[Pacer] = None,
        clock: Callable[[], datetime] = berlin_now,
    ) -> None:
        self.cfg = cfg
        self.client = client
        self.store = store
        self.stations = tuple(stations)
        self.windows = time_windows(cfg.window_count, cfg.window_minutes)
        self.pacer = pacer or Pacer(cfg.delay)
        self.clock = clock

    def rebuild(self) -> RebuildResult:
        if not self.store.try_begin_build():
            raise RebuildInProgressError("Index is already being built")
        try:
            return self._build()
        except Exception:
            self.store.abort_build()
            logger.exception("Index rebuild failed; keeping previous snapshot")
            raise

    def _fetch(self, kind: str, station: Station, window: TimeWindow, now: datetime) -> list[dict]:
        fetch = self.client.departures if kind == "dep" else self.client.arrivals
        return fetch(
            station.id,
            when=window.start(now),
            duration=window.duration_minutes,
            results=self.cfg.results_per_query,
            products=RAIL_PRODUCTS,
            policy=self.cfg.index_retry,
            use_cache=False,
        )

    def _build(self) -> RebuildResult:
        t0 = time.perf_counter()
        now = self.clock()
        total = len(self.stations)

        logger.info(
            "Index rebuild start stations=%d windows=%s results_per_query=%d delay=%.2f",
            total,
            ",".join(w.name for w in self.windows),
            self.cfg.results_per_query,
            self.pacer.delay,
        )

        new_index: dict[str, IndexEntry] = {}
        counts = {"dep": 0, "arr": 0}
        errors = 0
        stations_processed = 0

        for station in self.stations:
            for window in self.windows:
                for kind in ("dep", "arr"):
                    try:
                        records = self._fetch(kind, station, window, now)
                    except (httpx.HTTPError, ValueError) as e:
                        errors += 1
                        status = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
                        if status == 404:
                            logger.debug("No %s data for %s %s", kind, station.name, window.name)
                        else:
                            logger.warning("%s fetch failed %s %s: %r", kind, station.name, window.name, e)
                        records = []

                    source = f"{kind}-{window.name}"
                    for record in records:
                        built = build_entry(record, station, source)
                        if built is None:
                            continue
                        entry, keys = built
                        if file_entry(new_index, entry, keys):
                            counts[kind] += 1

                    self.pacer.pause()

            stations_processed += 1
            if self.cfg.progress_every and (
                stations_processed % self.cfg.progress_every == 0 or stations_processed == total
            ):
                logger.info(
                    "Index progress %d/%d stations, %d entries, %d errors",
                    stations_processed,
                    total,
                    len(new_index),
                    errors,
                )

        snap = self.store.publish(new_index, now=self.clock())

        result = RebuildResult(
            entries=len(snap),
            unique_trains=snap.unique_trains,
            departures=counts["dep"],
            arrivals=counts["arr"],
            stations=stations_processed,
            errors=errors,
            duration_seconds=round(time.perf_counter() - t0, 1),
            last_updated=snap.last_updated,
        )
        logger.info("Index rebuild done result=%s", result.as_dict())
        return result
