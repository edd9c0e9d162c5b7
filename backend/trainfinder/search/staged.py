from __future__ import annotations

import logging
import re
from typing import Callable, Optional, Sequence

import httpx

from trainfinder.catalog.stations import KNOWN_ROUTES, SEARCH_STATION_IDS, Route
from trainfinder.core.config import Settings
from trainfinder.index.identity import TRAIN_TYPES, digits_only
from trainfinder.search.journey import TrainJourney, to_train_journey
from trainfinder.upstream.cache import TTLCache
from trainfinder.upstream.client import TransportClient

logger = logging.getLogger(__name__)

MAX_TRIPS_EXPANDED = 3

UPSTREAM_ERRORS = (httpx.HTTPError, ValueError)


def _no_space(value: str) -> str:
    return re.sub(r"\s", "", value).upper()


def line_matches(line: dict, search_num: str, search_full: str, *, use_fahrt_nr: bool = True) -> bool:
    name = (line.get("name") or "").upper()
    parts = name.split()
    last_token = parts[-1] if parts else ""

    if search_num and use_fahrt_nr and str(line.get("fahrtNr") or "") == search_num:
        return True
    if search_num and last_token == search_num:
        return True
    return bool(search_full) and _no_space(name) == search_full


class StagedSearch:
    """
    Finds a train without the index:
      1. live departures at major stations
      2. journeys along known long-distance routes
      3. for a bare number, stage 1 again with each type prefix ("ICE 513", "IC 513", ...)
    The first stage that yields a journey wins.
    """

    def __init__(
        self,
        cfg: Settings,
        client: TransportClient,
        *,
        station_ids: Sequence[str] = SEARCH_STATION_IDS,
        routes: Sequence[Route] = KNOWN_ROUTES,
        result_cache: Optional[TTLCache] = None,
    ) -> None:
        self.cfg = cfg
        self.client = client
        self.station_ids = tuple(station_ids)
        self.routes = tuple(routes)
        self.result_cache = result_cache or TTLCache(cfg.search_cache_max_entries)

    def find(self, query: str) -> list[TrainJourney]:
        cleaned = query.strip().upper()
        if not cleaned:
            return []

        cached = self.result_cache.get(cleaned)
        if cached is not None:
            logger.info("Using cached search results for %r", cleaned)
            return cached

        stages: list[tuple[str, Callable[[str], list[TrainJourney]]]] = [
            ("station departures", self.search_via_stations),
            ("route journeys", self.search_via_journeys),
            ("type prefixes", self.search_via_type_prefixes),
        ]
        for idx, (name, stage) in enumerate(stages, start=1):
            logger.info("[%d/%d] Searching %r via %s", idx, len(stages), cleaned, name)
            results = stage(cleaned)
            if results:
                logger.info("Found %r via %s", cleaned, name)
                self.result_cache.set(cleaned, results, self.cfg.search_cache_ttl)
                return results

        logger.info("No results for %r", cleaned)
        return []

    def trip_details(self, trip_id: str) -> Optional[dict]:
        try:
            return self.client.trip(trip_id, stopovers=True)
        except UPSTREAM_ERRORS as e:
            logger.warning("Trip %s failed: %r", trip_id, e)
            return None

    def _first_journey(self, trip_ids: Sequence[str]) -> list[TrainJourney]:
        for trip_id in trip_ids[:MAX_TRIPS_EXPANDED]:
            journey = to_train_journey(self.trip_details(trip_id))
            if journey is not None:
                return [journey]
        return []

    def search_via_stations(self, query: str) -> list[TrainJourney]:
        search_num = digits_only(query)
        search_full = _no_space(query)

        for station_id in self.station_ids:
            try:
                departures = self.client.departures(station_id, policy=self.cfg.search_retry)
            except UPSTREAM_ERRORS as e:
                logger.warning("Departures for %s failed: %r", station_id, e)
                continue

            trip_ids: list[str] = []
            for dep in departures:
                trip_id = dep.get("tripId")
                if not trip_id or trip_id in trip_ids:
                    continue
                if line_matches(dep.get("line") or {}, search_num, search_full):
                    logger.debug("Station %s matched %s", station_id, (dep.get("line") or {}).get("name"))
                    trip_ids.append(trip_id)

            if trip_ids:
                return self._first_journey(trip_ids)
        return []

    def search_via_journeys(self, query: str) -> list[TrainJourney]:
        search_num = digits_only(query)
        search_full = _no_space(query)
        seen: set[str] = set()

        for route in self.routes:
            try:
                journeys = self.client.journeys(route.from_id, route.to_id)
            except UPSTREAM_ERRORS as e:
                logger.warning("Journeys %s failed: %r", route.label, e)
                continue

            for journey in journeys:
                for leg in journey.get("legs") or []:
                    line = leg.get("line") or {}
                    trip_id = leg.get("tripId")
                    if not line.get("name") or not trip_id or trip_id in seen:
                        continue
                    if not line_matches(line, search_num, search_full, use_fahrt_nr=False):
                        continue
                    seen.add(trip_id)
                    found = self._first_journey([trip_id])
                    if found:
                        return found
        return []

    def search_via_type_prefixes(self, query: str) -> list[TrainJourney]:
        if not re.fullmatch(r"[0-9]+", query):
            return []
        for train_type in TRAIN_TYPES:
            results = self.search_via_stations(f"{train_type} {query}")
            if results:
                return results
        return []
