from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Callable, Optional
from urllib.parse import quote

import httpx

from trainfinder.catalog.stations import RAIL_PRODUCTS
from trainfinder.core.config import RetryPolicy, Settings
from trainfinder.upstream.cache import TTLCache, cache_key
from trainfinder.upstream.http import fetch_with_retry, make_client

logger = logging.getLogger(__name__)


def as_list(payload: Any, field: str) -> list[dict]:
    """Upstream wraps lists as {"departures": [...]} or returns them bare."""
    if isinstance(payload, dict):
        payload = payload.get(field)
    if payload is None:
        return []
    return payload if isinstance(payload, list) else [payload]


def _product_params(products: dict[str, bool]) -> dict[str, str]:
    return {k: "true" if v else "false" for k, v in products.items()}


class TransportClient:
    """
    Departures, arrivals, trips, journeys and locations from a
    transport.rest style HAFAS API. Every call goes through
    fetch_with_retry; cacheable calls go through the shared TTL cache.
    """

    def __init__(
        self,
        cfg: Settings,
        *,
        http: Optional[httpx.Client] = None,
        cache: Optional[TTLCache] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.cfg = cfg
        self.http = http or make_client(cfg)
        self.cache = cache or TTLCache(cfg.cache_max_entries)
        self._sleep = sleep

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "TransportClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _get_json(self, path: str, params: dict, *, policy: RetryPolicy, ttl: Optional[float]) -> Any:
        def fetch() -> Any:
            r = fetch_with_retry(
                lambda: self.http.get(path, params=params),
                policy,
                label=path,
                sleep=self._sleep,
            )
            return r.json()

        if ttl is None:
            return fetch()
        return self.cache.cached_call(cache_key(path, params), ttl, fetch)

    def _board(
        self,
        kind: str,
        station_id: str,
        *,
        when: Optional[datetime],
        duration: int,
        results: int,
        products: dict[str, bool],
        policy: Optional[RetryPolicy],
        use_cache: bool,
    ) -> list[dict]:
        params: dict[str, Any] = {"duration": duration, "results": results, **_product_params(products)}
        if when is not None:
            params["when"] = when.isoformat()
        payload = self._get_json(
            f"/stops/{quote(station_id, safe='')}/{kind}",
            params,
            policy=policy or self.cfg.search_retry,
            ttl=self.cfg.departures_ttl if use_cache else None,
        )
        return as_list(payload, kind)

    def departures(
        self,
        station_id: str,
        *,
        when: Optional[datetime] = None,
        duration: int = 120,
        results: int = 30,
        products: dict[str, bool] = RAIL_PRODUCTS,
        policy: Optional[RetryPolicy] = None,
        use_cache: bool = True,
    ) -> list[dict]:
        return self._board(
            "departures",
            station_id,
            when=when,
            duration=duration,
            results=results,
            products=products,
            policy=policy,
            use_cache=use_cache,
        )

    def arrivals(
        self,
        station_id: str,
        *,
        when: Optional[datetime] = None,
        duration: int = 120,
        results: int = 30,
        products: dict[str, bool] = RAIL_PRODUCTS,
        policy: Optional[RetryPolicy] = None,
        use_cache: bool = True,
    ) -> list[dict]:
        return self._board(
            "arrivals",
            station_id,
            when=when,
            duration=duration,
            results=results,
            products=products,
            policy=policy,
            use_cache=use_cache,
        )

    def trip(self, trip_id: str, *, stopovers: bool = True, policy: Optional[RetryPolicy] = None) -> dict:
        payload = self._get_json(
            f"/trips/{quote(trip_id, safe='')}",
            {"stopovers": "true" if stopovers else "false"},
            policy=policy or self.cfg.trip_retry,
            ttl=self.cfg.trip_ttl,
        )
        if isinstance(payload, dict) and isinstance(payload.get("trip"), dict):
            return payload["trip"]
        return payload

    def journeys(
        self,
        from_id: str,
        to_id: str,
        *,
        results: int = 10,
        products: dict[str, bool] = RAIL_PRODUCTS,
        policy: Optional[RetryPolicy] = None,
    ) -> list[dict]:
        payload = self._get_json(
            "/journeys",
            {"from": from_id, "to": to_id, "results": results, **_product_params(products)},
            policy=policy or self.cfg.journeys_retry,
            ttl=self.cfg.journeys_ttl,
        )
        return as_list(payload, "journeys")

    def locations(self, query: str, *, results: int = 10, policy: Optional[RetryPolicy] = None) -> list[dict]:
        payload = self._get_json(
            "/locations",
            {"query": query, "results": results},
            policy=policy or self.cfg.search_retry,
            ttl=self.cfg.locations_ttl,
        )
        return as_list(payload, "locations")
