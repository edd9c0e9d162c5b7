from __future__ import annotations

import hashlib
import json
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    stored_at: float
    ttl: float


def cache_key(endpoint: str, params: Optional[dict] = None) -> str:
    """Deterministic key for a call shape; parameter order does not matter."""
    raw = json.dumps({"endpoint": endpoint, "params": params or {}}, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()


class TTLCache:
    """
    Bounded in-memory cache. An entry is never served once older than its
    TTL. Inserting into a full cache drops expired entries first, then the
    oldest remaining ones.
    """

    def __init__(self, max_entries: int, *, clock: Callable[[], float] = time.monotonic) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at > entry.ttl:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl: float) -> None:
        with self._lock:
            now = self._clock()
            self._entries.pop(key, None)
            if len(self._entries) >= self.max_entries:
                self._evict(now)
            self._entries[key] = CacheEntry(key=key, value=value, stored_at=now, ttl=ttl)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _evict(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if now - e.stored_at > e.ttl]
        for k in expired:
            del self._entries[k]
        while len(self._entries) >= self.max_entries:
            self._entries.popitem(last=False)

    def cached_call(self, key: str, ttl: float, call: Callable[[], Any]) -> Any:
        # The call runs outside the lock: concurrent misses may both hit upstream.
        hit = self.get(key)
        if hit is not None:
            return hit
        value = call()
        self.set(key, value, ttl)
        return value
