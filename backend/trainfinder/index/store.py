from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from trainfinder.index.types import IndexEntry, IndexMeta, IndexStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexSnapshot:
    entries: Mapping[str, IndexEntry]
    last_updated: Optional[datetime]
    unique_trains: int

    def __len__(self) -> int:
        return len(self.entries)


_EMPTY = IndexSnapshot(entries=MappingProxyType({}), last_updated=None, unique_trains=0)


class IndexStore:
    """
    Owns the published index. Readers get an immutable snapshot; the builder
    replaces it wholesale via publish(). Status transitions:

      not_initialized/ready --begin_build--> building
      building --publish--> ready
      building --abort_build--> previous status
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot = _EMPTY
        self._status = IndexStatus.NOT_INITIALIZED
        self._status_before_build = IndexStatus.NOT_INITIALIZED

    def current_snapshot(self) -> IndexSnapshot:
        return self._snapshot

    def meta(self) -> IndexMeta:
        with self._lock:
            snap = self._snapshot
            return IndexMeta(
                status=self._status,
                last_updated=snap.last_updated,
                entry_count=len(snap),
                unique_trains=snap.unique_trains,
            )

    def try_begin_build(self) -> bool:
        with self._lock:
            if self._status is IndexStatus.BUILDING:
                return False
            self._status_before_build = self._status
            self._status = IndexStatus.BUILDING
            return True

    def publish(self, entries: dict[str, IndexEntry], *, now: datetime) -> IndexSnapshot:
        if self._status is not IndexStatus.BUILDING:
            raise RuntimeError("publish() called without a build in progress")

        unique_trains = len({e.train_number for e in entries.values()})
        snap = IndexSnapshot(
            entries=MappingProxyType(dict(entries)),
            last_updated=now,
            unique_trains=unique_trains,
        )
        with self._lock:
            self._snapshot = snap
            self._status = IndexStatus.READY
        return snap

    def abort_build(self) -> None:
        with self._lock:
            if self._status is not IndexStatus.BUILDING:
                return
            self._status = self._status_before_build
            logger.warning("Index build aborted; status reverted to %s", self._status.value)
