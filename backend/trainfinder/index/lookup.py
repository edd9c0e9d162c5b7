from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from trainfinder.index.identity import digits_only
from trainfinder.index.store import IndexStore
from trainfinder.index.types import IndexEntry, IndexStatus

logger = logging.getLogger(__name__)

AUTOCOMPLETE_LIMIT = 10

_BARE_NUMBER_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class SearchResult:
    query: str
    found: bool
    entry: Optional[IndexEntry]
    index_status: IndexStatus
    index_size: int


@dataclass(frozen=True)
class Candidate:
    train_number: str
    line_name: str
    train_type: Optional[str]
    direction: Optional[str]
    trip_id: str


class LookupEngine:
    """Reads only the current published snapshot; never waits for a rebuild."""

    def __init__(self, store: IndexStore) -> None:
        self.store = store

    def search(self, query: str) -> SearchResult:
        snapshot = self.store.current_snapshot()
        entries = snapshot.entries

        q = query.upper().strip()
        q_no_space = re.sub(r"\s", "", q)
        q_num = digits_only(q)

        found: Optional[IndexEntry] = None
        for key in (q, q_no_space, q_num):
            if key and key in entries:
                found = entries[key]
                break

        # Linear scan, first match in build order.
        if found is None and q_num:
            for key, entry in entries.items():
                if q_num in key or entry.train_number == q_num:
                    found = entry
                    break

        if found is None:
            status = self.store.meta().status
            logger.info("Search %r not found (index status=%s size=%d)", query, status.value, len(entries))
            return SearchResult(query=query, found=False, entry=None, index_status=status, index_size=len(entries))

        logger.info("Search %r found %s at %s", query, found.line_name, found.station_name)
        return SearchResult(
            query=query,
            found=True,
            entry=found,
            index_status=self.store.meta().status,
            index_size=len(entries),
        )

    def autocomplete(self, query: str, limit: int = AUTOCOMPLETE_LIMIT) -> list[Candidate]:
        q = query.upper().strip()
        if not q:
            return []
        q_num = digits_only(q)

        matches: dict[str, Candidate] = {}
        for key, entry in self.store.current_snapshot().entries.items():
            # bare-number keys only, one candidate per train
            if not _BARE_NUMBER_RE.fullmatch(key):
                continue
            if entry.train_number in matches:
                continue
            hit = (
                bool(q_num) and (key.startswith(q_num) or entry.train_number.startswith(q_num))
            ) or q in entry.line_name.upper()
            if hit:
                matches[entry.train_number] = Candidate(
                    train_number=entry.train_number,
                    line_name=entry.line_name,
                    train_type=entry.train_type,
                    direction=entry.direction,
                    trip_id=entry.trip_id,
                )

        ranked = sorted(
            matches.values(),
            key=lambda c: (c.train_number != q_num, len(c.train_number), c.train_number),
        )
        return ranked[:limit]
