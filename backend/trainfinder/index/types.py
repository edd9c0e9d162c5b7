from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class IndexStatus(str, Enum):
    NOT_INITIALIZED = "not_initialized"
    BUILDING = "building"
    READY = "ready"


@dataclass(frozen=True)
class IndexEntry:
    trip_id: str                 # upstream trip id, needed for the itinerary
    line_name: str               # raw label, e.g. "ICE 513"
    train_number: str            # "513"
    train_type: Optional[str]    # "ICE", or None if unrecognised

    station_id: str
    station_name: str
    direction: Optional[str]

    time: Optional[str]          # ISO timestamp as given upstream (actual, else planned)
    delay: int                   # seconds
    source: str                  # "dep-now-6h", "arr-6h-12h", ...


@dataclass(frozen=True)
class IndexMeta:
    status: IndexStatus
    last_updated: Optional[datetime]
    entry_count: int
    unique_trains: int


@dataclass(frozen=True)
class RebuildResult:
    entries: int
    unique_trains: int
    departures: int
    arrivals: int
    stations: int
    errors: int
    duration_seconds: float
    last_updated: datetime

    def as_dict(self) -> dict:
        return {
            "entries": self.entries,
            "unique_trains": self.unique_trains,
            "departures": self.departures,
            "arrivals": self.arrivals,
            "stations": self.stations,
            "errors": self.errors,
            "duration_seconds": self.duration_seconds,
            "last_updated": self.last_updated.isoformat(),
        }
