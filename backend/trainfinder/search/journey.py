from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TrainStop:
    station_id: Optional[str]
    station_name: Optional[str]
    arrival: Optional[str]
    planned_arrival: Optional[str]
    departure: Optional[str]
    planned_departure: Optional[str]
    arrival_delay: Optional[int]
    departure_delay: Optional[int]
    platform: Optional[str]
    planned_platform: Optional[str]


@dataclass(frozen=True)
class TrainJourney:
    trip_id: str
    train_number: str
    train_type: str
    train_name: str
    direction: Optional[str]
    stops: tuple[TrainStop, ...]

    @property
    def origin(self) -> TrainStop:
        return self.stops[0]

    @property
    def destination(self) -> TrainStop:
        return self.stops[-1]


def _stop(s: dict) -> TrainStop:
    stop = s.get("stop") or {}
    return TrainStop(
        station_id=stop.get("id"),
        station_name=stop.get("name"),
        arrival=s.get("arrival"),
        planned_arrival=s.get("plannedArrival"),
        departure=s.get("departure"),
        planned_departure=s.get("plannedDeparture"),
        arrival_delay=s.get("arrivalDelay"),
        departure_delay=s.get("departureDelay"),
        platform=s.get("platform"),
        planned_platform=s.get("plannedPlatform"),
    )


def to_train_journey(trip: Optional[dict]) -> Optional[TrainJourney]:
    """Upstream trip with stopovers -> TrainJourney. None without stopovers."""
    if not trip or not trip.get("stopovers"):
        return None

    line = trip.get("line") or {}
    line_name = line.get("name") or ""
    parts = line_name.split(" ")
    train_type = parts[0] or line.get("product") or "Zug"

    return TrainJourney(
        trip_id=trip.get("id") or "",
        train_number=" ".join(parts[1:]),
        train_type=train_type,
        train_name=line_name,
        direction=trip.get("direction"),
        stops=tuple(_stop(s) for s in trip["stopovers"]),
    )
