import logging
from typing import Optional

from trainfinder.catalog.stations import Station
from trainfinder.index.identity import extract_train_number, extract_train_type
from trainfinder.index.types import IndexEntry

logger = logging.getLogger(__name__)


def index_keys(entry: IndexEntry) -> tuple[str, ...]:
    """
    Lookup keys for one entry, in filing order:
      "513", "ICE513", "ICE 513", original label upper-cased.
    Type-based keys are omitted when the type is unknown.
    """
    candidates = [entry.train_number]
    if entry.train_type:
        candidates.append(f"{entry.train_type}{entry.train_number}")
        candidates.append(f"{entry.train_type} {entry.train_number}")
    candidates.append(entry.line_name)

    keys: list[str] = []
    for c in candidates:
        k = c.upper()
        if k and k not in keys:
            keys.append(k)
    return tuple(keys)


def _delay_seconds(value) -> int:
    """Upstream delay in seconds; anything unparseable counts as on time."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return 0
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return 0


def build_entry(record: dict, station: Station, source: str) -> Optional[tuple[IndexEntry, tuple[str, ...]]]:
    """Normalise one upstream departure/arrival record, or None if it cannot be indexed."""
    if not isinstance(record, dict):
        logger.debug("Record at %s skipped: not an object (%s)", station.id, type(record).__name__)
        return None

    trip_id = record.get("tripId")
    line = record.get("line") or {}
    name = line.get("name") if isinstance(line, dict) else None
    line_name = name.strip() if isinstance(name, str) else ""

    if not trip_id or not line_name:
        logger.debug("Record at %s skipped: missing tripId or line name", station.id)
        return None

    train_number = extract_train_number(line_name)
    if train_number is None:
        logger.debug("Record %s skipped: no train number in %r", trip_id, line_name)
        return None

    direction = record.get("direction")
    when = record.get("when") or record.get("plannedWhen")
    entry = IndexEntry(
        trip_id=str(trip_id),
        line_name=line_name,
        train_number=train_number,
        train_type=extract_train_type(line_name),
        station_id=station.id,
        station_name=station.name,
        direction=direction if isinstance(direction, str) and direction else None,
        time=when if isinstance(when, str) else None,
        delay=_delay_seconds(record.get("delay")),
        source=source,
    )
    return entry, index_keys(entry)


def file_entry(index: dict[str, IndexEntry], entry: IndexEntry, keys: tuple[str, ...]) -> bool:
    """Insert entry under each key not yet taken. Returns True if any key was new."""
    added = False
    for key in keys:
        if key not in index:
            index[key] = entry
            added = True
    return added
