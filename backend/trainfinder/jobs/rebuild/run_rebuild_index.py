import argparse
import dataclasses

from trainfinder.catalog.stations import MAJOR_STATIONS
from trainfinder.core.config import load_config
from trainfinder.index.builder import IndexBuilder
from trainfinder.index.lookup import LookupEngine
from trainfinder.index.store import IndexStore
from trainfinder.upstream.client import TransportClient
from trainfinder.upstream.http import configure_logging_if_needed


def main():
    p = argparse.ArgumentParser(description="Build the train index once against the live upstream")
    p.add_argument("--max-stations", type=int, default=0, help="Only poll the first N catalog stations (0 = all)")
    p.add_argument("--windows", type=int, help="Override INDEX_WINDOW_COUNT")
    p.add_argument("--delay", type=float, help="Override INDEX_REQUEST_DELAY_SECONDS")
    p.add_argument("--lookup", action="append", default=[], help="Query to look up after the build; repeatable")

    args = p.parse_args()

    cfg = load_config()
    overrides = {}
    if args.windows is not None:
        overrides["window_count"] = args.windows
    if args.delay is not None:
        overrides["delay"] = args.delay
    if overrides:
        cfg = dataclasses.replace(cfg, **overrides)

    configure_logging_if_needed(cfg.log_level)

    stations = MAJOR_STATIONS[: args.max_stations] if args.max_stations else MAJOR_STATIONS
    store = IndexStore()

    with TransportClient(cfg) as client:
        result = IndexBuilder(cfg, client, store, stations=stations).rebuild()

    print(result.as_dict())

    engine = LookupEngine(store)
    for q in args.lookup:
        hit = engine.search(q)
        if hit.found:
            print(f"{q!r}: {hit.entry.line_name} -> {hit.entry.direction} (at {hit.entry.station_name}, trip {hit.entry.trip_id})")
        else:
            print(f"{q!r}: not found (index {hit.index_status.value}, {hit.index_size} keys)")


if __name__ == "__main__":
    main()
