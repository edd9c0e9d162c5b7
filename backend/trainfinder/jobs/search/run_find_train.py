import argparse

from trainfinder.core.config import load_config
from trainfinder.search.staged import StagedSearch
from trainfinder.upstream.client import TransportClient
from trainfinder.upstream.http import configure_logging_if_needed


def main():
    p = argparse.ArgumentParser(description="Find a train by number without the index (staged live search)")
    p.add_argument("query", help="Train designator, e.g. 'ICE 513' or 513")

    args = p.parse_args()

    cfg = load_config()
    configure_logging_if_needed(cfg.log_level)

    with TransportClient(cfg) as client:
        journeys = StagedSearch(cfg, client).find(args.query)

    if not journeys:
        print(f"No train found for {args.query!r}")
        raise SystemExit(1)

    for j in journeys:
        print(f"{j.train_name} -> {j.direction} (trip {j.trip_id})")
        for s in j.stops:
            dep = s.departure or s.planned_departure or ""
            arr = s.arrival or s.planned_arrival or ""
            print(f"  {s.station_name:<32} arr {arr:<25} dep {dep:<25} pl {s.platform or ''}")


if __name__ == "__main__":
    main()
