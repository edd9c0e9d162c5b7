from conftest import http_error, make_settings, record, trip_payload

from trainfinder.catalog.stations import Route
from trainfinder.search.journey import to_train_journey
from trainfinder.search.staged import StagedSearch, line_matches

STATIONS = ("8000105", "8011160")
ROUTES = (Route("8000207", "8000261", "Köln -> München"), Route("8000105", "8011160", "Frankfurt -> Berlin"))


def _search(transport, **kw):
    return StagedSearch(make_settings(), transport, station_ids=STATIONS, routes=ROUTES, **kw)


def _leg(line_name, trip_id):
    return {"tripId": trip_id, "line": {"name": line_name}}


def test_line_matching_rules():
    assert line_matches({"name": "ICE 513"}, "513", "513")
    assert line_matches({"name": "ICE 1513", "fahrtNr": "513"}, "513", "513")
    assert line_matches({"name": "ICE 513"}, "513", "ICE513")
    assert line_matches({"name": "ice  513"}, "", "ICE513")
    assert not line_matches({"name": "ICE 1513"}, "513", "513")
    assert not line_matches({"name": "ICE 1513", "fahrtNr": "513"}, "513", "513", use_fahrt_nr=False)
    assert not line_matches({}, "513", "513")


def test_station_stage_finds_train(transport):
    transport.boards[("dep", "8011160", 0)] = [record("ICE 513", "A")]
    transport.trips["A"] = trip_payload("A", "ICE 513")

    results = _search(transport).find("ice 513")

    assert len(results) == 1
    assert results[0].trip_id == "A"
    assert results[0].train_type == "ICE"
    assert results[0].train_number == "513"
    assert results[0].origin.station_name == "Frankfurt Hbf"
    assert results[0].destination.station_name == "München Hbf"
    assert not any(c[0] == "journeys" for c in transport.calls)


def test_station_stage_stops_at_first_station_with_a_match(transport):
    transport.boards[("dep", "8000105", 0)] = [record("ICE 513", "A")]
    transport.boards[("dep", "8011160", 0)] = [record("ICE 513", "B")]
    transport.trips["A"] = trip_payload("A", "ICE 513")

    _search(transport).find("513")

    assert ("dep", "8011160", 0) not in transport.calls


def test_station_stage_skips_trips_without_stopovers(transport):
    transport.boards[("dep", "8000105", 0)] = [record("ICE 513", "A"), record("ICE 513", "B")]
    transport.trips["A"] = {"id": "A", "line": {"name": "ICE 513"}}
    transport.trip_errors["B"] = http_error(503)
    transport.boards[("dep", "8011160", 0)] = []

    assert _search(transport).search_via_stations("513") == []


def test_failed_station_is_skipped(transport):
    transport.board_errors[("dep", "8000105", 0)] = http_error(500)
    transport.boards[("dep", "8011160", 0)] = [record("IC 2023", "B")]
    transport.trips["B"] = trip_payload("B", "IC 2023")

    assert _search(transport).find("2023")[0].trip_id == "B"


def test_falls_back_to_route_journeys(transport):
    transport.journey_results[("8000105", "8011160")] = [
        {"legs": [_leg("RE 1", "X"), _leg("ICE 513", "J")]},
    ]
    transport.trips["J"] = trip_payload("J", "ICE 513", stops=("Frankfurt Hbf", "Berlin Hbf"))

    results = _search(transport).find("513")

    assert results[0].trip_id == "J"
    assert ("journeys", "8000207", "8000261") in transport.calls
    assert ("trip", "X") not in transport.calls


def test_type_prefix_stage_only_for_bare_numbers(transport):
    search = _search(transport)
    calls = []
    search.search_via_stations = lambda q: calls.append(q) or []

    assert search.search_via_type_prefixes("ICE 513") == []
    assert calls == []

    search.search_via_type_prefixes("513")
    assert calls == ["ICE 513", "IC 513", "EC 513", "RE 513", "RB 513", "IRE 513", "TGV 513", "RJ 513", "NJ 513"]


def test_type_prefix_stage_matches_labels_written_without_space(transport):
    transport.boards[("dep", "8011160", 0)] = [record("ICE513", "A")]
    transport.trips["A"] = trip_payload("A", "ICE 513")
    search = _search(transport)

    assert search.search_via_stations("513") == []
    results = search.find("513")

    assert results[0].trip_id == "A"
    assert ("journeys", "8000105", "8011160") in transport.calls
    assert transport.calls[-1] == ("trip", "A")


def test_stages_run_in_order_and_first_result_wins(transport):
    search = _search(transport)
    order = []
    hit = [to_train_journey(trip_payload("P", "IC 513"))]

    search.search_via_stations = lambda q: order.append(("stations", q)) or []
    search.search_via_journeys = lambda q: order.append(("journeys", q)) or []

    def prefixes(q):
        order.append(("prefixes", q))
        return hit

    search.search_via_type_prefixes = prefixes

    assert search.find(" 513 ") == hit
    assert order == [("stations", "513"), ("journeys", "513"), ("prefixes", "513")]


def test_results_are_cached_per_query(transport):
    transport.boards[("dep", "8000105", 0)] = [record("ICE 513", "A")]
    transport.trips["A"] = trip_payload("A", "ICE 513")
    search = _search(transport)

    first = search.find("ICE 513")
    calls = len(transport.calls)
    second = search.find("ice 513 ")

    assert second == first
    assert len(transport.calls) == calls


def test_nothing_found_is_not_cached(transport):
    search = _search(transport)
    assert search.find("99999") == []
    calls = len(transport.calls)
    search.find("99999")
    assert len(transport.calls) > calls


def test_blank_query():
    assert _search(None).find("   ") == []


def test_to_train_journey_requires_stopovers():
    assert to_train_journey(None) is None
    assert to_train_journey({"id": "A", "stopovers": []}) is None

    j = to_train_journey({"id": "A", "line": {"name": "", "product": "regional"}, "stopovers": [{"stop": {"name": "X"}}]})
    assert j.train_type == "regional"
    assert j.train_number == ""
    assert j.origin == j.destination
