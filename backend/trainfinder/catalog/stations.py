from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Station:
    id: str
    name: str


@dataclass(frozen=True)
class Route:
    from_id: str
    to_id: str
    label: str


def _unique(stations: list[Station]) -> tuple[Station, ...]:
    seen: set[str] = set()
    out: list[Station] = []
    for s in stations:
        if s.id in seen:
            continue
        seen.add(s.id)
        out.append(s)
    return tuple(out)


# Polling targets for the index, in polling order. Order matters: earlier
# stations win shared index keys within one rebuild.
MAJOR_STATIONS: tuple[Station, ...] = _unique(
    [
        # Largest ICE hubs
        Station("8000105", "Frankfurt Hbf"),
        Station("8000261", "München Hbf"),
        Station("8011160", "Berlin Hbf"),
        Station("8000207", "Köln Hbf"),
        Station("8002549", "Hamburg Hbf"),
        Station("8000152", "Hannover Hbf"),
        Station("8000096", "Stuttgart Hbf"),
        Station("8000085", "Düsseldorf Hbf"),
        Station("8000284", "Nürnberg Hbf"),
        Station("8010224", "Leipzig Hbf"),
        # Other ICE stops
        Station("8000244", "Mannheim Hbf"),
        Station("8010159", "Dresden Hbf"),
        Station("8000080", "Dortmund Hbf"),
        Station("8000098", "Essen Hbf"),
        Station("8000191", "Karlsruhe Hbf"),
        Station("8000050", "Bremen Hbf"),
        Station("8003200", "Kassel-Wilhelmshöhe"),
        Station("8000263", "Münster Hbf"),
        Station("8010101", "Halle (Saale) Hbf"),
        Station("8000128", "Göttingen"),
        Station("8010205", "Erfurt Hbf"),
        Station("8010050", "Berlin Südkreuz"),
        Station("8000013", "Augsburg Hbf"),
        Station("8000260", "Würzburg Hbf"),
        Station("8000170", "Ulm Hbf"),
        Station("8000010", "Aachen Hbf"),
        Station("8010036", "Magdeburg Hbf"),
        Station("8000774", "Freiburg Hbf"),
        Station("8000049", "Braunschweig Hbf"),
        # Northern termini
        Station("8000199", "Kiel Hbf"),
        Station("8010304", "Rostock Hbf"),
        Station("8010324", "Stralsund Hbf"),
        Station("8000236", "Lübeck Hbf"),
        Station("8000310", "Oldenburg Hbf"),
        Station("8000294", "Osnabrück Hbf"),
        Station("8002553", "Hamburg-Altona"),
        Station("8006552", "Westerland (Sylt)"),
        Station("8010055", "Binz"),
        # Border and cross-border stations
        Station("8000026", "Basel Bad Bf"),
        Station("8500010", "Basel SBB"),
        Station("8100002", "Salzburg Hbf"),
        Station("8100003", "Wien Hbf"),
        Station("8100173", "Innsbruck Hbf"),
        Station("8400058", "Amsterdam Centraal"),
        Station("8400282", "Utrecht Centraal"),
        Station("8800105", "Bruxelles-Midi"),
        Station("8700011", "Paris Est"),
        Station("8700023", "Strasbourg"),
        Station("8501008", "Zürich HB"),
        Station("8501120", "Bern"),
        Station("8501026", "Interlaken Ost"),
        Station("5100002", "Warszawa Centralna"),
        Station("5400206", "Praha hl.n."),
        # Regional hubs
        Station("8000078", "Bielefeld Hbf"),
        Station("8000036", "Bonn Hbf"),
        Station("8000228", "Mainz Hbf"),
        Station("8000377", "Wiesbaden Hbf"),
        Station("8000320", "Regensburg Hbf"),
        Station("8000108", "Passau Hbf"),
        Station("8000115", "Fulda"),
        Station("8000252", "Marburg (Lahn)"),
        Station("8000286", "Offenburg"),
        Station("8000156", "Heidelberg Hbf"),
        Station("8000068", "Darmstadt Hbf"),
        Station("8000355", "Trier Hbf"),
        Station("8000189", "Kaiserslautern Hbf"),
        Station("8000319", "Saarbrücken Hbf"),
        # South
        Station("8000183", "Ingolstadt Hbf"),
        Station("8000309", "Rosenheim"),
        Station("8000262", "München Pasing"),
        Station("8000124", "Garmisch-Partenkirchen"),
        Station("8000221", "Lindau Hbf"),
        Station("8000057", "Konstanz"),
        Station("8000340", "Singen (Hohentwiel)"),
        # East
        Station("8010085", "Cottbus Hbf"),
        Station("8010366", "Wittenberge"),
        Station("8010404", "Frankfurt (Oder)"),
        Station("8010240", "Lutherstadt Wittenberg"),
        Station("8012666", "Berlin Ostbahnhof"),
        Station("8011102", "Berlin Gesundbrunnen"),
        Station("8010089", "Dessau Hbf"),
        Station("8010153", "Gera Hbf"),
        Station("8010097", "Eisenach"),
        Station("8010183", "Jena Paradies"),
        Station("8010405", "Zwickau Hbf"),
        Station("8010074", "Chemnitz Hbf"),
        # Extra coverage
        Station("8000142", "Hamm (Westf)"),
        Station("8000149", "Hagen Hbf"),
        Station("8000368", "Wuppertal Hbf"),
        Station("8000119", "Gelsenkirchen Hbf"),
        Station("8000041", "Bochum Hbf"),
        Station("8000086", "Duisburg Hbf"),
        Station("8000169", "Uelzen"),
        Station("8000062", "Celle"),
        Station("8000169", "Hildesheim Hbf"),
        Station("8000250", "Lüneburg"),
        Station("8000066", "Coburg"),
        Station("8000025", "Bamberg"),
        Station("8000032", "Bayreuth Hbf"),
        Station("8000162", "Hof Hbf"),
        Station("8000298", "Plauen (Vogtl) ob Bf"),
    ]
)

# Hubs queried live by the staged search fast path.
SEARCH_STATION_IDS: tuple[str, ...] = (
    "8000105",  # Frankfurt Hbf
    "8000261",  # München Hbf
    "8011160",  # Berlin Hbf
    "8000152",  # Hannover Hbf
    "8000207",  # Köln Hbf
    "8000096",  # Stuttgart Hbf
    "8000284",  # Nürnberg Hbf
    "8010224",  # Leipzig Hbf
    "8000191",  # Karlsruhe Hbf
    "8000050",  # Bremen Hbf
    "8002549",  # Hamburg Hbf
    "8000085",  # Düsseldorf Hbf
    "8010101",  # Halle (Saale) Hbf
    "8000128",  # Göttingen
    "8000244",  # Mannheim Hbf
    "8000080",  # Dortmund Hbf
    "8000098",  # Essen Hbf
    "8003200",  # Kassel-Wilhelmshöhe
    "8000263",  # Münster Hbf
    "8000294",  # Osnabrück Hbf
)

KNOWN_ROUTES: tuple[Route, ...] = (
    Route("8000263", "8000261", "Münster -> München"),
    Route("8000207", "8000261", "Köln -> München"),
    Route("8011160", "8000261", "Berlin -> München"),
    Route("8002549", "8000261", "Hamburg -> München"),
    Route("8000105", "8011160", "Frankfurt -> Berlin"),
    Route("8000207", "8011160", "Köln -> Berlin"),
    Route("8002549", "8011160", "Hamburg -> Berlin"),
    Route("8000096", "8011160", "Stuttgart -> Berlin"),
)

# Long-distance and regional rail only.
RAIL_PRODUCTS: dict[str, bool] = {
    "nationalExpress": True,
    "national": True,
    "regionalExpress": True,
    "regional": True,
    "suburban": False,
    "bus": False,
    "ferry": False,
    "subway": False,
    "tram": False,
    "taxi": False,
}
