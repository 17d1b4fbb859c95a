"""Small but realistic extracts of every dataset, plus an in-memory source reader."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from travelref.adapters.sources.catalog import CATALOG
from travelref.adapters.sources.readers import csv_rows, dat_rows
from travelref.domain.errors import SourceUnavailableError
from travelref.domain.ports.sources import Dataset

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

CURRENCIES: list[dict[str, object]] = [
    {"code": "USD", "name": "US Dollar", "symbol": "$"},
    {"code": "EUR", "name": "Euro", "symbol": "€"},
    {"code": "CAD", "name": "Canadian Dollar", "symbol": "$"},
]

LANGUAGES: list[dict[str, object]] = [
    {"code": "en", "name": "English", "nativeName": "English"},
    {"code": "fr", "name": "French", "nativeName": "français"},
    {"code": "de", "name": "German", "nativeName": "Deutsch"},
]

TIMEZONES: list[dict[str, object]] = [
    {
        "name": "America/New_York",
        "alternativeName": "Eastern Time",
        "rawOffsetInMinutes": -300,
    },
    {
        "name": "America/Toronto",
        "alternativeName": "Eastern Time",
        "rawOffsetInMinutes": -300,
    },
    {
        "name": "Europe/Paris",
        "alternativeName": "Central European Time",
        "rawOffsetInMinutes": 60,
    },
    {
        "name": "Europe/Berlin",
        "alternativeName": "Central European Time",
        "rawOffsetInMinutes": 60,
    },
]

COUNTRIES: list[dict[str, object]] = [
    {
        "name": {"common": "United States", "official": "United States of America"},
        "cca2": "US",
        "cca3": "USA",
        "ccn3": "840",
        "region": "Americas",
        "subregion": "North America",
        "capital": ["Washington D.C."],
        "tld": [".us"],
        "idd": {"root": "+1", "suffixes": ["201", "202", "203"]},
        "demonyms": {"eng": {"f": "American", "m": "American"}},
        "currencies": {"USD": {"name": "United States dollar", "symbol": "$"}},
        "languages": {"eng": "English"},
        "borders": ["CAN", "MEX"],
    },
    {
        "name": {"common": "Canada", "official": "Canada"},
        "cca2": "CA",
        "cca3": "CAN",
        "ccn3": "124",
        "region": "Americas",
        "subregion": "North America",
        "capital": ["Ottawa"],
        "tld": [".ca"],
        "idd": {"root": "+1", "suffixes": [""]},
        "demonyms": {"eng": {"f": "Canadian", "m": "Canadian"}},
        "currencies": {"CAD": {"name": "Canadian dollar", "symbol": "$"}},
        "languages": {"eng": "English", "fra": "French"},
        "borders": ["USA"],
    },
    {
        "name": {"common": "France", "official": "French Republic"},
        "cca2": "FR",
        "cca3": "FRA",
        "ccn3": "250",
        "region": "Europe",
        "subregion": "Western Europe",
        "capital": ["Paris"],
        "tld": [".fr"],
        "idd": {"root": "+3", "suffixes": ["3"]},
        "demonyms": {"eng": {"f": "French", "m": "French"}},
        "currencies": {"EUR": {"name": "Euro", "symbol": "€"}},
        "languages": {"fra": "French"},
        "borders": ["DEU", "ESP"],
    },
    {
        "name": {"common": "Germany", "official": "Federal Republic of Germany"},
        "cca2": "DE",
        "cca3": "DEU",
        "ccn3": "276",
        "region": "Europe",
        "subregion": "Western Europe",
        "capital": ["Berlin"],
        "tld": [".de"],
        "idd": {"root": "+4", "suffixes": ["9"]},
        "demonyms": {"eng": {"f": "German", "m": "German"}},
        "currencies": None,
        "languages": {"deu": "German"},
        "borders": ["FRA"],
    },
]

COUNTRY_EXTRAS: list[dict[str, object]] = [
    {"code": "US", "timezones": ["America/New_York"]},
    {"code": "CA", "timezones": ["America/Toronto"]},
    {"code": "FR", "timezones": ["Europe/Paris"]},
    {"code": "DE", "currency": "EUR", "timezones": ["Europe/Berlin"]},
]

REGIONS: list[dict[str, object]] = [
    {
        "countryName": "United States",
        "countryShortCode": "US",
        "regions": [
            {"name": "New York", "shortCode": "NY"},
            {"name": "California", "shortCode": "CA"},
        ],
    },
    {
        "countryName": "Canada",
        "countryShortCode": "CA",
        "regions": [{"name": "Ontario", "shortCode": "ON"}],
    },
    {
        "countryName": "Atlantis",
        "countryShortCode": "XA",
        "regions": [{"name": "Lost City", "shortCode": "LC"}],
    },
]

AIRPORTS_CSV = """\
ident,type,name,elevation_ft,continent,iso_country,iso_region,municipality,icao_code,iata_code,gps_code,local_code,coordinates
KJFK,large_airport,John F Kennedy International Airport,13,NA,US,US-NY,New York,KJFK,JFK,KJFK,JFK,"40.639751, -73.778925"
KLAX,large_airport,Los Angeles International Airport,125,NA,US,US-CA,Los Angeles,KLAX,LAX,KLAX,LAX,"33.942501, -118.407997"
CYYZ,large_airport,Toronto Pearson International Airport,569,NA,CA,CA-ON,Toronto,CYYZ,YYZ,CYYZ,YYZ,"43.6772, -79.6306"
LFPG,large_airport,Charles de Gaulle International Airport,392,EU,FR,FR-IDF,Paris,LFPG,CDG,LFPG,,"49.012798, 2.55"
US-0001,heliport,Private Helipad,10,NA,US,US-NY,,,,,,"40.0, -74.0"
XX01,small_airport,Atlantis Field,5,NA,XA,XA-01,,,ATL,,,"10.0, 10.0"
LFXX,small_airport,Broken Strip,5,EU,FR,FR-IDF,Nowhere,LFXX,,,,"not a coordinate"
"""

AIRPORT_TIMEZONES: list[dict[str, object]] = [
    {"code": "JFK", "timezone": "America/New_York"},
    {"code": "CDG", "timezone": "Europe/Paris"},
]

DESTINATION_CATEGORIES: list[dict[str, object]] = [
    {"name": "Beaches", "slug": "Beaches", "description": "Sun and  sand", "icon": "beach"},
    {"name": "Mountains", "slug": "mountains", "description": "", "icon": "mountain"},
]

DESTINATION_TYPES: list[dict[str, object]] = [
    {"name": "City", "slug": "city"},
    {"name": "National Park", "slug": "national_park"},
]

PASSPORT_INDEX_CSV = """\
Passport,Destination,Requirement
US,CA,180
US,FR,90
US,US,-1
US,DE,visa free
CA,US,e-visa
FR,US,eta
DE,US,something odd
US,XA,visa required
"""

FACTBOOK_US: dict[str, object] = {
    "Introduction": {
        "Background": {"text": "Britain's American colonies broke with the mother country in 1776."}
    },
    "Geography": {
        "Area": {
            "total": {"text": "9,833,517 sq km"},
            "land": {"text": "9,147,593 sq km"},
            "water": {"text": "685,924 sq km"},
        },
        "Coastline": {"text": "19,924 km"},
        "Climate": {"text": "mostly temperate,  but tropical in Hawaii"},
    },
    "People and Society": {
        "Population": {"total": {"text": "338,289,857 (2022 est.)"}},
        "Population growth rate": {"text": "0.7% (2024 est.)"},
        "Religions": {
            "text": "Protestant 46.5%, Roman Catholic 20.8%, Jewish 1.9%, Muslim 0.9%"
        },
        "Ethnic groups": {"text": "White 61.6%, Black 12.4%, Asian 6%"},
    },
    "Government": {
        "Government type": {"text": "constitutional federal republic"},
        "Independence": {"text": "4 July 1776 (declared); 3 September 1783 (recognized)"},
    },
    "Economy": {"Real GDP growth rate": {"text": "2.1% (2022 est.)"}},
}

FACTBOOK_FR: dict[str, object] = {
    "Geography": {
        "Area": {"total": {"text": "643,801 sq km"}},
        "Coastline": {"text": "4,853 km"},
    },
    "People and Society": {
        "Population": {"total": {"text": "68,521,974 (2024 est.)"}},
        "Religions": {"text": "Roman Catholic 47%, Muslim 4%, none 33%"},
    },
}

CRIME_DATA: dict[str, object] = {
    "criminality_scores": [
        {"country": "United States", "rank": 67, "score": 5.67, "delta": 0.2},
        {"country": "France", "rank": 100, "score": 5.2, "delta": 0.0},
        {"country": "Atlantis", "rank": 1, "score": 9.9, "delta": 0.1},
    ],
    "criminal_market_scores": [
        {
            "country": "United States",
            "average_score": 5.5,
            "average_delta": -0.1,
            "human_trafficking_score": 6.0,
            "human_trafficking_delta": 0.5,
            "arms_trafficking_score": 7.0,
            "arms_trafficking_delta": 0.0,
            "heroin_trade_score": 6.0,
            "cocaine_trade_score": 6.0,
            "cannabis_trade_score": 4.0,
            "synthetic_drug_trade_score": 8.0,
            "financial_crimes_score": 6.5,
            "cyber_dependent_crimes_score": 7.0,
        }
    ],
}

TRAVEL_ADVISORIES: list[dict[str, object]] = [
    {
        "title": "France - Level 2: Exercise Increased Caution",
        "description": "<p>Exercise increased caution in France due to terrorism.</p>",
        "link": "https://travel.state.gov/france",
        "pubDate": "Mon, 01 Jul 2024",
    },
    {
        "title": "Atlantis Travel Advisory",
        "description": "<p>Do not travel to Atlantis.</p>",
    },
    {"title": "image"},
]

AIRLINES_DAT = """\
24,"American Airlines",\\N,"AA","AAL","AMERICAN","United States","Y"
1,"Private flight",\\N,"-","N/A","","","Y"
330,"Air Canada",\\N,"AC","ACA","AIR CANADA","Canada","Y"
-1,"",\\N,"","","","","N"
"""

OPENFLIGHTS_AIRPORTS_DAT = """\
3797,"John F Kennedy International Airport","New York","United States","JFK","KJFK",40.63980103,-73.77890015,13,-5,"A","America/New_York","airport","OurAirports"
193,"Lester B. Pearson International Airport","Toronto","Canada","YYZ","CYYZ",43.6772003174,-79.63059997559999,569,-5,"A","America/Toronto","airport","OurAirports"
3484,"Boston Logan International Airport","Boston","United States","BOS","KBOS",42.36429977,-71.00520325,20,-5,"A","America/New_York","airport","OurAirports"
9999,"Nameless Strip","X","United States",\\N,\\N,1.0,1.0,0,0,"U",\\N,"airport","OurAirports"
"""

ROUTES_DAT = """\
AA,24,JFK,3797,LAX,\\N,,0,738
AA,24,JFK,3797,BOS,3484,Y,0,321 320
AA,24,JFK,3797,BOS,3484,Y,0,321 320
AC,330,YYZ,193,JFK,3797,,0,
ZZ,\\N,JFK,3797,LAX,\\N,,0,738
AA,24,JFK,3797,XXX,\\N,,0,738
"""


@dataclass(slots=True)
class StaticSources:
    """``SourceReader`` over in-memory rows; a dataset that is absent is unavailable."""

    rows_by_dataset: dict[Dataset, list[Mapping[str, object]]] = field(default_factory=dict)
    documents: dict[tuple[Dataset, str | None], Mapping[str, object]] = field(
        default_factory=dict
    )
    missing_documents: frozenset[Dataset] = frozenset()

    async def rows(self, dataset: Dataset) -> list[Mapping[str, object]]:
        if dataset not in self.rows_by_dataset:
            raise SourceUnavailableError(f"{dataset} not provided", dataset=dataset)
        return list(self.rows_by_dataset[dataset])

    async def document(
        self, dataset: Dataset, key: str | None = None
    ) -> Mapping[str, object] | None:
        if dataset in self.missing_documents:
            raise SourceUnavailableError(f"{dataset} not provided", dataset=dataset)
        return self.documents.get((dataset, key))


def write_datasets(directory: Path, *, skip: frozenset[Dataset] = frozenset()) -> Path:
    """Write the sample extracts under ``directory`` using the catalog file names."""

    texts: dict[Dataset, str] = {
        Dataset.CURRENCIES: json.dumps(CURRENCIES),
        Dataset.LANGUAGES: json.dumps(LANGUAGES),
        Dataset.TIMEZONES: json.dumps(TIMEZONES),
        Dataset.COUNTRIES: json.dumps(COUNTRIES),
        Dataset.COUNTRY_EXTRAS: json.dumps(COUNTRY_EXTRAS),
        Dataset.REGIONS: json.dumps(REGIONS),
        Dataset.AIRPORTS: AIRPORTS_CSV,
        Dataset.AIRPORT_TIMEZONES: json.dumps(AIRPORT_TIMEZONES),
        Dataset.DESTINATION_CATEGORIES: json.dumps(DESTINATION_CATEGORIES),
        Dataset.DESTINATION_TYPES: json.dumps(DESTINATION_TYPES),
        Dataset.VISA_REQUIREMENTS: PASSPORT_INDEX_CSV,
        Dataset.CRIME: json.dumps(CRIME_DATA),
        Dataset.TRAVEL_ADVISORIES: json.dumps(TRAVEL_ADVISORIES),
        Dataset.OPENFLIGHTS_AIRLINES: AIRLINES_DAT,
        Dataset.OPENFLIGHTS_AIRPORTS: OPENFLIGHTS_AIRPORTS_DAT,
        Dataset.OPENFLIGHTS_ROUTES: ROUTES_DAT,
    }
    directory.mkdir(parents=True, exist_ok=True)
    for dataset, text in texts.items():
        if dataset in skip:
            continue
        (directory / CATALOG[dataset].filename).write_text(text, encoding="utf-8")

    if Dataset.FACTBOOK not in skip:
        factbook = directory / CATALOG[Dataset.FACTBOOK].filename
        factbook.mkdir(exist_ok=True)
        (factbook / "us.json").write_text(json.dumps(FACTBOOK_US), encoding="utf-8")
        (factbook / "fr.json").write_text(json.dumps(FACTBOOK_FR), encoding="utf-8")
    return directory


def _dat(dataset: Dataset, text: str) -> list[Mapping[str, object]]:
    return dat_rows(text, CATALOG[dataset].columns)


def sample_sources(*, skip: frozenset[Dataset] = frozenset()) -> StaticSources:
    """Every sample extract already parsed, as the file reader would return it."""

    rows: dict[Dataset, list[Mapping[str, object]]] = {
        Dataset.CURRENCIES: list(CURRENCIES),
        Dataset.LANGUAGES: list(LANGUAGES),
        Dataset.TIMEZONES: list(TIMEZONES),
        Dataset.COUNTRIES: list(COUNTRIES),
        Dataset.COUNTRY_EXTRAS: list(COUNTRY_EXTRAS),
        Dataset.REGIONS: list(REGIONS),
        Dataset.AIRPORTS: csv_rows(AIRPORTS_CSV),
        Dataset.AIRPORT_TIMEZONES: list(AIRPORT_TIMEZONES),
        Dataset.DESTINATION_CATEGORIES: list(DESTINATION_CATEGORIES),
        Dataset.DESTINATION_TYPES: list(DESTINATION_TYPES),
        Dataset.VISA_REQUIREMENTS: csv_rows(PASSPORT_INDEX_CSV),
        Dataset.TRAVEL_ADVISORIES: list(TRAVEL_ADVISORIES),
        Dataset.OPENFLIGHTS_AIRLINES: _dat(Dataset.OPENFLIGHTS_AIRLINES, AIRLINES_DAT),
        Dataset.OPENFLIGHTS_AIRPORTS: _dat(Dataset.OPENFLIGHTS_AIRPORTS, OPENFLIGHTS_AIRPORTS_DAT),
        Dataset.OPENFLIGHTS_ROUTES: _dat(Dataset.OPENFLIGHTS_ROUTES, ROUTES_DAT),
    }
    documents: dict[tuple[Dataset, str | None], Mapping[str, object]] = {
        (Dataset.CRIME, None): CRIME_DATA,
        (Dataset.FACTBOOK, "us"): FACTBOOK_US,
        (Dataset.FACTBOOK, "fr"): FACTBOOK_FR,
    }
    return StaticSources(
        rows_by_dataset={dataset: value for dataset, value in rows.items() if dataset not in skip},
        documents=documents,
        missing_documents=frozenset(skip & {Dataset.CRIME, Dataset.FACTBOOK}),
    )
