"""Where each dataset lives: cached file name, format and remote locations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from travelref.domain.ports.sources import Dataset

_OPENFLIGHTS_BASE: Final = "https://raw.githubusercontent.com/jpatokal/openflights/master/data"
FACTBOOK_BASE_URL: Final = "https://raw.githubusercontent.com/factbook/factbook.json/master"
FACTBOOK_DIRNAME: Final = "factbook"
# factbook.json groups country documents by world region
FACTBOOK_FOLDERS: Final[tuple[str, ...]] = (
    "africa",
    "antarctica",
    "australia-oceania",
    "central-america-n-caribbean",
    "central-asia",
    "east-n-southeast-asia",
    "europe",
    "middle-east",
    "north-america",
    "south-america",
    "south-asia",
)
ADVISORY_FEED_URLS: Final[tuple[str, ...]] = (
    "https://travel.state.gov/_res/rss/TAsTWs.xml",
    "https://travel.state.gov/content/travel/en/traveladvisories/traveladvisories.xml",
    "https://travel.state.gov/content/travel/en/traveladvisories/_jcr_content.feed",
    "https://travel.state.gov/content/travel/en/traveladvisories/traveladvisories.rss",
)
ADVISORY_TABLE_URL: Final = (
    "https://travel.state.gov/content/travel/en/traveladvisories/traveladvisories.html/"
)

OPENFLIGHTS_AIRLINE_COLUMNS: Final = (
    "id", "name", "alias", "iata", "icao", "callsign", "country", "active",
)  # fmt: skip
OPENFLIGHTS_AIRPORT_COLUMNS: Final = (
    "id", "name", "city", "country", "iata", "icao", "latitude", "longitude",
    "altitude", "utc_offset", "dst", "tz", "type", "source",
)  # fmt: skip
OPENFLIGHTS_ROUTE_COLUMNS: Final = (
    "airline", "airline_id", "source_airport", "source_airport_id",
    "destination_airport", "destination_airport_id", "codeshare", "stops", "equipment",
)  # fmt: skip


class DatasetFormat(StrEnum):
    JSON = "json"
    CSV = "csv"
    # headerless CSV; column names come from ``DatasetSpec.columns``
    DAT = "dat"
    DIRECTORY = "directory"
    FEED = "feed"


@dataclass(slots=True, frozen=True)
class DatasetSpec:
    dataset: Dataset
    filename: str
    format: DatasetFormat
    remote_urls: tuple[str, ...] = ()
    columns: tuple[str, ...] = field(default=())


CATALOG: Final[dict[Dataset, DatasetSpec]] = {
    spec.dataset: spec
    for spec in (
        DatasetSpec(Dataset.CURRENCIES, "currencies.json", DatasetFormat.JSON),
        DatasetSpec(Dataset.LANGUAGES, "languages.json", DatasetFormat.JSON),
        DatasetSpec(
            Dataset.TIMEZONES,
            "timezones.json",
            DatasetFormat.JSON,
            ("https://raw.githubusercontent.com/vvo/tzdb/main/raw-time-zones.json",),
        ),
        DatasetSpec(
            Dataset.COUNTRIES,
            "countries.json",
            DatasetFormat.JSON,
            ("https://raw.githubusercontent.com/mledoze/countries/master/countries.json",),
        ),
        DatasetSpec(Dataset.COUNTRY_EXTRAS, "country-extras.json", DatasetFormat.JSON),
        DatasetSpec(
            Dataset.REGIONS,
            "regions.json",
            DatasetFormat.JSON,
            (
                "https://raw.githubusercontent.com/country-regions/country-region-data"
                "/master/data.json",
            ),
        ),
        DatasetSpec(
            Dataset.AIRPORTS,
            "airport-codes.csv",
            DatasetFormat.CSV,
            (
                "https://raw.githubusercontent.com/datasets/airport-codes/main/data"
                "/airport-codes.csv",
            ),
        ),
        DatasetSpec(Dataset.AIRPORT_TIMEZONES, "airport-timezones.json", DatasetFormat.JSON),
        DatasetSpec(
            Dataset.DESTINATION_CATEGORIES, "destination-categories.json", DatasetFormat.JSON
        ),
        DatasetSpec(Dataset.DESTINATION_TYPES, "destination-types.json", DatasetFormat.JSON),
        DatasetSpec(
            Dataset.VISA_REQUIREMENTS,
            "passport-index.csv",
            DatasetFormat.CSV,
            (
                "https://raw.githubusercontent.com/ilyankou/passport-index-dataset/master"
                "/passport-index-tidy-iso2.csv",
            ),
        ),
        DatasetSpec(
            Dataset.FACTBOOK,
            FACTBOOK_DIRNAME,
            DatasetFormat.DIRECTORY,
            tuple(f"{FACTBOOK_BASE_URL}/{folder}" for folder in FACTBOOK_FOLDERS),
        ),
        DatasetSpec(Dataset.CRIME, "crime-data.json", DatasetFormat.JSON),
        DatasetSpec(
            Dataset.TRAVEL_ADVISORIES,
            "travel-advisories.json",
            DatasetFormat.FEED,
            ADVISORY_FEED_URLS,
        ),
        DatasetSpec(
            Dataset.OPENFLIGHTS_AIRLINES,
            "airlines.dat",
            DatasetFormat.DAT,
            (f"{_OPENFLIGHTS_BASE}/airlines.dat",),
            OPENFLIGHTS_AIRLINE_COLUMNS,
        ),
        DatasetSpec(
            Dataset.OPENFLIGHTS_AIRPORTS,
            "airports.dat",
            DatasetFormat.DAT,
            (f"{_OPENFLIGHTS_BASE}/airports.dat",),
            OPENFLIGHTS_AIRPORT_COLUMNS,
        ),
        DatasetSpec(
            Dataset.OPENFLIGHTS_ROUTES,
            "routes.dat",
            DatasetFormat.DAT,
            (f"{_OPENFLIGHTS_BASE}/routes.dat",),
            OPENFLIGHTS_ROUTE_COLUMNS,
        ),
    )
}
