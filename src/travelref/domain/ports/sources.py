"""Source reader port: raw rows and documents per dataset."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class Dataset(StrEnum):
    CURRENCIES = "currencies"
    LANGUAGES = "languages"
    TIMEZONES = "timezones"
    COUNTRIES = "countries"
    COUNTRY_EXTRAS = "country-extras"
    REGIONS = "regions"
    AIRPORTS = "airports"
    AIRPORT_TIMEZONES = "airport-timezones"
    DESTINATION_CATEGORIES = "destination-categories"
    DESTINATION_TYPES = "destination-types"
    VISA_REQUIREMENTS = "visa-requirements"
    FACTBOOK = "factbook"
    CRIME = "crime"
    TRAVEL_ADVISORIES = "travel-advisories"
    OPENFLIGHTS_AIRLINES = "openflights-airlines"
    OPENFLIGHTS_AIRPORTS = "openflights-airports"
    OPENFLIGHTS_ROUTES = "openflights-routes"


@runtime_checkable
class SourceReader(Protocol):
    """Reads raw records for a dataset.

    ``rows`` returns a finite, lazily iterated sequence of loosely typed mappings and
    raises ``SourceUnavailableError`` when the dataset cannot be read at all.
    ``document`` returns one keyed JSON document (``None`` when that key is missing)
    or, without a key, the dataset's single top-level document.
    """

    async def rows(self, dataset: Dataset) -> Iterable[Mapping[str, object]]: ...

    async def document(
        self, dataset: Dataset, key: str | None = None
    ) -> Mapping[str, object] | None: ...
