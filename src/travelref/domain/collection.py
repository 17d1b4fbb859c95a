"""Names of the document collections populated by the pipeline."""

from __future__ import annotations

from enum import StrEnum


class Collection(StrEnum):
    CURRENCIES = "currencies"
    LANGUAGES = "languages"
    TIMEZONES = "timezones"
    RELIGIONS = "religions"
    COUNTRIES = "countries"
    REGIONS = "regions"
    AIRPORTS = "airports"
    DESTINATION_CATEGORIES = "destination-categories"
    DESTINATION_TYPES = "destination-types"
    VISA_REQUIREMENTS = "visa-requirements"
    COUNTRY_DETAILS = "country-details"
    CRIME_INDEX_SCORES = "crime-index-scores"
    CRIME_TRENDS = "crime-trends"
    TRAVEL_ADVISORIES = "travel-advisories"
    AIRLINES = "airlines"
    ROUTES = "routes"


# Collections whose clearing uses the larger delete batch.
LARGE_COLLECTIONS: frozenset[Collection] = frozenset(
    {
        Collection.VISA_REQUIREMENTS,
        Collection.AIRPORTS,
        Collection.AIRLINES,
        Collection.ROUTES,
        Collection.REGIONS,
    }
)
