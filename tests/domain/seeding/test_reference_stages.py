from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from tests.support.datasets import sample_sources
from tests.support.seeding import run_stages
from travelref.adapters.memory_store import InMemoryDocumentStore
from travelref.domain.collection import Collection
from travelref.domain.mappings import RELIGIONS
from travelref.domain.ports.sources import Dataset
from travelref.domain.seeding import StageName, StageStatus
from travelref.domain.seeding.stages import (
    BaseReferenceDataStage,
    CountriesStage,
    DestinationMetadataStage,
    RegionsStage,
)
from travelref.domain.seeding.stages.countries import continent_for
from travelref.domain.seeding.stages.regions import infer_region_type

if TYPE_CHECKING:
    from travelref.domain.outcome import Document
    from travelref.domain.ports.store import Where


def _by(store: InMemoryDocumentStore, collection: Collection, key: str) -> dict[object, dict]:
    return {document[key]: document for document in store.documents(collection)}


def test_base_reference_data_seeds_every_lookup_collection() -> None:
    store = InMemoryDocumentStore()
    report = asyncio.run(run_stages(store, sample_sources(), BaseReferenceDataStage()))

    assert report.stage(StageName.BASE_REFERENCE_DATA).status is StageStatus.COMPLETED
    currencies = _by(store, Collection.CURRENCIES, "code")
    assert set(currencies) == {"USD", "EUR", "CAD"}
    assert currencies["EUR"]["symbol"] == "€"
    assert _by(store, Collection.LANGUAGES, "code")["fr"]["native_name"] == "français"

    timezone = _by(store, Collection.TIMEZONES, "name")["America/New_York"]
    assert timezone["slug"] == "america-new-york"
    assert timezone["offset"] == "-05:00"
    assert timezone["label"] == "Eastern Time"


def test_religions_are_linked_to_their_parent() -> None:
    store = InMemoryDocumentStore()
    report = asyncio.run(run_stages(store, sample_sources(), BaseReferenceDataStage()))

    religions = _by(store, Collection.RELIGIONS, "name")
    assert len(religions) == len(RELIGIONS)
    assert religions["Anglican"]["parent_religion"] == religions["Protestant"]["id"]
    assert religions["Protestant"]["parent_religion"] == religions["Christianity"]["id"]
    assert "parent_religion" not in religions["Judaism"]

    linking = report.step("religion-parents")
    assert linking is not None
    assert linking.updated == sum(1 for religion in RELIGIONS if religion.parent)


def test_destination_metadata_normalizes_slugs_and_descriptions() -> None:
    store = InMemoryDocumentStore()
    asyncio.run(run_stages(store, sample_sources(), DestinationMetadataStage()))

    categories = _by(store, Collection.DESTINATION_CATEGORIES, "slug")
    assert categories["beaches"]["description"] == "Sun and sand"
    assert categories["mountains"]["description"] is None
    assert set(_by(store, Collection.DESTINATION_TYPES, "slug")) == {"city", "national-park"}


def test_countries_link_reference_data_and_neighbours() -> None:
    store = InMemoryDocumentStore()
    report = asyncio.run(
        run_stages(store, sample_sources(), BaseReferenceDataStage(), CountriesStage())
    )

    countries = _by(store, Collection.COUNTRIES, "code")
    currencies = _by(store, Collection.CURRENCIES, "code")
    languages = _by(store, Collection.LANGUAGES, "code")
    timezones = _by(store, Collection.TIMEZONES, "name")

    us = countries["US"]
    assert us["code3"] == "USA"
    assert us["continent"] == "north-america"
    assert us["dialing_code"] == "+1"
    assert us["demonym"] == "American"
    assert us["flag"] == "us.svg"
    assert us["currencies"] == [currencies["USD"]["id"]]
    assert us["timezones"] == [timezones["America/New_York"]["id"]]
    assert us["neighboring_countries"] == [countries["CA"]["id"]]

    assert countries["CA"]["dialing_code"] == "+1"
    assert countries["CA"]["languages"] == [languages["en"]["id"], languages["fr"]["id"]]
    assert countries["FR"]["dialing_code"] == "+33"
    assert countries["FR"]["continent"] == "europe"
    assert countries["DE"]["currencies"] == [currencies["EUR"]["id"]]
    assert countries["DE"]["neighboring_countries"] == [countries["FR"]["id"]]

    stats = report.step("countries")
    assert stats is not None
    assert stats.created == 4


def test_countries_continue_without_extras() -> None:
    store = InMemoryDocumentStore()
    sources = sample_sources(skip=frozenset({Dataset.COUNTRY_EXTRAS}))
    report = asyncio.run(run_stages(store, sources, BaseReferenceDataStage(), CountriesStage()))

    assert report.stage(StageName.COUNTRIES).status is StageStatus.COMPLETED
    countries = _by(store, Collection.COUNTRIES, "code")
    assert countries["DE"]["currencies"] == []
    assert countries["US"]["timezones"] == []


def test_regions_are_typed_per_country() -> None:
    store = InMemoryDocumentStore()
    report = asyncio.run(
        run_stages(
            store, sample_sources(), BaseReferenceDataStage(), CountriesStage(), RegionsStage()
        )
    )

    regions = _by(store, Collection.REGIONS, "name")
    countries = _by(store, Collection.COUNTRIES, "code")
    assert set(regions) == {"New York", "California", "Ontario"}
    assert regions["New York"]["type"] == "state"
    assert regions["New York"]["country"] == countries["US"]["id"]
    assert regions["Ontario"]["type"] == "province"

    stats = report.step("regions")
    assert stats is not None
    assert stats.count("country_not_found") == 1


class _QueryCountingStore(InMemoryDocumentStore):
    def __init__(self) -> None:
        super().__init__()
        self.keyed_finds: list[str] = []

    async def find(
        self, collection: str, *, where: Where | None = None, limit: int | None = None
    ) -> list[Document]:
        if where is not None:
            self.keyed_finds.append(collection)
        return await super().find(collection, where=where, limit=limit)


def test_regions_are_matched_from_a_preloaded_cache() -> None:
    store = _QueryCountingStore()
    report = asyncio.run(
        run_stages(
            store, sample_sources(), BaseReferenceDataStage(), CountriesStage(), RegionsStage()
        )
    )

    assert report.step("regions").created == 3
    assert Collection.REGIONS not in store.keyed_finds


def test_regions_fail_without_their_dataset() -> None:
    store = InMemoryDocumentStore()
    sources = sample_sources(skip=frozenset({Dataset.REGIONS}))
    report = asyncio.run(
        run_stages(store, sources, BaseReferenceDataStage(), CountriesStage(), RegionsStage())
    )

    assert report.stage(StageName.REGIONS).status is StageStatus.FAILED
    assert report.stage(StageName.COUNTRIES).status is StageStatus.COMPLETED


def test_continent_and_region_type_rules() -> None:
    assert continent_for("Americas", "South America") == "south-america"
    assert continent_for("Oceania", "Polynesia") == "oceania-australia"
    assert continent_for(None, None) == "antarctica"
    assert infer_region_type("AU", "ACT") == "territory"
    assert infer_region_type("AU", "NSW") == "state"
    assert infer_region_type("FR", "IDF") == "region"
