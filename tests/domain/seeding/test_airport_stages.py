from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from tests.support.datasets import sample_sources
from tests.support.seeding import run_stages
from travelref.adapters.memory_store import InMemoryDocumentStore
from travelref.domain.collection import Collection
from travelref.domain.records import AirportCodeRecord
from travelref.domain.seeding import StageName, StageStatus
from travelref.domain.seeding.stages import (
    AirlinesAndRoutesStage,
    AirportsStage,
    BaseReferenceDataStage,
    CountriesStage,
    RegionsStage,
)
from travelref.domain.seeding.stages.airports import airport_city, airport_codes

if TYPE_CHECKING:
    from travelref.domain.seeding import RunReport


def _by(store: InMemoryDocumentStore, collection: Collection, key: str) -> dict[object, dict]:
    return {document[key]: document for document in store.documents(collection)}


def _seed_airports(store: InMemoryDocumentStore) -> RunReport:
    return asyncio.run(
        run_stages(
            store,
            sample_sources(),
            BaseReferenceDataStage(),
            CountriesStage(),
            RegionsStage(),
            AirportsStage(),
        )
    )


def test_airports_link_country_region_and_timezone() -> None:
    store = InMemoryDocumentStore()
    _seed_airports(store)

    airports = _by(store, Collection.AIRPORTS, "iata")
    countries = _by(store, Collection.COUNTRIES, "code")
    timezones = _by(store, Collection.TIMEZONES, "name")
    regions = _by(store, Collection.REGIONS, "name")

    assert set(airports) == {"JFK", "LAX", "YYZ", "CDG"}
    jfk = airports["JFK"]
    assert jfk["icao"] == "KJFK"
    assert jfk["type"] == "large"
    assert jfk["city"] == "New York"
    assert jfk["latitude"] == pytest.approx(40.639751)
    assert jfk["longitude"] == pytest.approx(-73.778925)
    assert jfk["elevation"] == 13
    assert jfk["country"] == countries["US"]["id"]
    assert jfk["region"] == regions["New York"]["id"]
    assert jfk["timezone"] == timezones["America/New_York"]["id"]

    assert airports["LAX"]["region"] == regions["California"]["id"]
    assert airports["CDG"]["region"] is None
    assert airports["CDG"]["timezone"] == timezones["Europe/Paris"]["id"]


def test_airports_fall_back_to_country_timezone_and_skip_bad_rows() -> None:
    store = InMemoryDocumentStore()
    report = _seed_airports(store)

    stats = report.step("airports")
    assert stats is not None
    assert stats.created == 4
    assert stats.count("no_identifier") == 1
    assert stats.count("country_not_found") == 1
    assert stats.count("invalid_coordinates") == 1
    assert stats.noted("timezone_fallback") == 2

    airports = _by(store, Collection.AIRPORTS, "iata")
    timezones = _by(store, Collection.TIMEZONES, "name")
    assert airports["YYZ"]["timezone"] == timezones["America/Toronto"]["id"]


def test_airport_codes_prefer_iata_and_accept_icao_shaped_ident() -> None:
    with_both = AirportCodeRecord(name="Kennedy", iata_code="jfk", icao_code="kjfk")
    ident_only = AirportCodeRecord(name="Strip", ident="EGXY", iata_code="TOOLONG")
    neither = AirportCodeRecord(name="Helipad", ident="US-0001")

    assert airport_codes(with_both).natural_key() == {"iata": "JFK"}
    codes = airport_codes(ident_only)
    assert codes is not None
    assert codes.iata is None
    assert codes.natural_key() == {"icao": "EGXY"}
    assert airport_codes(neither) is None


def test_airport_codes_reject_malformed_codes() -> None:
    digits = AirportCodeRecord(name="Field", iata_code="0A3", icao_code="K-3A", ident="US-0A3")
    icao_fallback = AirportCodeRecord(name="Field", iata_code="0A3", icao_code="K0A3")

    assert airport_codes(digits) is None
    codes = airport_codes(icao_fallback)
    assert codes is not None
    assert codes.iata is None
    assert codes.natural_key() == {"icao": "K0A3"}


def test_airport_city_falls_back_to_the_name() -> None:
    assert airport_city(AirportCodeRecord(name="Gander International Airport")) == "Gander"
    assert airport_city(AirportCodeRecord(name="Nowhere")) == "Nowhere"


def test_openflights_adds_airlines_enriches_airports_and_links_routes() -> None:
    store = InMemoryDocumentStore()
    report = asyncio.run(
        run_stages(
            store,
            sample_sources(),
            BaseReferenceDataStage(),
            CountriesStage(),
            AirportsStage(),
            AirlinesAndRoutesStage(),
        )
    )

    assert report.stage(StageName.AIRLINES_AND_ROUTES).status is StageStatus.COMPLETED
    airlines = _by(store, Collection.AIRLINES, "openflights_id")
    countries = _by(store, Collection.COUNTRIES, "code")
    assert set(airlines) == {1, 24, 330}
    assert airlines[24]["iata"] == "AA"
    assert airlines[24]["country"] == "United States"
    assert airlines[24]["country_ref"] == countries["US"]["id"]
    assert airlines[330]["country"] == "Canada"
    assert airlines[330]["country_ref"] == countries["CA"]["id"]
    assert airlines[1]["country"] is None
    assert airlines[1]["country_ref"] is None
    assert report.step("airlines").count("missing_name") == 1

    airports = _by(store, Collection.AIRPORTS, "iata")
    assert airports["JFK"]["openflights_id"] == 3797
    assert airports["YYZ"]["openflights_id"] == 193
    assert airports["BOS"]["openflights_id"] == 3484
    assert airports["BOS"]["country"] == countries["US"]["id"]
    enrichment = report.step("openflights-airports")
    assert (enrichment.updated, enrichment.created) == (2, 1)
    assert enrichment.count("no_identifier") == 1

    routes = store.documents(Collection.ROUTES)
    assert len(routes) == 3
    jfk_bos = next(route for route in routes if route["destination_airport_code"] == "BOS")
    assert jfk_bos["airline"] == airlines[24]["id"]
    assert jfk_bos["source_airport"] == airports["JFK"]["id"]
    assert jfk_bos["destination_airport"] == airports["BOS"]["id"]
    assert jfk_bos["codeshare"] is True
    assert jfk_bos["equipment"] == ["321", "320"]

    stats = report.step("routes")
    assert stats.count("duplicate_route") == 1
    assert stats.count("airline_not_found") == 1
    assert stats.count("airport_not_found") == 1


def test_rerun_keeps_existing_routes() -> None:
    store = InMemoryDocumentStore()
    stages = (BaseReferenceDataStage(), CountriesStage(), AirportsStage(), AirlinesAndRoutesStage())

    async def scenario() -> None:
        await run_stages(store, sample_sources(), *stages)
        report = await run_stages(
            store, sample_sources(), AirlinesAndRoutesStage(), full_reset=False
        )
        assert report.step("routes").count("skipped_existing") == 1
        assert report.step("airlines").count("skipped_existing") == 1

    asyncio.run(scenario())

    assert len(store.documents(Collection.ROUTES)) == 3
