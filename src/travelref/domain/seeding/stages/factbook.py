"""Country details parsed from CIA World Factbook documents."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from travelref.domain.collection import Collection
from travelref.domain.lookup import lower_field_key
from travelref.domain.mappings import canonical_religion_name, iso_to_cia
from travelref.domain.normalizers import (
    clean_text,
    parse_date,
    parse_independence_from,
    parse_integer,
    parse_number,
    parse_percentage,
    parse_percentage_groups,
)
from travelref.domain.ports.sources import Dataset
from travelref.domain.records import FactbookDocument

if TYPE_CHECKING:
    from collections.abc import Sequence

    from travelref.domain.lookup import LookupTable
    from travelref.domain.outcome import Document, StageStats
    from travelref.domain.seeding.context import SeedContext
    from travelref.domain.upsert import UpsertEngine

log = logging.getLogger(__name__)

MAX_TEXT_LENGTH: Final = 2000
RELIGION_DESCRIPTION: Final = "Religion found in factbook data"


def first_text(document: FactbookDocument, section: str, *paths: Sequence[str]) -> str | None:
    """Return the first present ``text`` leaf among alternative paths of ``section``."""

    for path in paths:
        value = document.text(section, *path)
        if value is not None:
            return value
    return None


def is_landlocked(coastline: str | None) -> bool:
    return coastline is not None and coastline.strip().startswith("0 km")


def population_density(population: float | None, area: float | None) -> float | None:
    if population is None or not area:
        return None
    return round(population / area, 2)


def factbook_payload(document: FactbookDocument) -> Document:
    """Flatten the sections this pipeline keeps into a country-details payload."""

    area_total = parse_number(first_text(document, "geography", ("Area", "total"), ("Area",)))
    population = parse_integer(
        first_text(document, "people", ("Population", "total"), ("Population",))
    )
    independence = first_text(document, "government", ("Independence",))
    independence_date = parse_date(independence)
    coastline = first_text(document, "geography", ("Coastline",))

    return {
        "background": clean_text(
            first_text(document, "introduction", ("Background",)), max_length=MAX_TEXT_LENGTH
        ),
        "geography": {
            "area_total": area_total,
            "area_land": parse_number(document.text("geography", "Area", "land")),
            "area_water": parse_number(document.text("geography", "Area", "water")),
            "coastline": parse_number(coastline),
            "landlocked": is_landlocked(coastline),
            "highest_point": parse_number(
                first_text(
                    document, "geography", ("Elevation", "highest point"), ("Elevation",)
                )
            ),
            "climate": clean_text(first_text(document, "geography", ("Climate",))),
            "terrain": clean_text(first_text(document, "geography", ("Terrain",))),
            "natural_hazards": clean_text(
                first_text(document, "geography", ("Natural hazards",))
            ),
            "natural_resources": clean_text(
                first_text(document, "geography", ("Natural resources",))
            ),
            "environment_issues": clean_text(
                first_text(document, "geography", ("Environment - current issues",))
            ),
        },
        "people": {
            "population": population,
            "population_density": population_density(population, area_total),
            "population_growth_rate": parse_percentage(
                first_text(document, "people", ("Population growth rate",))
            ),
            "birth_rate": parse_number(first_text(document, "people", ("Birth rate",))),
            "death_rate": parse_number(first_text(document, "people", ("Death rate",))),
            "net_migration_rate": parse_number(
                first_text(document, "people", ("Net migration rate",))
            ),
            "median_age": parse_number(
                first_text(document, "people", ("Median age", "total"), ("Median age",))
            ),
            "life_expectancy": parse_number(
                first_text(
                    document,
                    "people",
                    ("Life expectancy at birth", "total population"),
                    ("Life expectancy at birth",),
                )
            ),
            "urban_population": parse_percentage(
                first_text(
                    document, "people", ("Urbanization", "urban population"), ("Urbanization",)
                )
            ),
            "literacy": parse_percentage(
                first_text(
                    document, "people", ("Literacy", "total population"), ("Literacy",)
                )
            ),
            "ethnic_groups": [
                {"name": group.name, "percentage": group.percentage}
                for group in parse_percentage_groups(
                    first_text(document, "people", ("Ethnic groups",))
                )
            ],
        },
        "government": {
            "type": clean_text(first_text(document, "government", ("Government type",))),
            "chief_of_state": clean_text(
                first_text(document, "government", ("Executive branch", "chief of state"))
            ),
            "head_of_government": clean_text(
                first_text(document, "government", ("Executive branch", "head of government"))
            ),
            "legal_system": clean_text(first_text(document, "government", ("Legal system",))),
            "suffrage": clean_text(first_text(document, "government", ("Suffrage",))),
            "independence_date": (
                independence_date.isoformat() if independence_date is not None else None
            ),
            "independence_from": parse_independence_from(independence),
        },
        "economy": {
            "gdp": parse_number(
                first_text(document, "economy", ("GDP (official exchange rate)",))
            ),
            "gdp_per_capita": parse_number(
                first_text(document, "economy", ("Real GDP per capita",))
            ),
            "gdp_growth_rate": parse_percentage(
                first_text(document, "economy", ("Real GDP growth rate",))
            ),
            "co2_emissions": parse_number(
                first_text(
                    document,
                    "energy",
                    ("Carbon dioxide emissions", "total emissions"),
                    ("Carbon dioxide emissions",),
                )
            ),
        },
        "communications": {
            "internet_users_percent": parse_percentage(
                first_text(
                    document, "communications", ("Internet users", "percent of population")
                )
            ),
            "mobile_subscriptions": parse_integer(
                first_text(
                    document,
                    "communications",
                    ("Telephones - mobile cellular", "total subscriptions"),
                )
            ),
        },
        "transnational": {
            "disputes": clean_text(
                first_text(document, "transnational", ("Disputes - international",)),
                max_length=MAX_TEXT_LENGTH,
            ),
            "refugees": clean_text(
                first_text(
                    document, "transnational", ("Refugees and internally displaced persons",)
                ),
                max_length=MAX_TEXT_LENGTH,
            ),
        },
    }


async def link_religions(
    engine: UpsertEngine, religions: LookupTable, text: str | None
) -> list[Document]:
    """Map factbook religion groups onto ``religions``, creating unknown names."""

    linked: list[Document] = []
    for group in parse_percentage_groups(text):
        name = canonical_religion_name(group.name)
        if name is None:
            continue
        religion = religions.get("name", name.lower())
        if religion is None:
            outcome = await engine.create(
                Collection.RELIGIONS, {"name": name, "description": RELIGION_DESCRIPTION}
            )
            if outcome.document is None:
                continue
            religion = outcome.document
            religions.add(religion)
            log.debug("Created religion %s from factbook data", name)
        if any(entry["religion"] == religion["id"] for entry in linked):
            continue
        linked.append({"religion": religion["id"], "percentage": group.percentage})
    return linked


async def seed_country_details(context: SeedContext) -> list[StageStats]:
    """One details document per stored country with a factbook entry.

    Factbook religions are linked to the ``religions`` collection and mirrored onto
    the country itself.
    """

    stats = context.stats("country-details")
    new_religions = context.stats("factbook-religions")
    country_religions = context.stats("country-religions")
    if not await context.should_seed(Collection.COUNTRY_DETAILS, stats):
        return [stats]

    countries = await context.store.find(Collection.COUNTRIES)
    religions = await context.lookup(Collection.RELIGIONS, {"name": lower_field_key("name")})
    engine = context.engine(stats)
    religion_engine = context.engine(new_religions)
    country_engine = context.engine(country_religions)
    await engine.preload(Collection.COUNTRY_DETAILS, ("country",))

    for country in sorted(countries, key=lambda document: str(document.get("code", ""))):
        code = str(country.get("code") or "").upper()
        cia = iso_to_cia(code)
        if cia is None:
            stats.skip("no_cia_code", detail=code)
            continue

        raw = await context.sources.document(Dataset.FACTBOOK, cia)
        if raw is None:
            stats.skip("document_not_found", detail=f"{code} ({cia})")
            continue
        try:
            document = FactbookDocument.model_validate(raw)
        except ValidationError as exc:
            stats.skip("invalid_record", detail=str(exc).splitlines()[0])
            continue

        payload = factbook_payload(document)
        payload["religions"] = await link_religions(
            religion_engine, religions, first_text(document, "people", ("Religions",))
        )
        await engine.upsert(Collection.COUNTRY_DETAILS, {"country": country["id"]}, payload)
        if payload["religions"]:
            await country_engine.patch(
                Collection.COUNTRIES,
                country,
                {"religions": [entry["religion"] for entry in payload["religions"]]},
            )

    if new_religions.created:
        log.info("Created %d religions from factbook data", new_religions.created)
    return [stats, new_religions, country_religions]
