"""Countries, linked to currencies, languages, timezones and their neighbours."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar, Final

from travelref.domain.collection import Collection
from travelref.domain.errors import SourceUnavailableError
from travelref.domain.lookup import field_key, lower_field_key, upper_field_key
from travelref.domain.mappings import to_iso_639_1
from travelref.domain.normalizers import slugify
from travelref.domain.ports.sources import Dataset
from travelref.domain.records import CountryExtraRecord, CountryRecord, decode
from travelref.domain.seeding.orchestrator import StageName

if TYPE_CHECKING:
    from travelref.domain.lookup import LookupTable
    from travelref.domain.outcome import Document, StageStats
    from travelref.domain.seeding.context import SeedContext
    from travelref.domain.upsert import UpsertItem

log = logging.getLogger(__name__)

_CONTINENTS: Final[dict[str, str]] = {
    "africa": "africa",
    "asia": "asia",
    "europe": "europe",
    "oceania": "oceania-australia",
    "antarctic": "antarctica",
    "antarctica": "antarctica",
}


def continent_for(region: str | None, subregion: str | None) -> str:
    """Map a world-countries region/subregion pair onto the seven continents."""

    if region is None:
        return "antarctica"
    if region.lower() == "americas":
        return "south-america" if subregion and "South" in subregion else "north-america"
    return _CONTINENTS.get(region.lower(), "antarctica")


def dialing_code(record: CountryRecord) -> str | None:
    root = record.idd.root
    if root is None:
        return None
    if len(record.idd.suffixes) == 1:
        return f"{root}{record.idd.suffixes[0]}"
    return root


def language_codes(record: CountryRecord, extra: CountryExtraRecord | None) -> list[str]:
    codes: list[str] = []
    for code in record.languages:
        mapped = to_iso_639_1(code)
        if mapped is not None and mapped not in codes:
            codes.append(mapped)
    if not codes and extra is not None and extra.language:
        codes.append(extra.language.strip().lower())
    return codes


def _ids(table: LookupTable, space: str, keys: list[str]) -> list[object]:
    ids: list[object] = []
    for key in keys:
        document = table.get(space, key)
        if document is not None and document["id"] not in ids:
            ids.append(document["id"])
    return ids


def country_payload(
    record: CountryRecord,
    extra: CountryExtraRecord | None,
    *,
    currencies: LookupTable,
    languages: LookupTable,
    timezones: LookupTable,
) -> Document:
    code = record.cca2.strip().upper()

    currency_keys = [key.upper() for key in record.currencies]
    currency_ids = _ids(currencies, "code", currency_keys)[:1]
    if not currency_ids and extra is not None and extra.currency:
        currency_ids = _ids(currencies, "code", [extra.currency.strip().upper()])

    timezone_slugs = [slugify(name) for name in extra.timezones] if extra is not None else []

    return {
        "name": record.name.common.strip(),
        "code": code,
        "code3": record.cca3.upper() if record.cca3 else None,
        "iso_code": record.ccn3,
        "continent": continent_for(record.region, record.subregion),
        "region": record.region,
        "subregion": record.subregion,
        "capital": record.capital[0] if record.capital else None,
        "flag": f"{code.lower()}.svg",
        "web_domain": record.tld[0] if record.tld else None,
        "dialing_code": dialing_code(record),
        "demonym": record.demonym,
        "currencies": currency_ids,
        "languages": _ids(languages, "code", language_codes(record, extra)),
        "timezones": _ids(timezones, "slug", timezone_slugs),
    }


class CountriesStage:
    name: ClassVar[StageName] = StageName.COUNTRIES
    collections: ClassVar[tuple[Collection, ...]] = (Collection.COUNTRIES,)
    depends_on: ClassVar[frozenset[StageName]] = frozenset({StageName.BASE_REFERENCE_DATA})

    async def run(self, context: SeedContext) -> list[StageStats]:
        stats = context.stats("countries")
        borders = context.stats("country-borders")
        if not await context.should_seed(Collection.COUNTRIES, stats):
            return [stats]

        rows = await context.sources.rows(Dataset.COUNTRIES)
        extras = await self._load_extras(context, stats)

        currencies = await context.lookup(Collection.CURRENCIES, {"code": upper_field_key("code")})
        languages = await context.lookup(Collection.LANGUAGES, {"code": lower_field_key("code")})
        timezones = await context.lookup(Collection.TIMEZONES, {"slug": field_key("slug")})
        log.info(
            "Linking against %d currencies, %d languages, %d timezones",
            len(currencies),
            len(languages),
            len(timezones),
        )

        items: list[UpsertItem] = []
        border_codes: dict[str, list[str]] = {}
        for record in decode(rows, CountryRecord, stats=stats):
            payload = country_payload(
                record,
                extras.get(record.cca2.strip().upper()),
                currencies=currencies,
                languages=languages,
                timezones=timezones,
            )
            code = payload.pop("code")
            items.append(({"code": code}, payload))
            if record.borders:
                border_codes[code] = [border.upper() for border in record.borders]

        engine = context.engine(stats)
        await engine.preload(Collection.COUNTRIES, ("code",))
        await engine.upsert_many(
            Collection.COUNTRIES,
            items,
            batch_size=context.options.batch_size,
            duplicate_reason="duplicate_code",
        )

        await self._link_borders(context, border_codes, borders)
        return [stats, borders]

    async def _load_extras(
        self, context: SeedContext, stats: StageStats
    ) -> dict[str, CountryExtraRecord]:
        try:
            rows = await context.sources.rows(Dataset.COUNTRY_EXTRAS)
        except SourceUnavailableError as exc:
            log.warning("Country extras unavailable, continuing without them: %s", exc)
            return {}
        return {
            record.code.strip().upper(): record
            for record in decode(rows, CountryExtraRecord, stats=stats)
        }

    async def _link_borders(
        self,
        context: SeedContext,
        border_codes: dict[str, list[str]],
        stats: StageStats,
    ) -> None:
        """Second pass: neighbours can only be linked once every country exists."""

        countries = await context.lookup(
            Collection.COUNTRIES,
            {"code": upper_field_key("code"), "code3": upper_field_key("code3")},
        )
        patches: list[tuple[Document, dict[str, object]]] = []
        for code, neighbours in border_codes.items():
            country = countries.get("code", code)
            if country is None:
                stats.skip("country_not_found", detail=code)
                continue
            patches.append(
                (country, {"neighboring_countries": _ids(countries, "code3", neighbours)})
            )
        await context.engine(stats).patch_many(
            Collection.COUNTRIES, patches, batch_size=context.options.batch_size
        )
