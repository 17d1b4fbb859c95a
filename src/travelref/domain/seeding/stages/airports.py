"""Airports from the airport-codes extract, linked to country, region and timezone."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Final

from travelref.domain.collection import Collection
from travelref.domain.errors import SourceUnavailableError
from travelref.domain.lookup import field_key, upper_field_key
from travelref.domain.normalizers import clean_text, parse_coordinates, parse_number, slugify
from travelref.domain.outcome import Outcome
from travelref.domain.ports.sources import Dataset
from travelref.domain.records import AirportCodeRecord, AirportTimezoneRecord, decode
from travelref.domain.seeding.orchestrator import StageName

if TYPE_CHECKING:
    from collections.abc import Mapping

    from travelref.domain.lookup import LookupTable
    from travelref.domain.outcome import Document, StageStats
    from travelref.domain.seeding.context import SeedContext
    from travelref.domain.upsert import UpsertItem

log = logging.getLogger(__name__)

AIRPORT_TYPES: Final[dict[str, str]] = {
    "large_airport": "large",
    "medium_airport": "medium",
    "small_airport": "small",
    "heliport": "heliport",
    "seaplane_base": "seaplane",
    "closed": "closed",
}
DEFAULT_AIRPORT_TYPE: Final = "small"

IATA_RE: Final = re.compile(r"^[A-Z]{3}$")
ICAO_RE: Final = re.compile(r"^[A-Z][A-Z0-9]{3}$")
_CITY_FROM_NAME_RE: Final = re.compile(
    r"^(.+?)\s+(?:International|Regional|Municipal|Airport|Airfield|Heliport)", re.IGNORECASE
)


@dataclass(slots=True, frozen=True)
class AirportCodes:
    iata: str | None
    icao: str | None

    def natural_key(self) -> dict[str, object]:
        if self.iata:
            return {"iata": self.iata}
        return {"icao": self.icao}


def airport_codes(record: AirportCodeRecord) -> AirportCodes | None:
    """IATA when three letters; ICAO from an ICAO-shaped ``icao_code`` or ``ident``.

    Rows yielding neither are rejected rather than given a synthetic code.
    """

    iata = record.iata_code.strip().upper() if record.iata_code else None
    if iata is not None and not IATA_RE.match(iata):
        iata = None

    icao = record.icao_code.strip().upper() if record.icao_code else None
    if icao is not None and not ICAO_RE.match(icao):
        icao = None
    if icao is None and record.ident:
        ident = record.ident.strip().upper()
        if ICAO_RE.match(ident):
            icao = ident

    if iata is None and icao is None:
        return None
    return AirportCodes(iata=iata, icao=icao)


def airport_city(record: AirportCodeRecord) -> str:
    if record.municipality:
        return record.municipality
    match = _CITY_FROM_NAME_RE.match(record.name)
    if match is not None:
        return match.group(1).strip()
    return record.name


@dataclass(slots=True)
class TimezoneResolver:
    """IATA code -> IANA name -> timezone document, falling back to the country's first."""

    iata_to_zone: Mapping[str, str]
    timezones: LookupTable

    def resolve(self, iata: str | None, country: Document) -> tuple[object | None, bool]:
        """Return ``(timezone_id, used_country_fallback)``."""

        zone = self.iata_to_zone.get(iata) if iata else None
        if zone is not None:
            document = (
                self.timezones.get("name", zone)
                or self.timezones.get("slug", slugify(zone))
                or self.timezones.get("slug", zone.lower().replace("/", "-"))
            )
            if document is not None:
                return document["id"], False
        country_zones = country.get("timezones") or []
        if country_zones:
            return country_zones[0], True
        return None, False


def region_key(document: Document) -> object:
    code = document.get("code")
    if not code:
        return None
    return (document.get("country"), str(code).upper())


def build_airport(
    record: AirportCodeRecord,
    *,
    countries: LookupTable,
    regions: LookupTable,
    timezones: TimezoneResolver,
    stats: StageStats,
) -> UpsertItem | Outcome:
    """Return ``(natural_key, payload)`` or the skip outcome explaining the rejection."""

    codes = airport_codes(record)
    if codes is None:
        return Outcome.skipped("no_identifier", detail=record.ident or record.name)

    country_code = record.iso_country.strip().upper() if record.iso_country else None
    country = countries.get("code", country_code)
    if country is None:
        return Outcome.skipped("country_not_found", detail=f"{record.name} ({country_code})")

    coordinates = parse_coordinates(record.coordinates)
    if coordinates is None:
        return Outcome.skipped("invalid_coordinates", detail=f"{record.name}: {record.coordinates}")

    timezone_id, fallback = timezones.resolve(codes.iata, country)
    if fallback:
        stats.note("timezone_fallback")

    region = None
    if record.iso_region and "-" in record.iso_region:
        region_code = record.iso_region.split("-", 1)[1].upper()
        region = regions.get("country_code", (country["id"], region_code))

    payload: Document = {
        "name": clean_text(record.name),
        "iata": codes.iata,
        "icao": codes.icao,
        "city": airport_city(record),
        "type": AIRPORT_TYPES.get(record.type or "", DEFAULT_AIRPORT_TYPE),
        "latitude": coordinates.latitude,
        "longitude": coordinates.longitude,
        "elevation": parse_number(record.elevation_ft),
        "country": country["id"],
        "region": region["id"] if region is not None else None,
        "timezone": timezone_id,
    }
    natural_key = codes.natural_key()
    for name in natural_key:
        payload.pop(name)
    if codes.iata is None:
        payload.pop("iata")
    return natural_key, payload


class AirportsStage:
    name: ClassVar[StageName] = StageName.AIRPORTS
    collections: ClassVar[tuple[Collection, ...]] = (Collection.AIRPORTS,)
    depends_on: ClassVar[frozenset[StageName]] = frozenset({StageName.COUNTRIES})

    async def run(self, context: SeedContext) -> list[StageStats]:
        stats = context.stats("airports")
        if not await context.should_seed(Collection.AIRPORTS, stats):
            return [stats]

        rows = await context.sources.rows(Dataset.AIRPORTS)
        timezone_resolver = TimezoneResolver(
            iata_to_zone=await self._iata_zones(context, stats),
            timezones=await context.lookup(
                Collection.TIMEZONES, {"name": field_key("name"), "slug": field_key("slug")}
            ),
        )
        if not len(timezone_resolver.timezones):
            log.warning("No timezones stored; airports will fall back to country timezones")
        countries = await context.lookup(Collection.COUNTRIES, {"code": upper_field_key("code")})
        regions = await context.lookup(Collection.REGIONS, {"country_code": region_key})

        items: list[UpsertItem] = []
        for record in decode(rows, AirportCodeRecord, stats=stats):
            built = build_airport(
                record,
                countries=countries,
                regions=regions,
                timezones=timezone_resolver,
                stats=stats,
            )
            if isinstance(built, Outcome):
                stats.record(built)
                continue
            items.append(built)

        engine = context.engine(stats)
        await engine.preload(Collection.AIRPORTS, ("iata",))
        await engine.preload(Collection.AIRPORTS, ("icao",))
        await engine.upsert_many(
            Collection.AIRPORTS,
            items,
            batch_size=context.options.large_batch_size,
            duplicate_reason="duplicate_code",
        )
        return [stats]

    async def _iata_zones(self, context: SeedContext, stats: StageStats) -> dict[str, str]:
        try:
            rows = await context.sources.rows(Dataset.AIRPORT_TIMEZONES)
        except SourceUnavailableError as exc:
            log.warning("Airport timezone mapping unavailable: %s", exc)
            return {}
        return {
            record.code.strip().upper(): record.timezone.strip()
            for record in decode(rows, AirportTimezoneRecord, stats=stats)
        }
