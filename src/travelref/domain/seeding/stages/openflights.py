"""Airlines, airport enrichment and routes from the OpenFlights database."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, ClassVar, Final

from travelref.domain.collection import Collection
from travelref.domain.linker import CrossReferenceLinker, Reference, code_candidates
from travelref.domain.lookup import field_key, lookup_table_from, upper_field_key
from travelref.domain.normalizers import clean_text, parse_equipment
from travelref.domain.outcome import Outcome
from travelref.domain.ports.sources import Dataset
from travelref.domain.records import (
    OpenFlightsAirlineRecord,
    OpenFlightsAirportRecord,
    OpenFlightsRouteRecord,
    decode,
)
from travelref.domain.seeding.orchestrator import StageName
from travelref.domain.seeding.stages.airports import IATA_RE
from travelref.domain.upsert import ExistingPolicy

if TYPE_CHECKING:
    from travelref.domain.lookup import LookupTable
    from travelref.domain.outcome import Document, StageStats
    from travelref.domain.resolver import CanonicalResolver
    from travelref.domain.seeding.context import SeedContext
    from travelref.domain.upsert import UpsertItem

log = logging.getLogger(__name__)

OPENFLIGHTS_AIRPORT_TYPES: Final[dict[str, str]] = {
    "airport": "large",
    "station": "medium",
    "port": "small",
}
DEFAULT_OPENFLIGHTS_TYPE: Final = "medium"
MIN_CITY_LENGTH: Final = 2
STRICT_ICAO_RE: Final = re.compile(r"^[A-Z]{4}$")

_AIRPORT_KEYS = {
    "openflights_id": field_key("openflights_id"),
    "iata": upper_field_key("iata"),
    "icao": upper_field_key("icao"),
}


def _code(value: str | None, pattern: re.Pattern[str]) -> str | None:
    if not value:
        return None
    code = value.strip().upper()
    return code if pattern.match(code) else None


def airline_item(
    record: OpenFlightsAirlineRecord, resolver: CanonicalResolver
) -> UpsertItem | Outcome:
    name = clean_text(record.name)
    if name is None:
        return Outcome.skipped("missing_name", detail=str(record.id))
    country = resolver.resolve_document(record.country) if record.country else None
    return (
        {"openflights_id": record.id},
        {
            "name": name,
            "alias": clean_text(record.alias),
            "iata": record.iata.strip().upper() if record.iata else None,
            "icao": record.icao.strip().upper() if record.icao else None,
            "callsign": clean_text(record.callsign),
            "country": clean_text(record.country),
            "country_ref": country["id"] if country is not None else None,
            "active": record.active,
        },
    )


def new_airport_item(
    record: OpenFlightsAirportRecord, resolver: CanonicalResolver
) -> UpsertItem | Outcome:
    """Payload for an OpenFlights airport unknown to the store, or why it is rejected."""

    iata = _code(record.iata, IATA_RE)
    icao = _code(record.icao, STRICT_ICAO_RE)
    if iata is None and icao is None:
        return Outcome.skipped("no_identifier", detail=record.name)
    city = clean_text(record.city)
    if city is None or len(city) < MIN_CITY_LENGTH:
        return Outcome.skipped("invalid_city", detail=record.name)
    country = resolver.resolve_document(record.country) if record.country else None
    if country is None:
        return Outcome.skipped("country_not_found", detail=f"{record.name} ({record.country})")
    if record.latitude is None or record.longitude is None:
        return Outcome.skipped("invalid_coordinates", detail=record.name)

    natural_key: dict[str, object] = {"iata": iata} if iata else {"icao": icao}
    payload: Document = {
        "name": clean_text(record.name) or city,
        "icao": icao,
        "city": city,
        "country": country["id"],
        "latitude": record.latitude,
        "longitude": record.longitude,
        "elevation": record.altitude,
        "type": OPENFLIGHTS_AIRPORT_TYPES.get(record.type or "", DEFAULT_OPENFLIGHTS_TYPE),
        "openflights_id": record.id,
    }
    if iata is None:
        payload.pop("icao")
    return natural_key, payload


def route_references(
    record: OpenFlightsRouteRecord, *, airlines: LookupTable, airports: LookupTable
) -> list[Reference]:
    return [
        Reference(
            "airline",
            airlines,
            code_candidates(record.airline_id, record.airline),
            reason="airline_not_found",
        ),
        Reference(
            "source_airport",
            airports,
            code_candidates(record.source_airport_id, record.source_airport),
            reason="airport_not_found",
        ),
        Reference(
            "destination_airport",
            airports,
            code_candidates(record.destination_airport_id, record.destination_airport),
            reason="airport_not_found",
        ),
    ]


def route_item(
    record: OpenFlightsRouteRecord,
    *,
    airlines: LookupTable,
    airports: LookupTable,
    linker: CrossReferenceLinker,
) -> UpsertItem | Outcome:
    ids, reason = linker.link_ids(route_references(record, airlines=airlines, airports=airports))
    if reason is not None:
        return Outcome.skipped(
            reason,
            detail=f"{record.airline} {record.source_airport}-{record.destination_airport}",
        )
    return (
        {
            "airline_code": record.airline,
            "source_airport_code": record.source_airport,
            "destination_airport_code": record.destination_airport,
        },
        {
            "airline": ids["airline"],
            "source_airport": ids["source_airport"],
            "destination_airport": ids["destination_airport"],
            "codeshare": record.codeshare,
            "stops": record.stops,
            "equipment": parse_equipment(record.equipment),
        },
    )


class AirlinesAndRoutesStage:
    name: ClassVar[StageName] = StageName.AIRLINES_AND_ROUTES
    collections: ClassVar[tuple[Collection, ...]] = (Collection.AIRLINES, Collection.ROUTES)
    depends_on: ClassVar[frozenset[StageName]] = frozenset({StageName.AIRPORTS})

    async def run(self, context: SeedContext) -> list[StageStats]:
        resolver = await context.country_resolver()
        airlines = await self.seed_airlines(context, resolver)
        enrichment, airports = await self.enrich_airports(context, resolver)
        routes = await self.seed_routes(context, airports)
        return [airlines, enrichment, routes]

    async def seed_airlines(self, context: SeedContext, resolver: CanonicalResolver) -> StageStats:
        stats = context.stats("airlines")
        if not await context.should_seed(Collection.AIRLINES, stats):
            return stats
        rows = await context.sources.rows(Dataset.OPENFLIGHTS_AIRLINES)

        items: list[UpsertItem] = []
        for record in decode(rows, OpenFlightsAirlineRecord, stats=stats):
            built = airline_item(record, resolver)
            if isinstance(built, Outcome):
                stats.record(built)
            else:
                items.append(built)

        engine = context.engine(stats)
        await engine.preload(Collection.AIRLINES, ("openflights_id",))
        await engine.upsert_many(
            Collection.AIRLINES,
            items,
            batch_size=context.options.large_batch_size,
            duplicate_reason="duplicate_openflights_id",
        )
        return stats

    async def enrich_airports(
        self, context: SeedContext, resolver: CanonicalResolver
    ) -> tuple[StageStats, LookupTable]:
        """Tag known airports with their OpenFlights id and add missing ones.

        Returns the refreshed airport lookup used to link routes.
        """

        stats = context.stats("openflights-airports")
        rows = await context.sources.rows(Dataset.OPENFLIGHTS_AIRPORTS)
        stored = await context.store.find(Collection.AIRPORTS)
        known = lookup_table_from(Collection.AIRPORTS, _AIRPORT_KEYS, stored)
        engine = context.engine(stats)
        await engine.preload(Collection.AIRPORTS, ("iata",))
        await engine.preload(Collection.AIRPORTS, ("icao",))

        items: list[UpsertItem] = []
        patches: list[tuple[Document, dict[str, object]]] = []
        for record in decode(rows, OpenFlightsAirportRecord, stats=stats):
            match = known.get("iata", _code(record.iata, IATA_RE)) or known.get(
                "icao", _code(record.icao, STRICT_ICAO_RE)
            )
            if match is not None:
                patches.append((match, {"openflights_id": record.id}))
                continue
            built = new_airport_item(record, resolver)
            if isinstance(built, Outcome):
                stats.record(built)
            else:
                items.append(built)

        await engine.patch_many(
            Collection.AIRPORTS, patches, batch_size=context.options.large_batch_size
        )
        outcomes = await engine.upsert_many(
            Collection.AIRPORTS,
            items,
            batch_size=context.options.large_batch_size,
            duplicate_reason="duplicate_code",
        )
        for outcome in outcomes:
            if outcome.written and outcome.document is not None:
                stored.append(outcome.document)
        log.info("Airports after OpenFlights enrichment: %d", len(stored))
        return stats, lookup_table_from(Collection.AIRPORTS, _AIRPORT_KEYS, stored)

    async def seed_routes(self, context: SeedContext, airports: LookupTable) -> StageStats:
        stats = context.stats("routes")
        if not await context.should_seed(Collection.ROUTES, stats):
            return stats
        rows = await context.sources.rows(Dataset.OPENFLIGHTS_ROUTES)
        airlines = await context.lookup(
            Collection.AIRLINES,
            {
                "openflights_id": field_key("openflights_id"),
                "iata": upper_field_key("iata"),
                "icao": upper_field_key("icao"),
            },
        )
        log.info("Linking routes against %d airlines, %d airports", len(airlines), len(airports))

        linker = CrossReferenceLinker()
        items: list[UpsertItem] = []
        for record in decode(rows, OpenFlightsRouteRecord, stats=stats):
            built = route_item(record, airlines=airlines, airports=airports, linker=linker)
            if isinstance(built, Outcome):
                stats.record(built)
            else:
                items.append(built)

        engine = context.engine(stats)
        await engine.preload(
            Collection.ROUTES, ("airline_code", "source_airport_code", "destination_airport_code")
        )
        await engine.upsert_many(
            Collection.ROUTES,
            items,
            batch_size=context.options.route_batch_size,
            on_existing=ExistingPolicy.SKIP,
            duplicate_reason="duplicate_route",
        )
        return stats

