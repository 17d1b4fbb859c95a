"""Base reference data: currencies, languages, timezones and religions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

from travelref.domain.collection import Collection
from travelref.domain.mappings import RELIGIONS, fix_language_code
from travelref.domain.normalizers import clean_text, format_utc_offset, slugify
from travelref.domain.ports.sources import Dataset
from travelref.domain.records import CurrencyRecord, LanguageRecord, TimezoneRecord, decode
from travelref.domain.seeding.orchestrator import StageName

if TYPE_CHECKING:
    from travelref.domain.outcome import Document, StageStats
    from travelref.domain.seeding.context import SeedContext
    from travelref.domain.upsert import UpsertItem

log = logging.getLogger(__name__)


def currency_payload(record: CurrencyRecord) -> Document:
    return {
        "code": record.code.strip().upper(),
        "name": record.name.strip(),
        "symbol": record.symbol,
    }


def language_payload(record: LanguageRecord) -> Document:
    return {
        "code": fix_language_code(record.code),
        "name": record.name.strip(),
        "native_name": record.native_name,
    }


def timezone_payload(record: TimezoneRecord) -> Document:
    return {
        "name": record.name,
        "slug": slugify(record.name),
        "label": record.alternative_name or record.name,
        "offset": format_utc_offset(record.raw_offset_in_minutes),
        "offset_minutes": record.raw_offset_in_minutes,
        "is_dst": False,
    }


class BaseReferenceDataStage:
    """Independent lookup collections every later stage links against."""

    name: ClassVar[StageName] = StageName.BASE_REFERENCE_DATA
    collections: ClassVar[tuple[Collection, ...]] = (
        Collection.CURRENCIES,
        Collection.LANGUAGES,
        Collection.TIMEZONES,
        Collection.RELIGIONS,
    )
    depends_on: ClassVar[frozenset[StageName]] = frozenset()

    async def run(self, context: SeedContext) -> list[StageStats]:
        return [
            await self.seed_currencies(context),
            await self.seed_languages(context),
            await self.seed_timezones(context),
            *await self.seed_religions(context),
        ]

    async def seed_currencies(self, context: SeedContext) -> StageStats:
        stats = context.stats("currencies")
        if not await context.should_seed(Collection.CURRENCIES, stats):
            return stats
        rows = await context.sources.rows(Dataset.CURRENCIES)
        items: list[UpsertItem] = []
        for record in decode(rows, CurrencyRecord, stats=stats):
            payload = currency_payload(record)
            items.append(({"code": payload.pop("code")}, payload))
        await context.engine(stats).upsert_many(
            Collection.CURRENCIES,
            items,
            batch_size=context.options.batch_size,
            duplicate_reason="duplicate_code",
        )
        return stats

    async def seed_languages(self, context: SeedContext) -> StageStats:
        stats = context.stats("languages")
        if not await context.should_seed(Collection.LANGUAGES, stats):
            return stats
        rows = await context.sources.rows(Dataset.LANGUAGES)
        items: list[UpsertItem] = []
        for record in decode(rows, LanguageRecord, stats=stats):
            payload = language_payload(record)
            items.append(({"code": payload.pop("code")}, payload))
        await context.engine(stats).upsert_many(
            Collection.LANGUAGES,
            items,
            batch_size=context.options.batch_size,
            duplicate_reason="duplicate_code",
        )
        return stats

    async def seed_timezones(self, context: SeedContext) -> StageStats:
        stats = context.stats("timezones")
        if not await context.should_seed(Collection.TIMEZONES, stats):
            return stats
        rows = await context.sources.rows(Dataset.TIMEZONES)
        items: list[UpsertItem] = []
        for record in decode(rows, TimezoneRecord, stats=stats):
            payload = timezone_payload(record)
            items.append(({"name": payload.pop("name")}, payload))
        await context.engine(stats).upsert_many(
            Collection.TIMEZONES,
            items,
            batch_size=context.options.batch_size,
            duplicate_reason="duplicate_name",
        )
        return stats

    async def seed_religions(self, context: SeedContext) -> list[StageStats]:
        """Create the bundled taxonomy, then link each religion to its parent."""

        stats = context.stats("religions")
        if not await context.should_seed(Collection.RELIGIONS, stats):
            return [stats]
        engine = context.engine(stats)
        await engine.preload(Collection.RELIGIONS, ("name",))

        by_name: dict[str, Document] = {}
        for religion in RELIGIONS:
            outcome = await engine.upsert(
                Collection.RELIGIONS,
                {"name": religion.name},
                {"description": clean_text(religion.description)},
            )
            if outcome.document is not None:
                by_name[religion.name] = outcome.document

        linking = context.stats("religion-parents")
        linker = context.engine(linking)
        for religion in RELIGIONS:
            if religion.parent is None:
                continue
            child = by_name.get(religion.name)
            parent = by_name.get(religion.parent)
            if child is None or parent is None:
                linking.skip("reference_not_found", detail=f"{religion.name} -> {religion.parent}")
                continue
            await linker.patch(Collection.RELIGIONS, child, {"parent_religion": parent["id"]})
        log.info("Linked %d religions to their parent", linking.updated)
        return [stats, linking]
