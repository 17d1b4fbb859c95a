"""Destination categories and types."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from travelref.domain.collection import Collection
from travelref.domain.normalizers import clean_text, slugify
from travelref.domain.ports.sources import Dataset
from travelref.domain.records import DestinationMetadataRecord, decode
from travelref.domain.seeding.orchestrator import StageName

if TYPE_CHECKING:
    from travelref.domain.outcome import StageStats
    from travelref.domain.seeding.context import SeedContext
    from travelref.domain.upsert import UpsertItem


class DestinationMetadataStage:
    name: ClassVar[StageName] = StageName.DESTINATION_METADATA
    collections: ClassVar[tuple[Collection, ...]] = (
        Collection.DESTINATION_CATEGORIES,
        Collection.DESTINATION_TYPES,
    )
    depends_on: ClassVar[frozenset[StageName]] = frozenset()

    async def run(self, context: SeedContext) -> list[StageStats]:
        return [
            await self._seed(
                context, Dataset.DESTINATION_CATEGORIES, Collection.DESTINATION_CATEGORIES
            ),
            await self._seed(context, Dataset.DESTINATION_TYPES, Collection.DESTINATION_TYPES),
        ]

    async def _seed(
        self, context: SeedContext, dataset: Dataset, collection: Collection
    ) -> StageStats:
        stats = context.stats(collection)
        if not await context.should_seed(collection, stats):
            return stats
        rows = await context.sources.rows(dataset)
        items: list[UpsertItem] = [
            (
                {"slug": slugify(record.slug)},
                {
                    "name": record.name.strip(),
                    "description": clean_text(record.description),
                    "icon": record.icon,
                },
            )
            for record in decode(rows, DestinationMetadataRecord, stats=stats)
        ]
        await context.engine(stats).upsert_many(
            collection,
            items,
            batch_size=context.options.batch_size,
            duplicate_reason="duplicate_slug",
        )
        return stats
