"""Per-run state shared by every seed stage."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from travelref.domain.collection import LARGE_COLLECTIONS, Collection
from travelref.domain.lookup import build_lookup_table
from travelref.domain.outcome import StageStats
from travelref.domain.resolver import country_resolver
from travelref.domain.upsert import UpsertEngine

if TYPE_CHECKING:
    from collections.abc import Mapping

    from travelref.domain.lookup import KeyExtractor, LookupTable
    from travelref.domain.ports.sources import SourceReader
    from travelref.domain.ports.store import DocumentStore, Where
    from travelref.domain.resolver import CanonicalResolver

log = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE: Final[int] = 100
DEFAULT_LARGE_BATCH_SIZE: Final[int] = 500
DEFAULT_ROUTE_BATCH_SIZE: Final[int] = 1000


@dataclass(slots=True, frozen=True, kw_only=True)
class SeedOptions:
    """Run-level switches.

    ``full_reset`` clears every selected collection before seeding; otherwise a
    collection that already holds documents is left as is.
    """

    full_reset: bool = True
    fuzzy_matching: bool = True
    batch_size: int = DEFAULT_BATCH_SIZE
    large_batch_size: int = DEFAULT_LARGE_BATCH_SIZE
    route_batch_size: int = DEFAULT_ROUTE_BATCH_SIZE

    def batch_size_for(self, collection: Collection) -> int:
        if collection in LARGE_COLLECTIONS:
            return self.large_batch_size
        return self.batch_size


@dataclass(slots=True)
class SeedContext:
    store: DocumentStore
    sources: SourceReader
    options: SeedOptions = field(default_factory=SeedOptions)

    def stats(self, name: str) -> StageStats:
        return StageStats(name=name)

    def engine(self, stats: StageStats) -> UpsertEngine:
        return UpsertEngine(store=self.store, stats=stats)

    async def lookup(
        self,
        collection: Collection,
        extractors: Mapping[str, KeyExtractor],
        *,
        where: Where | None = None,
    ) -> LookupTable:
        return await build_lookup_table(self.store, collection, extractors, where=where)

    async def country_resolver(self) -> CanonicalResolver:
        countries = await self.store.find(Collection.COUNTRIES)
        return country_resolver(countries, fuzzy=self.options.fuzzy_matching)

    async def should_seed(self, collection: Collection, stats: StageStats) -> bool:
        """In additive runs a non-empty collection is left untouched."""

        if self.options.full_reset:
            return True
        existing = await self.store.count(collection)
        if existing == 0:
            return True
        log.info("Skipping %s: %d documents already present", collection, existing)
        stats.skip("skipped_existing", detail=f"{collection} has {existing} documents")
        return False
