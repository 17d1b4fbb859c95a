from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

import pytest

from tests.support.datasets import StaticSources
from travelref.adapters.memory_store import InMemoryDocumentStore
from travelref.domain.collection import Collection
from travelref.domain.errors import SourceUnavailableError, StoreUnavailableError
from travelref.domain.seeding import (
    SeedContext,
    SeedOptions,
    SeedPipeline,
    StageName,
    StageStatus,
    default_stages,
)

if TYPE_CHECKING:
    from travelref.domain.outcome import StageStats


@dataclass(slots=True)
class RecordingStage:
    name: StageName
    collections: tuple[Collection, ...] = ()
    depends_on: frozenset[StageName] = frozenset()
    error: Exception | None = None
    calls: list[StageName] = field(default_factory=list)

    async def run(self, context: SeedContext) -> list[StageStats]:
        self.calls.append(self.name)
        if self.error is not None:
            raise self.error
        stats = context.stats(str(self.name))
        for collection in self.collections:
            await context.engine(stats).upsert(collection, {"name": self.name}, {"ok": True})
        return [stats]


def _context(store: InMemoryDocumentStore | None = None, **options: bool) -> SeedContext:
    return SeedContext(
        store=store or InMemoryDocumentStore(),
        sources=StaticSources(),
        options=SeedOptions(**options),
    )


def test_failed_stage_blocks_dependents_but_not_independent_stages() -> None:
    base = RecordingStage(StageName.BASE_REFERENCE_DATA, error=RuntimeError("boom"))
    countries = RecordingStage(
        StageName.COUNTRIES, depends_on=frozenset({StageName.BASE_REFERENCE_DATA})
    )
    airports = RecordingStage(StageName.AIRPORTS, depends_on=frozenset({StageName.COUNTRIES}))
    destinations = RecordingStage(
        StageName.DESTINATION_METADATA, collections=(Collection.DESTINATION_TYPES,)
    )
    pipeline = SeedPipeline(stages=(base, countries, airports, destinations))

    report = asyncio.run(pipeline.run(_context()))

    assert report.stage(StageName.BASE_REFERENCE_DATA).status is StageStatus.FAILED
    assert report.stage(StageName.BASE_REFERENCE_DATA).error == "boom"
    assert report.stage(StageName.COUNTRIES).status is StageStatus.SKIPPED_DEPENDENCY
    assert report.stage(StageName.AIRPORTS).status is StageStatus.SKIPPED_DEPENDENCY
    assert report.stage(StageName.DESTINATION_METADATA).status is StageStatus.COMPLETED
    assert countries.calls == []
    assert report.failed == [StageName.BASE_REFERENCE_DATA]
    assert report.created == 1


def test_source_unavailable_fails_only_that_stage() -> None:
    regions = RecordingStage(
        StageName.REGIONS, error=SourceUnavailableError("regions.json missing")
    )
    visas = RecordingStage(StageName.VISA_REQUIREMENTS)

    report = asyncio.run(SeedPipeline(stages=(regions, visas)).run(_context()))

    assert report.stage(StageName.REGIONS).status is StageStatus.FAILED
    assert report.stage(StageName.VISA_REQUIREMENTS).status is StageStatus.COMPLETED


def test_filtered_stage_does_not_block_dependents() -> None:
    countries = RecordingStage(StageName.COUNTRIES)
    regions = RecordingStage(StageName.REGIONS, depends_on=frozenset({StageName.COUNTRIES}))
    airports = RecordingStage(StageName.AIRPORTS, depends_on=frozenset({StageName.COUNTRIES}))
    pipeline = SeedPipeline(stages=(countries, regions, airports))

    only = {StageName.REGIONS, StageName.AIRPORTS}
    report = asyncio.run(pipeline.run(_context(), only=only, skip={StageName.AIRPORTS}))

    assert report.stage(StageName.COUNTRIES).status is StageStatus.SKIPPED_FILTERED
    assert report.stage(StageName.REGIONS).status is StageStatus.COMPLETED
    assert report.stage(StageName.AIRPORTS).status is StageStatus.SKIPPED_FILTERED
    assert countries.calls == []


def test_full_reset_clears_selected_collections_in_reverse_order() -> None:
    store = InMemoryDocumentStore()

    async def scenario() -> None:
        await store.create(Collection.COUNTRIES, {"name": "stale"})
        await store.create(Collection.ROUTES, {"name": "stale"})
        await store.create(Collection.CURRENCIES, {"name": "kept"})
        pipeline = SeedPipeline(
            stages=(
                RecordingStage(StageName.BASE_REFERENCE_DATA, (Collection.CURRENCIES,)),
                RecordingStage(StageName.COUNTRIES, (Collection.COUNTRIES,)),
                RecordingStage(StageName.AIRLINES_AND_ROUTES, (Collection.ROUTES,)),
            )
        )
        report = await pipeline.run(
            _context(store, full_reset=True), skip={StageName.BASE_REFERENCE_DATA}
        )
        assert [result.collection for result in report.cleared] == ["routes", "countries"]

    asyncio.run(scenario())

    assert [doc["name"] for doc in store.documents(Collection.COUNTRIES)] == ["countries"]
    assert [doc["name"] for doc in store.documents(Collection.CURRENCIES)] == ["kept"]


def test_additive_run_skips_non_empty_collections() -> None:
    store = InMemoryDocumentStore()

    async def scenario() -> None:
        await store.create(Collection.CURRENCIES, {"code": "USD"})
        context = _context(store, full_reset=False)
        stats = context.stats("currencies")
        assert not await context.should_seed(Collection.CURRENCIES, stats)
        assert stats.count("skipped_existing") == 1
        assert await context.should_seed(Collection.LANGUAGES, context.stats("languages"))

    asyncio.run(scenario())


def test_unreachable_store_aborts_the_run() -> None:
    stage = RecordingStage(StageName.COUNTRIES)
    context = _context(InMemoryDocumentStore(available=False))

    with pytest.raises(StoreUnavailableError):
        asyncio.run(SeedPipeline(stages=(stage,)).run(context))
    assert stage.calls == []


def test_store_lost_mid_run_propagates() -> None:
    stage = RecordingStage(StageName.COUNTRIES, error=StoreUnavailableError("gone"))

    with pytest.raises(StoreUnavailableError):
        asyncio.run(SeedPipeline(stages=(stage,)).run(_context()))


def test_default_stage_graph_is_ordered_by_dependencies() -> None:
    stages = default_stages()
    names = [stage.name for stage in stages]

    assert names == list(StageName)
    for index, stage in enumerate(stages):
        assert stage.depends_on <= set(names[:index])


def test_pipeline_composition_returns_new_pipelines() -> None:
    first = RecordingStage(StageName.COUNTRIES)
    second = RecordingStage(StageName.REGIONS)
    pipeline = SeedPipeline()

    extended = pipeline.with_stage(first).extend([second])

    assert pipeline.stage_names() == []
    assert extended.stage_names() == [StageName.COUNTRIES, StageName.REGIONS]
