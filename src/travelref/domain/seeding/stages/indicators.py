"""Derived indicators: factbook details, crime index and travel advisories."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

from travelref.domain.collection import Collection
from travelref.domain.errors import SourceUnavailableError
from travelref.domain.seeding.orchestrator import StageName
from travelref.domain.seeding.stages.advisories import seed_travel_advisories
from travelref.domain.seeding.stages.crime import seed_crime_data
from travelref.domain.seeding.stages.factbook import seed_country_details

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from travelref.domain.outcome import StageStats
    from travelref.domain.seeding.context import SeedContext

log = logging.getLogger(__name__)


class DerivedIndicatorsStage:
    """Each indicator source is optional; an unavailable one is logged and skipped."""

    name: ClassVar[StageName] = StageName.DERIVED_INDICATORS
    collections: ClassVar[tuple[Collection, ...]] = (
        Collection.COUNTRY_DETAILS,
        Collection.CRIME_INDEX_SCORES,
        Collection.CRIME_TRENDS,
        Collection.TRAVEL_ADVISORIES,
    )
    depends_on: ClassVar[frozenset[StageName]] = frozenset({StageName.COUNTRIES})

    async def run(self, context: SeedContext) -> list[StageStats]:
        steps: list[StageStats] = []
        for label, step in (
            ("country-details", seed_country_details),
            ("crime-index-scores", seed_crime_data),
            ("travel-advisories", seed_travel_advisories),
        ):
            steps.extend(await self._optional(context, label, step))
        return steps

    async def _optional(
        self,
        context: SeedContext,
        label: str,
        step: Callable[[SeedContext], Awaitable[list[StageStats]]],
    ) -> list[StageStats]:
        try:
            return await step(context)
        except SourceUnavailableError as exc:
            log.warning("Skipping %s: %s", label, exc)
            stats = context.stats(label)
            stats.skip("source_unavailable", detail=str(exc))
            return [stats]
