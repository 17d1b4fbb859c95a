"""Stage-based orchestrator for seed runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from travelref.domain.errors import SourceUnavailableError, StoreUnavailableError
from travelref.domain.seeding.clearing import clear_collections

if TYPE_CHECKING:
    from collections.abc import Collection as AbstractCollection
    from collections.abc import Iterable, Sequence

    from travelref.domain.collection import Collection
    from travelref.domain.outcome import StageStats
    from travelref.domain.seeding.clearing import ClearResult
    from travelref.domain.seeding.context import SeedContext

log = logging.getLogger(__name__)

PROBE_COLLECTION = "countries"


class StageName(StrEnum):
    BASE_REFERENCE_DATA = "base-reference-data"
    COUNTRIES = "countries"
    REGIONS = "regions"
    AIRPORTS = "airports"
    DESTINATION_METADATA = "destination-metadata"
    VISA_REQUIREMENTS = "visa-requirements"
    DERIVED_INDICATORS = "derived-indicators"
    AIRLINES_AND_ROUTES = "airlines-and-routes"


class StageStatus(StrEnum):
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED_DEPENDENCY = "skipped_dependency"
    SKIPPED_FILTERED = "skipped_filtered"


class SeedStage(Protocol):
    """Contract implemented by each seed stage.

    ``collections`` lists what the stage writes, in creation order; a full run clears
    them in reverse. ``run`` returns one ``StageStats`` per step.
    """

    name: StageName
    collections: Sequence[Collection]
    depends_on: frozenset[StageName]

    async def run(self, context: SeedContext) -> list[StageStats]: ...


@dataclass(slots=True)
class StageReport:
    name: StageName
    status: StageStatus
    steps: list[StageStats] = field(default_factory=list[StageStats])
    error: str | None = None

    @property
    def created(self) -> int:
        return sum(step.created for step in self.steps)

    @property
    def updated(self) -> int:
        return sum(step.updated for step in self.steps)

    @property
    def skipped(self) -> int:
        return sum(step.skipped for step in self.steps)

    @property
    def errors(self) -> int:
        return sum(step.errors for step in self.steps)

    def step(self, name: str) -> StageStats | None:
        return next((step for step in self.steps if step.name == name), None)

    def summary(self) -> str:
        text = (
            f"{self.name} [{self.status}]: created={self.created}, updated={self.updated}, "
            f"skipped={self.skipped}, errors={self.errors}"
        )
        if self.error:
            text += f" ({self.error})"
        return text


@dataclass(slots=True)
class RunReport:
    stages: list[StageReport] = field(default_factory=list[StageReport])
    cleared: list[ClearResult] = field(default_factory=list)

    def stage(self, name: StageName) -> StageReport:
        for report in self.stages:
            if report.name == name:
                return report
        raise KeyError(name)

    def step(self, name: str) -> StageStats | None:
        for report in self.stages:
            found = report.step(name)
            if found is not None:
                return found
        return None

    @property
    def failed(self) -> list[StageName]:
        return [report.name for report in self.stages if report.status is StageStatus.FAILED]

    @property
    def created(self) -> int:
        return sum(report.created for report in self.stages)

    @property
    def updated(self) -> int:
        return sum(report.updated for report in self.stages)

    @property
    def skipped(self) -> int:
        return sum(report.skipped for report in self.stages)

    @property
    def errors(self) -> int:
        return sum(report.errors for report in self.stages)


@dataclass(slots=True)
class SeedPipeline:
    """Compose and execute the ordered seed stages.

    Stages run strictly in sequence. A failing stage is logged and recorded; stages
    depending on it are skipped and every independent stage still runs. Only an
    unreachable store aborts the run.
    """

    stages: Sequence[SeedStage] = field(default_factory=tuple)

    def with_stage(self, stage: SeedStage) -> SeedPipeline:
        """Return a new pipeline appending ``stage`` at the end."""

        return SeedPipeline(stages=(*self.stages, stage))

    def extend(self, stages: Iterable[SeedStage]) -> SeedPipeline:
        """Return a new pipeline with ``stages`` concatenated."""

        return SeedPipeline(stages=(*self.stages, *tuple(stages)))

    def stage_names(self) -> list[StageName]:
        return [stage.name for stage in self.stages]

    async def run(
        self,
        context: SeedContext,
        *,
        only: AbstractCollection[StageName] | None = None,
        skip: AbstractCollection[StageName] | None = None,
    ) -> RunReport:
        await probe_store(context)

        selected = [
            stage for stage in self.stages if _selected(stage.name, only=only, skip=skip)
        ]
        report = RunReport()
        if context.options.full_reset:
            clear_order = [
                collection
                for stage in reversed(selected)
                for collection in reversed(stage.collections)
            ]
            report.cleared = await clear_collections(
                context.store, clear_order, options=context.options
            )

        statuses: dict[StageName, StageStatus] = {}
        for stage in self.stages:
            stage_report = await self._run_stage(stage, context, selected, statuses)
            statuses[stage.name] = stage_report.status
            report.stages.append(stage_report)
            log.info(stage_report.summary())

        _log_run_summary(report)
        return report

    async def _run_stage(
        self,
        stage: SeedStage,
        context: SeedContext,
        selected: Sequence[SeedStage],
        statuses: dict[StageName, StageStatus],
    ) -> StageReport:
        if stage not in selected:
            return StageReport(name=stage.name, status=StageStatus.SKIPPED_FILTERED)

        blocked = sorted(
            dependency
            for dependency in stage.depends_on
            if statuses.get(dependency)
            in {StageStatus.FAILED, StageStatus.SKIPPED_DEPENDENCY}
        )
        if blocked:
            log.warning("Skipping %s: depends on %s", stage.name, ", ".join(blocked))
            return StageReport(
                name=stage.name,
                status=StageStatus.SKIPPED_DEPENDENCY,
                error=f"blocked by {', '.join(blocked)}",
            )

        log.info("Starting stage %s", stage.name)
        try:
            steps = await stage.run(context)
        except StoreUnavailableError:
            raise
        except SourceUnavailableError as exc:
            log.error("Stage %s failed: source unavailable: %s", stage.name, exc)  # noqa: TRY400
            return StageReport(name=stage.name, status=StageStatus.FAILED, error=str(exc))
        except Exception as exc:  # noqa: BLE001
            log.exception("Stage %s failed", stage.name)
            return StageReport(name=stage.name, status=StageStatus.FAILED, error=str(exc))

        for step in steps:
            log.info("  %s", step.summary())
        return StageReport(name=stage.name, status=StageStatus.COMPLETED, steps=steps)


async def probe_store(context: SeedContext) -> None:
    """Fail fast when the store cannot be reached at all."""

    try:
        await context.store.count(PROBE_COLLECTION)
    except StoreUnavailableError:
        raise
    except Exception as exc:
        raise StoreUnavailableError(f"Document store unreachable: {exc}") from exc


def _selected(
    name: StageName,
    *,
    only: AbstractCollection[StageName] | None,
    skip: AbstractCollection[StageName] | None,
) -> bool:
    if only and name not in only:
        return False
    return not (skip and name in skip)


def _log_run_summary(report: RunReport) -> None:
    log.info(
        "Seed run finished: created=%d, updated=%d, skipped=%d, errors=%d",
        report.created,
        report.updated,
        report.skipped,
        report.errors,
    )
    for stage in report.stages:
        log.info("  %-22s %s", stage.name, stage.status)
    if report.failed:
        log.warning("Failed stages: %s", ", ".join(report.failed))
