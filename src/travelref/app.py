"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from travelref.adapters.sources import DatasetSources, RemoteFetcher
from travelref.adapters.sqlalchemy import SqlAlchemyDocumentStore, shutdown, startup
from travelref.config import ConfigurationError, SeedMode, get_seed_config
from travelref.domain.ports.sources import Dataset
from travelref.domain.seeding import SeedContext, SeedOptions, SeedPipeline, default_stages

if TYPE_CHECKING:
    from collections.abc import Collection as AbstractCollection

    from travelref.config import SeedConfig
    from travelref.domain.ports.sources import SourceReader
    from travelref.domain.ports.store import DocumentStore
    from travelref.domain.seeding import RunReport, StageName


log = getLogger(__name__)


def build_default_pipeline() -> SeedPipeline:
    return SeedPipeline(stages=default_stages())


def seed_options_from(config: SeedConfig) -> SeedOptions:
    return SeedOptions(
        full_reset=config.mode is SeedMode.FULL,
        fuzzy_matching=config.fuzzy_matching,
        batch_size=config.batch_size,
        large_batch_size=config.large_batch_size,
        route_batch_size=config.route_batch_size,
    )


def remote_datasets_from(config: SeedConfig) -> frozenset[Dataset]:
    known = {dataset.value for dataset in Dataset}
    unknown = sorted(name for name in config.remote_datasets if name not in known)
    if unknown:
        raise ConfigurationError(f"Unknown remote datasets: {', '.join(unknown)}")
    return frozenset(Dataset(name) for name in config.remote_datasets)


def build_dataset_sources(config: SeedConfig) -> DatasetSources:
    remote = remote_datasets_from(config)
    fetcher = RemoteFetcher(timeout_seconds=config.fetch_timeout_seconds) if remote else None
    return DatasetSources(
        datasets_dir=config.datasets_dir,
        remote_datasets=remote,
        fetcher=fetcher,
    )


async def seed_reference_data_async(
    config: SeedConfig | None = None,
    *,
    store: DocumentStore | None = None,
    sources: SourceReader | None = None,
    pipeline: SeedPipeline | None = None,
    only: AbstractCollection[StageName] | None = None,
    skip: AbstractCollection[StageName] | None = None,
) -> RunReport:
    """Run the seed pipeline against the configured store and dataset sources.

    Without an explicit ``store`` the SQLAlchemy adapter is started and shut down
    around the run. Sources built here are closed on exit.
    """

    effective_config = config or get_seed_config()
    owned_sources = None
    if sources is None:
        owned_sources = build_dataset_sources(effective_config)
        sources = owned_sources
    owns_store = store is None
    if store is None:
        try:
            await startup(force=True)
        except Exception:
            if owned_sources is not None:
                await owned_sources.aclose()
            raise
        store = SqlAlchemyDocumentStore()

    log.info(
        "Starting seed run: mode=%s, datasets_dir=%s, remote=%s, only=%s, skip=%s",
        effective_config.mode,
        effective_config.datasets_dir,
        sorted(effective_config.remote_datasets) or "-",
        sorted(only) if only else "-",
        sorted(skip) if skip else "-",
    )
    context = SeedContext(
        store=store, sources=sources, options=seed_options_from(effective_config)
    )
    try:
        report = await (pipeline or build_default_pipeline()).run(context, only=only, skip=skip)
    finally:
        if owned_sources is not None:
            await owned_sources.aclose()
        if owns_store:
            await shutdown()

    log.info(
        f"Finished seed run: created={report.created}, updated={report.updated}, "
        f"skipped={report.skipped}, errors={report.errors}, failed={len(report.failed)}"
    )
    return report


def seed_reference_data(
    config: SeedConfig | None = None,
    *,
    store: DocumentStore | None = None,
    sources: SourceReader | None = None,
    pipeline: SeedPipeline | None = None,
    only: AbstractCollection[StageName] | None = None,
    skip: AbstractCollection[StageName] | None = None,
) -> RunReport:
    """Synchronous wrapper around :func:`seed_reference_data_async`."""

    return asyncio.run(
        seed_reference_data_async(
            config, store=store, sources=sources, pipeline=pipeline, only=only, skip=skip
        )
    )
