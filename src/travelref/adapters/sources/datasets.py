"""File-or-remote :class:`SourceReader` over the dataset catalog."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from travelref.adapters.sources.catalog import ADVISORY_TABLE_URL, CATALOG, DatasetFormat
from travelref.adapters.sources.readers import (
    advisory_table_rows,
    csv_rows,
    dat_rows,
    json_document,
    json_rows,
    rss_items,
)
from travelref.domain.errors import SourceUnavailableError
from travelref.domain.ports.sources import Dataset

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from travelref.adapters.sources.catalog import DatasetSpec
    from travelref.adapters.sources.remote import RemoteFetcher

log = logging.getLogger(__name__)


@dataclass(slots=True)
class DatasetSources:
    """Reads cached extracts from ``datasets_dir``.

    Datasets named in ``remote_datasets`` are fetched through ``fetcher`` instead, and
    fall back to the cached file when every remote source fails. A cached file that is
    missing without a working remote raises ``SourceUnavailableError``.
    """

    datasets_dir: Path
    remote_datasets: frozenset[str] = field(default_factory=frozenset[str])
    fetcher: RemoteFetcher | None = None

    def is_remote(self, dataset: Dataset) -> bool:
        return dataset in self.remote_datasets and self.fetcher is not None

    async def rows(self, dataset: Dataset) -> list[Mapping[str, object]]:
        spec = CATALOG[dataset]
        if spec.format is DatasetFormat.FEED:
            return await self._feed_rows(spec)
        text = await self._text(spec)
        match spec.format:
            case DatasetFormat.CSV:
                rows = csv_rows(text)
            case DatasetFormat.DAT:
                rows = dat_rows(text, spec.columns)
            case _:
                rows = json_rows(text, dataset=dataset)
        log.info("Read %d %s rows", len(rows), dataset)
        return rows

    async def document(
        self, dataset: Dataset, key: str | None = None
    ) -> Mapping[str, object] | None:
        spec = CATALOG[dataset]
        if spec.format is DatasetFormat.DIRECTORY:
            if key is None:
                raise ValueError(f"{dataset} documents are keyed")
            return await self._keyed_document(spec, key)
        return json_document(await self._text(spec), dataset=dataset)

    async def aclose(self) -> None:
        if self.fetcher is not None:
            await self.fetcher.aclose()

    def _require_fetcher(self) -> RemoteFetcher:
        if self.fetcher is None:
            raise SourceUnavailableError("Remote fetching is not configured")
        return self.fetcher

    async def _text(self, spec: DatasetSpec) -> str:
        if not (self.is_remote(spec.dataset) and spec.remote_urls):
            return await self._read_cached(spec.dataset, self.datasets_dir / spec.filename)
        try:
            text = await self._require_fetcher().first_available(
                spec.remote_urls, dataset=spec.dataset
            )
        except SourceUnavailableError as exc:
            return await self._cached_fallback(spec, exc)
        log.info("Fetched %s from its remote source", spec.dataset)
        return text

    async def _cached_fallback(self, spec: DatasetSpec, exc: SourceUnavailableError) -> str:
        path = self.datasets_dir / spec.filename
        if not path.is_file():
            raise exc
        log.warning("%s: remote fetch failed (%s); using cached file %s", spec.dataset, exc, path)
        return await self._read_cached(spec.dataset, path)

    async def _read_cached(self, dataset: Dataset, path: Path) -> str:
        if not path.is_file():
            raise SourceUnavailableError(
                f"{dataset}: cached file {path} not found; enable remote fetching to download it",
                dataset=dataset,
            )
        return await asyncio.to_thread(path.read_text, encoding="utf-8")

    async def _keyed_document(self, spec: DatasetSpec, key: str) -> Mapping[str, object] | None:
        directory = self.datasets_dir / spec.filename
        cached = directory / f"{key}.json"
        if cached.is_file():
            text = await asyncio.to_thread(cached.read_text, encoding="utf-8")
            return json_document(text, dataset=spec.dataset)

        if not self.is_remote(spec.dataset):
            if not directory.is_dir():
                raise SourceUnavailableError(
                    f"{spec.dataset}: cached directory {directory} not found",
                    dataset=spec.dataset,
                )
            return None

        try:
            text = await self._require_fetcher().first_available(
                [f"{base}/{key}.json" for base in spec.remote_urls], dataset=spec.dataset
            )
        except SourceUnavailableError as exc:
            # one missing key is a skip for that record, not a failed dataset
            log.info("No %s document for %s: %s", spec.dataset, key, exc)
            return None
        return json_document(text, dataset=spec.dataset)

    async def _feed_rows(self, spec: DatasetSpec) -> list[Mapping[str, object]]:
        """RSS feeds, else the HTML advisory table; remote failures fall back to the cache."""

        if not self.is_remote(spec.dataset):
            text = await self._read_cached(spec.dataset, self.datasets_dir / spec.filename)
            return json_rows(text, dataset=spec.dataset)

        try:
            rows = await self._remote_feed_rows(spec)
        except SourceUnavailableError as exc:
            text = await self._cached_fallback(spec, exc)
            return json_rows(text, dataset=spec.dataset)
        log.info("Fetched %d %s rows from their remote source", len(rows), spec.dataset)
        return rows

    async def _remote_feed_rows(self, spec: DatasetSpec) -> list[Mapping[str, object]]:
        fetcher = self._require_fetcher()
        try:
            feed = await fetcher.first_available(
                spec.remote_urls, dataset=spec.dataset, accept=lambda text: bool(rss_items(text))
            )
            return rss_items(feed)
        except SourceUnavailableError as exc:
            log.warning("Advisory feeds unavailable, falling back to the advisory table: %s", exc)
        html = await fetcher.fetch_text(ADVISORY_TABLE_URL, dataset=spec.dataset)
        rows = advisory_table_rows(html)
        if not rows:
            raise SourceUnavailableError("Advisory table holds no rows", dataset=spec.dataset)
        return rows
