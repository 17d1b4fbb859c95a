"""Idempotent create-or-update against the document store.

Existing documents are found by natural key, either through a per-collection cache
preloaded once per stage or through an equality query. A present document is updated
only when the payload changes one of its fields; an unchanged document is reported as
``skipped("unchanged")`` so a second identical run creates nothing.

Per-record store rejections (:class:`StoreOperationError`) become ``Outcome.error`` and
never abort a batch. :class:`StoreUnavailableError` propagates.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from itertools import islice
from typing import TYPE_CHECKING, Final

from travelref.domain.errors import StoreOperationError
from travelref.domain.outcome import Outcome
from travelref.domain.ports.store import Where, find_one

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping, Sequence

    from travelref.domain.outcome import Document, StageStats
    from travelref.domain.ports.store import DocumentStore

log = logging.getLogger(__name__)

type NaturalKey = tuple[object, ...]
type UpsertItem = tuple[Mapping[str, object], Mapping[str, object]]

DEFAULT_BATCH_SIZE: Final[int] = 100


class ExistingPolicy(StrEnum):
    """What to do when a document with the same natural key is already stored."""

    UPDATE = "update"
    SKIP = "skip"


def payload_differs(document: Mapping[str, object], payload: Mapping[str, object]) -> bool:
    return any(document.get(name) != value for name, value in payload.items())


def chunked[T](items: Iterable[T], size: int) -> Iterator[list[T]]:
    iterator = iter(items)
    while batch := list(islice(iterator, size)):
        yield batch


@dataclass(slots=True)
class _KeyedCache:
    fields: tuple[str, ...]
    documents: dict[NaturalKey, Document] = field(default_factory=dict[NaturalKey, Document])

    def key_for(self, values: Mapping[str, object]) -> NaturalKey:
        return tuple(values.get(name) for name in self.fields)

    def covers(self, document: Mapping[str, object]) -> bool:
        return all(document.get(name) is not None for name in self.fields)


@dataclass(slots=True)
class UpsertEngine:
    """Writes one stage's documents and records every outcome on ``stats``."""

    store: DocumentStore
    stats: StageStats
    _caches: dict[tuple[str, frozenset[str]], _KeyedCache] = field(
        default_factory=dict[tuple[str, frozenset[str]], _KeyedCache]
    )

    async def preload(self, collection: str, key_fields: Sequence[str]) -> int:
        """Cache every stored document of ``collection`` by ``key_fields``.

        Later upserts into that collection with the same key fields are answered from
        the cache instead of one query per record.
        """

        cache = _KeyedCache(fields=tuple(key_fields))
        for document in await self.store.find(collection):
            if cache.covers(document):
                cache.documents.setdefault(cache.key_for(document), document)
        self._caches[(collection, frozenset(cache.fields))] = cache
        return len(cache.documents)

    async def existing(
        self, collection: str, natural_key: Mapping[str, object]
    ) -> Document | None:
        cache = self._caches.get((collection, frozenset(natural_key)))
        if cache is not None:
            return cache.documents.get(cache.key_for(natural_key))
        return await find_one(self.store, collection, Where.equals(**natural_key))

    async def upsert(
        self,
        collection: str,
        natural_key: Mapping[str, object],
        payload: Mapping[str, object],
        *,
        on_existing: ExistingPolicy = ExistingPolicy.UPDATE,
    ) -> Outcome:
        outcome = await self._upsert_one(collection, natural_key, payload, on_existing)
        self._remember(collection, outcome)
        return self.stats.record(outcome)

    async def upsert_many(
        self,
        collection: str,
        items: Iterable[UpsertItem],
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        on_existing: ExistingPolicy = ExistingPolicy.UPDATE,
        duplicate_reason: str = "duplicate_key",
    ) -> list[Outcome]:
        """Upsert ``(natural_key, payload)`` items in concurrent batches.

        A natural key repeated within ``items`` is written once; later occurrences are
        skipped under ``duplicate_reason``. Stats are recorded only after each batch
        has settled.
        """

        seen: set[tuple[tuple[str, object], ...]] = set()
        outcomes: list[Outcome] = []
        for batch in chunked(items, batch_size):
            pending: list[UpsertItem] = []
            duplicates: list[Outcome] = []
            for natural_key, payload in batch:
                marker = tuple(sorted(natural_key.items()))
                if marker in seen:
                    duplicates.append(
                        Outcome.skipped(duplicate_reason, detail=_describe(natural_key))
                    )
                    continue
                seen.add(marker)
                pending.append((natural_key, payload))

            settled = await asyncio.gather(
                *(
                    self._upsert_one(collection, natural_key, payload, on_existing)
                    for natural_key, payload in pending
                )
            )
            for outcome in settled:
                self._remember(collection, outcome)
            self.stats.record_all(settled)
            self.stats.record_all(duplicates)
            outcomes.extend(settled)
            outcomes.extend(duplicates)
        return outcomes

    async def patch(
        self, collection: str, document: Document, payload: Mapping[str, object]
    ) -> Outcome:
        """Merge ``payload`` into an already loaded document when it changes anything."""

        return self.stats.record(await self._patch_one(collection, document, payload))

    async def patch_many(
        self,
        collection: str,
        patches: Iterable[tuple[Document, Mapping[str, object]]],
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> list[Outcome]:
        """Apply ``(document, payload)`` patches in concurrent batches.

        Stats are recorded only after each batch has settled.
        """

        outcomes: list[Outcome] = []
        for batch in chunked(patches, batch_size):
            settled = await asyncio.gather(
                *(self._patch_one(collection, document, payload) for document, payload in batch)
            )
            self.stats.record_all(settled)
            outcomes.extend(settled)
        return outcomes

    async def create(self, collection: str, payload: Mapping[str, object]) -> Outcome:
        """Create without a natural-key check; the caller guarantees uniqueness."""

        return self.stats.record(await self._create(collection, payload))

    async def _patch_one(
        self, collection: str, document: Document, payload: Mapping[str, object]
    ) -> Outcome:
        if not payload_differs(document, payload):
            return Outcome.skipped("unchanged", document=document)
        try:
            updated = await self.store.update(collection, str(document["id"]), payload)
        except StoreOperationError as exc:
            log.warning("Update of %s %s rejected: %s", collection, document.get("id"), exc)
            return Outcome.error(str(exc))
        document.update(payload)
        return Outcome.updated(updated)

    async def _upsert_one(
        self,
        collection: str,
        natural_key: Mapping[str, object],
        payload: Mapping[str, object],
        on_existing: ExistingPolicy,
    ) -> Outcome:
        try:
            current = await self.existing(collection, natural_key)
        except StoreOperationError as exc:
            return Outcome.error(str(exc))

        if current is None:
            return await self._create(collection, {**natural_key, **payload})
        if on_existing is ExistingPolicy.SKIP:
            return Outcome.skipped("already_exists", document=current)
        if not payload_differs(current, payload):
            return Outcome.skipped("unchanged", document=current)
        try:
            updated = await self.store.update(collection, str(current["id"]), payload)
        except StoreOperationError as exc:
            log.warning("Update of %s %s rejected: %s", collection, current.get("id"), exc)
            return Outcome.error(str(exc))
        return Outcome.updated(updated)

    async def _create(self, collection: str, data: Mapping[str, object]) -> Outcome:
        try:
            created = await self.store.create(collection, data)
        except StoreOperationError as exc:
            log.warning("Create in %s rejected: %s", collection, exc)
            return Outcome.error(str(exc))
        return Outcome.created(created)

    def _remember(self, collection: str, outcome: Outcome) -> None:
        if outcome.document is None or not outcome.written:
            return
        for (cached_collection, _fields), cache in self._caches.items():
            if cached_collection == collection and cache.covers(outcome.document):
                cache.documents[cache.key_for(outcome.document)] = outcome.document


def _describe(natural_key: Mapping[str, object]) -> str:
    return ", ".join(f"{name}={value}" for name, value in natural_key.items())
