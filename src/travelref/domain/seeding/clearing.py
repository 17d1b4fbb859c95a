"""Clearing collections before a full reseed."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from travelref.domain.errors import StoreOperationError
from travelref.domain.ports.store import Where

if TYPE_CHECKING:
    from collections.abc import Iterable

    from travelref.domain.collection import Collection
    from travelref.domain.ports.store import DocumentStore
    from travelref.domain.seeding.context import SeedOptions

log = logging.getLogger(__name__)

EXTRA_PASSES: Final[int] = 5


@dataclass(slots=True)
class ClearResult:
    collection: str
    deleted: int = 0
    failed: int = 0
    remaining: int = 0
    bulk: bool = False


async def clear_collection(
    store: DocumentStore, collection: Collection, *, batch_size: int
) -> ClearResult:
    """Delete every document of ``collection``.

    A single bulk delete is tried first. When the store rejects it, documents are
    deleted in concurrent batches, with at most ``ceil(total / batch_size) + 5``
    passes so a store that keeps refusing deletes cannot loop forever.
    """

    result = ClearResult(collection=collection)
    total = await store.count(collection)
    if total == 0:
        return result

    try:
        result.deleted = await store.delete_where(collection, Where.exists("id"))
        result.bulk = True
    except StoreOperationError as exc:
        log.warning("Bulk delete of %s failed (%s); deleting in batches", collection, exc)
        await _clear_in_batches(store, collection, batch_size=batch_size, total=total, result=result)

    result.remaining = await store.count(collection)
    if result.remaining:
        log.warning("%d documents left in %s after clearing", result.remaining, collection)
    else:
        log.info("Cleared %d documents from %s", result.deleted, collection)
    return result


async def _clear_in_batches(
    store: DocumentStore,
    collection: Collection,
    *,
    batch_size: int,
    total: int,
    result: ClearResult,
) -> None:
    max_passes = math.ceil(total / batch_size) + EXTRA_PASSES
    failed_ids: set[str] = set()
    for _ in range(max_passes):
        documents = await store.find(collection, limit=batch_size + len(failed_ids))
        batch = [doc for doc in documents if str(doc["id"]) not in failed_ids][:batch_size]
        if not batch:
            break
        settled = await asyncio.gather(
            *(store.delete(collection, str(doc["id"])) for doc in batch),
            return_exceptions=True,
        )
        for document, outcome in zip(batch, settled, strict=True):
            if isinstance(outcome, StoreOperationError):
                failed_ids.add(str(document["id"]))
                result.failed += 1
                log.debug("Delete of %s %s failed: %s", collection, document["id"], outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.deleted += 1


async def clear_collections(
    store: DocumentStore, collections: Iterable[Collection], *, options: SeedOptions
) -> list[ClearResult]:
    """Clear ``collections`` sequentially, in the order given."""

    results: list[ClearResult] = []
    for collection in collections:
        results.append(
            await clear_collection(
                store, collection, batch_size=options.batch_size_for(collection)
            )
        )
    return results
