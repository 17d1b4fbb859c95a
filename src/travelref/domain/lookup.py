"""Per-run lookup tables over already-persisted canonical documents."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from travelref.domain.outcome import Document
    from travelref.domain.ports.store import DocumentStore, Where

log = logging.getLogger(__name__)

type KeyExtractor = Callable[[Document], object]


def field_key(name: str) -> KeyExtractor:
    def extract(document: Document) -> object:
        return document.get(name)

    return extract


def upper_field_key(name: str) -> KeyExtractor:
    def extract(document: Document) -> object:
        value = document.get(name)
        return value.strip().upper() if isinstance(value, str) else None

    return extract


def lower_field_key(name: str) -> KeyExtractor:
    def extract(document: Document) -> object:
        value = document.get(name)
        return value.strip().lower() if isinstance(value, str) else None

    return extract


def _usable(key: object) -> bool:
    if key is None:
        return False
    if isinstance(key, str):
        return bool(key)
    return True


@dataclass(slots=True)
class LookupTable:
    """One map per key space, each keyed by an extractor's output.

    Documents lacking a key are simply absent from that map. When two documents share a
    key the first one loaded keeps it.
    """

    collection: str
    extractors: Mapping[str, KeyExtractor]
    indices: dict[str, dict[object, Document]] = field(
        default_factory=dict[str, dict[object, Document]]
    )
    size: int = 0

    def __post_init__(self) -> None:
        for space in self.extractors:
            self.indices.setdefault(space, {})

    def add(self, document: Document) -> None:
        self.size += 1
        for space, extract in self.extractors.items():
            key = extract(document)
            if _usable(key):
                self.indices[space].setdefault(key, document)

    def get(self, space: str, key: object) -> Document | None:
        if not _usable(key):
            return None
        return self.indices[space].get(key)

    def index(self, space: str) -> Mapping[object, Document]:
        return self.indices[space]

    def __len__(self) -> int:
        return self.size

    def __contains__(self, item: tuple[str, object]) -> bool:
        space, key = item
        return self.get(space, key) is not None


async def build_lookup_table(
    store: DocumentStore,
    collection: str,
    extractors: Mapping[str, KeyExtractor],
    *,
    where: Where | None = None,
) -> LookupTable:
    """Load every document of ``collection`` once and index it by each key space."""

    documents = await store.find(collection, where=where)
    table = lookup_table_from(collection, extractors, documents)
    log.debug(
        "Loaded %d %s into lookup table (%s)",
        len(table),
        collection,
        ", ".join(f"{space}={len(index)}" for space, index in table.indices.items()),
    )
    return table


def lookup_table_from(
    collection: str,
    extractors: Mapping[str, KeyExtractor],
    documents: Iterable[Document],
) -> LookupTable:
    table = LookupTable(collection=collection, extractors=extractors)
    for document in documents:
        table.add(document)
    return table
