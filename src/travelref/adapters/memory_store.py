"""In-process document store used by tests and dry runs."""

from __future__ import annotations

import uuid
from collections import defaultdict
from copy import deepcopy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from travelref.domain.errors import StoreOperationError, StoreUnavailableError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from travelref.domain.outcome import Document
    from travelref.domain.ports.store import Where


@dataclass(slots=True)
class InMemoryDocumentStore:
    """Dict-backed :class:`DocumentStore`.

    ``unique_fields`` declares per-collection field tuples whose values must be unique;
    a violating create or update raises ``StoreOperationError``. Setting ``available``
    to ``False`` makes every call raise ``StoreUnavailableError``.
    """

    unique_fields: Mapping[str, Sequence[tuple[str, ...]]] = field(default_factory=dict)
    available: bool = True
    _collections: defaultdict[str, dict[str, Document]] = field(
        default_factory=lambda: defaultdict(dict)
    )

    def documents(self, collection: str) -> list[Document]:
        return [deepcopy(document) for document in self._collections[collection].values()]

    async def create(self, collection: str, data: Mapping[str, object]) -> Document:
        self._check_available()
        document: Document = {**deepcopy(dict(data)), "id": uuid.uuid4().hex}
        self._check_unique(collection, document)
        self._collections[collection][document["id"]] = document
        return deepcopy(document)

    async def find(
        self,
        collection: str,
        *,
        where: Where | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        self._check_available()
        found: list[Document] = []
        for document in self._collections[collection].values():
            if where is not None and not where.matches(document):
                continue
            found.append(deepcopy(document))
            if limit is not None and len(found) >= limit:
                break
        return found

    async def update(
        self, collection: str, document_id: str, data: Mapping[str, object]
    ) -> Document:
        self._check_available()
        current = self._collections[collection].get(document_id)
        if current is None:
            raise StoreOperationError(
                f"{collection}/{document_id} does not exist", collection=collection
            )
        merged = {**current, **deepcopy(dict(data)), "id": document_id}
        self._check_unique(collection, merged)
        self._collections[collection][document_id] = merged
        return deepcopy(merged)

    async def delete(self, collection: str, document_id: str) -> None:
        self._check_available()
        if self._collections[collection].pop(document_id, None) is None:
            raise StoreOperationError(
                f"{collection}/{document_id} does not exist", collection=collection
            )

    async def delete_where(self, collection: str, where: Where) -> int:
        self._check_available()
        doomed = [
            document_id
            for document_id, document in self._collections[collection].items()
            if where.matches(document)
        ]
        for document_id in doomed:
            del self._collections[collection][document_id]
        return len(doomed)

    async def count(self, collection: str, *, where: Where | None = None) -> int:
        self._check_available()
        if where is None:
            return len(self._collections[collection])
        documents = self._collections[collection].values()
        return sum(1 for document in documents if where.matches(document))

    def _check_available(self) -> None:
        if not self.available:
            raise StoreUnavailableError("In-memory store switched off")

    def _check_unique(self, collection: str, candidate: Document) -> None:
        for fields in self.unique_fields.get(collection, ()):
            key = tuple(candidate.get(name) for name in fields)
            if any(value is None for value in key):
                continue
            for document_id, document in self._collections[collection].items():
                if document_id == candidate["id"]:
                    continue
                if tuple(document.get(name) for name in fields) == key:
                    raise StoreOperationError(
                        f"duplicate {', '.join(fields)} {key!r} in {collection}",
                        collection=collection,
                    )
