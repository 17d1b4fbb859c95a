"""Document store port and its structured filter language."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from travelref.domain.outcome import Document


class Operator(StrEnum):
    EQUALS = "equals"
    IN = "in"
    EXISTS = "exists"


@dataclass(slots=True, frozen=True)
class Condition:
    field: str
    operator: Operator
    value: object = None

    def matches(self, document: Mapping[str, object]) -> bool:
        present = self.field in document and document[self.field] is not None
        match self.operator:
            case Operator.EXISTS:
                return present is bool(self.value)
            case Operator.EQUALS:
                return present and document[self.field] == self.value
            case Operator.IN:
                values: Sequence[object] = self.value  # type: ignore[assignment]
                return present and document[self.field] in values


@dataclass(slots=True, frozen=True)
class Where:
    """Conjunction of field conditions (``and`` of equals/in/exists)."""

    conditions: tuple[Condition, ...] = ()

    @classmethod
    def equals(cls, **fields: object) -> Where:
        return cls(
            tuple(Condition(name, Operator.EQUALS, value) for name, value in fields.items())
        )

    @classmethod
    def one_of(cls, field: str, values: Sequence[object]) -> Where:
        return cls((Condition(field, Operator.IN, tuple(values)),))

    @classmethod
    def exists(cls, field: str, *, present: bool = True) -> Where:
        return cls((Condition(field, Operator.EXISTS, present),))

    def and_(self, other: Where) -> Where:
        return Where((*self.conditions, *other.conditions))

    def matches(self, document: Mapping[str, object]) -> bool:
        return all(condition.matches(document) for condition in self.conditions)


@runtime_checkable
class DocumentStore(Protocol):
    """Generic collection-based store consumed by the pipeline.

    Documents are plain mappings carrying an ``"id"`` assigned on creation. ``update``
    merges the given fields into the stored document. Per-record rejections raise
    ``StoreOperationError``; an unreachable store raises ``StoreUnavailableError``.
    """

    async def create(self, collection: str, data: Mapping[str, object]) -> Document: ...

    async def find(
        self,
        collection: str,
        *,
        where: Where | None = None,
        limit: int | None = None,
    ) -> list[Document]: ...

    async def update(
        self, collection: str, document_id: str, data: Mapping[str, object]
    ) -> Document: ...

    async def delete(self, collection: str, document_id: str) -> None: ...

    async def delete_where(self, collection: str, where: Where) -> int: ...

    async def count(self, collection: str, *, where: Where | None = None) -> int: ...


async def find_one(store: DocumentStore, collection: str, where: Where) -> Document | None:
    documents = await store.find(collection, where=where, limit=1)
    return documents[0] if documents else None
