"""SQLAlchemy-backed document store.

Documents live in one ``documents`` table as JSON blobs keyed by ``(collection, id)``.
Scalar ``Where`` conditions are pushed down as SQLite ``json_extract`` comparisons;
conditions on list or mapping values are evaluated in Python after loading.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import ColumnElement, and_, delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from travelref.adapters.sqlalchemy.mappings import create_all_tables, documents_table
from travelref.config.storage import get_database_config
from travelref.domain.errors import StoreOperationError, StoreUnavailableError
from travelref.domain.ports.store import Operator

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

    from travelref.domain.outcome import Document
    from travelref.domain.ports.store import Condition, Where

log = logging.getLogger(__name__)

_SCALARS = (str, int, float, bool)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy store is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    engine: AsyncEngine | None = None


_STATE = _AdapterState()


def build_engine(database_uri: str) -> AsyncEngine:
    if ":memory:" in database_uri:
        # one shared connection, otherwise every checkout sees an empty database
        return create_async_engine(database_uri, poolclass=StaticPool)
    return create_async_engine(database_uri)


async def startup(
    *,
    engine: AsyncEngine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> AsyncEngine:
    """Initialise the async engine and create the document table."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy store already initialised. Pass force=True to reconfigure."
        )

    resolved = engine or build_engine(database_uri or get_database_config().uri)
    try:
        await create_all_tables(resolved)
    except (OperationalError, OSError) as exc:
        raise StoreUnavailableError(f"Cannot initialise document store: {exc}") from exc
    _STATE.engine = resolved
    return resolved


def configured_engine() -> AsyncEngine | None:
    return _STATE.engine


async def shutdown() -> None:
    """Dispose the managed engine and reset state."""

    if _STATE.engine is not None:
        await _STATE.engine.dispose()
    _STATE.engine = None


def _json_field(name: str) -> ColumnElement[Any]:
    escaped = name.replace('"', '\\"')
    return func.json_extract(documents_table.c.data, f'$."{escaped}"')


def _scalar(value: object) -> bool:
    return isinstance(value, _SCALARS)


def _pushdown(condition: Condition) -> ColumnElement[bool] | None:
    """SQL clause for ``condition``, or ``None`` when it must be checked in Python."""

    column = _json_field(condition.field)
    if condition.operator is Operator.EXISTS:
        return column.is_not(None) if condition.value else column.is_(None)
    if condition.operator is Operator.EQUALS and _scalar(condition.value):
        return column == condition.value
    if condition.operator is Operator.IN:
        values = cast("Sequence[object]", condition.value)
        if all(_scalar(value) for value in values):
            return column.in_(list(values))
    return None


class SqlAlchemyDocumentStore:
    """``DocumentStore`` over the adapter's async engine.

    Every operation runs under one lock so concurrent batches never interleave
    read-modify-write cycles on SQLite.
    """

    def __init__(self, engine: AsyncEngine | None = None) -> None:
        resolved = engine or _STATE.engine
        if resolved is None:
            raise StartupError(
                "SQLAlchemy store not initialised. Call travelref.adapters.sqlalchemy."
                "startup() before creating a store."
            )
        self.engine = resolved
        self._lock = asyncio.Lock()

    async def create(self, collection: str, data: Mapping[str, object]) -> Document:
        document: Document = {**dict(data), "id": uuid.uuid4().hex}
        now = datetime.now(UTC)
        async with self._transaction(collection) as connection:
            await connection.execute(
                insert(documents_table).values(
                    collection=collection,
                    id=document["id"],
                    data=document,
                    created_at=now,
                    updated_at=now,
                )
            )
        return document

    async def find(
        self,
        collection: str,
        *,
        where: Where | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        residual: list[Condition] = []
        statement = select(documents_table.c.data).where(
            self._filter(collection, where, residual)
        )
        statement = statement.order_by(documents_table.c.seq)
        if limit is not None and not residual:
            statement = statement.limit(limit)
        async with self._transaction(collection) as connection:
            rows = (await connection.execute(statement)).scalars().all()

        documents: list[Document] = []
        for row in rows:
            document = dict(row)
            if all(condition.matches(document) for condition in residual):
                documents.append(document)
                if limit is not None and len(documents) >= limit:
                    break
        return documents

    async def update(
        self, collection: str, document_id: str, data: Mapping[str, object]
    ) -> Document:
        async with self._transaction(collection) as connection:
            current = (
                await connection.execute(
                    select(documents_table.c.data).where(
                        documents_table.c.collection == collection,
                        documents_table.c.id == document_id,
                    )
                )
            ).scalar_one_or_none()
            if current is None:
                raise StoreOperationError(
                    f"{collection}/{document_id} does not exist", collection=collection
                )
            merged: Document = {**dict(current), **dict(data), "id": document_id}
            await connection.execute(
                update(documents_table)
                .where(
                    documents_table.c.collection == collection,
                    documents_table.c.id == document_id,
                )
                .values(data=merged, updated_at=datetime.now(UTC))
            )
        return merged

    async def delete(self, collection: str, document_id: str) -> None:
        async with self._transaction(collection) as connection:
            result = await connection.execute(
                delete(documents_table).where(
                    documents_table.c.collection == collection,
                    documents_table.c.id == document_id,
                )
            )
        if result.rowcount == 0:
            raise StoreOperationError(
                f"{collection}/{document_id} does not exist", collection=collection
            )

    async def delete_where(self, collection: str, where: Where) -> int:
        residual: list[Condition] = []
        clause = self._filter(collection, where, residual)
        if residual:
            doomed = [document["id"] for document in await self.find(collection, where=where)]
            if not doomed:
                return 0
            clause = and_(clause, documents_table.c.id.in_(doomed))
        async with self._transaction(collection) as connection:
            result = await connection.execute(delete(documents_table).where(clause))
        return result.rowcount

    async def count(self, collection: str, *, where: Where | None = None) -> int:
        residual: list[Condition] = []
        clause = self._filter(collection, where, residual)
        if residual:
            return len(await self.find(collection, where=where))
        async with self._transaction(collection) as connection:
            total = await connection.scalar(
                select(func.count()).select_from(documents_table).where(clause)
            )
        return int(total or 0)

    def _filter(
        self, collection: str, where: Where | None, residual: list[Condition]
    ) -> ColumnElement[bool]:
        clauses: list[ColumnElement[bool]] = [documents_table.c.collection == collection]
        for condition in where.conditions if where is not None else ():
            pushed = _pushdown(condition)
            if pushed is None:
                residual.append(condition)
            else:
                clauses.append(pushed)
        return and_(*clauses)

    @asynccontextmanager
    async def _transaction(self, collection: str) -> AsyncIterator[AsyncConnection]:
        """Locked ``engine.begin()`` translating driver errors into store errors."""

        async with self._lock:
            try:
                async with self.engine.begin() as connection:
                    yield connection
            except IntegrityError as exc:
                raise StoreOperationError(str(exc.orig), collection=collection) from exc
            except (OperationalError, OSError) as exc:
                raise StoreUnavailableError(f"Document store unreachable: {exc}") from exc
            except SQLAlchemyError as exc:
                raise StoreOperationError(str(exc), collection=collection) from exc
