from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING

import pytest

from tests.support.stores import sqlite_store
from travelref.adapters.memory_store import InMemoryDocumentStore
from travelref.adapters.sqlalchemy import SqlAlchemyDocumentStore, StartupError, shutdown
from travelref.domain.errors import StoreOperationError, StoreUnavailableError
from travelref.domain.ports.store import DocumentStore, Where, find_one

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

STORE_KINDS = ("memory", "sqlite")


@asynccontextmanager
async def open_store(kind: str, tmp_path: Path) -> AsyncIterator[DocumentStore]:
    if kind == "memory":
        yield InMemoryDocumentStore()
        return
    async with sqlite_store(tmp_path / "documents.db") as store:
        yield store


@pytest.mark.parametrize("kind", STORE_KINDS)
def test_create_assigns_ids_and_find_filters(kind: str, tmp_path: Path) -> None:
    async def scenario() -> None:
        async with open_store(kind, tmp_path) as store:
            usd = await store.create("currencies", {"code": "USD", "tags": ["major"]})
            await store.create("currencies", {"code": "EUR", "symbol": "€"})
            await store.create("languages", {"code": "USD"})

            assert isinstance(usd["id"], str)
            assert [doc["code"] for doc in await store.find("currencies")] == ["USD", "EUR"]
            eur = await store.find("currencies", where=Where.equals(code="EUR"))
            assert [doc["symbol"] for doc in eur] == ["€"]
            assert await store.count("currencies") == 2
            assert await store.count("currencies", where=Where.exists("symbol")) == 1
            assert await store.count(
                "currencies", where=Where.exists("symbol", present=False)
            ) == 1
            assert await store.count("currencies", where=Where.one_of("code", ["USD", "GBP"])) == 1
            assert await store.count("currencies", where=Where.equals(tags=["major"])) == 1
            assert len(await store.find("currencies", limit=1)) == 1

    asyncio.run(scenario())


@pytest.mark.parametrize("kind", STORE_KINDS)
def test_update_merges_fields(kind: str, tmp_path: Path) -> None:
    async def scenario() -> None:
        async with open_store(kind, tmp_path) as store:
            created = await store.create("countries", {"code": "FR", "name": "France"})
            updated = await store.update("countries", created["id"], {"capital": "Paris"})

            assert updated == {**created, "capital": "Paris"}
            assert await find_one(store, "countries", Where.equals(code="FR")) == updated
            with pytest.raises(StoreOperationError):
                await store.update("countries", "missing", {"name": "Nowhere"})

    asyncio.run(scenario())


@pytest.mark.parametrize("kind", STORE_KINDS)
def test_delete_and_delete_where(kind: str, tmp_path: Path) -> None:
    async def scenario() -> None:
        async with open_store(kind, tmp_path) as store:
            first = await store.create("routes", {"stops": 0})
            await store.create("routes", {"stops": 1})
            await store.create("routes", {"stops": 1, "equipment": ["320"]})
            await store.create("airlines", {"stops": 1})

            await store.delete("routes", first["id"])
            with pytest.raises(StoreOperationError):
                await store.delete("routes", first["id"])

            deleted = await store.delete_where("routes", Where.equals(equipment=["320"]))
            assert deleted == 1
            assert await store.delete_where("routes", Where.exists("id")) == 1
            assert await store.count("routes") == 0
            assert await store.count("airlines") == 1

    asyncio.run(scenario())


def test_memory_store_enforces_unique_fields() -> None:
    store = InMemoryDocumentStore(unique_fields={"airports": [("iata",)]})

    async def scenario() -> None:
        await store.create("airports", {"iata": "JFK"})
        await store.create("airports", {"iata": None, "icao": "EGXY"})
        await store.create("airports", {"iata": None, "icao": "EGXZ"})
        with pytest.raises(StoreOperationError, match="duplicate iata"):
            await store.create("airports", {"iata": "JFK"})

    asyncio.run(scenario())


def test_switched_off_memory_store_is_unavailable() -> None:
    store = InMemoryDocumentStore(available=False)

    with pytest.raises(StoreUnavailableError):
        asyncio.run(store.count("countries"))


def test_sqlalchemy_store_requires_startup() -> None:
    asyncio.run(shutdown())

    with pytest.raises(StartupError):
        SqlAlchemyDocumentStore()


def test_sqlalchemy_store_persists_across_engines(tmp_path: Path) -> None:
    path = tmp_path / "persisted.db"

    async def write() -> None:
        async with sqlite_store(path) as store:
            await store.create("countries", {"code": "DE", "neighbours": ["FR"]})

    async def read() -> list[dict[str, object]]:
        async with sqlite_store(path) as store:
            return await store.find("countries")

    asyncio.run(write())
    documents = asyncio.run(read())

    assert [(doc["code"], doc["neighbours"]) for doc in documents] == [("DE", ["FR"])]
