from __future__ import annotations

import asyncio

from cinemai.database import Database
from cinemai.history import SearchHistoryStore
from cinemai.storage import DatabaseKeyValueStore, MemoryKeyValueStore


def test_memory_store_round_trip() -> None:
    store = MemoryKeyValueStore()

    async def runner() -> tuple[str | None, str | None]:
        await store.set("k", "v")
        first = await store.get("k")
        await store.delete("k")
        await store.delete("k")
        return first, await store.get("k")

    assert asyncio.run(runner()) == ("v", None)


def test_database_store_persists_across_instances(tmp_path) -> None:
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'cinemai.db'}"

    async def write() -> None:
        database = Database(database_url)
        await database.create_all()
        history = SearchHistoryStore(DatabaseKeyValueStore(database))
        await history.record("A")
        await history.record("B")
        await history.record("A")
        await database.dispose()

    async def read() -> list[str]:
        database = Database(database_url)
        await database.create_all()
        try:
            history = SearchHistoryStore(DatabaseKeyValueStore(database))
            return await history.load()
        finally:
            await database.dispose()

    asyncio.run(write())

    assert asyncio.run(read()) == ["A", "B"]


def test_database_store_delete(tmp_path) -> None:
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'cinemai.db'}"

    async def runner() -> tuple[str | None, str | None]:
        database = Database(database_url)
        await database.create_all()
        try:
            store = DatabaseKeyValueStore(database)
            await store.set("k", "one")
            await store.set("k", "two")
            updated = await store.get("k")
            await store.delete("k")
            return updated, await store.get("k")
        finally:
            await database.dispose()

    assert asyncio.run(runner()) == ("two", None)
