"""Key/value persistence backends used by the session stores."""

from __future__ import annotations

from typing import Protocol

from sqlalchemy import delete

from .database import Database
from .db_models import KeyValueEntry


class KeyValueStore(Protocol):
    """Minimal async text storage addressed by key."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Process-local store, useful for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value

    async def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)


class DatabaseKeyValueStore:
    """Store values in the ``key_values`` table."""

    def __init__(self, database: Database):
        self._database = database

    async def get(self, key: str) -> str | None:
        async with self._database.session() as session:
            entry = await session.get(KeyValueEntry, key)
            return entry.value if entry is not None else None

    async def set(self, key: str, value: str) -> None:
        async with self._database.session() as session:
            entry = await session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            await session.commit()

    async def delete(self, key: str) -> None:
        async with self._database.session() as session:
            await session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            await session.commit()
