"""Bounded, most-recent-first log of past discovery queries."""

from __future__ import annotations

import asyncio
import json
import logging

from .exceptions import PersistenceCorruptError
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_KEY = "netflix_search_history"
DEFAULT_HISTORY_LIMIT = 8


def decode_history(raw: str) -> list[str]:
    """Decode a persisted history payload."""

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PersistenceCorruptError("Search history is not valid JSON") from exc
    if not isinstance(payload, list) or not all(isinstance(entry, str) for entry in payload):
        raise PersistenceCorruptError("Search history must be a list of strings")
    return payload


class SearchHistoryStore:
    """Query history persisted under a single key.

    Entries are unique by exact string match and ordered most recent first.
    Every mutation is written through to the backing store.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = DEFAULT_HISTORY_KEY,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self._store = store
        self._key = key
        self._limit = limit
        self._entries: list[str] = []
        self._lock = asyncio.Lock()

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def limit(self) -> int:
        return self._limit

    async def load(self) -> list[str]:
        """Populate the history from the store, starting empty on bad content."""

        raw = await self._store.get(self._key)
        if raw is None:
            self._entries = []
            return self.entries
        try:
            entries = decode_history(raw)
        except PersistenceCorruptError as exc:
            logger.warning("Discarding unreadable search history: %s", exc)
            self._entries = []
            return self.entries
        self._entries = self._dedupe(entries)[: self._limit]
        return self.entries

    async def record(self, query: str) -> None:
        if not query.strip():
            return
        async with self._lock:
            self._entries = [query, *(entry for entry in self._entries if entry != query)][
                : self._limit
            ]
            await self._persist()

    async def remove(self, query: str) -> None:
        async with self._lock:
            self._entries = [entry for entry in self._entries if entry != query]
            await self._persist()

    async def clear(self) -> None:
        async with self._lock:
            self._entries = []
            await self._store.delete(self._key)

    async def _persist(self) -> None:
        # Callers hold ``_lock`` so writes land in mutation order.
        await self._store.set(self._key, json.dumps(self._entries))

    @staticmethod
    def _dedupe(entries: list[str]) -> list[str]:
        seen: set[str] = set()
        unique: list[str] = []
        for entry in entries:
            if entry in seen:
                continue
            seen.add(entry)
            unique.append(entry)
        return unique
