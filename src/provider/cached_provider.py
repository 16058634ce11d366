# src/provider/cached_provider.py — v1
"""Caching decorator for any provider.

Memoizes field values per (table, id). The wrapped provider stays the source
of truth on a cache miss and the sink of truth on every write: writes go
through to it first and only then update the cache. Errors from the wrapped
provider propagate unchanged and are never retried.

Each operation on a record runs under a per-record lock, so a read that
misses the cache cannot store a value that a concurrent write has already
replaced.
"""

from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager, nullcontext
from dataclasses import dataclass
from typing import Generic, TypeVar

from gungnir_mongo.core.models import ID_KEY, ConnectionState, Value
from gungnir_mongo.provider.base_provider import BaseProvider
from gungnir_mongo.provider.locks import RecordLockRegistry

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=BaseProvider)


@dataclass(frozen=True)
class CacheInfo:
    """Snapshot of cache counters."""

    hits: int
    misses: int
    records: int


class CachedProvider(BaseProvider, Generic[P]):
    """Provider that caches the fields read or written through it."""

    def __init__(self, provider: P, serialize: bool = True) -> None:
        self._provider = provider
        self._entries: dict[tuple[str, str], dict[str, Value]] = {}
        self._locks = RecordLockRegistry() if serialize else None
        self._hits = 0
        self._misses = 0

    @property
    def wrapped(self) -> P:
        """The provider being cached."""
        return self._provider

    @property
    def state(self) -> ConnectionState:
        return self._provider.state

    async def connect(self) -> None:
        await self._provider.connect()

    async def close(self) -> None:
        await self._provider.close()
        self._entries.clear()

    async def get(self, table: str, record_id: str, key: str) -> Value:
        async with self._guard(table, record_id):
            entry = self._entries.get((table, record_id))
            if entry is not None and key in entry:
                self._hits += 1
                return entry[key]

            self._misses += 1
            value = await self._provider.get(table, record_id, key)
            self._entries.setdefault((table, record_id), {})[key] = value
            return value

    async def set(self, table: str, record_id: str, key: str, value: Value) -> None:
        async with self._guard(table, record_id):
            await self._provider.set(table, record_id, key, value)
            if key == ID_KEY:
                return
            self._entries.setdefault((table, record_id), {})[key] = value

    async def clear(self, table: str, record_id: str) -> bool:
        async with self._guard(table, record_id):
            try:
                return await self._provider.clear(table, record_id)
            finally:
                self._entries.pop((table, record_id), None)

    def invalidate(self, table: str | None = None, record_id: str | None = None) -> int:
        """Drop cached entries without touching the wrapped provider.

        With no arguments every entry is dropped; with a table only that
        table's entries; with both only that record. Returns the number of
        records evicted.

        Raises:
            ValueError: If record_id is given without table.
        """
        if table is None and record_id is not None:
            raise ValueError("invalidate() needs a table when record_id is given")
        if table is None:
            count = len(self._entries)
            self._entries.clear()
        elif record_id is None:
            keys = [k for k in self._entries if k[0] == table]
            for k in keys:
                del self._entries[k]
            count = len(keys)
        else:
            count = 1 if self._entries.pop((table, record_id), None) is not None else 0
        logger.debug("Invalidated %d cached record(s)", count)
        return count

    def cache_info(self) -> CacheInfo:
        return CacheInfo(hits=self._hits, misses=self._misses, records=len(self._entries))

    def _guard(self, table: str, record_id: str) -> AbstractAsyncContextManager:
        if self._locks is None:
            return nullcontext()
        return self._locks.lock_for(table, record_id)

    def __repr__(self) -> str:
        return f"CachedProvider({self._provider!r})"
