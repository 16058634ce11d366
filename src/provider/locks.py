# src/provider/locks.py — v1
"""Per-record asyncio locks."""

from __future__ import annotations

import asyncio
import weakref


class RecordLockRegistry:
    """Provides a stable lock per (table, id) to avoid global contention.

    Locks are held weakly: a lock lives while an operation holds or awaits
    it and is dropped once the last user releases it. Must be used from a
    single event loop.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock_for(self, table: str, record_id: str) -> asyncio.Lock:
        key = (table, record_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)
