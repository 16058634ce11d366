# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides unconnected in-memory backends and providers, plus a counting
provider double for observing what a decorator delegates.
No external dependencies: all I/O stays in memory.
"""

from __future__ import annotations

from collections import Counter

import pytest

from gungnir_mongo.backend.memory_backend import InMemoryBackend
from gungnir_mongo.core.errors import NotReady
from gungnir_mongo.core.models import ID_KEY, ConnectionState, Value
from gungnir_mongo.provider.base_provider import BaseProvider
from gungnir_mongo.provider.record_provider import RecordProvider


class CountingProvider(BaseProvider):
    """Dict-backed provider that counts every call made to it."""

    def __init__(self, ready: bool = True) -> None:
        self.rows: dict[tuple[str, str], dict[str, Value]] = {}
        self.calls: Counter[str] = Counter()
        self.ready = ready
        self.fail_next: Exception | None = None

    @property
    def state(self) -> ConnectionState:
        return ConnectionState.READY if self.ready else ConnectionState.CONNECTING

    async def connect(self) -> None:
        self.ready = True

    def _check(self, operation: str) -> None:
        self.calls[operation] += 1
        if not self.ready:
            raise NotReady(operation)
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error

    async def get(self, table: str, record_id: str, key: str) -> Value:
        self._check("get")
        if key == ID_KEY:
            return record_id
        return self.rows.get((table, record_id), {}).get(key)

    async def set(self, table: str, record_id: str, key: str, value: Value) -> None:
        self._check("set")
        if key == ID_KEY:
            return
        self.rows.setdefault((table, record_id), {})[key] = value

    async def clear(self, table: str, record_id: str) -> bool:
        self._check("clear")
        return self.rows.pop((table, record_id), None) is not None


# === FIXTURES ===


@pytest.fixture
def memory_backend() -> InMemoryBackend:
    """Unconnected in-memory backend."""
    return InMemoryBackend()


@pytest.fixture
def memory_provider(memory_backend: InMemoryBackend) -> RecordProvider:
    """Unconnected provider over the in-memory backend."""
    return RecordProvider(memory_backend)


@pytest.fixture
def counting_provider() -> CountingProvider:
    """Ready provider double with call counters."""
    return CountingProvider()
