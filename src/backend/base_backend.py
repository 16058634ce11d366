# src/backend/base_backend.py — v1
"""Abstract storage backend interface.

A provider is built purely on four primitives: fetch one record, insert a
record, merge fields into an existing record, delete a record. Any engine
that offers them (relational, document or plain key-value) can back a
provider.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from gungnir_mongo.core.models import ConnectionState, Value


class BaseBackend(ABC):
    """Unified interface for storage backends.

    Backends start in CONNECTING and move to READY once connect() completes.
    The connection handle is assigned once and never replaced.
    """

    def __init__(self) -> None:
        self._state = ConnectionState.CONNECTING
        self._ready = asyncio.Event()

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ConnectionState.READY

    async def wait_ready(self, timeout: float | None = None) -> None:
        """Block until connect() has completed.

        Raises:
            TimeoutError: If the backend is not ready within timeout seconds.
        """
        await asyncio.wait_for(self._ready.wait(), timeout)

    def _mark_ready(self) -> None:
        self._state = ConnectionState.READY
        self._ready.set()

    def _mark_closed(self) -> None:
        self._state = ConnectionState.CLOSED
        self._ready.clear()

    @abstractmethod
    async def connect(self) -> None:
        """Establish the connection and switch to READY."""

    @abstractmethod
    async def close(self) -> None:
        """Release the connection and switch to CLOSED."""

    @abstractmethod
    async def fetch_one(self, table: str, record_id: str) -> dict[str, Any] | None:
        """Return the stored document for record_id, or None if absent."""

    @abstractmethod
    async def insert_one(self, table: str, document: dict[str, Value]) -> None:
        """Insert a new document carrying its '_id'.

        Raises:
            RecordExists: If a document with the same '_id' is already stored.
        """

    @abstractmethod
    async def update_fields(
        self, table: str, record_id: str, fields: dict[str, Value]
    ) -> None:
        """Merge fields into an existing document; other fields survive."""

    @abstractmethod
    async def delete_one(self, table: str, record_id: str) -> bool:
        """Delete a document. Returns False, without raising, if none existed."""
