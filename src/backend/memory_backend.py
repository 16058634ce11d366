# src/backend/memory_backend.py — v1
"""In-memory storage backend (STORAGE_BACKEND=memory).

Process-local dict storage. Useful for tests and local development; data is
lost when the process exits.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from gungnir_mongo.backend.base_backend import BaseBackend
from gungnir_mongo.core.errors import RecordExists
from gungnir_mongo.core.models import ID_KEY, Value

logger = logging.getLogger(__name__)


class InMemoryBackend(BaseBackend):
    """Dict-of-dicts backend keyed by table then record id."""

    def __init__(self) -> None:
        super().__init__()
        self._tables: dict[str, dict[str, dict[str, Any]]] = {}

    async def connect(self) -> None:
        self._mark_ready()
        logger.info("In-memory backend ready")

    async def close(self) -> None:
        self._mark_closed()

    async def fetch_one(self, table: str, record_id: str) -> dict[str, Any] | None:
        doc = self._tables.get(table, {}).get(record_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def insert_one(self, table: str, document: dict[str, Value]) -> None:
        record_id = str(document[ID_KEY])
        rows = self._tables.setdefault(table, {})
        if record_id in rows:
            raise RecordExists(table, record_id)
        rows[record_id] = dict(document)

    async def update_fields(
        self, table: str, record_id: str, fields: dict[str, Value]
    ) -> None:
        doc = self._tables.get(table, {}).get(record_id)
        if doc is None:
            # Same as an update matching no document: nothing changes.
            return
        doc.update(fields)

    async def delete_one(self, table: str, record_id: str) -> bool:
        rows = self._tables.get(table)
        if not rows or record_id not in rows:
            return False
        del rows[record_id]
        return True

    def count(self, table: str) -> int:
        """Number of records stored in a table."""
        return len(self._tables.get(table, {}))
