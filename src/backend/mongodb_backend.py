# src/backend/mongodb_backend.py — v1
"""MongoDB storage backend (STORAGE_BACKEND=mongodb).

Uses pymongo's asyncio client. Each table maps to a collection and each
record to a single document keyed by '_id'.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pymongo import AsyncMongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from gungnir_mongo.backend.base_backend import BaseBackend
from gungnir_mongo.core.errors import BackendError, NotReady, RecordExists
from gungnir_mongo.core.models import ID_KEY, ConnectionState, Value

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "gungnir"


class MongoDBBackend(BaseBackend):
    """Document-store backend backed by MongoDB."""

    def __init__(
        self,
        uri: str,
        database: str | None = None,
        connect_timeout_ms: int = 5000,
        client: Any | None = None,
    ) -> None:
        super().__init__()
        self.uri = uri
        self._database_name = database or None
        self._connect_timeout_ms = connect_timeout_ms
        self._client = client
        self._db: Any | None = None
        self._connect_lock = asyncio.Lock()

    @property
    def database_name(self) -> str | None:
        """Name of the database in use, once connected."""
        return None if self._db is None else self._db.name

    async def connect(self) -> None:
        """Open the client and ping the server.

        Raises:
            BackendError: If the server cannot be reached. The backend stays
                in CONNECTING so connect() may be retried.
        """
        # Overlapping callers share one handshake and one client.
        async with self._connect_lock:
            await self._handshake()

    async def _handshake(self) -> None:
        if self.is_ready:
            return
        if self._db is not None:
            raise BackendError("connect", cause=RuntimeError("connection already assigned"))
        client = self._client
        try:
            if client is None:
                client = AsyncMongoClient(
                    self.uri,
                    connectTimeoutMS=self._connect_timeout_ms,
                    serverSelectionTimeoutMS=self._connect_timeout_ms,
                )
            await client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB connection to %s failed: %s", _redact(self.uri), e)
            if client is not None and self._client is None:
                await client.close()
            raise BackendError("connect", cause=e) from e

        self._client = client
        if self._database_name:
            self._db = client[self._database_name]
        else:
            self._db = client.get_default_database(default=DEFAULT_DATABASE)
        self._mark_ready()
        logger.info(
            "MongoDB backend ready (database=%s)", self.database_name,
        )

    async def close(self) -> None:
        """Close the client connection."""
        if self._client is not None and self._state is not ConnectionState.CLOSED:
            await self._client.close()
        self._mark_closed()

    async def fetch_one(self, table: str, record_id: str) -> dict[str, Any] | None:
        try:
            return await self._collection(table, "fetch").find_one({ID_KEY: record_id})
        except PyMongoError as e:
            raise self._fault("fetch", table, record_id, e) from e

    async def insert_one(self, table: str, document: dict[str, Value]) -> None:
        record_id = str(document[ID_KEY])
        try:
            await self._collection(table, "insert").insert_one(dict(document))
        except DuplicateKeyError as e:
            raise RecordExists(table, record_id) from e
        except PyMongoError as e:
            raise self._fault("insert", table, record_id, e) from e

    async def update_fields(
        self, table: str, record_id: str, fields: dict[str, Value]
    ) -> None:
        try:
            await self._collection(table, "update").update_one(
                {ID_KEY: record_id}, {"$set": dict(fields)}
            )
        except PyMongoError as e:
            raise self._fault("update", table, record_id, e) from e

    async def delete_one(self, table: str, record_id: str) -> bool:
        try:
            result = await self._collection(table, "delete").delete_one({ID_KEY: record_id})
        except PyMongoError as e:
            raise self._fault("delete", table, record_id, e) from e
        return result.deleted_count > 0

    def _collection(self, table: str, operation: str) -> Any:
        if self._db is None or not self.is_ready:
            raise NotReady(operation, "MongoDB client is not connected")
        return self._db[table]

    @staticmethod
    def _fault(
        operation: str, table: str, record_id: str, error: Exception
    ) -> BackendError:
        logger.warning(
            "MongoDB %s failed on %s/%s: %s", operation, table, record_id, error,
        )
        return BackendError(operation, table=table, record_id=record_id, cause=error)


def _redact(uri: str) -> str:
    """Hide credentials in a connection URI for logging."""
    scheme, sep, rest = uri.partition("://")
    if not sep or "@" not in rest:
        return uri
    return f"{scheme}://***@{rest.split('@', 1)[1]}"
