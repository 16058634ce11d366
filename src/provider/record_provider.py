# src/provider/record_provider.py — v1
"""Provider built on the four backend primitives.

Records are materialized lazily: reading a record with no backing row yields
an empty record that carries only its id. Writes probe for the record first
and then either insert a new document or merge the field into the existing
one, so the backend never needs native upsert support.
"""

from __future__ import annotations

import logging
from typing import Awaitable, TypeVar

from pydantic import ValidationError

from gungnir_mongo.backend.base_backend import BaseBackend
from gungnir_mongo.core.errors import BackendError, NotReady, ProviderError, RecordExists
from gungnir_mongo.core.models import (
    ID_KEY,
    ConnectionState,
    Record,
    Value,
    validate_key,
    validate_value,
)
from gungnir_mongo.logging.context import operation_context
from gungnir_mongo.provider.base_provider import BaseProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordProvider(BaseProvider):
    """Provider implementing get/set/clear over any BaseBackend."""

    def __init__(self, backend: BaseBackend) -> None:
        self._backend = backend

    @property
    def backend(self) -> BaseBackend:
        return self._backend

    @property
    def state(self) -> ConnectionState:
        return self._backend.state

    @property
    def is_ready(self) -> bool:
        return self._backend.is_ready

    async def connect(self) -> None:
        """Run the backend handshake; the provider is READY afterwards."""
        await self._backend.connect()
        logger.info("%s connected", type(self).__name__)

    async def wait_ready(self, timeout: float | None = None) -> None:
        """Wait until a concurrently running connect() has completed."""
        await self._backend.wait_ready(timeout)

    async def close(self) -> None:
        await self._backend.close()
        logger.info("%s closed", type(self).__name__)

    # --- Provider contract ---

    async def get(self, table: str, record_id: str, key: str) -> Value:
        self._ensure_ready("get")
        if key == ID_KEY:
            return record_id
        with operation_context("get", table, record_id):
            record = await self.fetch_record(table, record_id)
            value = record.lookup(key).collapse()
            logger.debug("Read field %r", key)
            return value

    async def set(self, table: str, record_id: str, key: str, value: Value) -> None:
        self._ensure_ready("set")
        if key == ID_KEY:
            logger.debug("Ignoring write to %r on %s/%s", ID_KEY, table, record_id)
            return
        validate_key(key)
        validate_value(key, value)
        fields = {key: value}

        with operation_context("set", table, record_id):
            existing = await self._call(
                "fetch", table, record_id, self._backend.fetch_one(table, record_id)
            )
            if existing is None:
                try:
                    await self._call(
                        "insert", table, record_id,
                        self._backend.insert_one(table, {ID_KEY: record_id, **fields}),
                    )
                    logger.debug("Created record with field %r", key)
                    return
                except RecordExists:
                    # Another writer created the record after the probe.
                    logger.debug("Record created concurrently, merging field %r", key)
            await self._call(
                "update", table, record_id,
                self._backend.update_fields(table, record_id, fields),
            )
            logger.debug("Updated field %r", key)

    async def clear(self, table: str, record_id: str) -> bool:
        self._ensure_ready("clear")
        with operation_context("clear", table, record_id):
            deleted = await self._call(
                "delete", table, record_id, self._backend.delete_one(table, record_id)
            )
            logger.debug("Cleared record (existed=%s)", deleted)
            return deleted

    # --- Record materialization ---

    async def fetch_record(self, table: str, record_id: str) -> Record:
        """Materialize the full record; a missing row yields an empty record.

        Raises:
            NotReady: If the backend is not connected.
            BackendError: If the fetch fails or the stored document holds
                non-primitive values.
        """
        self._ensure_ready("fetch")
        document = await self._call(
            "fetch", table, record_id, self._backend.fetch_one(table, record_id)
        )
        if document is None:
            return Record.empty(record_id)
        try:
            return Record.from_document(record_id, document)
        except ValidationError as e:
            logger.warning("Malformed document %s/%s: %s", table, record_id, e)
            raise BackendError("fetch", table=table, record_id=record_id, cause=e) from e

    # --- Internals ---

    def _ensure_ready(self, operation: str) -> None:
        if not self._backend.is_ready:
            raise NotReady(operation, f"backend state is {self._backend.state.value}")

    async def _call(
        self, operation: str, table: str, record_id: str, call: Awaitable[T]
    ) -> T:
        """Await a backend primitive, wrapping foreign errors in BackendError."""
        try:
            return await call
        except ProviderError:
            raise
        except Exception as e:
            logger.warning("Backend %s failed on %s/%s: %s", operation, table, record_id, e)
            raise BackendError(operation, table=table, record_id=record_id, cause=e) from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}(backend={type(self._backend).__name__}, state={self.state.value})"

