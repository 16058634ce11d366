# src/provider/mongodb_provider.py — v1
"""MongoDB provider.

Construction is two-phase: the constructor returns immediately in the
CONNECTING state and connect() (or ``async with``) performs the handshake.

    provider = MongoDBProvider("mongodb://localhost:27017/app")
    await provider.connect()
    await provider.set("users", "42", "name", "Ada")

    cached = MongoDBProvider.cached("mongodb://localhost:27017/app")
"""

from __future__ import annotations

from typing import Any

from gungnir_mongo.backend.mongodb_backend import MongoDBBackend
from gungnir_mongo.provider.record_provider import RecordProvider


class MongoDBProvider(RecordProvider):
    """Provider storing one MongoDB document per record."""

    def __init__(
        self,
        uri: str,
        database: str | None = None,
        connect_timeout_ms: int = 5000,
        client: Any | None = None,
    ) -> None:
        super().__init__(
            MongoDBBackend(
                uri,
                database=database,
                connect_timeout_ms=connect_timeout_ms,
                client=client,
            )
        )
        self.uri = uri
