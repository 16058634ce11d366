# src/backend/backend_factory.py — v1
"""Factory for storage backend instantiation."""

from __future__ import annotations

from gungnir_mongo.backend.base_backend import BaseBackend
from gungnir_mongo.config.settings import Settings


def create_backend(settings: Settings | None = None) -> BaseBackend:
    """Instantiate the configured storage backend.

    Args:
        settings: Application settings. Defaults to the in-memory backend.

    Returns:
        Unconnected BaseBackend implementation.
    """
    backend = "memory" if settings is None else settings.storage_backend

    if backend == "memory":
        from gungnir_mongo.backend.memory_backend import InMemoryBackend
        return InMemoryBackend()

    if backend == "mongodb":
        from gungnir_mongo.backend.mongodb_backend import MongoDBBackend
        if settings is None or not settings.mongodb_uri:
            raise ValueError(
                "MONGODB_URI must be set when STORAGE_BACKEND=mongodb"
            )
        return MongoDBBackend(
            uri=settings.mongodb_uri,
            database=settings.mongodb_database or None,
            connect_timeout_ms=settings.mongodb_connect_timeout_ms,
        )

    raise ValueError(f"Unsupported storage backend: {backend!r}")
