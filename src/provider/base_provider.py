# src/provider/base_provider.py — v1
"""Abstract provider interface.

A provider reads, writes and clears individual fields addressed by
(table, id, key). Implementations must honour these rules:

- get() of '_id' returns the id itself.
- get() of a field that was never written returns None, not an error.
- set() of '_id' is a no-op.
- set() merges a single field; other fields of the record survive.
- clear() deletes the whole record and is idempotent.
- Before the backend is ready every operation raises NotReady.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, TypeVar

from gungnir_mongo.core.models import ConnectionState, Value

if TYPE_CHECKING:
    from gungnir_mongo.provider.cached_provider import CachedProvider

ProviderT = TypeVar("ProviderT", bound="BaseProvider")


class BaseProvider(ABC):
    """Unified interface for per-field storage providers."""

    @abstractmethod
    async def get(self, table: str, record_id: str, key: str) -> Value:
        """Return the field value, or None if the field is absent."""

    @abstractmethod
    async def set(self, table: str, record_id: str, key: str, value: Value) -> None:
        """Write a single field of a record."""

    @abstractmethod
    async def clear(self, table: str, record_id: str) -> bool:
        """Delete a whole record. Returns False if no record existed."""

    @property
    def state(self) -> ConnectionState:
        """Connection state. Providers without a connection are always ready."""
        return ConnectionState.READY

    async def connect(self) -> None:
        """Establish the backend connection. No-op by default."""

    async def close(self) -> None:
        """Release the backend connection. No-op by default."""

    async def __aenter__(self: ProviderT) -> ProviderT:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @classmethod
    def cached(
        cls: type[ProviderT], *args: Any, **kwargs: Any
    ) -> CachedProvider[ProviderT]:
        """Build this provider and wrap it in a CachedProvider.

        Arguments are passed to the provider's constructor.
        """
        from gungnir_mongo.provider.cached_provider import CachedProvider

        return CachedProvider(cls(*args, **kwargs))
