# tests/unit/backend/test_unit_base_backend.py — v1
"""Tests for backend/base_backend.py: BaseBackend ABC and readiness."""

from __future__ import annotations

import asyncio

import pytest

from gungnir_mongo.backend.base_backend import BaseBackend
from gungnir_mongo.backend.memory_backend import InMemoryBackend
from gungnir_mongo.core.models import ConnectionState


class TestBaseBackend:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseBackend()  # type: ignore[abstract]

    def test_has_required_methods(self):
        for method in [
            "connect", "close", "fetch_one", "insert_one", "update_fields", "delete_one",
        ]:
            assert hasattr(BaseBackend, method)


class TestReadiness:
    def test_starts_connecting(self):
        backend = InMemoryBackend()
        assert backend.state is ConnectionState.CONNECTING
        assert backend.is_ready is False

    @pytest.mark.asyncio
    async def test_wait_ready_released_by_connect(self):
        backend = InMemoryBackend()
        waiter = asyncio.create_task(backend.wait_ready(timeout=1.0))
        await asyncio.sleep(0)
        assert not waiter.done()
        await backend.connect()
        await waiter
        assert backend.state is ConnectionState.READY

    @pytest.mark.asyncio
    async def test_wait_ready_times_out(self):
        backend = InMemoryBackend()
        with pytest.raises(asyncio.TimeoutError):
            await backend.wait_ready(timeout=0.01)

    @pytest.mark.asyncio
    async def test_close_moves_to_closed(self):
        backend = InMemoryBackend()
        await backend.connect()
        await backend.close()
        assert backend.state is ConnectionState.CLOSED
        assert backend.is_ready is False
