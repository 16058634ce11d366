# src/provider/provider_factory.py — v1
"""Factory assembling a provider chain from settings."""

from __future__ import annotations

import logging

from gungnir_mongo.backend.backend_factory import create_backend
from gungnir_mongo.config.settings import Settings
from gungnir_mongo.provider.base_provider import BaseProvider
from gungnir_mongo.provider.cached_provider import CachedProvider
from gungnir_mongo.provider.record_provider import RecordProvider

logger = logging.getLogger(__name__)


def create_provider(settings: Settings | None = None) -> BaseProvider:
    """Build the configured provider, cached unless CACHE_ENABLED=false.

    The returned provider is not connected yet; call connect() or use it
    as an async context manager.
    """
    provider = RecordProvider(create_backend(settings))

    cache_enabled = True if settings is None else settings.cache_enabled
    if not cache_enabled:
        logger.debug("Created %s (cache disabled)", type(provider).__name__)
        return provider

    serialize = True if settings is None else settings.cache_serialize_per_record
    logger.debug("Created cached %s (serialize=%s)", type(provider).__name__, serialize)
    return CachedProvider(provider, serialize=serialize)
