# src/__init__.py — v1
"""gungnir-mongo: per-field key/value providers with a caching decorator."""

from gungnir_mongo.version import __version__

__all__ = ["__version__"]
