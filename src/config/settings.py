# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings: which storage
backend to use, how to reach MongoDB, whether to cache, and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_MONGODB_SCHEMES = ("mongodb://", "mongodb+srv://")


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Storage backend ===
    storage_backend: Literal["mongodb", "memory"] = "mongodb"

    # === MongoDB ===
    mongodb_uri: str = ""
    mongodb_database: str = ""
    mongodb_connect_timeout_ms: int = 5000

    # === Cache ===
    cache_enabled: bool = True
    cache_serialize_per_record: bool = True

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("mongodb_connect_timeout_ms")
    @classmethod
    def validate_connect_timeout(cls, v: int) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError("mongodb_connect_timeout_ms must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if (
            self.storage_backend == "mongodb"
            and self.mongodb_uri
            and not self.mongodb_uri.startswith(_MONGODB_SCHEMES)
        ):
            errors.append(
                "MONGODB_URI must start with mongodb:// or mongodb+srv://"
            )

        if self.log_retention < 0:
            errors.append("LOG_RETENTION must be >= 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
