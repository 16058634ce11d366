# src/logging/context.py — v1
"""Contextual logging support: attach table, record_id and operation to log records."""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

# Context variables for structured logging, set per provider operation.
_table: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "table", default=None
)
_record_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "record_id", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    table: str | None = None
    record_id: str | None = None
    operation: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        table=_table.get(),
        record_id=_record_id.get(),
        operation=_operation.get(),
    )


def set_record_context(table: str, record_id: str | None = None) -> None:
    """Set record-level context."""
    _table.set(table)
    _record_id.set(record_id)


def set_operation_context(operation: str) -> None:
    _operation.set(operation)


@contextmanager
def operation_context(
    operation: str, table: str, record_id: str | None = None
) -> Iterator[None]:
    """Scope the logging context to a single provider operation.

    Previous values are restored on exit, so nested or concurrent
    operations do not leak context into each other.
    """
    tokens = (
        _operation.set(operation),
        _table.set(table),
        _record_id.set(record_id),
    )
    try:
        yield
    finally:
        _operation.reset(tokens[0])
        _table.reset(tokens[1])
        _record_id.reset(tokens[2])


def clear_context() -> None:
    """Reset all context variables."""
    _table.set(None)
    _record_id.set(None)
    _operation.set(None)
