# src/core/errors.py — v1
"""Provider error taxonomy.

NotReady is the only contract-level error. Anything the storage engine
raises reaches callers as BackendError with the original cause chained.
"""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for provider and backend errors."""


class NotReady(ProviderError):
    """Operation attempted before the backend connection is established."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        message = f"Backend is not connected; cannot {operation}. Call connect() first."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class BackendError(ProviderError):
    """Failure raised by the underlying storage engine."""

    def __init__(
        self,
        operation: str,
        table: str | None = None,
        record_id: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.operation = operation
        self.table = table
        self.record_id = record_id
        self.cause = cause
        target = ""
        if table is not None:
            target = f" on {table}"
            if record_id is not None:
                target += f"/{record_id}"
        reason = f": {cause}" if cause is not None else ""
        super().__init__(f"Backend {operation} failed{target}{reason}")


class RecordExists(ProviderError):
    """Insert rejected because a record with the same id already exists."""

    def __init__(self, table: str, record_id: str) -> None:
        self.table = table
        self.record_id = record_id
        super().__init__(f"Record {table}/{record_id} already exists")
