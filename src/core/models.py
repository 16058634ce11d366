# src/core/models.py — v1
"""Core domain models: field values, lookups, records and connection state.

A record is the set of field values stored for one (table, id) pair. It
always carries its identifier, even when no backing row exists yet.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr

ID_KEY = "_id"

Value = Union[str, int, float, bool, None]
"""Primitive field value. Nested structures are never stored."""

_StrictValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]


class ConnectionState(str, Enum):
    """Lifecycle of a backend connection handle."""

    CONNECTING = "connecting"
    READY = "ready"
    CLOSED = "closed"


@dataclass(frozen=True)
class Found:
    """Field present in the record; value may be an explicit None."""

    value: Value

    def collapse(self) -> Value:
        return self.value


@dataclass(frozen=True)
class Absent:
    """Field not present in the record."""

    def collapse(self) -> Value:
        return None


ABSENT = Absent()

FieldLookup = Union[Found, Absent]


def is_value(value: Any) -> bool:
    """Return True if value is one of the storable primitive types."""
    return value is None or isinstance(value, (str, int, float, bool))


def validate_value(key: str, value: Any) -> Value:
    """Reject values that are not storable primitives.

    Raises:
        TypeError: If value is a container or any other non-primitive.
    """
    if not is_value(value):
        raise TypeError(
            f"Field {key!r} must be str, int, float, bool or None, "
            f"got {type(value).__name__}"
        )
    return value


def validate_key(key: str) -> str:
    """Reject field keys that document stores read as paths or operators.

    Raises:
        ValueError: If key contains '.' or starts with '$'.
    """
    if "." in key or key.startswith("$"):
        raise ValueError(f"Field key {key!r} must not contain '.' or start with '$'")
    return key


class Record(BaseModel):
    """Materialized record for one (table, id) pair."""

    record_id: str
    fields: dict[str, _StrictValue] = Field(default_factory=dict)

    @classmethod
    def empty(cls, record_id: str) -> Record:
        """Record for an id with no backing row."""
        return cls(record_id=record_id)

    @classmethod
    def from_document(cls, record_id: str, document: dict[str, Any]) -> Record:
        """Build a record from a stored document, dropping the identifier key.

        Raises:
            pydantic.ValidationError: If a stored field is not a primitive.
        """
        fields = {k: v for k, v in document.items() if k != ID_KEY}
        return cls(record_id=record_id, fields=fields)

    def lookup(self, key: str) -> FieldLookup:
        """Look up a field, keeping 'absent' distinct from 'explicit None'."""
        if key == ID_KEY:
            return Found(self.record_id)
        if key in self.fields:
            return Found(self.fields[key])
        return ABSENT

    def to_document(self) -> dict[str, Any]:
        """Return the storage document, identifier included."""
        return {ID_KEY: self.record_id, **self.fields}
