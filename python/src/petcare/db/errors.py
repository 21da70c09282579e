"""
Database Errors

Structured error raised by every data-access operation. The backend's message is
kept verbatim; ``kind`` lets callers branch without inspecting message text.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    QUERY = "query"
    NOT_FOUND = "not_found"
    AUTHORIZATION = "authorization"
    CONFIGURATION = "configuration"
    CONNECTION = "connection"


# PostgREST / Postgres codes with a fixed meaning for callers
_NOT_FOUND_CODES = {"PGRST116"}
_AUTHORIZATION_CODES = {"42501", "PGRST301", "PGRST302"}
_MISSING_RELATION_CODES = {"42P01", "PGRST205"}

_AUTHORIZATION_MARKERS = ("jwt", "permission denied", "row-level security", "unauthorized")


class DatabaseError(Exception):
    """
    Failure reported by (or on the way to) the backend.

    Attributes:
        kind:    ErrorKind classification
        message: backend message, unmodified
        code:    PostgREST / Postgres error code when the backend supplied one
        details: backend details string, if any
        hint:    backend hint string, if any
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        code: str | None = None,
        details: str | None = None,
        hint: str | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint
        super().__init__(message)

    @property
    def is_missing_relation(self) -> bool:
        """True when the queried table does not exist (schema not applied yet)."""
        if self.code in _MISSING_RELATION_CODES:
            return True
        text = self.message.lower()
        return "relation" in text or "does not exist" in text

    def __repr__(self) -> str:
        return f"DatabaseError(kind={self.kind.value!r}, code={self.code!r}, message={self.message!r})"


def classify(code: str | None, message: str) -> ErrorKind:
    """Map a backend error code/message to an ErrorKind."""
    if code in _NOT_FOUND_CODES:
        return ErrorKind.NOT_FOUND
    if code in _AUTHORIZATION_CODES:
        return ErrorKind.AUTHORIZATION
    lowered = (message or "").lower()
    if any(marker in lowered for marker in _AUTHORIZATION_MARKERS):
        return ErrorKind.AUTHORIZATION
    return ErrorKind.QUERY


def from_backend_error(error: Any) -> DatabaseError:
    """
    Build a DatabaseError from a postgrest APIError (or anything shaped like one).

    Args:
        error: object exposing ``message``/``code``/``details``/``hint`` attributes

    Returns:
        DatabaseError with the backend's fields preserved
    """
    message = getattr(error, "message", None) or str(error)
    code = getattr(error, "code", None)
    code = str(code) if code is not None else None
    return DatabaseError(
        classify(code, message),
        message,
        code=code,
        details=getattr(error, "details", None),
        hint=getattr(error, "hint", None),
    )


def not_found(table: str, row_id: str) -> DatabaseError:
    return DatabaseError(ErrorKind.NOT_FOUND, f"No row in '{table}' with id '{row_id}'")
