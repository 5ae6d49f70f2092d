"""Custom exception hierarchy for simpledb.

All errors raised by simpledb itself inherit from :class:`SimpleDbError` so
callers can catch the base class for any library-specific failure.

Driver and SQL execution failures are *not* wrapped: the DB-API exception
raised by the underlying driver propagates unchanged, with its original
error information.
"""
from __future__ import annotations

from typing import Any


class SimpleDbError(Exception):
    """Base exception for all simpledb errors."""


# ---------------------------------------------------------------------------
# Builder misuse
# ---------------------------------------------------------------------------


class StatementError(SimpleDbError):
    """Raised when a statement is built or used incorrectly.

    Builder misuse is detected before anything reaches the driver.
    """


class PlaceholderCountError(StatementError):
    """Raised when the ``?`` count does not match the number of bound values.

    Args:
        expected: Number of ``?`` placeholders found in the SQL text.
        actual: Number of values supplied.
        fragment: The offending fragment (or full statement text).
        message: Replaces the default message.
    """

    def __init__(
        self, expected: int, actual: int, fragment: str, *, message: str | None = None
    ) -> None:
        super().__init__(
            message
            or f"Fragment has {expected} placeholder(s) but {actual} value(s) "
            f"were supplied: {fragment!r}"
        )
        self.expected = expected
        self.actual = actual
        self.fragment = fragment


class EmptyValuesError(StatementError):
    """Raised when ``append_in`` is called without any value to expand."""

    def __init__(self, fragment: str) -> None:
        super().__init__(f"append_in() needs at least one value: {fragment!r}")
        self.fragment = fragment


class StatementConsumedError(StatementError):
    """Raised when a statement is appended to or executed after execution.

    Args:
        state: The lifecycle state the statement was in.
    """

    def __init__(self, state: Any) -> None:
        super().__init__(
            f"Statement is {state} and cannot be reused; create a new one "
            "with SimpleDb.gen_sql()."
        )
        self.state = state


# ---------------------------------------------------------------------------
# Result mapping
# ---------------------------------------------------------------------------


class CoercionError(SimpleDbError):
    """Raised when a column value cannot be converted to the requested type.

    Args:
        value: The driver-native value.
        target: Name of the requested Python type.
    """

    def __init__(self, value: Any, target: str) -> None:
        super().__init__(
            f"Cannot coerce {type(value).__name__} value {value!r} to {target}."
        )
        self.value = value
        self.target = target


class NoRowsError(SimpleDbError):
    """Raised when a scalar select requires a row but the query returned none."""


class GeneratedKeyError(SimpleDbError):
    """Raised when an insert did not produce a generated primary key."""


# ---------------------------------------------------------------------------
# Session / configuration
# ---------------------------------------------------------------------------


class SessionError(SimpleDbError):
    """Raised when a :class:`~simpledb.db.SimpleDb` session is misused."""


class SessionClosedError(SessionError):
    """Raised when a closed session is used."""

    def __init__(self) -> None:
        super().__init__("SimpleDb session is closed.")


class TransactionError(SessionError):
    """Raised on invalid transaction usage (e.g. nesting)."""


class ConfigError(SimpleDbError):
    """Raised when simpledb is misconfigured.

    Args:
        message: Human-readable description.
        field: The configuration field at fault, if any.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
