"""Conversion of driver-native column values to typed scalar results.

Each ``to_*`` function accepts whatever a DB-API driver may plausibly return
for a column of the requested kind.  ``None`` always maps to ``None``; a
value that cannot be converted raises :class:`~simpledb.errors.CoercionError`
instead of falling back to a default.
"""
from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, TypeVar, Union

from simpledb.errors import CoercionError

T = TypeVar("T")

#: A typed value in a row mapping.
ColumnValue = Union[int, float, Decimal, str, bytes, bool, datetime, date, time, None]

_BINARY = (bytes, bytearray, memoryview)


def to_boolean(value: Any) -> bool | None:
    """BIT / BOOLEAN / computed ``1 = 1`` values: zero is ``False``."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, Decimal)):
        return value != 0
    if isinstance(value, _BINARY):
        return any(bytes(value))
    raise CoercionError(value, "bool")


def to_long(value: Any) -> int | None:
    """Integer columns, ``COUNT(*)``, integral ``SUM`` results, BIT columns."""
    if value is None:
        return None
    if isinstance(value, int):
        return int(value)
    if isinstance(value, (Decimal, float)):
        if not _is_integral(value):
            raise CoercionError(value, "int")
        return int(value)
    if isinstance(value, _BINARY):
        return int.from_bytes(bytes(value), "big")
    raise CoercionError(value, "int")


def _is_integral(value: Decimal | float) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    return value.is_integer()


def to_string(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, _BINARY):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CoercionError(value, "str") from exc
    raise CoercionError(value, "str")


def to_datetime(value: Any) -> datetime | None:
    """Temporal columns; ISO-8601 text as returned by SQLite is parsed."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, _BINARY):
        value = bytes(value).decode("ascii", errors="replace")
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise CoercionError(value, "datetime") from exc
    raise CoercionError(value, "datetime")


#: Scalar converters by the Python type they produce.
SCALAR_COERCERS: dict[type, Callable[[Any], Any]] = {
    int: to_long,
    str: to_string,
    bool: to_boolean,
    datetime: to_datetime,
}


def coerce(value: Any, target: type[T]) -> T | None:
    """Convert ``value`` to ``target`` using the registered converter.

    Raises:
        CoercionError: If ``value`` cannot be converted, or ``target`` has no
            registered converter.
    """
    coercer = SCALAR_COERCERS.get(target)
    if coercer is None:
        raise CoercionError(value, target.__name__)
    return coercer(value)
