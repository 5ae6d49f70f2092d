"""Developer-mode rendering of a statement with its values inlined.

The output is for human inspection only (logs, debugging).  It is never sent
to the database and must not be relied upon for correctness or safety.
"""
from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from simpledb.statement.placeholders import split_segments

_MISSING = object()


def render_literal(value: Any) -> str:
    """Return a literal-looking SQL rendering of ``value``.

    ``None`` becomes ``NULL``, booleans ``TRUE``/``FALSE``, numbers stay
    bare, temporal values are quoted ISO-8601, bytes become ``X'..'``, and
    everything else is rendered as a single-quoted string.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return f"'{value.isoformat(sep=' ')}'"
    if isinstance(value, (date, time)):
        return f"'{value.isoformat()}'"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"X'{bytes(value).hex().upper()}'"
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


def render_raw_sql(
    sql: str, params: tuple[Any, ...], *, backslash_escapes: bool = False
) -> str:
    """Substitute each ``?`` placeholder in ``sql`` with its rendered value.

    Placeholders beyond the supplied values are left as ``?``.
    """
    values = iter(params)
    parts: list[str] = []
    for kind, text in split_segments(sql, backslash_escapes=backslash_escapes):
        if kind != "code" or "?" not in text:
            parts.append(text)
            continue
        pieces = text.split("?")
        parts.append(pieces[0])
        for piece in pieces[1:]:
            value = next(values, _MISSING)
            parts.append("?" if value is _MISSING else render_literal(value))
            parts.append(piece)
    return "".join(parts)

