"""Positional ``?`` placeholder scanning, expansion, and paramstyle conversion.

Statements are always written with qmark placeholders.  A ``?`` counts as a
placeholder only when it appears in SQL code, i.e. outside

* quoted literals and identifiers (``'...'``, ``"..."``, `````...`````), and
* comments (``-- ...`` to end of line, ``/* ... */``).

Quoted sections always honour doubled-quote escapes (``'it''s'``).  Backslash
escapes (``'it\\'s'``) are a MySQL extension: they are honoured only when
``backslash_escapes`` is set, so ``'C:\\'`` is a complete SQLite literal.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Literal

from simpledb.errors import EmptyValuesError, PlaceholderCountError

#: Segment kinds produced by :func:`split_segments`.
SegmentKind = Literal["code", "quoted", "comment"]

#: DB-API 2.0 paramstyles (PEP 249).
Paramstyle = Literal["qmark", "numeric", "named", "format", "pyformat"]

_QUOTES = frozenset("'\"`")


def split_segments(
    sql: str, *, backslash_escapes: bool = False
) -> Iterator[tuple[SegmentKind, str]]:
    """Split ``sql`` into code, quoted, and comment segments.

    Concatenating the yielded texts reproduces ``sql`` exactly.  An
    unterminated quote or block comment runs to the end of the string.
    """
    length = len(sql)
    start = 0
    i = 0

    while i < length:
        ch = sql[i]

        if ch in _QUOTES:
            if i > start:
                yield "code", sql[start:i]
            end = _scan_quoted(sql, i, backslash_escapes)
            yield "quoted", sql[i:end]
            start = i = end
            continue

        if ch == "-" and sql.startswith("--", i):
            if i > start:
                yield "code", sql[start:i]
            end = sql.find("\n", i)
            end = length if end == -1 else end + 1
            yield "comment", sql[i:end]
            start = i = end
            continue

        if ch == "/" and sql.startswith("/*", i):
            if i > start:
                yield "code", sql[start:i]
            end = sql.find("*/", i + 2)
            end = length if end == -1 else end + 2
            yield "comment", sql[i:end]
            start = i = end
            continue

        i += 1

    if start < length:
        yield "code", sql[start:]


def _scan_quoted(sql: str, i: int, backslash_escapes: bool) -> int:
    """Return the index just past the quoted section opened at ``sql[i]``."""
    quote = sql[i]
    length = len(sql)
    i += 1
    while i < length:
        c = sql[i]
        if backslash_escapes and c == "\\" and quote != "`":
            i += 2
            continue
        if c == quote:
            if i + 1 < length and sql[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    return length


def count_placeholders(sql: str, *, backslash_escapes: bool = False) -> int:
    """Return the number of ``?`` placeholders in ``sql``."""
    segments = split_segments(sql, backslash_escapes=backslash_escapes)
    return sum(text.count("?") for kind, text in segments if kind == "code")


def normalize_values(values: tuple[Any, ...]) -> tuple[Any, ...]:
    """Collapse the two ``append_in`` calling conventions into one tuple.

    ``append_in(frag, [1, 2, 3])`` and ``append_in(frag, 1, 2, 3)`` both
    normalize to ``(1, 2, 3)``.  Strings, bytes, and mappings passed as the
    only argument are treated as a single scalar value.
    """
    if len(values) == 1 and _is_value_collection(values[0]):
        return tuple(values[0])
    return tuple(values)


def _is_value_collection(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray, memoryview, Mapping)):
        return False
    return isinstance(value, Iterable)


def expand_placeholder(fragment: str, count: int, *, backslash_escapes: bool = False) -> str:
    """Replace the single placeholder in ``fragment`` with ``count`` placeholders.

    ``"WHERE id IN (?)"`` with ``count=3`` becomes
    ``"WHERE id IN (?, ?, ?)"``; ``"ORDER BY FIELD(id, ?)"`` becomes
    ``"ORDER BY FIELD(id, ?, ?, ?)"``.

    Raises:
        EmptyValuesError: If ``count`` is zero.
        PlaceholderCountError: If ``fragment`` does not contain exactly one
            placeholder.
    """
    if count == 0:
        raise EmptyValuesError(fragment)

    found = count_placeholders(fragment, backslash_escapes=backslash_escapes)
    if found != 1:
        raise PlaceholderCountError(
            found,
            count,
            fragment,
            message=f"append_in() fragment must contain exactly one placeholder, "
            f"found {found}: {fragment!r}",
        )

    group = ", ".join(["?"] * count)
    parts: list[str] = []
    for kind, text in split_segments(fragment, backslash_escapes=backslash_escapes):
        parts.append(text.replace("?", group) if kind == "code" else text)
    return "".join(parts)


def convert_paramstyle(
    sql: str,
    params: tuple[Any, ...],
    paramstyle: Paramstyle,
    *,
    backslash_escapes: bool = False,
) -> tuple[str, tuple[Any, ...] | dict[str, Any]]:
    """Rewrite qmark SQL for a driver using a different DB-API paramstyle.

    Args:
        sql: SQL text with ``?`` placeholders.
        params: Positional values, one per placeholder.
        paramstyle: The driver's ``paramstyle`` attribute.
        backslash_escapes: Treat ``\\`` inside quotes as an escape (MySQL).

    Returns:
        ``(sql, params)`` ready for ``cursor.execute``.  ``named`` style
        returns params as a dict keyed ``p1``, ``p2``, ...; every other style
        keeps the tuple.

    Note:
        ``format`` / ``pyformat`` drivers run the SQL through ``%``
        interpolation, so every literal ``%`` (including those inside quoted
        ``LIKE`` patterns) is doubled.
    """
    if paramstyle == "qmark":
        return sql, params

    percent = paramstyle in ("format", "pyformat")
    counter = 0
    parts: list[str] = []

    for kind, text in split_segments(sql, backslash_escapes=backslash_escapes):
        if percent:
            text = text.replace("%", "%%")
        if kind != "code" or "?" not in text:
            parts.append(text)
            continue
        pieces = text.split("?")
        out = [pieces[0]]
        for piece in pieces[1:]:
            counter += 1
            out.append(_placeholder(paramstyle, counter))
            out.append(piece)
        parts.append("".join(out))

    if paramstyle == "named":
        return "".join(parts), {f"p{n}": v for n, v in enumerate(params, start=1)}
    return "".join(parts), params


def _placeholder(paramstyle: Paramstyle, position: int) -> str:
    if paramstyle == "numeric":
        return f":{position}"
    if paramstyle == "named":
        return f":p{position}"
    return "%s"
