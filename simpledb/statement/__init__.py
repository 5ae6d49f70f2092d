"""Statement building: fragments, placeholders, and developer rendering."""
from __future__ import annotations

from simpledb.statement.builder import CompiledStatement, Sql, StatementState
from simpledb.statement.placeholders import (
    convert_paramstyle,
    count_placeholders,
    expand_placeholder,
    normalize_values,
)
from simpledb.statement.render import render_literal, render_raw_sql

__all__ = [
    "CompiledStatement",
    "Sql",
    "StatementState",
    "convert_paramstyle",
    "count_placeholders",
    "expand_placeholder",
    "normalize_values",
    "render_literal",
    "render_raw_sql",
]
