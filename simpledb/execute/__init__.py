"""Statement execution: binding, result mapping, and type coercion."""
from __future__ import annotations

from simpledb.execute.coercion import (
    ColumnValue,
    coerce,
    to_boolean,
    to_datetime,
    to_long,
    to_string,
)
from simpledb.execute.executor import ExecutionMode, Executor, Row

__all__ = [
    "ColumnValue",
    "ExecutionMode",
    "Executor",
    "Row",
    "coerce",
    "to_boolean",
    "to_datetime",
    "to_long",
    "to_string",
]
