"""simpledb – a minimal SQL access layer.

Write the SQL. Bind the values.

Public API
----------
``SimpleDb``
    A session owning a connection source.  ``gen_sql()`` starts a statement,
    ``run()`` executes raw SQL directly, ``transaction()`` groups statements.

``Sql``
    Fluent statement builder: ``append`` adds a fragment and its ``?``
    values, ``append_in`` expands one ``?`` into a list of placeholders.
    Execution shortcuts (``insert``, ``update``, ``delete``,
    ``select_rows``, ``select_long``, ...) return typed results.

Example::

    db = simpledb.SimpleDb.sqlite()
    ids = [2, 1, 3]
    found = (
        db.gen_sql()
        .append("SELECT id FROM article")
        .append_in("WHERE id IN (?)", ids)
        .append_in("ORDER BY FIELD(id, ?)", ids)
        .select_longs()
    )

Extensibility
-------------
New connection sources can be registered via::

    from simpledb.driver.registry import SourceFactory

    @SourceFactory.register("duckdb")
    class DuckDBSource(ConnectionSource):
        ...

After registration, ``SimpleDb.from_config`` picks it up for any
``SimpleDbConfig`` with ``driver="duckdb"``.
"""

from __future__ import annotations

from simpledb.config import MySQLSettings, SimpleDbConfig
from simpledb.db import SimpleDb, is_read_statement
from simpledb.driver import ConnectionSource, EngineSource, SourceFactory, SQLiteSource
from simpledb.errors import (
    CoercionError,
    ConfigError,
    EmptyValuesError,
    GeneratedKeyError,
    NoRowsError,
    PlaceholderCountError,
    SessionClosedError,
    SessionError,
    SimpleDbError,
    StatementConsumedError,
    StatementError,
    TransactionError,
)
from simpledb.execute import ColumnValue, ExecutionMode, Executor, Row
from simpledb.statement import CompiledStatement, Sql, StatementState, render_raw_sql

__all__ = [
    # Session
    "SimpleDb",
    "is_read_statement",
    # Configuration
    "SimpleDbConfig",
    "MySQLSettings",
    # Statements
    "Sql",
    "CompiledStatement",
    "StatementState",
    "render_raw_sql",
    # Execution
    "Executor",
    "ExecutionMode",
    "Row",
    "ColumnValue",
    # Connection sources
    "ConnectionSource",
    "SQLiteSource",
    "EngineSource",
    "SourceFactory",
    # Errors
    "SimpleDbError",
    "StatementError",
    "PlaceholderCountError",
    "EmptyValuesError",
    "StatementConsumedError",
    "CoercionError",
    "NoRowsError",
    "GeneratedKeyError",
    "SessionError",
    "SessionClosedError",
    "TransactionError",
    "ConfigError",
]
