"""The ``SimpleDb`` session: one connection source plus one executor.

A session is created explicitly, configured explicitly, and closed
explicitly (or used as a context manager)::

    with SimpleDb.sqlite("app.db") as db:
        db.run("CREATE TABLE IF NOT EXISTS article (id INTEGER PRIMARY KEY, title TEXT)")
        new_id = db.gen_sql().append("INSERT INTO article (title) VALUES (?)", "hello").insert()
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from simpledb.config import MySQLSettings, SimpleDbConfig
from simpledb.driver import ConnectionSource, SourceFactory, SQLiteSource
from simpledb.errors import SessionClosedError
from simpledb.execute.executor import ExecutionMode, Executor, Row
from simpledb.statement.builder import Sql

logger = logging.getLogger(__name__)

_READ_KEYWORDS = frozenset(
    {"SELECT", "WITH", "SHOW", "PRAGMA", "EXPLAIN", "DESCRIBE", "DESC", "VALUES"}
)
_LEADING_NOISE = re.compile(r"^(?:\s|;|\(|--[^\n]*\n?|/\*.*?\*/)+", re.DOTALL)


def is_read_statement(sql: str) -> bool:
    """True if ``sql`` returns rows (SELECT, WITH, SHOW, ...), else it is a write."""
    stripped = _LEADING_NOISE.sub("", sql)
    words = stripped.split(None, 1)
    return bool(words) and words[0].upper() in _READ_KEYWORDS


class SimpleDb:
    """A database session.

    Args:
        source: The connection source; the session owns it and closes it.
        dev_mode: Log every executed statement with its values inlined.
    """

    def __init__(self, source: ConnectionSource, *, dev_mode: bool = False) -> None:
        self._source = source
        self._executor = Executor(source, dev_mode=dev_mode)
        self._closed = False

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_config(cls, config: SimpleDbConfig) -> SimpleDb:
        """Create a session from a :class:`~simpledb.config.SimpleDbConfig`.

        Raises:
            ConfigError: If ``config.driver`` is not registered.
        """
        return cls(SourceFactory.create(config), dev_mode=config.dev_mode)

    @classmethod
    def sqlite(cls, database: str = ":memory:", *, dev_mode: bool = False) -> SimpleDb:
        """Create a session on a SQLite file or in-memory database."""
        return cls(SQLiteSource(database), dev_mode=dev_mode)

    @classmethod
    def mysql(
        cls,
        host: str,
        user: str,
        password: str,
        database: str,
        *,
        port: int = 3306,
        dev_mode: bool = False,
        **engine_options: Any,
    ) -> SimpleDb:
        """Create a session on a MySQL server (SQLAlchemy pool + PyMySQL)."""
        settings = MySQLSettings(
            host=host, user=user, password=password, database=database, port=port
        )
        return cls.from_config(settings.to_config(dev_mode=dev_mode, **engine_options))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def source(self) -> ConnectionSource:
        return self._source

    @property
    def executor(self) -> Executor:
        return self._executor

    @property
    def dev_mode(self) -> bool:
        return self._executor.dev_mode

    @dev_mode.setter
    def dev_mode(self, enabled: bool) -> None:
        self._executor.dev_mode = enabled

    @property
    def closed(self) -> bool:
        return self._closed

    def gen_sql(self) -> Sql:
        """Return a fresh, empty statement bound to this session."""
        self._ensure_open()
        return self._executor.new_sql()

    def run(self, raw_sql: str, *params: Any) -> list[Row] | int:
        """Execute one raw statement outside the builder flow.

        Read statements return their rows; anything else (DDL, DML) returns
        the affected row count, ``0`` when the driver reports none.

        Args:
            raw_sql: SQL text with one ``?`` per value.
            *params: Values for the placeholders, in order.
        """
        statement = self.gen_sql().append(raw_sql, *params)
        if is_read_statement(raw_sql):
            return self._executor.execute(statement, ExecutionMode.SELECT_ROWS)
        return self._executor.execute(statement, ExecutionMode.EXECUTE)

    @contextmanager
    def transaction(self) -> Iterator[SimpleDb]:
        """Group this thread's statements into one transaction.

        Commits when the block exits cleanly and rolls back if it raises::

            with db.transaction():
                db.gen_sql().append("UPDATE account SET balance = balance - ?", 10).update()
                db.gen_sql().append("UPDATE account SET balance = balance + ?", 10).update()

        Raises:
            TransactionError: If this thread already has an open transaction.
        """
        self._ensure_open()
        with self._executor.transaction():
            yield self

    def close(self) -> None:
        """Close the connection source.  Closing twice is a no-op."""
        if self._closed:
            return
        self._closed = True
        self._executor.close()
        self._source.close()
        logger.debug("session closed")

    def __enter__(self) -> SimpleDb:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError()
