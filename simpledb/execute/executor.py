"""Statement execution and result mapping.

``Executor`` takes a built :class:`~simpledb.statement.builder.Sql`, binds
its values positionally, runs it in the requested :class:`ExecutionMode`,
and maps the driver result into the caller's shape:

================  =======  ================================================
Mode              Kind     Result
================  =======  ================================================
INSERT            write    generated primary key
UPDATE / DELETE   write    affected row count (rows matched by WHERE)
EXECUTE           write    affected row count (``0`` when not reported)
SELECT_ROWS       read     ``list[Row]``; column and row order preserved
SELECT_ROW        read     first ``Row`` or ``None``
SELECT_<scalar>   read     first column of the first row, coerced
SELECT_LONGS      read     first column of every row as ``int``
================  =======  ================================================

Unit of work
------------
Outside a transaction every statement runs on its own connection from the
source: writes commit, failures roll back, and the cursor and connection
are released on every exit path.  Inside :meth:`Executor.transaction` the
calling thread's statements share one pinned connection and commit or roll
back together.

Failures raised by the driver propagate unchanged; nothing is retried.
"""
from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from simpledb.driver.base import ConnectionSource
from simpledb.errors import (
    CoercionError,
    GeneratedKeyError,
    NoRowsError,
    SessionClosedError,
    TransactionError,
)
from simpledb.execute.coercion import ColumnValue, coerce, to_long
from simpledb.statement.builder import CompiledStatement, Sql, StatementState
from simpledb.statement.placeholders import convert_paramstyle

logger = logging.getLogger(__name__)

#: A result row: column name -> typed value, in result-set column order.
Row = dict[str, ColumnValue]


class ExecutionMode(str, enum.Enum):
    """How a statement is executed and what shape its result takes."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    EXECUTE = "execute"
    SELECT_ROWS = "select_rows"
    SELECT_ROW = "select_row"
    SELECT_LONG = "select_long"
    SELECT_STRING = "select_string"
    SELECT_BOOLEAN = "select_boolean"
    SELECT_DATETIME = "select_datetime"
    SELECT_LONGS = "select_longs"

    @property
    def is_write(self) -> bool:
        return self in _WRITE_MODES


_WRITE_MODES = frozenset(
    {ExecutionMode.INSERT, ExecutionMode.UPDATE, ExecutionMode.DELETE, ExecutionMode.EXECUTE}
)

_SCALAR_TYPES: dict[ExecutionMode, type] = {
    ExecutionMode.SELECT_LONG: int,
    ExecutionMode.SELECT_STRING: str,
    ExecutionMode.SELECT_BOOLEAN: bool,
    ExecutionMode.SELECT_DATETIME: datetime,
}


class Executor:
    """Runs statements against a connection source.

    Args:
        source: Where connections come from.
        dev_mode: Log each statement with its values inlined (INFO level).
    """

    def __init__(self, source: ConnectionSource, *, dev_mode: bool = False) -> None:
        self._source = source
        self._dev_mode = dev_mode
        self._local = threading.local()
        self._closed = False

    @property
    def source(self) -> ConnectionSource:
        return self._source

    @property
    def dev_mode(self) -> bool:
        return self._dev_mode

    @dev_mode.setter
    def dev_mode(self, enabled: bool) -> None:
        self._dev_mode = enabled

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Reject later executions, including statements built before this call."""
        self._closed = True

    @property
    def in_transaction(self) -> bool:
        """Whether the calling thread has an open transaction."""
        return self._pinned() is not None

    def new_sql(self) -> Sql:
        """Return a fresh statement attached to this executor."""
        return Sql(self)

    # ------------------------------------------------------------------
    # Mode shortcuts
    # ------------------------------------------------------------------

    def insert(self, statement: Sql) -> int:
        return self.execute(statement, ExecutionMode.INSERT)

    def update(self, statement: Sql) -> int:
        return self.execute(statement, ExecutionMode.UPDATE)

    def delete(self, statement: Sql) -> int:
        return self.execute(statement, ExecutionMode.DELETE)

    def select_rows(self, statement: Sql) -> list[Row]:
        return self.execute(statement, ExecutionMode.SELECT_ROWS)

    def select_row(self, statement: Sql) -> Row | None:
        return self.execute(statement, ExecutionMode.SELECT_ROW)

    def select_long(self, statement: Sql, *, required: bool = False) -> int | None:
        return self.execute(statement, ExecutionMode.SELECT_LONG, required=required)

    def select_string(self, statement: Sql, *, required: bool = False) -> str | None:
        return self.execute(statement, ExecutionMode.SELECT_STRING, required=required)

    def select_boolean(self, statement: Sql, *, required: bool = False) -> bool | None:
        return self.execute(statement, ExecutionMode.SELECT_BOOLEAN, required=required)

    def select_datetime(self, statement: Sql, *, required: bool = False) -> datetime | None:
        return self.execute(statement, ExecutionMode.SELECT_DATETIME, required=required)

    def select_longs(self, statement: Sql) -> list[int]:
        return self.execute(statement, ExecutionMode.SELECT_LONGS)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, statement: Sql, mode: ExecutionMode, *, required: bool = False) -> Any:
        """Bind, execute, and map ``statement`` according to ``mode``.

        Args:
            statement: A statement in the ``BUILT`` state.
            mode: Execution mode selecting the result shape.
            required: For scalar modes, raise :class:`NoRowsError` instead
                of returning ``None`` when the query yields no row.

        Returns:
            The mode-specific result (see the module docstring).

        Raises:
            StatementError: The statement is empty, already executed, or
                its placeholder count does not match its values.
            CoercionError: A scalar could not be converted to the requested
                type.
            NoRowsError: ``required=True`` and no row was returned.
            GeneratedKeyError: An INSERT produced no generated key.
            SessionClosedError: The executor was closed.
        """
        if self._closed:
            raise SessionClosedError()
        compiled = statement.compile()
        escapes = self._source.backslash_escapes
        sql, params = convert_paramstyle(
            compiled.sql, compiled.params, self._source.paramstyle, backslash_escapes=escapes
        )
        statement.advance(StatementState.BOUND)

        if self._dev_mode:
            logger.info("== rawSql ==\n%s", compiled.raw_sql(backslash_escapes=escapes))
        logger.debug("%s: %s", mode.value, sql)

        try:
            with self._unit_of_work() as conn:
                cursor = conn.cursor()
                try:
                    cursor.execute(sql, params)
                    statement.advance(StatementState.EXECUTED)
                    return self._map_result(cursor, mode, compiled, required)
                finally:
                    cursor.close()
        finally:
            statement.advance(StatementState.CONSUMED)

    def _map_result(
        self,
        cursor: Any,
        mode: ExecutionMode,
        compiled: CompiledStatement,
        required: bool,
    ) -> Any:
        if mode is ExecutionMode.INSERT:
            key = cursor.lastrowid
            if not key:
                raise GeneratedKeyError(f"INSERT produced no generated key: {compiled.sql!r}")
            return int(key)

        if mode.is_write:
            return max(cursor.rowcount, 0)

        if cursor.description is None:
            rows: list[tuple[Any, ...]] = []
            type_codes: list[Any] = []
            columns: list[str] = []
        else:
            rows = list(cursor.fetchall())
            columns = [d[0] for d in cursor.description]
            type_codes = [d[1] for d in cursor.description]

        if mode is ExecutionMode.SELECT_ROWS:
            return [self._to_row(columns, type_codes, r) for r in rows]

        if mode is ExecutionMode.SELECT_ROW:
            return self._to_row(columns, type_codes, rows[0]) if rows else None

        if mode is ExecutionMode.SELECT_LONGS:
            return [self._first_long(r, type_codes[0]) for r in rows]

        if not rows:
            if required:
                raise NoRowsError(f"Query returned no rows: {compiled.sql!r}")
            return None
        value = self._source.convert_value(rows[0][0], type_codes[0])
        return coerce(value, _SCALAR_TYPES[mode])

    def _to_row(self, columns: list[str], type_codes: list[Any], values: Any) -> Row:
        return {
            name: self._source.convert_value(value, type_code)
            for name, type_code, value in zip(columns, type_codes, values)
        }

    def _first_long(self, row: Any, type_code: Any) -> int:
        value = to_long(self._source.convert_value(row[0], type_code))
        if value is None:
            raise CoercionError(None, "int")
        return value

    # ------------------------------------------------------------------
    # Connections and transactions
    # ------------------------------------------------------------------

    def _pinned(self) -> Any:
        return getattr(self._local, "conn", None)

    @contextmanager
    def _unit_of_work(self) -> Iterator[Any]:
        pinned = self._pinned()
        if pinned is not None:
            yield pinned
            return

        with self._source.connection() as conn:
            try:
                yield conn
            except BaseException:
                _rollback(conn)
                raise
            conn.commit()
            logger.debug("committed")

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed statements of this thread on one connection.

        Commits on a clean exit and rolls back if the block raises.

        Raises:
            TransactionError: If this thread already has an open transaction.
        """
        if self._closed:
            raise SessionClosedError()
        if self._pinned() is not None:
            raise TransactionError("A transaction is already open in this thread.")

        with self._source.connection() as conn:
            self._local.conn = conn
            logger.debug("transaction started")
            try:
                yield
            except BaseException:
                _rollback(conn)
                raise
            else:
                conn.commit()
                logger.debug("transaction committed")
            finally:
                self._local.conn = None


def _rollback(conn: Any) -> None:
    """Roll back after a failure without masking the error being raised."""
    try:
        conn.rollback()
    except Exception:
        logger.warning("rollback failed", exc_info=True)
    else:
        logger.debug("rolled back")
