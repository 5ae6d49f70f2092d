"""Fluent SQL statement builder.

``Sql`` accumulates raw SQL fragments and positional ``?`` values in append
order.  It never touches the database: :meth:`Sql.compile` hands the final
``(sql, params)`` pair to the :class:`~simpledb.execute.executor.Executor`
that generated the statement, and the execution shortcuts (``insert``,
``select_long``, ...) simply delegate to it::

    sql = (
        db.gen_sql()
        .append("SELECT id")
        .append("FROM article")
        .append_in("WHERE id IN (?)", ids)
        .append_in("ORDER BY FIELD(id, ?)", ids)
    )
    found = sql.select_longs()

Lifecycle
---------
A statement moves through :class:`StatementState` exactly once::

    BUILT -> BOUND -> EXECUTED -> CONSUMED

Once it has left ``BUILT`` it can neither be appended to nor executed again.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from simpledb.errors import (
    PlaceholderCountError,
    StatementConsumedError,
    StatementError,
)
from simpledb.statement.placeholders import (
    count_placeholders,
    expand_placeholder,
    normalize_values,
)
from simpledb.statement.render import render_raw_sql

if TYPE_CHECKING:
    from simpledb.execute.executor import Executor, Row


class StatementState(str, enum.Enum):
    """Lifecycle states of a :class:`Sql` statement."""

    BUILT = "built"
    BOUND = "bound"
    EXECUTED = "executed"
    CONSUMED = "consumed"

    def __str__(self) -> str:
        return self.value


_ORDER = list(StatementState)


@dataclass(frozen=True)
class CompiledStatement:
    """The final text and values of a statement, ready for binding.

    Attributes:
        sql: SQL text with qmark (``?``) placeholders.
        params: Positional values, one per placeholder, in order.
    """

    sql: str
    params: tuple[Any, ...]

    def raw_sql(self, *, backslash_escapes: bool = False) -> str:
        """Return the SQL with values inlined, for human inspection only."""
        return render_raw_sql(self.sql, self.params, backslash_escapes=backslash_escapes)


class Sql:
    """Accumulates SQL fragments and their bound values.

    Args:
        executor: The executor used by the execution shortcuts.  A bare
            ``Sql()`` can still be built and compiled, and executed by
            passing it to an :class:`~simpledb.execute.executor.Executor`.
            Placeholders are counted with the quoting rules of the
            executor's source; a bare ``Sql()`` uses standard SQL quoting.
    """

    def __init__(self, executor: Executor | None = None) -> None:
        self._executor = executor
        self._backslash_escapes = (
            executor.source.backslash_escapes if executor is not None else False
        )
        self._fragments: list[str] = []
        self._params: list[Any] = []
        self._state = StatementState.BUILT

    def __repr__(self) -> str:
        return f"Sql({self.sql!r}, params={self.params!r}, state={self._state})"

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def append(self, fragment: str, *values: Any) -> Sql:
        """Append a fragment and the values for its ``?`` placeholders.

        Args:
            fragment: Raw SQL text; it is not escaped or quoted.
            *values: One value per ``?`` in ``fragment``, in order.

        Returns:
            This statement, for chaining.

        Raises:
            PlaceholderCountError: If the number of values does not match
                the number of placeholders in ``fragment``.
            StatementConsumedError: If the statement was already executed.
        """
        self._ensure_state(StatementState.BUILT)
        expected = count_placeholders(fragment, backslash_escapes=self._backslash_escapes)
        if expected != len(values):
            raise PlaceholderCountError(expected, len(values), fragment)
        self._fragments.append(fragment)
        self._params.extend(values)
        return self

    def append_in(self, fragment: str, *values: Any) -> Sql:
        """Append a fragment whose single placeholder expands to a value list.

        Values may be passed as one iterable or as several arguments::

            sql.append_in("WHERE id IN (?)", [1, 2, 3])
            sql.append_in("WHERE id IN (?)", 1, 2, 3)

        Both append ``WHERE id IN (?, ?, ?)`` and bind ``1, 2, 3``.

        Raises:
            EmptyValuesError: If no values were supplied.
            PlaceholderCountError: If ``fragment`` does not contain exactly
                one placeholder.
            StatementConsumedError: If the statement was already executed.
        """
        self._ensure_state(StatementState.BUILT)
        normalized = normalize_values(values)
        expanded = expand_placeholder(
            fragment, len(normalized), backslash_escapes=self._backslash_escapes
        )
        return self.append(expanded, *normalized)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def sql(self) -> str:
        """The fragments joined with single spaces."""
        return " ".join(self._fragments)

    @property
    def params(self) -> tuple[Any, ...]:
        return tuple(self._params)

    @property
    def state(self) -> StatementState:
        return self._state

    @property
    def executor(self) -> Executor | None:
        return self._executor

    def compile(self) -> CompiledStatement:
        """Return the final ``(sql, params)`` pair.

        Raises:
            StatementError: If the statement has no fragments.
            PlaceholderCountError: If the placeholder invariant is broken.
            StatementConsumedError: If the statement was already executed.
        """
        self._ensure_state(StatementState.BUILT)
        sql = self.sql
        if not sql.strip():
            raise StatementError("Statement is empty; append at least one fragment.")
        expected = count_placeholders(sql, backslash_escapes=self._backslash_escapes)
        if expected != len(self._params):
            raise PlaceholderCountError(expected, len(self._params), sql)
        return CompiledStatement(sql=sql, params=self.params)

    def raw_sql(self) -> str:
        """Return the SQL with values inlined, for human inspection only."""
        return render_raw_sql(self.sql, self.params, backslash_escapes=self._backslash_escapes)

    def advance(self, state: StatementState) -> None:
        """Move the statement forward to ``state``.

        Called by the executor; states can only move forward.
        """
        if _ORDER.index(state) < _ORDER.index(self._state):
            raise StatementConsumedError(self._state)
        self._state = state

    def _ensure_state(self, state: StatementState) -> None:
        if self._state is not state:
            raise StatementConsumedError(self._state)

    # ------------------------------------------------------------------
    # Execution shortcuts
    # ------------------------------------------------------------------

    def insert(self) -> int:
        """Execute as INSERT and return the generated primary key."""
        return self._require_executor().insert(self)

    def update(self) -> int:
        """Execute as UPDATE and return the affected row count."""
        return self._require_executor().update(self)

    def delete(self) -> int:
        """Execute as DELETE and return the affected row count."""
        return self._require_executor().delete(self)

    def select_rows(self) -> list[Row]:
        return self._require_executor().select_rows(self)

    def select_row(self) -> Row | None:
        return self._require_executor().select_row(self)

    def select_long(self, *, required: bool = False) -> int | None:
        return self._require_executor().select_long(self, required=required)

    def select_string(self, *, required: bool = False) -> str | None:
        return self._require_executor().select_string(self, required=required)

    def select_boolean(self, *, required: bool = False) -> bool | None:
        return self._require_executor().select_boolean(self, required=required)

    def select_datetime(self, *, required: bool = False) -> datetime | None:
        return self._require_executor().select_datetime(self, required=required)

    def select_longs(self) -> list[int]:
        return self._require_executor().select_longs(self)

    def _require_executor(self) -> Executor:
        if self._executor is None:
            raise StatementError(
                "Statement is not attached to an executor; create it with "
                "SimpleDb.gen_sql() or pass it to Executor directly."
            )
        return self._executor
