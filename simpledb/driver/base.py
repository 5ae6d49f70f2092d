"""Connection source abstraction over DB-API 2.0 drivers.

The Template Method pattern is used:

- ``ConnectionSource`` defines how a connection is acquired and released
  around one unit of work (:meth:`ConnectionSource.connection`).
- ``SQLiteSource`` and ``EngineSource`` override the driver-specific steps
  (opening connections, paramstyle, value conversion).

Everything past the source speaks plain PEP 249: ``cursor()``,
``execute()``, ``description``, ``fetchall()``, ``rowcount``,
``lastrowid``, ``commit()``, ``rollback()``, ``close()``.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from simpledb.statement.placeholders import Paramstyle

if TYPE_CHECKING:
    from simpledb.config import SimpleDbConfig

logger = logging.getLogger(__name__)


class ConnectionSource(ABC):
    """Abstract base for objects that hand out DB-API connections.

    A source must be safe to call from several threads when the statements
    using it run concurrently; pooling, if any, is the source's business.
    """

    @classmethod
    @abstractmethod
    def from_config(cls, config: SimpleDbConfig) -> ConnectionSource:
        """Create a source from a :class:`~simpledb.config.SimpleDbConfig`."""

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the database dialect name (e.g. ``'sqlite'``, ``'mysql'``)."""

    @property
    @abstractmethod
    def paramstyle(self) -> Paramstyle:
        """Return the driver's PEP 249 ``paramstyle``."""

    @abstractmethod
    def connect(self) -> Any:
        """Acquire a DB-API connection."""

    def release(self, conn: Any) -> None:
        """Give back a connection obtained from :meth:`connect`.

        The default closes it.
        """
        conn.close()

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Acquire a connection for one unit of work and always release it."""
        conn = self.connect()
        logger.debug("acquired %s connection %r", self.dialect_name, conn)
        try:
            yield conn
        finally:
            self.release(conn)
            logger.debug("released %s connection %r", self.dialect_name, conn)

    @property
    def backslash_escapes(self) -> bool:
        """Whether ``\\`` escapes a quote inside string literals.

        ``False`` means only doubled quotes escape, as in standard SQL.
        """
        return False

    def convert_value(self, value: Any, type_code: Any) -> Any:
        """Convert a driver-native column value for a row mapping.

        Args:
            value: The value as returned by ``fetchall()``.
            type_code: The column's ``cursor.description`` type code.

        Returns:
            The value to expose to callers.  The default returns it as-is.
        """
        return value

    def close(self) -> None:
        """Release every resource held by the source.

        The default does nothing.
        """
