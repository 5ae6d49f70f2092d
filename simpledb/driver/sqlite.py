"""SQLite connection source (stdlib ``sqlite3``).

Declared column types drive value conversion through ``PARSE_DECLTYPES``:

* ``BIT`` / ``BOOL`` / ``BOOLEAN`` columns come back as ``bool``.
* ``DATETIME`` / ``TIMESTAMP`` columns come back as ``datetime``.

Each connection also gets the MySQL functions that statements written for
this library commonly use: ``NOW()``, ``FIELD(x, a, b, ...)`` (for
``ORDER BY FIELD``) and ``CONCAT(...)``.

An in-memory database exists only as long as its connection, so
``":memory:"`` sources share a single connection guarded by a lock.  File
databases open one connection per unit of work.
"""
from __future__ import annotations

import sqlite3
import threading
from datetime import datetime
from typing import TYPE_CHECKING, Any

from simpledb.driver.base import ConnectionSource
from simpledb.statement.placeholders import Paramstyle

if TYPE_CHECKING:
    from simpledb.config import SimpleDbConfig

MEMORY = ":memory:"


def _convert_bool(raw: bytes) -> bool:
    return int(raw) != 0


def _convert_datetime(raw: bytes) -> datetime:
    return datetime.fromisoformat(raw.decode())


def _adapt_datetime(value: datetime) -> str:
    return value.isoformat(sep=" ")


for _name in ("BIT", "BOOL", "BOOLEAN"):
    sqlite3.register_converter(_name, _convert_bool)
for _name in ("DATETIME", "TIMESTAMP"):
    sqlite3.register_converter(_name, _convert_datetime)
sqlite3.register_adapter(datetime, _adapt_datetime)


# ---------------------------------------------------------------------------
# MySQL-compatible SQL functions
# ---------------------------------------------------------------------------


def _now() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def _field(needle: Any, *haystack: Any) -> int:
    """MySQL ``FIELD()``: 1-based position of ``needle``, ``0`` if absent."""
    if needle is None:
        return 0
    for position, candidate in enumerate(haystack, start=1):
        if candidate == needle:
            return position
    return 0


def _concat(*args: Any) -> str | None:
    """MySQL ``CONCAT()``: ``NULL`` if any argument is ``NULL``."""
    if any(a is None for a in args):
        return None
    return "".join(str(a) for a in args)


class SQLiteSource(ConnectionSource):
    """Hands out ``sqlite3`` connections.

    Args:
        database: Database file path, or ``":memory:"``.
        **connect_kwargs: Extra keyword arguments for ``sqlite3.connect``.
    """

    def __init__(self, database: str = MEMORY, **connect_kwargs: Any) -> None:
        self._database = database
        self._connect_kwargs = connect_kwargs
        self._lock = threading.RLock()
        self._shared: sqlite3.Connection | None = None

    @classmethod
    def from_config(cls, config: SimpleDbConfig) -> SQLiteSource:
        return cls(config.url)

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    @property
    def paramstyle(self) -> Paramstyle:
        return "qmark"

    @property
    def database(self) -> str:
        return self._database

    @property
    def in_memory(self) -> bool:
        return self._database == MEMORY

    def connect(self) -> sqlite3.Connection:
        if not self.in_memory:
            return self._open()
        self._lock.acquire()
        try:
            if self._shared is None:
                self._shared = self._open(check_same_thread=False)
        except BaseException:
            self._lock.release()
            raise
        return self._shared

    def release(self, conn: sqlite3.Connection) -> None:
        if self.in_memory:
            self._lock.release()
        else:
            conn.close()

    def close(self) -> None:
        with self._lock:
            if self._shared is not None:
                self._shared.close()
                self._shared = None

    def _open(self, **overrides: Any) -> sqlite3.Connection:
        kwargs = {"detect_types": sqlite3.PARSE_DECLTYPES, **self._connect_kwargs, **overrides}
        conn = sqlite3.connect(self._database, **kwargs)
        conn.create_function("NOW", 0, _now)
        conn.create_function("FIELD", -1, _field, deterministic=True)
        conn.create_function("CONCAT", -1, _concat, deterministic=True)
        return conn
