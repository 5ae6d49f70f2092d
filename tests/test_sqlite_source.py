"""Unit tests for the SQLite connection source."""

from __future__ import annotations

import sqlite3
import threading

import pytest

from simpledb.driver import SQLiteSource


def test_memory_source_shares_one_connection():
    source = SQLiteSource()
    with source.connection() as first:
        pass
    with source.connection() as second:
        pass
    assert first is second
    source.close()


def test_failed_open_releases_memory_lock(monkeypatch):
    source = SQLiteSource()

    def fail_open(**overrides):
        raise sqlite3.OperationalError("unable to open database file")

    monkeypatch.setattr(source, "_open", fail_open)
    with pytest.raises(sqlite3.OperationalError):
        source.connect()
    monkeypatch.undo()

    opened = []

    def other_thread():
        with source.connection() as conn:
            opened.append(conn.execute("SELECT 1").fetchone()[0])

    worker = threading.Thread(target=other_thread)
    worker.start()
    worker.join(timeout=5)
    assert not worker.is_alive()
    assert opened == [1]
    source.close()


def test_mysql_functions_are_installed():
    source = SQLiteSource()
    with source.connection() as conn:
        row = conn.execute(
            "SELECT FIELD(3, 2, 1, 3), FIELD(9, 1), CONCAT('%', 'a', '%'), CONCAT('a', NULL)"
        ).fetchone()
    assert row == (3, 0, "%a%", None)
    source.close()
