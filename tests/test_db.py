"""Unit tests for the SimpleDb session facade."""

from __future__ import annotations

import threading

import pytest

from simpledb import SimpleDb, is_read_statement
from simpledb.errors import SessionClosedError, TransactionError


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT 1",
        "  select * from article",
        "WITH t AS (SELECT 1) SELECT * FROM t",
        "-- comment\nSELECT 1",
        "/* hint */ SELECT 1",
        "(SELECT 1) UNION (SELECT 2)",
        "SHOW TABLES",
        "PRAGMA table_info(article)",
    ],
)
def test_read_statements(sql):
    assert is_read_statement(sql)


@pytest.mark.parametrize(
    "sql",
    [
        "INSERT INTO article VALUES (1)",
        "\n  UPDATE article SET title = 'x'",
        "DELETE FROM article",
        "CREATE TABLE t (id INT)",
        "DROP TABLE IF EXISTS article",
        "TRUNCATE article",
        "",
    ],
)
def test_write_statements(sql):
    assert not is_read_statement(sql)


def test_run_ddl_and_writes_return_counts(empty_db):
    assert empty_db.run("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)") == 0
    assert empty_db.run("INSERT INTO t (name) VALUES (?), (?)", "a", "b") == 2
    assert empty_db.run("UPDATE t SET name = ? WHERE id > ?", "z", 0) == 2


def test_run_select_returns_rows(empty_db):
    empty_db.run("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
    empty_db.run("INSERT INTO t (name) VALUES (?)", "a")
    assert empty_db.run("SELECT id, name FROM t WHERE name = ?", "a") == [{"id": 1, "name": "a"}]


def test_gen_sql_returns_fresh_statements(empty_db):
    first = empty_db.gen_sql()
    second = empty_db.gen_sql()
    assert first is not second
    assert first.executor is empty_db.executor


def test_dev_mode_toggle(empty_db):
    assert empty_db.dev_mode is False
    empty_db.dev_mode = True
    assert empty_db.executor.dev_mode is True


def test_transaction_commits(empty_db):
    empty_db.run("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
    with empty_db.transaction() as db:
        db.gen_sql().append("INSERT INTO t (name) VALUES (?)", "a").insert()
        db.gen_sql().append("INSERT INTO t (name) VALUES (?)", "b").insert()
    assert empty_db.gen_sql().append("SELECT COUNT(*) FROM t").select_long() == 2


def test_transaction_rolls_back(empty_db):
    empty_db.run("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
    empty_db.run("INSERT INTO t (name) VALUES (?)", "kept")
    with pytest.raises(RuntimeError):
        with empty_db.transaction():
            empty_db.gen_sql().append("INSERT INTO t (name) VALUES (?)", "lost").insert()
            raise RuntimeError("abort")
    assert empty_db.run("SELECT name FROM t") == [{"name": "kept"}]


def test_nested_transaction(empty_db):
    with empty_db.transaction():
        with pytest.raises(TransactionError):
            with empty_db.transaction():
                pass


def test_closed_session_rejects_use():
    db = SimpleDb.sqlite()
    db.close()
    db.close()
    assert db.closed
    with pytest.raises(SessionClosedError):
        db.gen_sql()
    with pytest.raises(SessionClosedError):
        db.run("SELECT 1")


def test_context_manager_closes():
    with SimpleDb.sqlite() as db:
        assert db.run("SELECT 1 AS one") == [{"one": 1}]
    assert db.closed


def test_statement_built_before_close_is_rejected(empty_db):
    empty_db.run("CREATE TABLE t (id INTEGER)")
    sql = empty_db.gen_sql().append("SELECT COUNT(*) FROM t")
    empty_db.close()
    with pytest.raises(SessionClosedError):
        sql.select_long()
    assert empty_db.executor.closed


def test_backslash_is_an_ordinary_character_on_sqlite(empty_db):
    empty_db.run("CREATE TABLE t (id INTEGER, path TEXT)")
    empty_db.run("INSERT INTO t (id, path) VALUES (?, 'C:\\')", 1)
    sql = empty_db.gen_sql().append("SELECT COUNT(*) FROM t WHERE path = 'C:\\' AND id = ?", 1)
    assert sql.params == (1,)
    assert sql.select_long() == 1


def test_transaction_is_pinned_to_its_thread(tmp_path):
    seen = {}

    with SimpleDb.sqlite(str(tmp_path / "pinned.db")) as db:
        db.run("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")

        def other_thread():
            seen["in_transaction"] = db.executor.in_transaction
            seen["count"] = db.gen_sql().append("SELECT COUNT(*) FROM t").select_long()

        with db.transaction():
            db.gen_sql().append("INSERT INTO t (name) VALUES (?)", "a").insert()
            worker = threading.Thread(target=other_thread)
            worker.start()
            worker.join(timeout=10)
            assert db.executor.in_transaction

        # the other thread neither joined the transaction nor saw its write
        assert seen == {"in_transaction": False, "count": 0}
        assert db.gen_sql().append("SELECT COUNT(*) FROM t").select_long() == 1
