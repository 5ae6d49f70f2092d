"""Test fixtures: the sample ``article`` table DDL and seed data."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from simpledb import SimpleDb

_FIXTURES_DIR = Path(__file__).parent

#: Number of rows inserted by :func:`seed_articles`.
ARTICLE_COUNT = 6


def load_ddl(target: Literal["sqlite", "mysql"] = "sqlite") -> str:
    """Return the ``article`` table DDL for the given backend.

    Args:
        target: ``'sqlite'`` (default) or ``'mysql'``.

    Returns:
        A single CREATE TABLE statement.
    """
    return (_FIXTURES_DIR / f"ddl_{target}.sql").read_text(encoding="utf-8")


def create_article_table(db: SimpleDb, target: Literal["sqlite", "mysql"] = "sqlite") -> None:
    db.run("DROP TABLE IF EXISTS article")
    db.run(load_ddl(target))


def seed_articles(db: SimpleDb, count: int = ARTICLE_COUNT) -> None:
    """Insert ``count`` articles; articles after the third are blind.

    Titles and bodies are ``제목{n}`` and ``내용{n}``.
    """
    for no in range(1, count + 1):
        db.run(
            """
            INSERT INTO article (createdDate, modifiedDate, title, `body`, isBlind)
            VALUES (NOW(), NOW(), ?, ?, ?)
            """,
            f"제목{no}",
            f"내용{no}",
            no > 3,
        )
