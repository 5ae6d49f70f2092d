"""Shared pytest fixtures for simpledb unit and integration tests."""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from simpledb import SimpleDb
from tests.fixtures import create_article_table, seed_articles


@pytest.fixture()
def db() -> Iterator[SimpleDb]:
    """In-memory SQLite session with a seeded ``article`` table."""
    session = SimpleDb.sqlite(dev_mode=True)
    create_article_table(session)
    seed_articles(session)
    yield session
    session.close()


@pytest.fixture()
def empty_db() -> Iterator[SimpleDb]:
    """In-memory SQLite session with no tables."""
    session = SimpleDb.sqlite()
    yield session
    session.close()
