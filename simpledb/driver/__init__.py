"""Connection sources: the narrow interface to DB-API drivers."""
from __future__ import annotations

from simpledb.driver.base import ConnectionSource
from simpledb.driver.registry import SourceFactory
from simpledb.driver.sqlalchemy import EngineSource
from simpledb.driver.sqlite import SQLiteSource

SourceFactory.register_class("sqlite", SQLiteSource)
SourceFactory.register_class("sqlalchemy", EngineSource)

__all__ = [
    "ConnectionSource",
    "EngineSource",
    "SQLiteSource",
    "SourceFactory",
]
