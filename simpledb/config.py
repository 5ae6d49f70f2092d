"""Pydantic models for simpledb session configuration.

A session is configured once, explicitly, and owns its connection source and
developer-mode flag; there is no module-level global state::

    from simpledb import SimpleDb, SimpleDbConfig

    db = SimpleDb.from_config(SimpleDbConfig(driver="sqlite", url="app.db"))

    settings = MySQLSettings(host="localhost", user="root",
                             password="secret", database="app")
    db = SimpleDb.from_config(
        SimpleDbConfig(driver="sqlalchemy", url=settings.url(), dev_mode=True)
    )
"""
from __future__ import annotations

from typing import Any
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SimpleDbConfig(BaseModel):
    """Configuration for a :class:`~simpledb.db.SimpleDb` session.

    Attributes:
        driver: Registered connection source name.
        url: SQLite database path (``":memory:"`` by default) for the
            ``sqlite`` driver, or a SQLAlchemy URL for ``sqlalchemy``.
        dev_mode: Log every executed statement with its values inlined.
        engine_options: Extra keyword arguments for
            :func:`sqlalchemy.create_engine` (pool size, echo, ...).
    """

    model_config = ConfigDict(extra="forbid")

    driver: str = "sqlite"
    url: str = ":memory:"
    dev_mode: bool = False
    engine_options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("url")
    @classmethod
    def _url_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("url must not be blank")
        return value


class MySQLSettings(BaseModel):
    """Connection settings for a MySQL server reached through PyMySQL.

    Attributes:
        host: Server host name.
        user: Login user.
        password: Login password.
        database: Default database (schema).
        port: Server port.
        charset: Connection character set.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = "localhost"
    user: str
    password: str = ""
    database: str
    port: int = Field(default=3306, gt=0, lt=65536)
    charset: str = "utf8mb4"

    def url(self) -> str:
        """Render a ``mysql+pymysql://`` SQLAlchemy URL."""
        return (
            f"mysql+pymysql://{quote_plus(self.user)}:{quote_plus(self.password)}"
            f"@{self.host}:{self.port}/{self.database}?charset={self.charset}"
        )

    def to_config(self, *, dev_mode: bool = False, **engine_options: Any) -> SimpleDbConfig:
        """Return a :class:`SimpleDbConfig` using the ``sqlalchemy`` driver."""
        return SimpleDbConfig(
            driver="sqlalchemy",
            url=self.url(),
            dev_mode=dev_mode,
            engine_options=engine_options,
        )
