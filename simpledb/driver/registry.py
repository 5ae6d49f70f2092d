"""Connection source registry.

``SourceFactory`` maps the ``driver`` name of a
:class:`~simpledb.config.SimpleDbConfig` to a
:class:`~simpledb.driver.base.ConnectionSource` class.  Register a new
source once; :meth:`SimpleDb.from_config <simpledb.db.SimpleDb.from_config>`
looks it up automatically.

Usage::

    from simpledb.driver.registry import SourceFactory

    @SourceFactory.register("duckdb")
    class DuckDBSource(ConnectionSource):
        ...
"""
from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, ClassVar

from simpledb.driver.base import ConnectionSource
from simpledb.errors import ConfigError

if TYPE_CHECKING:
    from simpledb.config import SimpleDbConfig


class SourceFactory:
    """Registry mapping driver names to :class:`ConnectionSource` classes.

    Example::

        @SourceFactory.register("duckdb")
        class DuckDBSource(ConnectionSource):
            ...

        source = SourceFactory.create(SimpleDbConfig(driver="duckdb", url="app.db"))
    """

    _sources: ClassVar[dict[str, type[ConnectionSource]]] = {}

    @classmethod
    def register(
        cls, name: str
    ) -> Callable[[type[ConnectionSource]], type[ConnectionSource]]:
        """Decorator that registers a source class under ``name``.

        Args:
            name: The driver name (e.g. ``"sqlite"``).

        Returns:
            A decorator that registers and returns the source class.
        """

        def decorator(source_cls: type[ConnectionSource]) -> type[ConnectionSource]:
            cls._sources[name] = source_cls
            return source_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, source_cls: type[ConnectionSource]) -> None:
        """Register a source class without using the decorator form."""
        cls._sources[name] = source_cls

    @classmethod
    def create(cls, config: SimpleDbConfig) -> ConnectionSource:
        """Instantiate the source registered for ``config.driver``.

        Raises:
            ConfigError: If no source is registered under that name.
        """
        source_cls = cls._sources.get(config.driver)
        if source_cls is None:
            raise ConfigError(
                f"Unsupported driver: '{config.driver}'. "
                f"Registered drivers: {cls.registered_names()}.",
                field="driver",
            )
        return source_cls.from_config(config)

    @classmethod
    def registered_names(cls) -> list[str]:
        """Return the sorted list of registered driver names."""
        return sorted(cls._sources)
