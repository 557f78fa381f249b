"""Registry mapping plugin type names to factories.

One registry is built for collectors and one for reporters when the agent
is wired together. Nothing is registered implicitly at import time.
"""

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from ispmonitor.core.config import ConfigurationError, Section
from ispmonitor.core.locks import ReadWriteLock

logger = logging.getLogger(__name__)

T = TypeVar("T")

PluginFactory = Callable[[Section, bool], T | None]


class PluginRegistry(Generic[T]):
    """Concurrency-safe table of plugin factories keyed by type name.

    Registration and lookup may happen from different threads. A factory is
    published atomically under the write lock, so ``create`` sees either the
    old factory or the new one, never anything in between.

    Example:
        ```python
        registry: PluginRegistry[Reporter] = PluginRegistry("reporter")
        registry.register("log", LogReporter.from_section)
        reporter = registry.create(Section(name="main", type="log"))
        ```
    """

    def __init__(self, kind: str = "plugin") -> None:
        """Initialize an empty registry.

        Args:
            kind: Human-readable plugin kind, used in log messages.
        """
        self.kind = kind
        self._factories: dict[str, PluginFactory[T]] = {}
        self._lock = ReadWriteLock()

    def register(self, type_name: str, factory: PluginFactory[T]) -> None:
        """Register a factory for a type name. Re-registering replaces it.

        Raises:
            ValueError: If ``type_name`` is empty.
            TypeError: If ``factory`` is not callable.
        """
        if not type_name:
            raise ValueError(f"{self.kind} type name must not be empty")
        if not callable(factory):
            raise TypeError("factory must be callable")
        with self._lock.write_locked():
            replaced = type_name in self._factories
            self._factories[type_name] = factory
        if replaced:
            logger.debug("Replaced %s factory for type %r", self.kind, type_name)

    def lookup(self, type_name: str) -> PluginFactory[T] | None:
        """Return the factory registered for a type name, or None."""
        with self._lock.read_locked():
            return self._factories.get(type_name)

    def create(self, section: Section, debug: bool = False) -> T | None:
        """Build a plugin from a configuration section.

        Args:
            section: Section whose ``type`` selects the factory.
            debug: Passed through to the factory.

        Returns:
            The plugin, or None when the type is unknown or the factory
            could not build a plugin from the section's options. The reason
            is logged; it is up to the caller whether None is fatal.
        """
        factory = self.lookup(section.type)
        if factory is None:
            logger.warning(
                "Unknown %s type %r in section %r", self.kind, section.type, section.name
            )
            return None
        try:
            plugin = factory(section, debug)
        except ConfigurationError as exc:
            logger.warning(
                "Cannot create %s %r of type %r: %s",
                self.kind,
                section.name,
                section.type,
                exc,
            )
            return None
        if plugin is None:
            logger.warning(
                "Factory for %s type %r produced nothing for section %r",
                self.kind,
                section.type,
                section.name,
            )
        return plugin

    def types(self) -> list[str]:
        """Return the registered type names, sorted."""
        with self._lock.read_locked():
            return sorted(self._factories)

    def __contains__(self, type_name: object) -> bool:
        with self._lock.read_locked():
            return type_name in self._factories

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._factories)
