"""Wiring of collectors and reporters from configuration.

The ``Agent`` owns the two plugin registries. Plugins are registered on it
explicitly, built from a ``Config``, then started; each collector runs in
its own thread and reports to every reporter.
"""

import logging
from typing import Any

from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.config import DEFAULT_COLLECT_INTERVAL, Config, ConfigurationError, Section
from ispmonitor.core.ports import Collector, Reporter
from ispmonitor.core.registry import PluginFactory, PluginRegistry
from ispmonitor.core.scheduler import CollectionLoop

logger = logging.getLogger(__name__)

DEFAULT_REPORTER_SECTION = Section(name="defaultLog", type="log")


class Agent:
    """Builds, starts and stops the configured collectors and reporters."""

    def __init__(
        self,
        collector_registry: PluginRegistry[Collector] | None = None,
        reporter_registry: PluginRegistry[Reporter] | None = None,
        debug: bool = False,
    ) -> None:
        self.collector_registry = collector_registry or PluginRegistry("collector")
        self.reporter_registry = reporter_registry or PluginRegistry("reporter")
        self.debug = debug
        self.collectors: dict[str, Collector] = {}
        self.reporters: dict[str, Reporter] = {}
        self._started = False

    @classmethod
    def with_builtin_plugins(cls, debug: bool = False) -> "Agent":
        """Create an agent with the shipped collector and reporter types registered."""
        from ispmonitor.collectors import register_builtin_collectors
        from ispmonitor.reporters import register_builtin_reporters

        agent = cls(debug=debug)
        register_builtin_collectors(agent.collector_registry)
        register_builtin_reporters(agent.reporter_registry)
        return agent

    def register_collector_type(self, type_name: str, factory: PluginFactory[Collector]) -> None:
        self.collector_registry.register(type_name, factory)

    def register_reporter_type(self, type_name: str, factory: PluginFactory[Reporter]) -> None:
        self.reporter_registry.register(type_name, factory)

    def create_collector_from_config(self, section: Section) -> Collector | None:
        return self.collector_registry.create(section, self.debug)

    def create_reporter_from_config(self, section: Section) -> Reporter | None:
        return self.reporter_registry.create(section, self.debug)

    def configure(self, config: Config) -> None:
        """Build reporters and collectors from a configuration.

        Without configured reporters a single log reporter is used.
        Sections that cannot be built are skipped and logged.

        Raises:
            ConfigurationError: If no collectors are configured, or none of
                them could be built.
        """
        for section in config.reporters or [DEFAULT_REPORTER_SECTION]:
            reporter = self.create_reporter_from_config(section)
            if reporter is not None:
                _add_unique(self.reporters, reporter.name, reporter, "reporter")

        if not config.collectors:
            raise ConfigurationError("no collectors are configured")
        for section in config.collectors:
            collector = self.create_collector_from_config(section)
            if collector is not None:
                _add_unique(self.collectors, collector.name, collector, "collector")
        if not self.collectors:
            raise ConfigurationError("none of the configured collectors could be created")

        logger.info(
            "Configured %d collector(s) %s and %d reporter(s) %s",
            len(self.collectors),
            sorted(self.collectors),
            len(self.reporters),
            sorted(self.reporters),
        )

    @classmethod
    def from_config(cls, config: Config, debug: bool = False) -> "Agent":
        """Create an agent with the builtin plugins and configure it."""
        agent = cls.with_builtin_plugins(debug=debug)
        agent.configure(config)
        return agent

    def start(self) -> None:
        """Start every collector's loop."""
        if self._started:
            return
        for collector in self.collectors.values():
            collector.run(self.reporters)
        self._started = True

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop all collector loops, then close reporters that support it.

        A reporter whose ``close()`` raises is logged and does not keep the
        remaining reporters from being closed.
        """
        for collector in self.collectors.values():
            collector.stop(timeout)
        self._started = False
        for name, reporter in self.reporters.items():
            close = getattr(reporter, "close", None)
            if not callable(close):
                continue
            try:
                close()
            except Exception:
                logger.exception("Reporter %r failed to close", name)

    def collect_once(self) -> dict[str, StatisticsBucket]:
        """Run one cycle of every collector without reporting.

        Failures are turned into failure metrics exactly as in the loop.
        """
        results: dict[str, StatisticsBucket] = {}
        for name, collector in self.collectors.items():
            interval = getattr(collector, "interval", DEFAULT_COLLECT_INTERVAL)
            results[name] = CollectionLoop(collector, {}, interval).run_cycle()
        return results


def _add_unique(plugins: dict[str, Any], name: str, plugin: Any, kind: str) -> None:
    if name in plugins:
        logger.warning("Duplicate %s name %r, the later section replaces the earlier one", kind, name)
    plugins[name] = plugin
