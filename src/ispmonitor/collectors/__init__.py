"""Collector plugins implementing the Collector port."""

from ispmonitor.collectors.base import BaseCollector, interval_from_section
from ispmonitor.collectors.ping import PingCollector
from ispmonitor.collectors.speedtest import SpeedTestCollector
from ispmonitor.collectors.system import SystemCollector
from ispmonitor.core.ports import Collector
from ispmonitor.core.registry import PluginRegistry


def register_builtin_collectors(registry: PluginRegistry[Collector]) -> None:
    """Register the collector types shipped with ispmonitor."""
    registry.register("ping", PingCollector.from_section)
    registry.register("speedtest", SpeedTestCollector.from_section)
    registry.register("system", SystemCollector.from_section)


__all__ = [
    "BaseCollector",
    "PingCollector",
    "SpeedTestCollector",
    "SystemCollector",
    "interval_from_section",
    "register_builtin_collectors",
]
