"""Reporter plugins implementing the Reporter port."""

from ispmonitor.core.ports import Reporter
from ispmonitor.core.registry import PluginRegistry
from ispmonitor.reporters.base import BaseReporter
from ispmonitor.reporters.datadog import DatadogReporter
from ispmonitor.reporters.log import LogReporter
from ispmonitor.reporters.memory import Emission, InMemoryReporter
from ispmonitor.reporters.ndjson import NDJSONReporter


def register_builtin_reporters(registry: PluginRegistry[Reporter]) -> None:
    """Register the reporter types shipped with ispmonitor."""
    registry.register("log", LogReporter.from_section)
    registry.register("datadog", DatadogReporter.from_section)
    registry.register("ndjson", NDJSONReporter.from_section)
    registry.register("memory", InMemoryReporter.from_section)


__all__ = [
    "BaseReporter",
    "DatadogReporter",
    "Emission",
    "InMemoryReporter",
    "LogReporter",
    "NDJSONReporter",
    "register_builtin_reporters",
]
