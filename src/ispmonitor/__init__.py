"""ispmonitor - periodic connection telemetry with pluggable collectors and reporters."""

from ispmonitor.agent import Agent
from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.config import Config, ConfigurationError, Section, load_config
from ispmonitor.core.models import Event, Metric, MetricKind, Statistic, StatisticType
from ispmonitor.core.ports import Collector, Reporter
from ispmonitor.core.registry import PluginRegistry
from ispmonitor.core.scheduler import CollectionError, CollectionLoop, fan_out
from ispmonitor.core.statistics import count, event, gauge, histogram, timing
from ispmonitor.core.values import Value, ValueKind

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "CollectionError",
    "CollectionLoop",
    "Collector",
    "Config",
    "ConfigurationError",
    "Event",
    "Metric",
    "MetricKind",
    "PluginRegistry",
    "Reporter",
    "Section",
    "Statistic",
    "StatisticType",
    "StatisticsBucket",
    "Value",
    "ValueKind",
    "count",
    "event",
    "fan_out",
    "gauge",
    "histogram",
    "load_config",
    "timing",
]
