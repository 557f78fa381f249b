"""Helper functions for creating Metric and Event statistics."""

from collections.abc import Iterable
from datetime import timedelta

from ispmonitor.core.models import Event, Metric, MetricKind
from ispmonitor.core.values import Value


def _as_value(value: Value | int | float, default: type) -> Value:
    if isinstance(value, Value):
        return value
    if default is int:
        return Value.from_int(int(value))
    return Value.from_float(value)


def count(
    name: str,
    value: Value | int = 1,
    tags: Iterable[str] = (),
) -> Metric:
    """Create a count metric.

    Args:
        name: Metric name (e.g., "isp_monitor.pinger.packets_sent")
        value: Count to report (default: 1)
        tags: Optional ``key:value`` tags

    Returns:
        Metric of kind COUNT
    """
    return Metric(MetricKind.COUNT, name, _as_value(value, int), tuple(tags))


def gauge(
    name: str,
    value: Value | float,
    tags: Iterable[str] = (),
) -> Metric:
    """Create a gauge metric.

    Args:
        name: Metric name (e.g., "isp_monitor.system.cpu_percent")
        value: Current gauge value
        tags: Optional ``key:value`` tags

    Returns:
        Metric of kind GAUGE
    """
    return Metric(MetricKind.GAUGE, name, _as_value(value, float), tuple(tags))


def histogram(
    name: str,
    value: Value | float,
    tags: Iterable[str] = (),
) -> Metric:
    """Create a histogram metric for a single observation."""
    return Metric(MetricKind.HISTOGRAM, name, _as_value(value, float), tuple(tags))


def timing(
    name: str,
    duration: Value | timedelta,
    tags: Iterable[str] = (),
) -> Metric:
    """Create a timing metric.

    Args:
        name: Metric name (e.g., "isp_monitor.pinger.avg_rtt")
        duration: Elapsed time, as a ``timedelta`` or a ready-made Value
        tags: Optional ``key:value`` tags

    Returns:
        Metric of kind TIMING
    """
    value = duration if isinstance(duration, Value) else Value.from_duration(duration)
    return Metric(MetricKind.TIMING, name, value, tuple(tags))


def event(title: str, message: str, tags: Iterable[str] = ()) -> Event:
    """Create an event."""
    return Event(title, message, tuple(tags))
