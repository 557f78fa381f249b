"""Shared demultiplexing of statistics onto a reporter's typed emitters.

Every reporter routes buckets through ``report_bucket`` so that all sinks
interpret statistics identically.
"""

from collections.abc import Iterable

from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.models import Event, Metric, Statistic, StatisticType, statistic_type
from ispmonitor.core.ports import Reporter


def dispatch(reporter: Reporter, statistic: Statistic) -> bool:
    """Emit one statistic through the matching typed emitter.

    Returns:
        True if something was emitted, False for unknown statistics.
    """
    kind = statistic_type(statistic)
    if kind is StatisticType.EVENT:
        assert isinstance(statistic, Event)
        reporter.event(statistic.title, statistic.message, *statistic.tags)
        return True
    if kind is StatisticType.UNKNOWN:
        return False

    assert isinstance(statistic, Metric)
    value = statistic.value
    if kind is StatisticType.COUNT:
        reporter.count(statistic.name, value.as_int(), *statistic.tags)
    elif kind is StatisticType.GAUGE:
        reporter.gauge(statistic.name, value.as_float(), *statistic.tags)
    elif kind is StatisticType.TIMING:
        reporter.timing(statistic.name, value.as_duration(), *statistic.tags)
    elif kind is StatisticType.HISTOGRAM:
        reporter.histogram(statistic.name, value.as_float(), *statistic.tags)
    return True


def report_bucket(
    reporter: Reporter, bucket: StatisticsBucket | Iterable[Statistic]
) -> int:
    """Emit every statistic of a bucket in order.

    Returns:
        Number of statistics emitted.
    """
    statistics = bucket.snapshot() if isinstance(bucket, StatisticsBucket) else bucket
    return sum(1 for statistic in statistics if dispatch(reporter, statistic))
