"""Core domain models for collected statistics."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeAlias

from ispmonitor.core.values import Value


class MetricKind(Enum):
    """How a metric should be interpreted by a reporter."""

    COUNT = "count"
    GAUGE = "gauge"
    TIMING = "timing"
    HISTOGRAM = "histogram"


class StatisticType(Enum):
    """Discriminant of a statistic, derived from its contents."""

    EVENT = "event"
    COUNT = "count"
    GAUGE = "gauge"
    TIMING = "timing"
    HISTOGRAM = "histogram"
    UNKNOWN = "unknown"


def _freeze_tags(instance: object, tags: Iterable[str]) -> None:
    if isinstance(tags, str):
        raise TypeError("tags must be a sequence of strings, not a single string")
    object.__setattr__(instance, "tags", tuple(str(tag) for tag in tags))


@dataclass(frozen=True)
class Metric:
    """A named, typed, tagged numeric measurement.

    Attributes:
        kind: Metric kind (count, gauge, timing or histogram).
        name: Metric name (e.g. isp_monitor.pinger.avg_rtt).
        value: The measured value.
        tags: Ordered ``key:value`` style tags.
    """

    kind: MetricKind
    name: str
    value: Value
    tags: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", MetricKind(self.kind))
        if not isinstance(self.value, Value):
            raise TypeError(f"metric value must be a Value, got {type(self.value).__name__}")
        _freeze_tags(self, self.tags)

    @property
    def type(self) -> StatisticType:
        return StatisticType(self.kind.value)


@dataclass(frozen=True)
class Event:
    """A titled, tagged textual occurrence.

    Attributes:
        title: Short event title.
        message: Event body.
        tags: Ordered ``key:value`` style tags.
    """

    title: str
    message: str
    tags: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _freeze_tags(self, self.tags)

    @property
    def type(self) -> StatisticType:
        return StatisticType.EVENT


Statistic: TypeAlias = Metric | Event


def statistic_type(statistic: object) -> StatisticType:
    """Return the discriminant of a statistic.

    Anything that is neither a Metric nor an Event is UNKNOWN.
    """
    if isinstance(statistic, (Metric, Event)):
        return statistic.type
    return StatisticType.UNKNOWN


def is_statistic(obj: object) -> bool:
    return isinstance(obj, (Metric, Event))
