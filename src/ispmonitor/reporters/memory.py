"""In-memory reporter.

Keeps every emission in a list, or in a fixed-size ring buffer when
``max_size`` is given, evicting the oldest emissions first. Suitable for
testing and for embedding the agent in another process.
"""

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import timedelta

from pydantic import Field

from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.config import Section
from ispmonitor.options import PluginOptions, parse_options
from ispmonitor.reporters.base import BaseReporter


@dataclass(frozen=True)
class Emission:
    """One call to a typed emitter.

    Attributes:
        kind: "timing", "count", "histogram", "gauge" or "event".
        name: Metric name, or the event title.
        value: Emitted value, or the event message.
        tags: Tags passed with the emission.
    """

    kind: str
    name: str
    value: timedelta | int | float | str
    tags: tuple[str, ...] = field(default_factory=tuple)


class MemoryOptions(PluginOptions):
    max_size: int | None = Field(default=None, ge=1)


class InMemoryReporter(BaseReporter):
    """In-memory implementation of the Reporter port."""

    default_name = "memory"

    def __init__(self, name: str = "", max_size: int | None = None) -> None:
        super().__init__(name)
        self._emissions: deque[Emission] = deque(maxlen=max_size)
        self._lock = threading.Lock()
        self.buckets_received = 0

    @classmethod
    def from_section(cls, section: Section, debug: bool = False) -> "InMemoryReporter":
        options = parse_options(MemoryOptions, section)
        return cls(section.name, max_size=options.max_size)

    def _record(self, emission: Emission) -> None:
        with self._lock:
            self._emissions.append(emission)

    def timing(self, metric: str, duration: timedelta, *tags: str) -> None:
        self._record(Emission("timing", metric, duration, tags))

    def count(self, metric: str, value: int, *tags: str) -> None:
        self._record(Emission("count", metric, value, tags))

    def histogram(self, metric: str, value: float, *tags: str) -> None:
        self._record(Emission("histogram", metric, value, tags))

    def gauge(self, metric: str, value: float, *tags: str) -> None:
        self._record(Emission("gauge", metric, value, tags))

    def event(self, title: str, message: str, *tags: str) -> None:
        self._record(Emission("event", title, message, tags))

    def report_statistics(self, bucket: StatisticsBucket) -> None:
        super().report_statistics(bucket)
        with self._lock:
            self.buckets_received += 1

    def emissions(self) -> list[Emission]:
        """Return the retained emissions, oldest first."""
        with self._lock:
            return list(self._emissions)

    def clear(self) -> None:
        with self._lock:
            self._emissions.clear()
            self.buckets_received = 0
