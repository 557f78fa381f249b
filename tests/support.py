"""Test doubles shared by unit, integration and feature tests."""

from collections.abc import Callable
from datetime import timedelta

from ispmonitor.collectors.base import BaseCollector
from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.statistics import gauge
from ispmonitor.reporters.memory import InMemoryReporter


class StubCollector(BaseCollector):
    """Collector whose probe is a plain callable, for driving the scheduler."""

    namespace = "stub"

    def __init__(
        self,
        name: str = "stub",
        probe: Callable[[StatisticsBucket], None] | None = None,
        interval: timedelta = timedelta(seconds=30),
    ) -> None:
        super().__init__(name, interval)
        self.probe = probe
        self.calls = 0

    @property
    def tags(self) -> tuple[str, ...]:
        return (f"name:{self.name}",)

    def gather(self, bucket: StatisticsBucket) -> None:
        self.calls += 1
        if self.probe is None:
            bucket.add(gauge(self.metric_name("value"), float(self.calls), self.tags))
        else:
            self.probe(bucket)


class ExplodingReporter(InMemoryReporter):
    """Reporter whose report_statistics always raises."""

    def report_statistics(self, bucket: StatisticsBucket) -> None:
        raise RuntimeError(f"{self.name} is broken")
