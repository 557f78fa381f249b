"""Port interfaces for collector and reporter plugins.

These protocols define the capability sets the scheduler and the registry
rely on. The core depends only on these interfaces, not on concrete plugins.
"""

from collections.abc import Mapping
from datetime import timedelta
from typing import Protocol, runtime_checkable

from ispmonitor.core.bucket import StatisticsBucket


@runtime_checkable
class Reporter(Protocol):
    """Port for statistic sinks.

    Reporters are shared by every collector thread, so implementations must
    tolerate concurrent calls.
    Examples: LogReporter, DatadogReporter, NDJSONReporter, InMemoryReporter.
    """

    @property
    def name(self) -> str:
        """Unique name of this reporter instance."""
        ...

    def timing(self, metric: str, duration: timedelta, *tags: str) -> None:
        """Emit a timing metric."""
        ...

    def count(self, metric: str, value: int, *tags: str) -> None:
        """Emit a count metric."""
        ...

    def histogram(self, metric: str, value: float, *tags: str) -> None:
        """Emit a histogram observation."""
        ...

    def gauge(self, metric: str, value: float, *tags: str) -> None:
        """Emit a gauge metric."""
        ...

    def event(self, title: str, message: str, *tags: str) -> None:
        """Emit an event."""
        ...

    def report_statistics(self, bucket: StatisticsBucket) -> None:
        """Emit every statistic in the bucket through the typed emitters."""
        ...


@runtime_checkable
class Collector(Protocol):
    """Port for periodic probes.

    Examples: PingCollector, SpeedTestCollector, SystemCollector.
    """

    @property
    def name(self) -> str:
        """Unique name of this collector instance."""
        ...

    def collect(self) -> StatisticsBucket:
        """Run the probe once.

        Returns:
            A bucket holding the statistics of this run.

        Raises:
            CollectionError: If the probe failed; carries the partial bucket.
        """
        ...

    def run(self, reporters: Mapping[str, Reporter]) -> None:
        """Start collecting periodically in the background and report to all reporters."""
        ...

    def stop(self, timeout: float | None = None) -> None:
        """Stop the background collection started by ``run``."""
        ...
