"""Base class for collectors."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import timedelta

from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.config import DEFAULT_COLLECT_INTERVAL, Section, duration_from_string
from ispmonitor.core.ports import Reporter
from ispmonitor.core.scheduler import (
    COLLECT_FAILURE_SUFFIX,
    METRIC_PREFIX,
    CollectionError,
    CollectionLoop,
)

logger = logging.getLogger(__name__)


def interval_from_section(section: Section) -> timedelta:
    """Return the section's collect interval, or the 30s default."""
    return duration_from_string(section.interval, DEFAULT_COLLECT_INTERVAL)


class BaseCollector(ABC):
    """Collector with the shared collect/run plumbing.

    Subclasses implement ``gather`` to add statistics to a fresh bucket.
    ``collect`` turns any exception from ``gather`` into a
    ``CollectionError`` carrying whatever was gathered before the failure,
    and ``run`` drives the collector with a ``CollectionLoop``.
    """

    namespace = "collector"

    def __init__(
        self,
        name: str,
        interval: timedelta = DEFAULT_COLLECT_INTERVAL,
        debug: bool = False,
    ) -> None:
        self._name = name or self.namespace
        self.interval = interval
        self.debug = debug
        self._loop: CollectionLoop | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def tags(self) -> tuple[str, ...]:
        """Tags attached to every statistic, including the failure metric."""
        return ()

    def metric_name(self, suffix: str) -> str:
        return f"{METRIC_PREFIX}{self.namespace}.{suffix}"

    @property
    def failure_metric(self) -> str:
        return self.metric_name(COLLECT_FAILURE_SUFFIX)

    @abstractmethod
    def gather(self, bucket: StatisticsBucket) -> None:
        """Run the probe and add its statistics to ``bucket``."""

    def collect(self) -> StatisticsBucket:
        bucket = StatisticsBucket()
        try:
            self.gather(bucket)
        except CollectionError as exc:
            if exc.bucket is not bucket:
                raise CollectionError(str(exc), bucket) from exc
            raise
        except Exception as exc:
            raise CollectionError(str(exc) or type(exc).__name__, bucket) from exc
        return bucket

    def run(self, reporters: Mapping[str, Reporter]) -> None:
        """Start collecting in a background thread."""
        if self._loop is not None and self._loop.running:
            logger.warning("Collector %r is already running", self.name)
            return
        self._loop = CollectionLoop(self, reporters, self.interval)
        self._loop.start()

    def stop(self, timeout: float | None = None) -> None:
        if self._loop is not None:
            self._loop.stop(timeout)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, interval={self.interval})"
