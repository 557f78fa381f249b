"""Periodic collection loop and fan-out to reporters.

Each collector runs its own ``CollectionLoop`` in a dedicated thread. A loop
collects once immediately, then once per interval, and delivers every bucket
to every reporter. Probe failures become a ``collect_failure`` count metric
instead of stopping the loop, and a failing reporter never prevents the
others from receiving the bucket.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from datetime import timedelta

from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.ports import Collector, Reporter
from ispmonitor.core.statistics import count

logger = logging.getLogger(__name__)

METRIC_PREFIX = "isp_monitor."
COLLECT_FAILURE_SUFFIX = "collect_failure"


class CollectionError(Exception):
    """A probe failed during ``collect``.

    Attributes:
        bucket: Statistics gathered before the failure. Never None.
    """

    def __init__(self, message: str, bucket: StatisticsBucket | None = None) -> None:
        super().__init__(message)
        self.bucket = bucket if bucket is not None else StatisticsBucket()


def failure_metric_name(namespace: str) -> str:
    """Return the failure metric name for a collector namespace.

    Example: ``failure_metric_name("pinger")`` is
    ``"isp_monitor.pinger.collect_failure"``.
    """
    return f"{METRIC_PREFIX}{namespace}.{COLLECT_FAILURE_SUFFIX}"


def _named(reporters: Mapping[str, Reporter] | Iterable[Reporter]) -> list[tuple[str, Reporter]]:
    if isinstance(reporters, Mapping):
        return list(reporters.items())
    return [(getattr(reporter, "name", repr(reporter)), reporter) for reporter in reporters]


def fan_out(
    bucket: StatisticsBucket,
    reporters: Mapping[str, Reporter] | Iterable[Reporter],
) -> list[tuple[str, Exception]]:
    """Deliver a bucket to every reporter.

    Each reporter is called exactly once. An exception raised by one
    reporter is logged and does not affect the others.

    Args:
        bucket: Statistics of one collection cycle.
        reporters: Reporters keyed by name, or a plain iterable of reporters.

    Returns:
        ``(reporter_name, exception)`` for every reporter that failed.
    """
    failures: list[tuple[str, Exception]] = []
    for name, reporter in _named(reporters):
        try:
            reporter.report_statistics(bucket)
        except Exception as exc:
            logger.exception("Reporter %r failed to report statistics", name)
            failures.append((name, exc))
    return failures


class CollectionLoop:
    """Drives one collector: collect, report, wait, repeat.

    Ticks fall on a fixed grid ``start + k * interval``. A cycle that runs
    past one or more ticks delays the next cycle rather than skipping it;
    the overrun ticks collapse into a single immediate cycle, after which
    the grid resumes.
    """

    def __init__(
        self,
        collector: Collector,
        reporters: Mapping[str, Reporter],
        interval: timedelta | float,
        *,
        failure_metric: str | None = None,
        failure_tags: Iterable[str] | None = None,
        clock: Callable[[], float] = time.monotonic,
        wait: Callable[[float], bool] | None = None,
        stop_event: threading.Event | None = None,
    ) -> None:
        """Initialize the loop.

        Args:
            collector: Collector to drive.
            reporters: Reporters receiving every bucket, keyed by name.
            interval: Collection period, as a ``timedelta`` or seconds.
            failure_metric: Name of the failure count metric. Defaults to the
                collector's ``failure_metric`` attribute, else
                ``failure_metric_name(collector.name)``.
            failure_tags: Tags attached to the failure metric. Defaults to the
                collector's ``tags`` attribute, if any.
            clock: Monotonic clock in seconds.
            wait: Blocks for up to the given number of seconds and returns
                True when the loop should stop. Defaults to waiting on the
                stop event.
            stop_event: Event that stops the loop when set.
        """
        seconds = interval.total_seconds() if isinstance(interval, timedelta) else float(interval)
        if seconds <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")
        self.collector = collector
        self.reporters = dict(reporters)
        self.interval = seconds
        self.failure_metric = (
            failure_metric
            or getattr(collector, "failure_metric", None)
            or failure_metric_name(collector.name)
        )
        if failure_tags is None:
            failure_tags = getattr(collector, "tags", ())
        self.failure_tags = tuple(failure_tags)
        self.cycles = 0
        self._clock = clock
        self._stop_event = stop_event or threading.Event()
        self._wait = wait or self._stop_event.wait
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_cycle(self) -> StatisticsBucket:
        """Collect once and report the bucket to every reporter.

        Returns:
            The bucket that was reported.
        """
        try:
            bucket = self.collector.collect()
        except CollectionError as exc:
            bucket = exc.bucket
            self._record_failure(bucket, exc)
        except Exception as exc:
            bucket = StatisticsBucket()
            self._record_failure(bucket, exc)
        else:
            if bucket is None:
                bucket = StatisticsBucket()

        fan_out(bucket, self.reporters)
        self.cycles += 1
        return bucket

    def _record_failure(self, bucket: StatisticsBucket, exc: Exception) -> None:
        logger.warning(
            "Collector %r failed to collect: %s",
            self.collector.name,
            exc,
            exc_info=logger.isEnabledFor(logging.DEBUG),
        )
        bucket.add(count(self.failure_metric, 1, self.failure_tags))

    def run_forever(self) -> None:
        """Run cycles until the stop event is set. Blocks the calling thread."""
        logger.info(
            "Collector %r started, collecting every %.3gs",
            self.collector.name,
            self.interval,
        )
        next_tick = self._clock()
        while not self._stop_event.is_set():
            self.run_cycle()
            next_tick += self.interval
            now = self._clock()
            if next_tick < now:
                overrun = int((now - next_tick) // self.interval)
                next_tick += overrun * self.interval
            if self._wait(max(0.0, next_tick - now)):
                break
        logger.info("Collector %r stopped", self.collector.name)

    def start(self) -> threading.Thread:
        """Run the loop in a daemon thread named after the collector."""
        if self.running:
            raise RuntimeError(f"collector {self.collector.name!r} is already running")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run_forever,
            name=f"collector-{self.collector.name}",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to stop and wait for the current cycle to finish."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
