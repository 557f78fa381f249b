"""Reporter that writes statistics as log lines."""

import logging
from datetime import timedelta

from ispmonitor.core.config import Section
from ispmonitor.reporters.base import BaseReporter

logger = logging.getLogger(__name__)


def _format_tags(tags: tuple[str, ...]) -> str:
    return ", ".join(tags)


def _millis(duration: timedelta) -> int:
    return int(duration / timedelta(milliseconds=1))


class LogReporter(BaseReporter):
    """Reports every statistic as an INFO line on the ``ispmonitor.reporters.log`` logger.

    Example output:
        ``[metric] type=timing name=isp_monitor.pinger.avg_rtt duration=12ms address:1.1.1.1``
    """

    default_name = "log"

    def __init__(self, name: str = "", log: logging.Logger | None = None) -> None:
        """Initialize the reporter.

        Args:
            name: Reporter name (default: "log").
            log: Logger to write to. Defaults to this module's logger.
        """
        super().__init__(name)
        self._log = log or logger

    @classmethod
    def from_section(cls, section: Section, debug: bool = False) -> "LogReporter":
        return cls(section.name)

    def timing(self, metric: str, duration: timedelta, *tags: str) -> None:
        self._log.info(
            "[metric] type=timing name=%s duration=%dms %s",
            metric,
            _millis(duration),
            _format_tags(tags),
        )

    def count(self, metric: str, value: int, *tags: str) -> None:
        self._log.info(
            "[metric] type=count name=%s val=%d %s", metric, value, _format_tags(tags)
        )

    def histogram(self, metric: str, value: float, *tags: str) -> None:
        self._log.info(
            "[metric] type=histogram name=%s val=%f %s", metric, value, _format_tags(tags)
        )

    def gauge(self, metric: str, value: float, *tags: str) -> None:
        self._log.info(
            "[metric] type=gauge name=%s val=%f %s", metric, value, _format_tags(tags)
        )

    def event(self, title: str, message: str, *tags: str) -> None:
        self._log.info(
            "[event] title=%s message=%s %s", title, message, _format_tags(tags)
        )
