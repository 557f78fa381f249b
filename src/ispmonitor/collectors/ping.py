"""ICMP ping collector.

Sends ``count`` echo requests per cycle with ``icmplib`` and reports
round-trip times, packet counts and loss. The call blocks the collector's
own thread until the last reply arrives or ``timeout`` expires.
"""

import logging
import statistics
from datetime import timedelta

import icmplib
from pydantic import Field, field_validator

from ispmonitor.collectors.base import BaseCollector, interval_from_section
from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.config import DEFAULT_COLLECT_INTERVAL, Section, duration_from_string
from ispmonitor.core.statistics import count, histogram, timing
from ispmonitor.options import PluginOptions, parse_options

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 5
DEFAULT_PACKET_SIZE = 56
DEFAULT_TIMEOUT = timedelta(seconds=5)
DEFAULT_PING_INTERVAL = timedelta(seconds=1)


class PingOptions(PluginOptions):
    address: str = Field(min_length=1)
    count: int = DEFAULT_COUNT
    timeout: str = ""
    interval: str = ""
    packet_size: int = Field(default=DEFAULT_PACKET_SIZE, alias="packetSize")
    privileged: bool = False

    @field_validator("count", mode="after")
    @classmethod
    def _default_count(cls, value: int) -> int:
        return value if value > 0 else DEFAULT_COUNT

    @field_validator("packet_size", mode="after")
    @classmethod
    def _default_packet_size(cls, value: int) -> int:
        return value if value > 0 else DEFAULT_PACKET_SIZE


def _ms(value: float) -> timedelta:
    return timedelta(milliseconds=value)


class PingCollector(BaseCollector):
    """Collects ping statistics for one address."""

    namespace = "pinger"

    def __init__(
        self,
        name: str,
        address: str,
        count: int = DEFAULT_COUNT,
        timeout: timedelta = DEFAULT_TIMEOUT,
        interval: timedelta = DEFAULT_COLLECT_INTERVAL,
        ping_interval: timedelta = DEFAULT_PING_INTERVAL,
        packet_size: int = DEFAULT_PACKET_SIZE,
        privileged: bool = False,
        debug: bool = False,
    ) -> None:
        super().__init__(name or address, interval, debug)
        self.address = address
        self.count = count
        self.timeout = timeout
        self.ping_interval = ping_interval
        self.packet_size = packet_size
        self.privileged = privileged

    @classmethod
    def from_section(cls, section: Section, debug: bool = False) -> "PingCollector":
        options = parse_options(PingOptions, section)
        return cls(
            section.name,
            options.address,
            count=options.count,
            timeout=duration_from_string(options.timeout, DEFAULT_TIMEOUT),
            interval=interval_from_section(section),
            ping_interval=duration_from_string(options.interval, DEFAULT_PING_INTERVAL),
            packet_size=options.packet_size,
            privileged=options.privileged,
            debug=debug,
        )

    @property
    def tags(self) -> tuple[str, ...]:
        return (f"address:{self.address}", f"name:{self.name}")

    def gather(self, bucket: StatisticsBucket) -> None:
        logger.debug("Collecting ping results for %r (%s)", self.name, self.address)
        host = icmplib.ping(
            self.address,
            count=self.count,
            interval=self.ping_interval.total_seconds(),
            timeout=self.timeout.total_seconds(),
            privileged=self.privileged,
            payload_size=self.packet_size,
        )
        logger.debug("Reporting ping results for %r (%s)", self.name, self.address)

        tags = (f"address:{host.address}", f"name:{self.name}")
        stddev = statistics.pstdev(host.rtts) if host.rtts else 0.0

        bucket.add(timing(self.metric_name("avg_rtt"), _ms(host.avg_rtt), tags))
        bucket.add(timing(self.metric_name("max_rtt"), _ms(host.max_rtt), tags))
        bucket.add(timing(self.metric_name("min_rtt"), _ms(host.min_rtt), tags))
        bucket.add(timing(self.metric_name("stddev_rtt"), _ms(stddev), tags))

        bucket.add(count(self.metric_name("packets_sent"), host.packets_sent, tags))
        bucket.add(count(self.metric_name("packets_recv"), host.packets_received, tags))
        bucket.add(histogram(self.metric_name("packet_loss"), host.packet_loss * 100.0, tags))
