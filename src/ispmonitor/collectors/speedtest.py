"""Bandwidth collector using speedtest.net through ``speedtest-cli``."""

import logging
from datetime import timedelta

import speedtest

from ispmonitor.collectors.base import BaseCollector, interval_from_section
from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.config import DEFAULT_COLLECT_INTERVAL, Section, duration_from_string
from ispmonitor.core.statistics import gauge, histogram
from ispmonitor.options import PluginOptions, parse_options

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = timedelta(seconds=5)
BITS_PER_MEGABIT = 1_000_000


class SpeedTestOptions(PluginOptions):
    secure: bool = False
    timeout: str = ""


class SpeedTestCollector(BaseCollector):
    """Measures latency, download and upload speed against the closest server."""

    namespace = "speedtest"

    def __init__(
        self,
        name: str = "",
        secure: bool = False,
        timeout: timedelta = DEFAULT_TIMEOUT,
        interval: timedelta = DEFAULT_COLLECT_INTERVAL,
        debug: bool = False,
    ) -> None:
        super().__init__(name or "speedtest", interval, debug)
        self.secure = secure
        self.timeout = timeout

    @classmethod
    def from_section(cls, section: Section, debug: bool = False) -> "SpeedTestCollector":
        options = parse_options(SpeedTestOptions, section)
        return cls(
            section.name,
            secure=options.secure,
            timeout=duration_from_string(options.timeout, DEFAULT_TIMEOUT),
            interval=interval_from_section(section),
            debug=debug,
        )

    def _client(self) -> speedtest.Speedtest:
        return speedtest.Speedtest(timeout=self.timeout.total_seconds(), secure=self.secure)

    def gather(self, bucket: StatisticsBucket) -> None:
        logger.debug("Collecting speedtest results")
        client = self._client()
        client_config = client.config.get("client", {})
        logger.debug(
            "speedtest - testing from %s (%s)", client_config.get("isp"), client_config.get("ip")
        )
        server = client.get_best_server()
        logger.debug(
            "speedtest - hosted by %s (%s) [%.2f km]: %.0f ms",
            server.get("sponsor"),
            server.get("name"),
            float(server.get("d", 0.0)),
            float(server.get("latency", 0.0)),
        )

        tags = (f"server_id:{server.get('id')}", f"server_sponsor:{server.get('sponsor')}")
        # histograms are emitted as floats, so keep the latency in milliseconds
        latency_ms = float(server.get("latency", 0.0))

        bucket.add(gauge(self.metric_name("server_distance"), float(server.get("d", 0.0)), tags))
        bucket.add(histogram(self.metric_name("server_latency"), latency_ms, tags))

        download = client.download() / BITS_PER_MEGABIT
        bucket.add(gauge(self.metric_name("download_speed"), download, tags))
        upload = client.upload() / BITS_PER_MEGABIT
        bucket.add(gauge(self.metric_name("upload_speed"), upload, tags))
        logger.debug("Reporting speedtest results: %.2f down / %.2f up Mbit/s", download, upload)
