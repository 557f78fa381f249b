"""Host resource collector using psutil."""

import logging
from datetime import timedelta

import psutil

from ispmonitor.collectors.base import BaseCollector, interval_from_section
from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.config import DEFAULT_COLLECT_INTERVAL, Section
from ispmonitor.core.statistics import gauge
from ispmonitor.options import PluginOptions, parse_options

logger = logging.getLogger(__name__)


class SystemOptions(PluginOptions):
    per_cpu: bool = False


class SystemCollector(BaseCollector):
    """Reports CPU, memory and thread usage of the host running the agent."""

    namespace = "system"

    def __init__(
        self,
        name: str = "",
        per_cpu: bool = False,
        interval: timedelta = DEFAULT_COLLECT_INTERVAL,
        debug: bool = False,
    ) -> None:
        super().__init__(name or "system", interval, debug)
        self.per_cpu = per_cpu
        # first cpu_percent call primes psutil's counters and always reads 0.0
        psutil.cpu_percent(interval=None)

    @classmethod
    def from_section(cls, section: Section, debug: bool = False) -> "SystemCollector":
        options = parse_options(SystemOptions, section)
        return cls(
            section.name,
            per_cpu=options.per_cpu,
            interval=interval_from_section(section),
            debug=debug,
        )

    @property
    def tags(self) -> tuple[str, ...]:
        return (f"name:{self.name}",)

    def gather(self, bucket: StatisticsBucket) -> None:
        tags = self.tags
        if self.per_cpu:
            for index, percent in enumerate(psutil.cpu_percent(interval=None, percpu=True)):
                bucket.add(gauge(self.metric_name("cpu_percent"), percent, (*tags, f"cpu:{index}")))
        else:
            bucket.add(gauge(self.metric_name("cpu_percent"), psutil.cpu_percent(interval=None), tags))

        memory = psutil.virtual_memory()
        bucket.add(gauge(self.metric_name("memory_percent"), memory.percent, tags))
        bucket.add(gauge(self.metric_name("memory_used_bytes"), float(memory.used), tags))

        threads = psutil.Process().num_threads()
        bucket.add(gauge(self.metric_name("thread_count"), float(threads), tags))
        logger.debug(
            "System metrics: CPU=%s, Memory=%.1f%%, Threads=%d",
            "per-cpu" if self.per_cpu else "total",
            memory.percent,
            threads,
        )
