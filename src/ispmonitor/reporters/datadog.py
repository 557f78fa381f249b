"""DogStatsD reporter built on the ``datadog`` client."""

import logging
from datetime import timedelta
from typing import Any

from datadog.dogstatsd import DogStatsd
from pydantic import Field

from ispmonitor.core.config import ConfigurationError, Section, duration_from_string
from ispmonitor.options import PluginOptions, parse_options
from ispmonitor.reporters.base import BaseReporter

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8125


class DatadogOptions(PluginOptions):
    address: str = ""
    namespace: str = ""
    tags: list[str] = Field(default_factory=list)
    buffered: bool = False
    async_uds: bool = False
    write_timeout_uds: str = ""


def client_kwargs(options: DatadogOptions) -> dict[str, Any]:
    """Translate reporter options into ``DogStatsd`` keyword arguments.

    ``address`` is either ``host:port`` or ``unix:///path/to/socket``.
    ``write_timeout_uds`` only applies to unix sockets and becomes the
    client's socket timeout.

    Raises:
        ConfigurationError: If the address cannot be parsed.
    """
    kwargs: dict[str, Any] = {"disable_buffering": not options.buffered}
    address = options.address.strip()
    if address.startswith("unix://"):
        kwargs["socket_path"] = address[len("unix://") :]
        write_timeout = duration_from_string(options.write_timeout_uds, timedelta(0))
        if write_timeout > timedelta(0):
            kwargs["socket_timeout"] = write_timeout.total_seconds()
    elif address:
        host, sep, port = address.rpartition(":")
        if not sep:
            host, port = address, str(DEFAULT_PORT)
        try:
            kwargs["port"] = int(port)
        except ValueError as exc:
            raise ConfigurationError(f"invalid statsd port in address {address!r}") from exc
        kwargs["host"] = host or DEFAULT_HOST
    if options.namespace:
        kwargs["namespace"] = options.namespace
    if options.tags:
        kwargs["constant_tags"] = list(options.tags)
    return kwargs


class DatadogReporter(BaseReporter):
    """Sends statistics to a DogStatsD agent.

    Counts are sent as increments, timings in milliseconds, and events with
    their tags attached.
    """

    default_name = "datadog"

    def __init__(self, client: DogStatsd, name: str = "", background_sender: bool = False) -> None:
        super().__init__(name)
        self.client = client
        self.background_sender = background_sender

    @classmethod
    def from_section(cls, section: Section, debug: bool = False) -> "DatadogReporter":
        options = parse_options(DatadogOptions, section)
        kwargs = client_kwargs(options)
        try:
            client = DogStatsd(**kwargs)
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"cannot create statsd client: {exc}") from exc
        background_sender = options.async_uds and "socket_path" in kwargs
        if background_sender:
            client.enable_background_sender()
        logger.debug("DogStatsD client created with %s", kwargs)
        return cls(client, section.name, background_sender)

    def timing(self, metric: str, duration: timedelta, *tags: str) -> None:
        self.client.timing(metric, duration / timedelta(milliseconds=1), tags=list(tags))

    def histogram(self, metric: str, value: float, *tags: str) -> None:
        self.client.histogram(metric, value, tags=list(tags))

    def count(self, metric: str, value: int, *tags: str) -> None:
        self.client.increment(metric, value, tags=list(tags))

    def gauge(self, metric: str, value: float, *tags: str) -> None:
        self.client.gauge(metric, value, tags=list(tags))

    def event(self, title: str, message: str, *tags: str) -> None:
        self.client.event(title, message, tags=list(tags))

    def close(self) -> None:
        if self.background_sender:
            # blocks until queued payloads are sent
            self.client.disable_background_sender()
        self.client.flush()
        self.client.close_socket()
