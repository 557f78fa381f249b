"""Tests for DatadogReporter."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.config import ConfigurationError, Section
from ispmonitor.core.statistics import count, timing
from ispmonitor.reporters import datadog as datadog_module
from ispmonitor.reporters.datadog import DatadogOptions, DatadogReporter, client_kwargs


class TestClientKwargs:
    """Tests for translating options into DogStatsd arguments."""

    @pytest.mark.plugins
    def test_defaults_are_unbuffered(self) -> None:
        """Without options the client sends every metric immediately."""
        assert client_kwargs(DatadogOptions()) == {"disable_buffering": True}

    @pytest.mark.plugins
    def test_host_and_port(self) -> None:
        """host:port is split."""
        kwargs = client_kwargs(DatadogOptions(address="statsd.local:9125"))
        assert kwargs["host"] == "statsd.local"
        assert kwargs["port"] == 9125

    @pytest.mark.plugins
    def test_host_without_port(self) -> None:
        """A bare host uses the default statsd port."""
        kwargs = client_kwargs(DatadogOptions(address="statsd.local"))
        assert kwargs["host"] == "statsd.local"
        assert kwargs["port"] == 8125

    @pytest.mark.plugins
    def test_port_without_host(self) -> None:
        """A bare :port uses localhost."""
        kwargs = client_kwargs(DatadogOptions(address=":8126"))
        assert kwargs["host"] == "localhost"
        assert kwargs["port"] == 8126

    @pytest.mark.plugins
    def test_unix_socket(self) -> None:
        """unix:// addresses select a socket path."""
        kwargs = client_kwargs(DatadogOptions(address="unix:///var/run/dsd.socket"))
        assert kwargs["socket_path"] == "/var/run/dsd.socket"
        assert "host" not in kwargs

    @pytest.mark.plugins
    def test_unix_socket_write_timeout(self) -> None:
        """write_timeout_uds becomes the socket timeout in seconds."""
        kwargs = client_kwargs(
            DatadogOptions(address="unix:///var/run/dsd.socket", write_timeout_uds="250ms")
        )
        assert kwargs["socket_timeout"] == 0.25

    @pytest.mark.plugins
    def test_write_timeout_ignored_for_udp(self) -> None:
        """write_timeout_uds has no effect on host:port addresses."""
        kwargs = client_kwargs(DatadogOptions(address="statsd.local:8125", write_timeout_uds="1s"))
        assert "socket_timeout" not in kwargs

    @pytest.mark.plugins
    def test_invalid_write_timeout_is_ignored(self) -> None:
        """An unparsable write timeout leaves the client default."""
        kwargs = client_kwargs(
            DatadogOptions(address="unix:///var/run/dsd.socket", write_timeout_uds="soon")
        )
        assert "socket_timeout" not in kwargs

    @pytest.mark.plugins
    def test_namespace_tags_and_buffering(self) -> None:
        """Namespace, constant tags and buffering are passed through."""
        kwargs = client_kwargs(
            DatadogOptions(namespace="home", tags=["env:prod"], buffered=True)
        )
        assert kwargs == {
            "disable_buffering": False,
            "namespace": "home",
            "constant_tags": ["env:prod"],
        }

    @pytest.mark.plugins
    def test_bad_port(self) -> None:
        """A non-numeric port is a configuration error."""
        with pytest.raises(ConfigurationError, match="invalid statsd port"):
            client_kwargs(DatadogOptions(address="localhost:statsd"))


class TestDatadogReporter:
    """Tests for forwarding emissions to the client."""

    @pytest.mark.plugins
    def test_timing_in_milliseconds(self) -> None:
        """Timings are sent as float milliseconds."""
        client = MagicMock()
        DatadogReporter(client).timing("rtt", timedelta(microseconds=12_500), "a:1")
        client.timing.assert_called_once_with("rtt", 12.5, tags=["a:1"])

    @pytest.mark.plugins
    def test_count_is_increment(self) -> None:
        """Counts are sent as increments."""
        client = MagicMock()
        DatadogReporter(client).count("sent", 5)
        client.increment.assert_called_once_with("sent", 5, tags=[])

    @pytest.mark.plugins
    def test_gauge_histogram_event(self) -> None:
        """Gauges, histograms and events map to their client calls."""
        client = MagicMock()
        reporter = DatadogReporter(client)
        reporter.gauge("g", 1.5, "a:1")
        reporter.histogram("h", 2.5)
        reporter.event("title", "message", "b:2")
        client.gauge.assert_called_once_with("g", 1.5, tags=["a:1"])
        client.histogram.assert_called_once_with("h", 2.5, tags=[])
        client.event.assert_called_once_with("title", "message", tags=["b:2"])

    @pytest.mark.plugins
    def test_report_statistics(self) -> None:
        """A bucket is forwarded statistic by statistic."""
        client = MagicMock()
        bucket = StatisticsBucket()
        bucket.add(timing("rtt", timedelta(milliseconds=3)))
        bucket.add(count("sent", 2))

        DatadogReporter(client, "dd").report_statistics(bucket)

        client.timing.assert_called_once_with("rtt", 3.0, tags=[])
        client.increment.assert_called_once_with("sent", 2, tags=[])

    @pytest.mark.plugins
    def test_close_flushes(self) -> None:
        """close() flushes and closes the socket."""
        client = MagicMock()
        DatadogReporter(client).close()
        client.flush.assert_called_once_with()
        client.close_socket.assert_called_once_with()
        client.disable_background_sender.assert_not_called()

    @pytest.mark.plugins
    def test_close_drains_background_sender(self) -> None:
        """close() stops the background sender before flushing."""
        client = MagicMock()
        DatadogReporter(client, background_sender=True).close()
        assert [c[0] for c in client.method_calls] == [
            "disable_background_sender",
            "flush",
            "close_socket",
        ]


class TestDatadogReporterFromSection:
    """Tests for building the reporter from configuration."""

    @pytest.mark.plugins
    def test_builds_client_from_options(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The client is created with the translated options."""
        created: list[dict] = []

        def fake_client(**kwargs: object) -> MagicMock:
            created.append(kwargs)
            return MagicMock()

        monkeypatch.setattr(datadog_module, "DogStatsd", fake_client)
        section = Section(
            name="dd", type="datadog", options={"address": "10.0.0.2:8125", "namespace": "home"}
        )

        reporter = DatadogReporter.from_section(section)

        assert reporter.name == "dd"
        assert created == [
            {"disable_buffering": True, "port": 8125, "host": "10.0.0.2", "namespace": "home"}
        ]

    @pytest.mark.plugins
    def test_async_uds_enables_background_sender(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """async_uds turns on the background sender for unix sockets only."""
        clients: list[MagicMock] = []

        def fake_client(**kwargs: object) -> MagicMock:
            clients.append(MagicMock())
            return clients[-1]

        monkeypatch.setattr(datadog_module, "DogStatsd", fake_client)
        uds = DatadogReporter.from_section(
            Section(
                name="uds",
                type="datadog",
                options={"address": "unix:///var/run/dsd.socket", "async_uds": True},
            )
        )
        udp = DatadogReporter.from_section(
            Section(name="udp", type="datadog", options={"address": ":8125", "async_uds": True})
        )

        assert uds.background_sender is True
        clients[0].enable_background_sender.assert_called_once_with()
        assert udp.background_sender is False
        clients[1].enable_background_sender.assert_not_called()

    @pytest.mark.plugins
    def test_client_error_is_configuration_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Errors creating the client become configuration errors."""

        def broken_client(**kwargs: object) -> MagicMock:
            raise OSError("no such socket")

        monkeypatch.setattr(datadog_module, "DogStatsd", broken_client)
        with pytest.raises(ConfigurationError, match="cannot create statsd client"):
            DatadogReporter.from_section(Section(name="dd", type="datadog"))

