"""Reporter appending statistics to a newline-delimited JSON file."""

import json
import threading
import time
from datetime import timedelta
from pathlib import Path
from typing import TextIO

from ispmonitor.core.config import ConfigurationError, Section
from ispmonitor.core.encoding.ndjson import statistic_to_dict
from ispmonitor.core.models import Statistic
from ispmonitor.core.statistics import count, event, gauge, histogram, timing
from ispmonitor.options import PluginOptions, parse_options
from ispmonitor.reporters.base import BaseReporter


class NDJSONOptions(PluginOptions):
    path: str


class NDJSONReporter(BaseReporter):
    """Writes one JSON object per emission to a text stream.

    Each line carries a ``timestamp`` (Unix seconds) plus the fields of
    ``statistic_to_dict``. Writes are serialized and flushed line by line.
    """

    default_name = "ndjson"

    def __init__(self, stream: TextIO, name: str = "", owns_stream: bool = False) -> None:
        """Initialize the reporter.

        Args:
            stream: Text stream to append lines to.
            name: Reporter name (default: "ndjson").
            owns_stream: Close the stream in ``close()``.
        """
        super().__init__(name)
        self._stream = stream
        self._owns_stream = owns_stream
        self._lock = threading.Lock()

    @classmethod
    def from_section(cls, section: Section, debug: bool = False) -> "NDJSONReporter":
        options = parse_options(NDJSONOptions, section)
        path = Path(options.path).expanduser()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            stream = path.open("a", encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"cannot open {path} for writing: {exc}") from exc
        return cls(stream, section.name, owns_stream=True)

    def _write(self, statistic: Statistic) -> None:
        obj = {"timestamp": time.time(), **statistic_to_dict(statistic)}
        line = json.dumps(obj) + "\n"
        with self._lock:
            self._stream.write(line)
            self._stream.flush()

    def timing(self, metric: str, duration: timedelta, *tags: str) -> None:
        self._write(timing(metric, duration, tags))

    def count(self, metric: str, value: int, *tags: str) -> None:
        self._write(count(metric, value, tags))

    def histogram(self, metric: str, value: float, *tags: str) -> None:
        self._write(histogram(metric, value, tags))

    def gauge(self, metric: str, value: float, *tags: str) -> None:
        self._write(gauge(metric, value, tags))

    def event(self, title: str, message: str, *tags: str) -> None:
        self._write(event(title, message, tags))

    def close(self) -> None:
        if self._owns_stream:
            with self._lock:
                self._stream.close()
