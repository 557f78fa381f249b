"""Base class for reporters."""

from abc import ABC, abstractmethod
from datetime import timedelta

from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.dispatch import report_bucket


class BaseReporter(ABC):
    """Reporter with the shared bucket demultiplexing.

    Subclasses implement the five typed emitters; ``report_statistics``
    routes each statistic to them through ``report_bucket``.
    """

    default_name = "reporter"

    def __init__(self, name: str = "") -> None:
        self._name = name or self.default_name

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    def timing(self, metric: str, duration: timedelta, *tags: str) -> None: ...

    @abstractmethod
    def count(self, metric: str, value: int, *tags: str) -> None: ...

    @abstractmethod
    def histogram(self, metric: str, value: float, *tags: str) -> None: ...

    @abstractmethod
    def gauge(self, metric: str, value: float, *tags: str) -> None: ...

    @abstractmethod
    def event(self, title: str, message: str, *tags: str) -> None: ...

    def report_statistics(self, bucket: StatisticsBucket) -> None:
        report_bucket(self, bucket)

    def close(self) -> None:
        """Release any resources held by the reporter."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
