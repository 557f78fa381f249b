"""Shared test fixtures for all test modules."""

from collections.abc import Callable

import pytest

from ispmonitor.core.config import Section
from ispmonitor.reporters.memory import InMemoryReporter
from tests.support import StubCollector


@pytest.fixture
def memory_reporter() -> InMemoryReporter:
    """Provide an empty in-memory reporter."""
    return InMemoryReporter("memory")


@pytest.fixture
def stub_collector() -> StubCollector:
    """Provide a collector that adds one gauge per cycle."""
    return StubCollector()


@pytest.fixture
def section() -> Callable[..., Section]:
    """Factory fixture for configuration sections."""

    def _section(
        type: str = "stub",
        name: str = "test",
        interval: str = "",
        **options: object,
    ) -> Section:
        return Section(name=name, type=type, interval=interval, options=options)

    return _section
