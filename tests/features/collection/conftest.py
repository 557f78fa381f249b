"""BDD step definitions for collection and configuration features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from ispmonitor.agent import Agent
from ispmonitor.core.bucket import StatisticsBucket
from ispmonitor.core.config import Config, ConfigurationError, Section
from ispmonitor.core.scheduler import CollectionLoop
from ispmonitor.core.statistics import gauge
from ispmonitor.reporters.memory import InMemoryReporter
from tests.support import ExplodingReporter, StubCollector


@dataclass
class CollectionScenarioContext:
    """State shared between the steps of one scenario."""

    collector: StubCollector | None = None
    reporters: dict[str, InMemoryReporter] = field(default_factory=dict)
    ticks: list[float] = field(default_factory=list)
    collectors: list[Section] = field(default_factory=list)
    agent: Agent | None = None
    error: ConfigurationError | None = None


@pytest.fixture
def ctx() -> CollectionScenarioContext:
    """Fresh scenario context for each test."""
    return CollectionScenarioContext()


def _names(text: str) -> list[str]:
    return [name.strip() for name in text.split(",") if name.strip()]


# === Collection Steps ===


@given(parsers.parse('a collector named "{name}" that reports a gauge'))
def given_reporting_collector(ctx: CollectionScenarioContext, name: str) -> None:
    ctx.collector = StubCollector(name)


@given(parsers.parse('a collector named "{name}" that fails after reporting a gauge'))
def given_failing_collector(ctx: CollectionScenarioContext, name: str) -> None:
    def probe(bucket: StatisticsBucket) -> None:
        bucket.add(gauge("isp_monitor.stub.value", 1.0))
        raise ConnectionError("probe timed out")

    ctx.collector = StubCollector(name, probe)


@given(parsers.parse('reporters "{names}"'))
def given_reporters(ctx: CollectionScenarioContext, names: str) -> None:
    for name in _names(names):
        ctx.reporters[name] = InMemoryReporter(name)


@given(parsers.parse('a broken reporter "{name}"'))
def given_broken_reporter(ctx: CollectionScenarioContext, name: str) -> None:
    ctx.reporters[name] = ExplodingReporter(name)


@when("one collection cycle runs")
def when_one_cycle(ctx: CollectionScenarioContext) -> None:
    assert ctx.collector is not None
    CollectionLoop(ctx.collector, ctx.reporters, ctx.collector.interval).run_cycle()


@when(parsers.parse("the loop runs {cycles:d} cycles every {seconds:d} seconds on a manual clock"))
def when_loop_runs(ctx: CollectionScenarioContext, cycles: int, seconds: int) -> None:
    assert ctx.collector is not None
    now = [0.0]

    def clock() -> float:
        return now[0]

    def wait(timeout: float) -> bool:
        now[0] += timeout
        return len(ctx.ticks) >= cycles

    def probe(bucket: StatisticsBucket) -> None:
        ctx.ticks.append(now[0])
        bucket.add(gauge("isp_monitor.stub.value", 1.0))

    ctx.collector.probe = probe
    CollectionLoop(ctx.collector, ctx.reporters, seconds, clock=clock, wait=wait).run_forever()


@then(parsers.parse("every reporter received {count:d} bucket"))
def then_every_reporter_received(ctx: CollectionScenarioContext, count: int) -> None:
    for reporter in ctx.reporters.values():
        assert reporter.buckets_received == count


@then(parsers.parse('reporter "{name}" received {count:d} bucket'))
def then_reporter_received(ctx: CollectionScenarioContext, name: str, count: int) -> None:
    assert ctx.reporters[name].buckets_received == count


@then(parsers.parse('reporter "{name}" received the metrics "{metrics}"'))
def then_reporter_received_metrics(ctx: CollectionScenarioContext, name: str, metrics: str) -> None:
    assert [e.name for e in ctx.reporters[name].emissions()] == _names(metrics)


@then(parsers.parse('collections happened at "{seconds}" seconds'))
def then_collections_happened_at(ctx: CollectionScenarioContext, seconds: str) -> None:
    assert ctx.ticks == [float(s) for s in _names(seconds)]


# === Configuration Steps ===


@given(parsers.parse('a configuration with a "{type_name}" collector named "{name}"'))
def given_configuration_with_collector(
    ctx: CollectionScenarioContext, type_name: str, name: str
) -> None:
    ctx.collectors.append(Section(name=name, type=type_name))


@given(parsers.parse('a "{type_name}" collector named "{name}"'))
def given_additional_collector(ctx: CollectionScenarioContext, type_name: str, name: str) -> None:
    ctx.collectors.append(Section(name=name, type=type_name))


@given("a configuration without collectors")
def given_configuration_without_collectors(ctx: CollectionScenarioContext) -> None:
    ctx.collectors = []


@when("the agent is configured")
def when_agent_configured(ctx: CollectionScenarioContext) -> None:
    agent = Agent.with_builtin_plugins()
    agent.register_collector_type("stub", lambda section, debug: StubCollector(section.name))
    ctx.agent = agent
    try:
        agent.configure(Config(collectors=ctx.collectors))
    except ConfigurationError as exc:
        ctx.error = exc


@then(parsers.parse('the agent has reporters "{names}"'))
def then_agent_has_reporters(ctx: CollectionScenarioContext, names: str) -> None:
    assert ctx.agent is not None
    assert ctx.error is None
    assert sorted(ctx.agent.reporters) == sorted(_names(names))


@then(parsers.parse('the agent has collectors "{names}"'))
def then_agent_has_collectors(ctx: CollectionScenarioContext, names: str) -> None:
    assert ctx.agent is not None
    assert ctx.error is None
    assert sorted(ctx.agent.collectors) == sorted(_names(names))


@then(parsers.parse('configuration fails with "{message}"'))
def then_configuration_fails(ctx: CollectionScenarioContext, message: str) -> None:
    assert ctx.error is not None
    assert message in str(ctx.error)
