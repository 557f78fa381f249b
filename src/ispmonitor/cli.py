"""Command line interface for the isp-monitor agent."""

import logging
import signal
import threading
from pathlib import Path
from typing import Annotated

import typer

from ispmonitor.agent import Agent
from ispmonitor.core.config import ConfigurationError, load_config
from ispmonitor.core.encoding.ndjson import encode_statistics
from ispmonitor.logging_config import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.isp_monitor.yaml"

app = typer.Typer(
    name="isp-monitor",
    help="Periodically probe your connection and report the results.",
    add_completion=False,
    pretty_exceptions_show_locals=False,
)

# --- CLI Option Annotations ---
ConfigOption = Annotated[
    Path,
    typer.Option("--config", "-c", help="YAML configuration file to use."),
]

DebugOption = Annotated[
    bool,
    typer.Option("--debug", help="Enable debug mode and debug logging.", is_flag=True),
]


def _build_agent(config: Path, debug: bool) -> Agent:
    try:
        return Agent.from_config(load_config(config), debug=debug)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def run(
    config: ConfigOption = Path(DEFAULT_CONFIG_PATH),
    debug: DebugOption = False,
) -> None:
    """Start all configured collectors and report until interrupted."""
    setup_logging(debug)
    logger.info("Starting ISP monitor...")
    agent = _build_agent(config, debug)

    done = threading.Event()

    def _handle_signal(signum: int, frame: object) -> None:
        logger.info("Received %s, exiting...", signal.Signals(signum).name)
        done.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    agent.start()
    done.wait()
    agent.stop()


@app.command()
def once(
    config: ConfigOption = Path(DEFAULT_CONFIG_PATH),
    debug: DebugOption = False,
) -> None:
    """Run every configured collector once and print the statistics as NDJSON."""
    setup_logging(debug)
    agent = _build_agent(config, debug)
    for bucket in agent.collect_once().values():
        typer.echo(encode_statistics(bucket.snapshot()), nl=False)


@app.command()
def plugins() -> None:
    """List the available collector and reporter types."""
    agent = Agent.with_builtin_plugins()
    typer.echo("collectors: " + ", ".join(agent.collector_registry.types()))
    typer.echo("reporters: " + ", ".join(agent.reporter_registry.types()))


if __name__ == "__main__":
    app()
