from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

import typer

from cli.client import BusClient
from cli.config import CLIConfig, load_config
from cli.render import SensorTableRenderer
from logging_config import configure_logging
from services.errors import (
    DiscoveryEmptyError,
    SensorError,
    TransportError,
    UnresolvedSensorError,
)
from services.normalizer import PropertyNormalizer
from services.poller import SnapshotPoller, resolve_session
from services.sensors import SensorService

_CATEGORY_RE = re.compile(r"[A-Za-z0-9_]+")


@dataclass
class CLIState:
    config: CLIConfig
    client: BusClient
    service: SensorService


app = typer.Typer(
    help="Inspect sensors exposed by a remote object bus.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        _fail("CLI state is uninitialized.")
    return state


@contextmanager
def _reported_errors() -> Iterator[None]:
    try:
        yield
    except DiscoveryEmptyError as exc:
        _fail(
            f"{exc}\nCheck the sensor category name, or run with --help for usage."
        )
    except (UnresolvedSensorError, TransportError) as exc:
        _fail(str(exc))
    except SensorError as exc:
        _fail(f"Unexpected sensor error: {exc}")


def _validate_category(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not _CATEGORY_RE.fullmatch(value):
        raise typer.BadParameter("Invalid sensor type is specified.")
    return value


def _parse_watch_names(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    names = [name.strip() for name in value.split(",")]
    if any(not name for name in names):
        raise typer.BadParameter("Sensor names must not be empty.")
    return names


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Bus gateway base URL (defaults to SENSOR_BUS_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        min=0.001,
        help="Seconds to wait for each bus request.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log discovery and fetch activity to stderr.",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging("DEBUG" if verbose else "WARNING")
    config = load_config(base_url=base_url, timeout=timeout)
    client = BusClient(config)
    service = SensorService(
        transport=client,
        normalizer=PropertyNormalizer(),
        root_path=config.root_path,
        interface=config.interface,
    )
    ctx.obj = CLIState(config=config, client=client, service=service)
    ctx.call_on_close(client.close)


@app.command("list")
def list_command(
    ctx: typer.Context,
    category: Optional[str] = typer.Argument(
        None,
        callback=_validate_category,
        help="Sensor type to show (e.g. temperature); all sensors when omitted.",
    ),
    watch: Optional[str] = typer.Option(
        None,
        "--watch",
        "-w",
        callback=_parse_watch_names,
        help="Comma-separated sensor names to poll, in display order.",
    ),
    interval: Optional[int] = typer.Option(
        None,
        "--interval",
        "-i",
        min=1,
        help="Seconds between polls in watch mode.",
    ),
    fatal: bool = typer.Option(
        True,
        "--fatal/--no-fatal",
        help="Show the fatal threshold column.",
    ),
) -> None:
    """Show sensors of the given type, or poll selected sensors with --watch."""
    state = _get_state(ctx)
    with _reported_errors():
        endpoints = state.service.discover(category)

        if watch is None:
            # Any failed fetch aborts the listing before a partial table is printed.
            rows = list(state.service.iter_rows(endpoints))
            SensorTableRenderer(show_fatal=fatal).render_all(rows)
            return

        session = resolve_session(watch, endpoints)
        poller = SnapshotPoller(
            fetch=state.service.fetch,
            normalizer=state.service.normalizer,
            emit=typer.echo,
        )
        period = interval if interval is not None else state.config.watch_interval
        try:
            poller.run(session, period)
        except KeyboardInterrupt:
            _fail("Watch interrupted.")
