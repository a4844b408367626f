from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterator, List, Optional

import typer

from cli.render import PROMPT, render_locations, render_ranking, render_report
from datastore.ranking_cache import RankingCache
from logging_config import configure_logging
from models.errors import ConfigurationError
from services.forecast import ForecastClient, HttpForecastClient, StaticForecastClient
from services.pipeline import ForecastLoop
from services.validator import LocationValidator, StaticLocationDirectory
from settings import ConfigurationProvider, Settings, get_settings


@dataclass
class CLIState:
    settings: Settings
    provider: ConfigurationProvider
    client: ForecastClient


app = typer.Typer(
    help="Look up city forecasts and keep track of the hottest one seen so far.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _build_client(settings: Settings, offline: bool) -> ForecastClient:
    if offline or settings.backend == "static":
        return StaticForecastClient()
    return HttpForecastClient(timeout=settings.request_timeout)


def _build_loop(state: CLIState) -> ForecastLoop:
    try:
        config = state.provider.get()
    except ConfigurationError as exc:
        typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    validator = LocationValidator(StaticLocationDirectory(state.settings.known_locations))
    return ForecastLoop(
        config=config,
        validator=validator,
        client=state.client,
        cache=RankingCache(),
        retries=state.settings.fetch_retries,
    )


def _read_stdin_line() -> Optional[str]:
    typer.echo(PROMPT)
    line = sys.stdin.readline()
    if not line:
        return None
    return line.rstrip("\r\n")


@app.callback()
def main(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Forecast service host (defaults to FORECAST_HOST env).",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        help="Forecast service port (defaults to FORECAST_PORT env).",
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Answer from the built-in static forecasts instead of the network.",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging()
    settings = get_settings()
    client = _build_client(settings, offline)
    ctx.obj = CLIState(
        settings=settings,
        provider=ConfigurationProvider(host=host, port=port),
        client=client,
    )
    ctx.call_on_close(client.close)


@app.command("run")
def run_command(ctx: typer.Context) -> None:
    """Prompt for cities until end of input or 'quit'."""
    loop = _build_loop(_get_state(ctx))
    loop.run(_read_stdin_line, render_report)
    typer.echo()
    render_ranking(loop.cache.ranking())


@app.command("lookup")
def lookup_command(
    ctx: typer.Context,
    cities: List[str] = typer.Argument(..., help="Cities to look up, in order."),
) -> None:
    """Look up the given cities and report the hottest one."""
    loop = _build_loop(_get_state(ctx))
    pending: Iterator[str] = iter(cities)
    loop.run(lambda: next(pending, None), render_report)


@app.command("cities")
def cities_command(ctx: typer.Context) -> None:
    """List the cities the validator recognises."""
    state = _get_state(ctx)
    render_locations(StaticLocationDirectory(state.settings.known_locations))
