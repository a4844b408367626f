from __future__ import annotations

from typing import Iterable, Optional, Tuple

import typer

from models.records import Location, TemperatureReading
from services.pipeline import IterationReport

PROMPT = "What is the next city?"


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def format_best(best: Optional[Tuple[Location, TemperatureReading]]) -> str:
    if best is None:
        return "No city recorded yet."
    location, reading = best
    return f"Hottest city found so far: {location} ({reading})"


def render_report(report: IterationReport) -> None:
    if report.ok:
        typer.echo(f"Forecast for city {report.location} is {report.reading}")
    else:
        typer.secho(str(report.error), fg=typer.colors.RED)
    typer.echo(format_best(report.best))


def render_ranking(entries: Iterable[Tuple[Location, TemperatureReading]]) -> None:
    echo_heading("Session summary")
    rows = list(entries)
    if not rows:
        typer.echo("No city recorded yet.")
        return
    for position, (location, reading) in enumerate(rows, start=1):
        typer.echo(f"  {position}. {location}: {reading}")


def render_locations(names: Iterable[str]) -> None:
    echo_heading("Known cities")
    for name in names:
        typer.echo(f"  - {name}")
