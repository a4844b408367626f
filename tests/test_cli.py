from __future__ import annotations

from typing import List

import pytest
from typer.testing import CliRunner

from cli.app import app
from models.errors import FetchError
from models.records import Location, TemperatureReading
from settings import ConnectionConfig

CONNECTION_ENV = {"FORECAST_HOST": "localhost", "FORECAST_PORT": "8000"}


class StubClient:
    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout
        self.configs: List[ConnectionConfig] = []
        self.locations: List[Location] = []
        self.closed = False

    def fetch(self, config: ConnectionConfig, location: Location) -> TemperatureReading:
        self.configs.append(config)
        self.locations.append(location)
        if location.name == "Cadiz":
            return TemperatureReading(31.0)
        raise FetchError(location.name, "unknown location")

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    client = StubClient()

    def factory(timeout: float = 5.0) -> StubClient:
        client.timeout = timeout
        return client

    monkeypatch.setattr("cli.app.HttpForecastClient", factory)
    return client


def test_run_reports_each_city_and_hottest(runner: CliRunner) -> None:
    result = runner.invoke(
        app,
        ["--offline", "run"],
        input="Wroclaw\nCadiz\nblablabla\nLondon\n",
        env=CONNECTION_ENV,
    )

    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[:3] == [
        "What is the next city?",
        "Forecast for city Wroclaw is 7°C",
        "Hottest city found so far: Wroclaw (7°C)",
    ]
    assert "Forecast for city Cadiz is 35°C" in lines
    assert "Unknown city: 'blablabla'" in lines
    assert lines.count("Hottest city found so far: Cadiz (35°C)") == 3
    assert lines.count("What is the next city?") == 5
    summary = lines[lines.index("Session summary") + 1 :]
    assert summary == ["  1. Cadiz: 35°C", "  2. London: 15°C", "  3. Wroclaw: 7°C"]


def test_run_stops_on_quit(runner: CliRunner) -> None:
    result = runner.invoke(
        app,
        ["--offline", "run"],
        input="London\nquit\nCadiz\n",
        env=CONNECTION_ENV,
    )

    assert result.exit_code == 0
    assert "Forecast for city London is 15°C" in result.stdout
    assert "Forecast for city Cadiz" not in result.stdout


def test_run_with_no_input_prints_empty_summary(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--offline", "run"], input="", env=CONNECTION_ENV)

    assert result.exit_code == 0
    assert result.stdout.splitlines()[-1] == "No city recorded yet."


def test_missing_configuration_is_fatal(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--offline", "run"], input="Cadiz\n")

    assert result.exit_code == 1
    assert "Configuration error" in result.output
    assert "What is the next city?" not in result.output


def test_out_of_range_port_is_fatal(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["--host", "localhost", "--port", "70000", "lookup", "Cadiz"])

    assert result.exit_code == 1
    assert "between 1 and 65535" in result.output
    assert stub.locations == []
    assert stub.closed is True


def test_lookup_uses_http_client_with_flags(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(
        app,
        ["--host", "forecast.local", "--port", "9000", "lookup", "Cadiz", "Berlin"],
    )

    assert result.exit_code == 0
    assert "Forecast for city Cadiz is 31°C" in result.stdout
    assert "Could not fetch forecast for city Berlin: unknown location" in result.stdout
    assert result.stdout.splitlines()[-1] == "Hottest city found so far: Cadiz (31°C)"
    assert stub.configs == [
        ConnectionConfig(host="forecast.local", port=9000),
        ConnectionConfig(host="forecast.local", port=9000),
    ]
    assert stub.closed is True


def test_lookup_rejects_unknown_city_without_fetching(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["lookup", "blablabla"], env=CONNECTION_ENV)

    assert result.exit_code == 0
    assert "Unknown city: 'blablabla'" in result.stdout
    assert "No city recorded yet." in result.stdout
    assert stub.locations == []


def test_timeout_setting_reaches_http_client(runner: CliRunner, stub: StubClient) -> None:
    env = dict(CONNECTION_ENV, FORECAST_TIMEOUT="1.5")

    result = runner.invoke(app, ["lookup", "Cadiz"], env=env)

    assert result.exit_code == 0
    assert stub.timeout == 1.5


def test_static_backend_setting_skips_network_client(runner: CliRunner, monkeypatch) -> None:
    def refuse(timeout: float = 5.0):
        raise AssertionError("HTTP client must not be built for the static backend")

    monkeypatch.setattr("cli.app.HttpForecastClient", refuse)
    env = dict(CONNECTION_ENV, FORECAST_BACKEND="static")

    result = runner.invoke(app, ["lookup", "Cadiz"], env=env)

    assert result.exit_code == 0
    assert "Forecast for city Cadiz is 35°C" in result.stdout


def test_cities_lists_known_locations(runner: CliRunner) -> None:
    result = runner.invoke(app, ["cities"], env={"KNOWN_LOCATIONS": "Porto,Lisbon"})

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["Known cities", "  - Lisbon", "  - Porto"]
