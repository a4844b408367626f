from __future__ import annotations

from typing import Iterator

import pytest

from logging_config import configure_logging
from services.forecast import build_default_static_client
from settings import ConnectionConfig, get_settings

_ENV_VARS = (
    "FORECAST_HOST",
    "FORECAST_PORT",
    "FORECAST_TIMEOUT",
    "FORECAST_RETRIES",
    "FORECAST_BACKEND",
    "KNOWN_LOCATIONS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True, scope="session")
def application_logging() -> None:
    # Bind the stderr handler before any CliRunner swaps the streams.
    configure_logging(level="INFO")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    build_default_static_client.cache_clear()
    yield
    get_settings.cache_clear()
    build_default_static_client.cache_clear()


@pytest.fixture()
def connection_config() -> ConnectionConfig:
    return ConnectionConfig(host="forecast.local", port=9000)
