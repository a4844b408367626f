from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from models.errors import ConfigurationError

logger = logging.getLogger(__name__)

_HOST_ENV = "FORECAST_HOST"
_PORT_ENV = "FORECAST_PORT"
_TIMEOUT_ENV = "FORECAST_TIMEOUT"
_RETRIES_ENV = "FORECAST_RETRIES"
_BACKEND_ENV = "FORECAST_BACKEND"
_KNOWN_LOCATIONS_ENV = "KNOWN_LOCATIONS"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_KNOWN_LOCATIONS = ("Wroclaw", "Cadiz", "London", "Berlin")
BACKENDS = ("http", "static")


@dataclass(frozen=True)
class Settings:
    request_timeout: float
    fetch_retries: int
    backend: str
    known_locations: Tuple[str, ...]
    log_level: str


@dataclass(frozen=True)
class ConnectionConfig:
    host: str
    port: int

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_retries(default: int) -> int:
    value = os.getenv(_RETRIES_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_backend(default: str) -> str:
    candidate = _read_str_env(_BACKEND_ENV, default).lower()
    return candidate if candidate in BACKENDS else default


def _read_known_locations(default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(_KNOWN_LOCATIONS_ENV)
    if value is None:
        return default
    names = tuple(part.strip() for part in value.split(",") if part.strip())
    return names or default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        request_timeout=_read_float_env(_TIMEOUT_ENV, 5.0),
        fetch_retries=_read_retries(0),
        backend=_read_backend("http"),
        known_locations=_read_known_locations(DEFAULT_KNOWN_LOCATIONS),
        log_level=_read_log_level("INFO"),
    )


def _parse_port(raw: str) -> int:
    try:
        port = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Forecast port must be an integer (got {raw!r}).") from exc
    if not 1 <= port <= 65535:
        raise ConfigurationError(f"Forecast port must be between 1 and 65535 (got {port}).")
    return port


def load_connection_config(
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> ConnectionConfig:
    """Build connection settings from explicit overrides and the environment.

    Raises ``ConfigurationError`` when the host or port is missing or the port
    is not a valid TCP port number.
    """
    resolved_host = (host or os.getenv(_HOST_ENV) or "").strip()
    if not resolved_host:
        raise ConfigurationError(f"Forecast host is not configured; set {_HOST_ENV} or pass --host.")

    if port is not None:
        resolved_port = _parse_port(str(port))
    else:
        raw_port = (os.getenv(_PORT_ENV) or "").strip()
        if not raw_port:
            raise ConfigurationError(f"Forecast port is not configured; set {_PORT_ENV} or pass --port.")
        resolved_port = _parse_port(raw_port)

    return ConnectionConfig(host=resolved_host, port=resolved_port)


class ConfigurationProvider:
    """Hands out one ``ConnectionConfig`` for the lifetime of the process."""

    def __init__(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        self._host = host
        self._port = port
        self._config: Optional[ConnectionConfig] = None

    def get(self) -> ConnectionConfig:
        if self._config is None:
            self._config = load_connection_config(host=self._host, port=self._port)
            logger.debug(
                "Loaded connection settings",
                extra={"host": self._config.host, "port": self._config.port},
            )
        return self._config
