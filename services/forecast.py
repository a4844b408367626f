"""Forecast service clients.

Each client performs exactly one lookup per ``fetch`` call and reports
failures as ``FetchError``. Retrying is left to the caller.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Mapping, Optional, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError as SchemaValidationError

from app.schemas import ForecastResponse
from models.errors import FetchError
from models.records import Location, TemperatureReading, TemperatureUnit
from settings import ConnectionConfig

logger = logging.getLogger(__name__)

STATIC_FORECASTS: Dict[str, TemperatureReading] = {
    "Wroclaw": TemperatureReading(7.0, TemperatureUnit.celsius),
    "Cadiz": TemperatureReading(35.0, TemperatureUnit.celsius),
    "London": TemperatureReading(15.0, TemperatureUnit.celsius),
}


class ForecastClient(Protocol):
    def fetch(self, config: ConnectionConfig, location: Location) -> TemperatureReading: ...

    def close(self) -> None: ...


class StaticForecastClient:
    """In-process stand-in that answers from a fixed table."""

    def __init__(self, readings: Optional[Mapping[str, TemperatureReading]] = None) -> None:
        self._readings = dict(STATIC_FORECASTS if readings is None else readings)

    def lookup(self, location: Location) -> TemperatureReading:
        reading = self._readings.get(location.name)
        if reading is None:
            raise FetchError(location.name, "unknown location")
        return reading

    def fetch(self, config: ConnectionConfig, location: Location) -> TemperatureReading:
        return self.lookup(location)

    def close(self) -> None:
        return None


class HttpForecastClient:
    """Fetch readings from ``GET /forecast/{location}`` on the configured host."""

    def __init__(
        self,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def fetch(self, config: ConnectionConfig, location: Location) -> TemperatureReading:
        url = f"{config.base_url}/forecast/{quote(location.name, safe='')}"
        try:
            response = self._client.get(url)
        except httpx.TimeoutException as exc:
            raise FetchError(location.name, "request timed out") from exc
        except httpx.HTTPError as exc:
            raise FetchError(location.name, f"request failed: {exc}") from exc

        if response.status_code == 404:
            raise FetchError(location.name, "unknown location")
        if response.status_code >= 400:
            logger.warning(
                "Forecast service returned an error",
                extra={"location": location.name, "status_code": response.status_code},
            )
            raise FetchError(location.name, f"service returned HTTP {response.status_code}")

        try:
            payload = ForecastResponse.model_validate(response.json())
        except (ValueError, SchemaValidationError) as exc:
            raise FetchError(location.name, "malformed response from forecast service") from exc

        if payload.location != location.name:
            logger.warning(
                "Forecast service answered for another city",
                extra={"location": location.name, "reason": f"got {payload.location!r}"},
            )
            raise FetchError(location.name, "response was for a different location")

        return payload.to_reading()


@lru_cache
def build_default_static_client() -> StaticForecastClient:
    return StaticForecastClient()
