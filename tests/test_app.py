from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from models.records import TemperatureReading, TemperatureUnit
from services.forecast import StaticForecastClient


@pytest.fixture
def api_client(monkeypatch) -> Iterator[TestClient]:
    source = StaticForecastClient(
        {
            "Cadiz": TemperatureReading(35.0),
            "Phoenix": TemperatureReading(104.0, TemperatureUnit.fahrenheit),
        }
    )
    monkeypatch.setattr("app.api.build_default_static_client", lambda: source)

    with TestClient(create_app()) as client:
        yield client


def test_forecast_for_known_city(api_client: TestClient) -> None:
    response = api_client.get("/forecast/Cadiz")

    assert response.status_code == 200
    assert response.json() == {"location": "Cadiz", "magnitude": 35.0, "unit": "C"}


def test_forecast_keeps_reading_unit(api_client: TestClient) -> None:
    response = api_client.get("/forecast/Phoenix")

    assert response.status_code == 200
    assert response.json()["unit"] == "F"


def test_forecast_for_unknown_city_returns_not_found(api_client: TestClient) -> None:
    response = api_client.get("/forecast/Atlantis")

    assert response.status_code == 404
    assert "Atlantis" in response.json()["detail"]


def test_health(api_client: TestClient) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_default_source_serves_built_in_cities() -> None:
    with TestClient(create_app()) as client:
        assert client.get("/forecast/Wroclaw").json()["magnitude"] == 7.0
        assert client.get("/forecast/Berlin").status_code == 404
