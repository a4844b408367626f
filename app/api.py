"""HTTP route definitions for the stand-in forecast service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas import ForecastResponse, HealthResponse
from models.errors import FetchError
from models.records import Location
from services.forecast import StaticForecastClient, build_default_static_client

router = APIRouter()


def get_forecast_source() -> StaticForecastClient:
    return build_default_static_client()


@router.get(
    "/forecast/{location}",
    response_model=ForecastResponse,
    summary="Return the current temperature reading for a location.",
)
async def get_forecast(
    location: str,
    source: StaticForecastClient = Depends(get_forecast_source),
) -> ForecastResponse:
    place = Location(location)
    try:
        reading = source.lookup(place)
    except FetchError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No forecast available for {location!r}.",
        ) from exc
    return ForecastResponse.from_reading(place, reading)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> HealthResponse:
    return HealthResponse()
