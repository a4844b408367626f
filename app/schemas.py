"""Pydantic schemas for the forecast HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from models.records import Location, TemperatureReading, TemperatureUnit


class ForecastResponse(BaseModel):
    """Temperature reading served for a single location."""

    location: str = Field(..., min_length=1)
    magnitude: float = Field(..., allow_inf_nan=False)
    unit: TemperatureUnit = Field(
        default=TemperatureUnit.celsius, description="One of C, F or K."
    )

    @classmethod
    def from_reading(cls, location: Location, reading: TemperatureReading) -> "ForecastResponse":
        return cls(location=location.name, magnitude=reading.magnitude, unit=reading.unit)

    def to_reading(self) -> TemperatureReading:
        return TemperatureReading(magnitude=self.magnitude, unit=self.unit)


class HealthResponse(BaseModel):
    status: str = "ok"
