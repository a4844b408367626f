"""Domain models shared across services."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class TemperatureUnit(str, Enum):
    """Units a forecast reading can be expressed in."""

    celsius = "C"
    fahrenheit = "F"
    kelvin = "K"

    @property
    def symbol(self) -> str:
        if self is TemperatureUnit.kelvin:
            return "K"
        return f"°{self.value}"


@dataclass(frozen=True, order=True)
class Location:
    """A validated place name usable in a forecast lookup."""

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Location name must not be empty.")

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TemperatureReading:
    """A single temperature observation."""

    magnitude: float
    unit: TemperatureUnit = TemperatureUnit.celsius

    def __post_init__(self) -> None:
        if not math.isfinite(self.magnitude):
            raise ValueError(f"Temperature magnitude must be finite (got {self.magnitude!r}).")

    def to_celsius(self) -> float:
        if self.unit is TemperatureUnit.fahrenheit:
            return (self.magnitude - 32.0) * 5.0 / 9.0
        if self.unit is TemperatureUnit.kelvin:
            return self.magnitude - 273.15
        return float(self.magnitude)

    def __str__(self) -> str:
        return f"{self.magnitude:g}{self.unit.symbol}"
