"""Error hierarchy for the forecast pipeline."""

from __future__ import annotations


class ForecastAppError(Exception):
    """Base class for every error raised by the application."""


class ConfigurationError(ForecastAppError):
    """Connection settings are missing or invalid. Fatal at startup."""


class ValidationError(ForecastAppError):
    """User input could not be turned into a location."""


class UnknownLocation(ValidationError):

    def __init__(self, raw_input: str) -> None:
        super().__init__(f"Unknown city: {raw_input!r}")
        self.raw_input = raw_input


class FetchError(ForecastAppError):
    """A single forecast lookup failed."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"Could not fetch forecast for city {location}: {reason}")
        self.location = location
        self.reason = reason
