"""Prompt, validate, fetch, rank and report, one city at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, FrozenSet, Optional, Tuple

from datastore.ranking_cache import RankingCache
from models.errors import FetchError, ForecastAppError, UnknownLocation
from models.records import Location, TemperatureReading
from services.forecast import ForecastClient
from services.validator import LocationValidator
from settings import ConnectionConfig

logger = logging.getLogger(__name__)

QUIT_COMMANDS: FrozenSet[str] = frozenset({"quit", "exit"})


class LoopState(str, Enum):
    """States of the interactive loop."""

    awaiting_input = "awaiting_input"
    validating = "validating"
    fetching = "fetching"
    updating = "updating"
    reporting = "reporting"
    stopped = "stopped"


@dataclass(frozen=True)
class IterationReport:
    """Everything the reporting step shows for one input line."""

    raw_input: str
    location: Optional[Location] = None
    reading: Optional[TemperatureReading] = None
    error: Optional[ForecastAppError] = None
    best: Optional[Tuple[Location, TemperatureReading]] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ForecastLoop:
    """Runs the forecast pipeline against a shared ranking cache."""

    def __init__(
        self,
        config: ConnectionConfig,
        validator: LocationValidator,
        client: ForecastClient,
        cache: RankingCache,
        retries: int = 0,
        quit_commands: FrozenSet[str] = QUIT_COMMANDS,
    ) -> None:
        if retries < 0:
            raise ValueError("retries must be zero or positive.")
        self.config = config
        self.validator = validator
        self.client = client
        self.cache = cache
        self.retries = retries
        self.quit_commands = quit_commands
        self._state = LoopState.awaiting_input

    @property
    def state(self) -> LoopState:
        return self._state

    def handle(self, raw: str) -> IterationReport:
        """Process one line of input and return what should be reported."""
        if self._state is LoopState.stopped:
            raise RuntimeError("The forecast loop has already stopped.")

        self._state = LoopState.validating
        try:
            location = self.validator.validate(raw)
        except UnknownLocation as exc:
            logger.info("Input is not a known city", extra={"raw_input": repr(raw)})
            return self._report(IterationReport(raw_input=raw, error=exc))

        self._state = LoopState.fetching
        try:
            reading = self._fetch(location)
        except FetchError as exc:
            return self._report(IterationReport(raw_input=raw, location=location, error=exc))

        self._state = LoopState.updating
        self.cache.update(location, reading)
        return self._report(IterationReport(raw_input=raw, location=location, reading=reading))

    def run(
        self,
        read_line: Callable[[], Optional[str]],
        emit: Callable[[IterationReport], None],
    ) -> int:
        """Handle lines until end of input or a quit command.

        ``read_line`` returns ``None`` at end of input. Returns the number of
        lines handled.
        """
        handled = 0
        while self._state is LoopState.awaiting_input:
            raw = read_line()
            if raw is None or raw in self.quit_commands:
                self.stop()
                break
            emit(self.handle(raw))
            handled += 1
        logger.info("Forecast loop stopped", extra={"cache_size": len(self.cache)})
        return handled

    def stop(self) -> None:
        self._state = LoopState.stopped

    def _fetch(self, location: Location) -> TemperatureReading:
        attempt = 1
        while True:
            try:
                return self.client.fetch(self.config, location)
            except FetchError as exc:
                logger.warning(
                    "Forecast lookup failed",
                    extra={"location": location.name, "reason": exc.reason, "attempt": attempt},
                )
                if attempt > self.retries:
                    raise
                attempt += 1

    def _report(self, report: IterationReport) -> IterationReport:
        self._state = LoopState.reporting
        report = replace(report, best=self.cache.best())
        self._state = LoopState.awaiting_input
        return report
