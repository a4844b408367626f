"""Turn free-text user input into a validated location."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Protocol

from models.errors import UnknownLocation
from models.records import Location

logger = logging.getLogger(__name__)


class LocationDirectory(Protocol):
    """Anything that can answer whether a place name is recognised."""

    def __contains__(self, name: object) -> bool: ...


class StaticLocationDirectory:
    """A fixed set of recognised place names."""

    def __init__(self, names: Iterable[str]) -> None:
        self._names = frozenset(names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)


class LocationValidator:
    """Exact-match validation against a location directory.

    Input is never trimmed or case folded: ``"cadiz"`` and ``" Cadiz"`` are
    both rejected when the directory only knows ``"Cadiz"``.
    """

    def __init__(self, directory: LocationDirectory) -> None:
        self.directory = directory

    def validate(self, raw: str) -> Location:
        if not raw or raw not in self.directory:
            logger.debug("Rejected location input", extra={"raw_input": repr(raw)})
            raise UnknownLocation(raw)
        return Location(raw)
