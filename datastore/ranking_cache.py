from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, List, Optional, Tuple

from models.records import Location, TemperatureReading

logger = logging.getLogger(__name__)

Entry = Tuple[Location, TemperatureReading]


def _rank_key(entry: Entry) -> Tuple[float, str]:
    location, reading = entry
    # Hottest first; equal temperatures fall back to the smallest name.
    return (-reading.to_celsius(), location.name)


class RankingCache:
    """Latest reading per location with a "hottest so far" query.

    Readings are compared after conversion to Celsius, so ``95°F`` ranks above
    ``30°C``. Writing a location twice keeps only the second reading.
    """

    def __init__(self) -> None:
        self._entries: Dict[Location, TemperatureReading] = {}
        self._lock = Lock()

    def update(self, location: Location, reading: TemperatureReading) -> None:
        with self._lock:
            self._entries[location] = reading
            size = len(self._entries)
        logger.debug(
            "Recorded reading %s",
            reading,
            extra={"location": location.name, "cache_size": size},
        )

    def best(self) -> Optional[Entry]:
        with self._lock:
            if not self._entries:
                return None
            return min(self._entries.items(), key=_rank_key)

    def ranking(self) -> List[Entry]:
        """Return every entry, hottest first."""

        with self._lock:
            return sorted(self._entries.items(), key=_rank_key)

    def get(self, location: Location) -> Optional[TemperatureReading]:
        with self._lock:
            return self._entries.get(location)

    def __contains__(self, location: object) -> bool:
        with self._lock:
            return location in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
