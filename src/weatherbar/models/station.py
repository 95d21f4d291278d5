"""Weather station model."""

from __future__ import annotations

from dataclasses import dataclass

#: Official (ICAO airport) identifiers are exactly this long; anything
#: else is treated as a personal weather station code.
ICAO_ID_LENGTH = 4


@dataclass(frozen=True, slots=True)
class Station:
    """A weather-observation station.

    Coordinates are ``None`` for a station given by identifier only
    (fixed in configuration), which never takes part in distance search.
    """

    identifier: str
    latitude: float | None = None
    longitude: float | None = None

    @property
    def is_icao(self) -> bool:
        return len(self.identifier) == ICAO_ID_LENGTH
