"""Station list loading and nearest-station search."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

from weatherbar._api.noaa import parse_station_index
from weatherbar._cache import StationListCache
from weatherbar._constants import EARTH_RADIUS_KM, NOAA_STATION_LIST_URL
from weatherbar._transport import Transport
from weatherbar.exceptions import WeatherBarError, WeatherBarStartupError
from weatherbar.models.geo import Point
from weatherbar.models.station import Station

_logger = logging.getLogger(__name__)


def haversine_km(p1: Point, p2: Point) -> float:
    """Great-circle distance between two points, in kilometres.

    The Earth is treated as a sphere of radius :data:`EARTH_RADIUS_KM`,
    which is accurate enough to rank nearby stations.
    """
    lat1 = math.radians(p1.latitude)
    lat2 = math.radians(p2.latitude)
    delta_lat = math.radians(p2.latitude - p1.latitude)
    delta_lon = math.radians(p2.longitude - p1.longitude)

    a = math.sin(delta_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2
    # Rounding can push near-antipodal pairs just past 1.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def nearest_station(point: Point, stations: Iterable[Station]) -> Station | None:
    """Return the station closest to *point*, or ``None`` for an empty list.

    Linear scan. The first station always becomes the initial candidate;
    a later station replaces it only when strictly closer, so ties keep
    the earliest entry. Stations without coordinates are ignored.
    """
    best: Station | None = None
    best_distance = 0.0
    for station in stations:
        if station.latitude is None or station.longitude is None:
            continue
        distance = haversine_km(point, Point(station.latitude, station.longitude))
        if best is None or distance < best_distance:
            best = station
            best_distance = distance
    return best


class StationIndex:
    """The reference list of NOAA stations.

    The list is read-only once loaded, so it is shared between loops
    without locking.
    """

    def __init__(
        self,
        transport: Transport | None,
        *,
        url: str = NOAA_STATION_LIST_URL,
        cache: StationListCache | None = None,
        stations: Sequence[Station] | None = None,
    ) -> None:
        self._transport = transport
        self._url = url
        self._cache = cache
        self._stations: tuple[Station, ...] = tuple(stations) if stations is not None else ()

    @property
    def stations(self) -> tuple[Station, ...]:
        return self._stations

    @property
    def loaded(self) -> bool:
        return bool(self._stations)

    async def load(self) -> tuple[Station, ...]:
        """Load the list from the cache, downloading it when needed.

        Returns the already-loaded list on repeated calls. Raises
        :class:`WeatherBarStartupError` when no usable list can be had.
        """
        if self._stations:
            return self._stations

        if self._cache is not None:
            cached = await self._cache.read()
            if cached is not None:
                try:
                    stations = parse_station_index(cached, source=str(self._cache.path))
                except WeatherBarError:
                    _logger.warning("Cached station list at %s is unreadable, refetching", self._cache.path)
                    stations = []
                if stations:
                    self._stations = tuple(stations)
                    _logger.debug("Loaded %d stations from cache", len(self._stations))
                    return self._stations

        return await self.refresh()

    async def refresh(self) -> tuple[Station, ...]:
        """Download the station list and rewrite the cache."""
        if self._transport is None:
            raise WeatherBarStartupError("No station list available and no transport to download one")
        try:
            data = await self._transport.get_bytes(self._url)
            stations = parse_station_index(data, source=self._url)
        except WeatherBarError as exc:
            raise WeatherBarStartupError(f"Could not load station list: {exc}") from exc
        if not stations:
            raise WeatherBarStartupError(f"Station list from {self._url} is empty")

        if self._cache is not None:
            try:
                await self._cache.write(data)
            except OSError:
                _logger.warning("Could not cache station list at %s", self._cache.path, exc_info=True)

        self._stations = tuple(stations)
        _logger.info("Loaded %d stations from %s", len(self._stations), self._url)
        return self._stations

    def nearest(self, point: Point) -> Station | None:
        return nearest_station(point, self._stations)
