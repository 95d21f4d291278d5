"""Guarded state shared by the polling loops.

Each cell group (location, point, station) has its own reader/writer
lock so loops reading different cells never contend. Locks are held
only for the in-memory copy or assignment, never across I/O. Code that
needs more than one lock takes them in the order location, point,
station; :meth:`SharedState.snapshot` is the one place that does.
"""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass

from weatherbar.models.geo import GeoFix, Point
from weatherbar.models.station import Station
from weatherbar.state.locks import ReadWriteLock


@dataclass(frozen=True)
class StateSnapshot:
    """Consistent view of every cell at one moment."""

    location: GeoFix | None
    previous_location: GeoFix | None
    point: Point | None
    station: Station | None


class SharedState:
    """Location, point and station cells written by the location loop."""

    def __init__(self) -> None:
        self._location_lock = ReadWriteLock()
        self._point_lock = ReadWriteLock()
        self._station_lock = ReadWriteLock()

        self._location: GeoFix | None = None
        self._previous_location: GeoFix | None = None
        self._point: Point | None = None
        self._station: Station | None = None
        # One-shot: set the first time a station is written, never cleared.
        self._station_ready = asyncio.Event()

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    async def get_location(self) -> GeoFix | None:
        async with self._location_lock.read():
            return self._location

    async def get_previous_location(self) -> GeoFix | None:
        async with self._location_lock.read():
            return self._previous_location

    async def set_fix(self, fix: GeoFix) -> None:
        """Replace the current location and derive the current point from it."""
        async with self._location_lock.write(), self._point_lock.write():
            self._location = fix
            self._point = fix.point

    async def commit_location(self) -> bool:
        """Compare current and previous location, then roll previous forward.

        Returns ``True`` when the location moved since the last commit.
        The first commit after startup reports no movement.
        """
        async with self._location_lock.write():
            current = self._location
            previous = self._previous_location
            moved = previous is not None and current is not None and not current.same_position(previous)
            self._previous_location = current
            return moved

    # ------------------------------------------------------------------
    # Point
    # ------------------------------------------------------------------

    async def get_point(self) -> Point | None:
        async with self._point_lock.read():
            return self._point

    async def set_point(self, point: Point) -> None:
        async with self._point_lock.write():
            self._point = point

    # ------------------------------------------------------------------
    # Station
    # ------------------------------------------------------------------

    async def get_station(self) -> Station | None:
        async with self._station_lock.read():
            return self._station

    async def set_station(self, station: Station) -> None:
        async with self._station_lock.write():
            self._station = station
        self._station_ready.set()

    @property
    def station_ready(self) -> bool:
        return self._station_ready.is_set()

    async def wait_station(self) -> Station:
        """Block until a station has been resolved, then return it."""
        await self._station_ready.wait()
        station = await self.get_station()
        assert station is not None  # noqa: S101
        return station

    # ------------------------------------------------------------------
    # Multi-cell reads
    # ------------------------------------------------------------------

    async def snapshot(self) -> StateSnapshot:
        async with contextlib.AsyncExitStack() as stack:
            for lock in (self._location_lock, self._point_lock, self._station_lock):
                await stack.enter_async_context(lock.read())
            return StateSnapshot(
                location=self._location,
                previous_location=self._previous_location,
                point=self._point,
                station=self._station,
            )
