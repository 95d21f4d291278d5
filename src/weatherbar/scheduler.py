"""Polling loops that keep the status line current.

Four loops run side by side:

* location watcher: geolocates, resolves the nearest station and
  triggers a weather refresh when the location moves
* weather watcher: fetches conditions for the current station on a
  timer or when triggered
* sleep detector: infers a suspend/resume from wall-clock gaps and
  triggers a location refresh
* reporter: renders each fresh observation to one output line

They talk only through :class:`~weatherbar.state.store.SharedState`
and single-slot channels, and all of them return as soon as
:meth:`WeatherBar.stop` is called.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp

from weatherbar._api import ConditionsFetcher, GeoResolver, build_conditions_fetcher
from weatherbar._cache import StationListCache
from weatherbar._transport import HttpTransport, Transport
from weatherbar.config import WeatherBarConfig
from weatherbar.exceptions import WeatherBarError, WeatherBarStartupError
from weatherbar.formatter import render
from weatherbar.models.geo import GeoFix, Point
from weatherbar.models.observation import Observation
from weatherbar.models.station import Station
from weatherbar.state.channels import Mailbox, Signal
from weatherbar.state.store import SharedState
from weatherbar.stations import StationIndex

_logger = logging.getLogger(__name__)


def _print_line(line: str) -> None:
    print(line, flush=True)


class _Ticker:
    """Periodic deadline on the event loop clock.

    Ticks missed while nobody was waiting are dropped, not queued.
    """

    def __init__(self, interval: float) -> None:
        self._interval = interval
        self._next = asyncio.get_running_loop().time() + interval

    async def wait(self) -> None:
        loop = asyncio.get_running_loop()
        delay = self._next - loop.time()
        if delay > 0:
            await asyncio.sleep(delay)
        now = loop.time()
        self._next += self._interval
        if self._next <= now:
            self._next = now + self._interval


class WeatherBar:
    """Background weather source for a status line.

    Usage::

        async with WeatherBar(config) as bar:
            await bar.run()

    Collaborators default to the HTTP-backed implementations and can be
    injected for testing.
    """

    def __init__(
        self,
        config: WeatherBarConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        geo_resolver: GeoResolver | None = None,
        station_index: StationIndex | None = None,
        fetcher: ConditionsFetcher | None = None,
        output: Callable[[str], None] = _print_line,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._geo = geo_resolver
        self._stations = station_index
        self._fetcher = fetcher
        self._output = output
        self._clock = clock

        self._state = SharedState()
        self._weather_signal = Signal()
        self._geo_signal = Signal()
        self._observations: Mailbox[Observation] = Mailbox()
        self._stop = asyncio.Event()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> WeatherBar:
        if self._transport is None and None in (self._geo, self._stations, self._fetcher):
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session, timeout=self._config.http_timeout)

        transport = self._transport
        if self._geo is None:
            assert transport is not None  # noqa: S101
            self._geo = GeoResolver(transport, self._config.geoip_url)
        if self._stations is None:
            cache_path = self._config.station_cache_path
            self._stations = StationIndex(
                transport,
                url=self._config.noaa_station_list_url,
                cache=StationListCache(cache_path) if cache_path is not None else None,
            )
        if self._fetcher is None:
            assert transport is not None  # noqa: S101
            self._fetcher = build_conditions_fetcher(self._config, transport)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    @property
    def state(self) -> SharedState:
        return self._state

    @property
    def weather_signal(self) -> Signal:
        """Triggers a conditions refresh."""
        return self._weather_signal

    @property
    def geo_signal(self) -> Signal:
        """Triggers a location refresh."""
        return self._geo_signal

    @property
    def observations(self) -> Mailbox[Observation]:
        return self._observations

    def stop(self) -> None:
        """Ask every loop to return. Safe to call from a signal handler."""
        self._stop.set()

    async def run(self) -> None:
        """Run all loops until :meth:`stop` is called.

        A fatal startup error raised by any loop stops the others and
        is re-raised here.
        """
        self._require_collaborators()
        loops = [
            asyncio.create_task(self._location_watcher(), name="weatherbar-location"),
            asyncio.create_task(self._weather_watcher(), name="weatherbar-weather"),
            asyncio.create_task(self._sleep_detector(), name="weatherbar-sleep"),
            asyncio.create_task(self._reporter(), name="weatherbar-reporter"),
        ]
        stop_waiter = asyncio.create_task(self._stop.wait())
        pending = set(loops)
        try:
            while True:
                done, _ = await asyncio.wait({stop_waiter, *pending}, return_when=asyncio.FIRST_COMPLETED)
                if stop_waiter in done:
                    _logger.info("Termination requested, stopping")
                    return
                for task in done:
                    pending.discard(task)
                    if task.cancelled():
                        continue
                    exc = task.exception()
                    if exc is not None:
                        raise exc
                    _logger.debug("%s finished", task.get_name())
        finally:
            # Abandon in-flight fetches rather than waiting for them.
            for task in (*loops, stop_waiter):
                task.cancel()
            await asyncio.gather(*loops, stop_waiter, return_exceptions=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_collaborators(self) -> None:
        if self._geo is None or self._stations is None or self._fetcher is None:
            raise WeatherBarError("WeatherBar not initialized. Use 'async with WeatherBar(...) as bar:'")

    async def _select(self, *waits: Awaitable[Any]) -> tuple[int, Any] | None:
        """Wait for the first of *waits* or for stop.

        Returns ``(index, result)`` of the first completed wait, or
        ``None`` once stop has been requested. The losers are cancelled.
        """
        stop = asyncio.ensure_future(self._stop.wait())
        futures = [asyncio.ensure_future(w) for w in waits]
        try:
            done, _ = await asyncio.wait([stop, *futures], return_when=asyncio.FIRST_COMPLETED)
        finally:
            for fut in (stop, *futures):
                if not fut.done():
                    fut.cancel()
        if stop in done:
            return None
        for index, fut in enumerate(futures):
            if fut in done:
                return index, fut.result()
        raise AssertionError("asyncio.wait returned without a completed future")

    async def _sleep(self, delay: float) -> bool:
        """Sleep for *delay* seconds. Returns ``False`` if stopped meanwhile."""
        return await self._select(asyncio.sleep(delay)) is not None

    # ------------------------------------------------------------------
    # Location watcher
    # ------------------------------------------------------------------

    async def _location_watcher(self) -> None:
        config = self._config
        if config.station:
            # A fixed station makes geolocation pointless for the whole run.
            station_id = config.station.strip()
            _logger.info("Weather station is fixed to %s, geolocation disabled", station_id)
            await self._state.set_station(Station(identifier=station_id))
            self._weather_signal.send()
            return

        await self._bootstrap_location()

        ticker = _Ticker(config.geo_update_interval)
        while True:
            selected = await self._select(self._geo_signal.wait(), ticker.wait())
            if selected is None:
                _logger.debug("Location watcher stopping")
                return
            _logger.debug("Location refresh (%s)", "signal" if selected[0] == 0 else "timer")
            await self._refresh_location()

    async def _bootstrap_location(self) -> None:
        assert self._geo is not None and self._stations is not None  # noqa: S101
        config = self._config
        if config.latitude is not None and config.longitude is not None:
            _logger.info(
                "Using configured location %s/%s, geolocation disabled",
                config.latitude,
                config.longitude,
            )
            await self._state.set_point(Point(config.latitude, config.longitude))
        else:
            try:
                fix = await self._geo.resolve()
            except WeatherBarError as exc:
                raise WeatherBarStartupError(f"Could not get location: {exc}") from exc
            await self._state.set_fix(fix)
            await self._state.commit_location()
            _logger.debug("Location: %r", fix)

        await self._stations.load()
        if await self._resolve_station() is None:
            raise WeatherBarStartupError("Could not resolve a weather station for the current location")
        self._weather_signal.send()

    async def _refresh_location(self) -> None:
        if self._config.has_fixed_point:
            _logger.debug("Configured location in use, skipping geolocation")
            self._weather_signal.send()
            return

        fix = await self._geolocate_with_retry()
        if fix is None:
            return
        await self._state.set_fix(fix)
        await self._resolve_station()
        if await self._state.commit_location():
            _logger.info("Location changed to %s/%s, refreshing weather", fix.latitude, fix.longitude)
            self._weather_signal.send()
        _logger.debug("Location: %r", fix)

    async def _geolocate_with_retry(self) -> GeoFix | None:
        """One attempt plus a single delayed retry; ``None`` abandons the cycle."""
        assert self._geo is not None  # noqa: S101
        try:
            return await self._geo.resolve()
        except WeatherBarError as exc:
            _logger.warning("Error fetching location: %s", exc)

        if not await self._sleep(self._config.geo_retry_delay):
            return None
        try:
            return await self._geo.resolve()
        except WeatherBarError as exc:
            _logger.warning("Error fetching location, waiting for the next update: %s", exc)
            return None

    async def _resolve_station(self) -> Station | None:
        assert self._stations is not None  # noqa: S101
        point = await self._state.get_point()
        if point is None:
            return None
        station = self._stations.nearest(point)
        if station is None:
            _logger.warning("No station found near %s/%s", point.latitude, point.longitude)
            return None
        previous = await self._state.get_station()
        await self._state.set_station(station)
        if previous is None or previous.identifier != station.identifier:
            _logger.info("Nearest weather station is %s", station.identifier)
        return station

    # ------------------------------------------------------------------
    # Weather watcher
    # ------------------------------------------------------------------

    async def _weather_watcher(self) -> None:
        ticker = _Ticker(self._config.weather_update_interval)
        while True:
            selected = await self._select(self._weather_signal.wait(), ticker.wait())
            if selected is None:
                _logger.debug("Weather watcher stopping")
                return

            if not self._state.station_ready:
                _logger.debug("Station not yet determined, waiting for it")
            ready = await self._select(self._state.wait_station())
            if ready is None:
                _logger.debug("Weather watcher stopping")
                return
            await self._refresh_conditions(ready[1])

    async def _refresh_conditions(self, station: Station) -> None:
        assert self._fetcher is not None  # noqa: S101
        try:
            observation = await self._fetcher.fetch(station.identifier)
        except WeatherBarError as exc:
            _logger.warning("Error fetching conditions for %s: %s", station.identifier, exc)
            return
        if self._observations.put(observation):
            _logger.debug("Replaced an unreported observation with a newer one")

    # ------------------------------------------------------------------
    # Sleep detector
    # ------------------------------------------------------------------

    async def _sleep_detector(self) -> None:
        threshold = self._config.sleep_gap_threshold
        ticker = _Ticker(self._config.sleep_check_interval)
        previous = self._clock()
        while True:
            if await self._select(ticker.wait()) is None:
                _logger.debug("Sleep detector stopping")
                return
            now = self._clock()
            gap = now - previous
            previous = now
            if gap > threshold:
                _logger.info("Wake from sleep detected (%.0fs since last check)", gap)
                self._geo_signal.send()

    # ------------------------------------------------------------------
    # Reporter
    # ------------------------------------------------------------------

    async def _reporter(self) -> None:
        template = self._config.template
        while True:
            selected = await self._select(self._observations.get())
            if selected is None:
                _logger.debug("Reporter stopping")
                return
            self._output(render(template, selected[1]))
