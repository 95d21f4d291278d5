"""Upstream collaborators: geolocation, conditions and station list."""

from __future__ import annotations

from typing import Protocol

from weatherbar._api.geolocation import GeoResolver
from weatherbar._api.noaa import NoaaConditionsFetcher
from weatherbar._api.wunderground import WundergroundConditionsFetcher
from weatherbar._transport import Transport
from weatherbar.config import WeatherBarConfig
from weatherbar.models.observation import Observation


class ConditionsFetcher(Protocol):
    """Anything that can produce current conditions for a station id."""

    async def fetch(self, station_id: str) -> Observation:
        ...


def build_conditions_fetcher(config: WeatherBarConfig, transport: Transport) -> ConditionsFetcher:
    """Weather Underground when an API key is configured, NOAA otherwise."""
    if config.wu_api_key:
        return WundergroundConditionsFetcher(transport, config.wu_api_key, config.wu_base_url)
    return NoaaConditionsFetcher(transport, config.noaa_conditions_url)


__all__ = [
    "ConditionsFetcher",
    "GeoResolver",
    "NoaaConditionsFetcher",
    "WundergroundConditionsFetcher",
    "build_conditions_fetcher",
]
