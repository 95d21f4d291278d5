"""Weather Underground conditions endpoint.

Endpoint: <base>/<key>/conditions/q/<query>.json

Weather Underground serves two kinds of station: ICAO airports
(official, government-run) and personal weather stations (PWS).
Four-character identifiers are queried as ICAO codes, anything else
with the ``pws:`` prefix.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from weatherbar._constants import WU_BASE_URL
from weatherbar._transport import Transport
from weatherbar.exceptions import WeatherBarApiError, WeatherBarPayloadError
from weatherbar.models.observation import Observation
from weatherbar.models.station import Station

_logger = logging.getLogger(__name__)


def station_query(station_id: str) -> str:
    """Return the location query for *station_id*."""
    if Station(station_id).is_icao:
        return station_id.upper()
    return f"pws:{station_id}"


def parse_conditions_response(payload: Any, *, source: str = "") -> Observation:
    """Decode a WU ``conditions`` JSON document."""
    if not isinstance(payload, dict):
        raise WeatherBarPayloadError("Conditions response is not an object", source=source)

    response = payload.get("response")
    if isinstance(response, dict):
        error = response.get("error")
        if isinstance(error, dict):
            raise WeatherBarApiError(
                f"Weather Underground error: {error.get('description') or error.get('type')}",
                code=str(error.get("type", "")),
                source=source,
            )

    current = payload.get("current_observation")
    if not isinstance(current, dict):
        raise WeatherBarPayloadError("Conditions response has no current_observation", source=source)
    try:
        return Observation.model_validate(current)
    except ValidationError as exc:
        raise WeatherBarPayloadError(f"Invalid observation: {exc}", source=source) from exc


class WundergroundConditionsFetcher:
    """Fetch current conditions from the Weather Underground API."""

    def __init__(self, transport: Transport, api_key: str, base_url: str = WU_BASE_URL) -> None:
        self._transport = transport
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def _url(self, station_id: str) -> str:
        query = quote(station_query(station_id), safe=":")
        return f"{self._base_url}/{self._api_key}/conditions/q/{query}.json"

    async def fetch(self, station_id: str) -> Observation:
        _logger.debug("Fetching conditions for station %s from Weather Underground", station_id)
        # The URL embeds the API key, keep it out of error sources.
        source = f"wunderground:{station_id}"
        payload = await self._transport.get_json(self._url(station_id))
        observation = parse_conditions_response(payload, source=source)
        _logger.debug("Conditions: %r", observation)
        return observation
