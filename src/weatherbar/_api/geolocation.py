"""IP geolocation lookup.

Endpoint: a freegeoip-compatible ``/json/`` document describing the
caller's network-visible location.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from weatherbar._constants import GEOIP_URL
from weatherbar._transport import Transport
from weatherbar.exceptions import WeatherBarPayloadError
from weatherbar.models.geo import GeoFix

_logger = logging.getLogger(__name__)


def parse_geo_fix(payload: object, *, source: str = "") -> GeoFix:
    """Validate a decoded geolocation document into a :class:`GeoFix`."""
    if not isinstance(payload, dict):
        raise WeatherBarPayloadError("Geolocation response is not an object", source=source)
    try:
        return GeoFix.model_validate(payload)
    except ValidationError as exc:
        raise WeatherBarPayloadError(f"Geolocation response is incomplete: {exc}", source=source) from exc


class GeoResolver:
    """Resolve the current location of this machine."""

    def __init__(self, transport: Transport, url: str = GEOIP_URL) -> None:
        self._transport = transport
        self._url = url

    async def resolve(self) -> GeoFix:
        payload = await self._transport.get_json(self._url)
        fix = parse_geo_fix(payload, source=self._url)
        _logger.debug(
            "Geolocated to %s, %s (%s/%s)",
            fix.city or "?",
            fix.region_code or fix.country_code or "?",
            fix.latitude,
            fix.longitude,
        )
        return fix
