"""NOAA current observation and station index endpoints.

Endpoints:
  - <base>/<STATION>.xml (current_observation document)
  - <base>/index.xml (wx_station_index document)
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from pydantic import ValidationError

from weatherbar._constants import NOAA_CONDITIONS_URL
from weatherbar._transport import Transport
from weatherbar.exceptions import WeatherBarPayloadError
from weatherbar.models._base import safe_float
from weatherbar.models.observation import Observation
from weatherbar.models.station import Station

_logger = logging.getLogger(__name__)

_OBSERVATION_TAGS = ("station_id", "temp_f", "pressure_mb", "wind_mph", "wind_degrees")


def _parse_xml(data: bytes, source: str) -> ET.Element:
    try:
        return ET.fromstring(data)
    except ET.ParseError as exc:
        raise WeatherBarPayloadError(f"Invalid XML from {source}: {exc}", source=source) from exc


def _child_text(element: ET.Element, tag: str) -> str | None:
    child = element.find(tag)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def parse_current_observation(data: bytes, *, source: str = "") -> Observation:
    """Decode a NOAA ``current_observation`` XML document."""
    root = _parse_xml(data, source)
    if root.tag != "current_observation":
        raise WeatherBarPayloadError(f"Unexpected root element <{root.tag}>", source=source)

    fields = {tag: _child_text(root, tag) for tag in _OBSERVATION_TAGS}
    if not fields["station_id"]:
        # No station id means the lookup failed upstream; nothing to report.
        raise WeatherBarPayloadError("Observation is missing station_id", source=source)
    try:
        return Observation.model_validate(fields)
    except ValidationError as exc:
        raise WeatherBarPayloadError(f"Invalid observation: {exc}", source=source) from exc


def parse_station_index(data: bytes, *, source: str = "") -> list[Station]:
    """Decode the NOAA ``wx_station_index`` XML document.

    Entries without an identifier or usable coordinates are skipped.
    Document order is preserved.
    """
    root = _parse_xml(data, source)
    stations: list[Station] = []
    skipped = 0
    for element in root.iter("station"):
        identifier = _child_text(element, "station_id")
        lat = safe_float(_child_text(element, "latitude"))
        lon = safe_float(_child_text(element, "longitude"))
        if not identifier or lat is None or lon is None:
            skipped += 1
            continue
        stations.append(Station(identifier=identifier, latitude=lat, longitude=lon))
    if skipped:
        _logger.debug("Skipped %d station entries without id or coordinates", skipped)
    return stations


class NoaaConditionsFetcher:
    """Fetch current conditions from NOAA's per-station XML feed."""

    def __init__(self, transport: Transport, base_url: str = NOAA_CONDITIONS_URL) -> None:
        self._transport = transport
        self._base_url = base_url.rstrip("/")

    async def fetch(self, station_id: str) -> Observation:
        url = f"{self._base_url}/{station_id.upper()}.xml"
        _logger.debug("Fetching conditions for station %s from NOAA", station_id)
        data = await self._transport.get_bytes(url)
        observation = parse_current_observation(data, source=url)
        _logger.debug("Conditions: %r", observation)
        return observation
