from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from weatherbar._api import build_conditions_fetcher
from weatherbar._api.geolocation import GeoResolver, parse_geo_fix
from weatherbar._api.noaa import NoaaConditionsFetcher, parse_current_observation
from weatherbar._api.wunderground import (
    WundergroundConditionsFetcher,
    parse_conditions_response,
    station_query,
)
from weatherbar.config import WeatherBarConfig
from weatherbar.exceptions import WeatherBarApiError, WeatherBarPayloadError

NOAA_KSEA_XML = b"""<?xml version="1.0" encoding="ISO-8859-1"?>
<?xml-stylesheet href="latest_ob.xsl" type="text/xsl"?>
<current_observation version="1.0">
  <location>Seattle, Seattle-Tacoma International Airport, WA</location>
  <station_id>KSEA</station_id>
  <latitude>47.44472</latitude>
  <longitude>-122.31361</longitude>
  <observation_time_rfc822>Sat, 17 Oct 2026 09:53:00 -0700</observation_time_rfc822>
  <weather>Mostly Cloudy</weather>
  <temp_f>55.0</temp_f>
  <temp_c>12.8</temp_c>
  <wind_dir>North</wind_dir>
  <wind_degrees>10</wind_degrees>
  <wind_mph>6.9</wind_mph>
  <wind_kt>6</wind_kt>
  <pressure_mb>1016.2</pressure_mb>
</current_observation>
"""

FREEGEOIP_JSON = {
    "ip": "203.0.113.7",
    "country_code": "US",
    "country_name": "United States",
    "region_code": "WA",
    "region_name": "Washington",
    "city": "Seattle",
    "zip_code": "98101",
    "time_zone": "America/Los_Angeles",
    "latitude": 47.6,
    "longitude": -122.3,
    "metro_code": 819,
}


@dataclass
class FakeTransport:
    responses: dict[str, Any] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def get_bytes(self, url: str) -> bytes:
        self.calls.append(url)
        return self.responses[url]

    async def get_json(self, url: str) -> Any:
        self.calls.append(url)
        return self.responses[url]


class TestGeolocation:
    @pytest.mark.asyncio
    async def test_resolve(self) -> None:
        transport = FakeTransport({"https://geo.test/json/": FREEGEOIP_JSON})
        fix = await GeoResolver(transport, "https://geo.test/json/").resolve()

        assert fix.city == "Seattle"
        assert fix.region_code == "WA"
        assert fix.metro_code == 819
        assert (fix.latitude, fix.longitude) == (47.6, -122.3)
        assert fix.raw == FREEGEOIP_JSON

    def test_missing_coordinates(self) -> None:
        with pytest.raises(WeatherBarPayloadError):
            parse_geo_fix({"ip": "203.0.113.7", "city": "Seattle"})

    def test_not_an_object(self) -> None:
        with pytest.raises(WeatherBarPayloadError):
            parse_geo_fix(["47.6", "-122.3"])

    def test_empty_descriptive_fields_default(self) -> None:
        fix = parse_geo_fix({"latitude": "47.6", "longitude": "-122.3", "city": "", "metro_code": 0})
        assert fix.city == ""
        assert fix.latitude == 47.6


class TestNoaa:
    def test_parse_current_observation(self) -> None:
        obs = parse_current_observation(NOAA_KSEA_XML)

        assert obs.station_id == "KSEA"
        assert obs.temperature == 55.0
        assert obs.pressure == 1016.2
        assert obs.wind_speed == 6.9
        assert obs.wind_direction == 10.0

    def test_missing_station_id_is_an_error(self) -> None:
        with pytest.raises(WeatherBarPayloadError):
            parse_current_observation(b"<current_observation><temp_f>50</temp_f></current_observation>")

    def test_malformed_xml(self) -> None:
        with pytest.raises(WeatherBarPayloadError):
            parse_current_observation(b"<html><body>Service Unavailable")

    def test_unexpected_document(self) -> None:
        with pytest.raises(WeatherBarPayloadError):
            parse_current_observation(b"<html><body>Not Found</body></html>")

    def test_not_available_values(self) -> None:
        obs = parse_current_observation(
            b"<current_observation><station_id>KBFI</station_id>"
            b"<temp_f>48.0</temp_f><wind_mph>NA</wind_mph></current_observation>"
        )
        assert obs.wind_speed is None
        assert obs.pressure is None

    @pytest.mark.asyncio
    async def test_fetcher_url(self) -> None:
        transport = FakeTransport({"https://noaa.test/obs/KSEA.xml": NOAA_KSEA_XML})
        fetcher = NoaaConditionsFetcher(transport, "https://noaa.test/obs/")

        obs = await fetcher.fetch("ksea")

        assert obs.station_id == "KSEA"
        assert transport.calls == ["https://noaa.test/obs/KSEA.xml"]


class TestWunderground:
    def test_station_query_routing(self) -> None:
        assert station_query("KSEA") == "KSEA"
        assert station_query("ksea") == "KSEA"
        assert station_query("KWASEATT123") == "pws:KWASEATT123"

    @pytest.mark.asyncio
    async def test_fetch_personal_station(self) -> None:
        url = "https://wu.test/api/KEY/conditions/q/pws:KWASEATT123.json"
        transport = FakeTransport(
            {
                url: {
                    "response": {"version": "0.1"},
                    "current_observation": {
                        "station_id": "KWASEATT123",
                        "temp_f": 52.3,
                        "pressure_mb": "1015",
                        "wind_mph": 3.1,
                        "wind_degrees": 200,
                    },
                }
            }
        )
        fetcher = WundergroundConditionsFetcher(transport, "KEY", "https://wu.test/api")

        obs = await fetcher.fetch("KWASEATT123")

        assert transport.calls == [url]
        assert obs.station_id == "KWASEATT123"
        assert obs.pressure == 1015.0
        assert obs.wind_direction == 200.0

    def test_error_response(self) -> None:
        payload = {"response": {"error": {"type": "keynotfound", "description": "this key does not exist"}}}
        with pytest.raises(WeatherBarApiError) as excinfo:
            parse_conditions_response(payload)
        assert excinfo.value.code == "keynotfound"

    def test_missing_observation(self) -> None:
        with pytest.raises(WeatherBarPayloadError):
            parse_conditions_response({"response": {"version": "0.1"}})


def test_fetcher_selection() -> None:
    transport = FakeTransport()
    assert isinstance(build_conditions_fetcher(WeatherBarConfig(), transport), NoaaConditionsFetcher)
    assert isinstance(
        build_conditions_fetcher(WeatherBarConfig(wu_api_key="KEY"), transport),
        WundergroundConditionsFetcher,
    )
