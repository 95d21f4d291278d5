"""Geographic coordinate and geolocation models."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import AliasChoices, Field

from weatherbar.models._base import WeatherBarModel


@dataclass(frozen=True, slots=True)
class Point:
    """A latitude/longitude pair in degrees."""

    latitude: float
    longitude: float


class GeoFix(WeatherBarModel):
    """Location reported by a freegeoip-compatible service.

    Parameters
    ----------
    latitude, longitude : float
        Position in degrees. Required.
    ip : str
        Public address the lookup was made for.
    country_code, country_name, region_code, region_name, city, zip_code : str
        Descriptive fields, empty when not reported.
    time_zone : str
        IANA time zone name.
    metro_code : int or None
        US metro (DMA) code.
    """

    latitude: float
    longitude: float
    ip: str = ""
    country_code: str = ""
    country_name: str = ""
    region_code: str = ""
    region_name: str = ""
    city: str = ""
    zip_code: str = Field(default="", validation_alias=AliasChoices("zip_code", "zip"))
    time_zone: str = Field(default="", validation_alias=AliasChoices("time_zone", "timezone"))
    metro_code: int | None = None

    @property
    def point(self) -> Point:
        return Point(latitude=self.latitude, longitude=self.longitude)

    def same_position(self, other: GeoFix | None) -> bool:
        """Exact coordinate equality with *other*.

        This is a discrete change detector: provider jitter counts as
        movement and sub-precision drift does not.
        """
        if other is None:
            return False
        return self.latitude == other.latitude and self.longitude == other.longitude
