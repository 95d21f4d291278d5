"""Current conditions model."""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator

from weatherbar.models._base import OptionalFloat, WeatherBarModel


class Observation(WeatherBarModel):
    """A single snapshot of current conditions at a station.

    Parameters
    ----------
    station_id : str
        Reporting station identifier.
    temperature : float or None
        Air temperature in degrees Fahrenheit.
    pressure : float or None
        Barometric pressure in millibars.
    wind_speed : float or None
        Wind speed in miles per hour.
    wind_direction : float or None
        Direction the wind blows from, in degrees.
    raw : dict
        Original payload.
    """

    station_id: str = Field(validation_alias=AliasChoices("station_id", "stationId"))
    temperature: OptionalFloat = Field(default=None, validation_alias=AliasChoices("temperature", "temp_f"))
    pressure: OptionalFloat = Field(default=None, validation_alias=AliasChoices("pressure", "pressure_mb"))
    wind_speed: OptionalFloat = Field(default=None, validation_alias=AliasChoices("wind_speed", "wind_mph"))
    wind_direction: OptionalFloat = Field(
        default=None,
        validation_alias=AliasChoices("wind_direction", "wind_degrees"),
    )

    @field_validator("station_id", mode="before")
    @classmethod
    def _strip_station_id(cls, value: object) -> str:
        text = str(value).strip()
        if not text:
            raise ValueError("station_id must be non-empty")
        return text
