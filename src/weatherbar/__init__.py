"""weatherbar - Nearest-station weather for desktop status lines."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("noaa-weather-bar")
except PackageNotFoundError:
    __version__ = "0+local"
from weatherbar.config import WeatherBarConfig
from weatherbar.exceptions import (
    WeatherBarApiError,
    WeatherBarConfigError,
    WeatherBarError,
    WeatherBarPayloadError,
    WeatherBarStartupError,
    WeatherBarTransportError,
)
from weatherbar.formatter import render
from weatherbar.models import GeoFix, Observation, Point, Station
from weatherbar.scheduler import WeatherBar
from weatherbar.stations import StationIndex, haversine_km, nearest_station

__all__ = [
    "__version__",
    "GeoFix",
    "Observation",
    "Point",
    "Station",
    "StationIndex",
    "WeatherBar",
    "WeatherBarApiError",
    "WeatherBarConfig",
    "WeatherBarConfigError",
    "WeatherBarError",
    "WeatherBarPayloadError",
    "WeatherBarStartupError",
    "WeatherBarTransportError",
    "haversine_km",
    "nearest_station",
    "render",
]
