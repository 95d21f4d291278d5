"""Runtime configuration for weatherbar."""

from __future__ import annotations

import configparser
import dataclasses
import os
from pathlib import Path
from typing import Any

from weatherbar._constants import (
    GEO_RETRY_DELAY,
    GEO_UPDATE_INTERVAL,
    GEOIP_URL,
    HTTP_TIMEOUT,
    NOAA_CONDITIONS_URL,
    NOAA_STATION_LIST_URL,
    SLEEP_CHECK_INTERVAL,
    SLEEP_GAP_THRESHOLD,
    WEATHER_UPDATE_INTERVAL,
    WU_BASE_URL,
)
from weatherbar.exceptions import WeatherBarConfigError

DEFAULT_TEMPLATE = "%temperature-fahrenheit%F %wind-cardinal% %wind-speed%mph"


def default_config_path() -> Path:
    """Location of the INI file read by the command line entry point."""
    return Path.home() / ".config" / "noaa-weather-bar" / "config"


def default_station_cache_path() -> Path:
    return Path.home() / ".cache" / "noaa-weather-bar" / "noaa_stations.xml"


def _optional_str(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _optional_float(value: str | None, name: str) -> float | None:
    text = _optional_str(value)
    if text is None:
        return None
    try:
        return float(text)
    except ValueError as exc:
        raise WeatherBarConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class WeatherBarConfig:
    """Client configuration.

    Parameters
    ----------
    template : str
        Output line template. Placeholders are replaced on every
        observation, see :func:`weatherbar.formatter.render`.
    station : str or None
        Fixed station identifier. Disables geolocation entirely.
    latitude, longitude : float or None
        Fixed coordinates. Geolocation is skipped and the nearest
        station to this point is used. Both or neither must be set.
    wu_api_key : str or None
        Weather Underground API key. When set, conditions are fetched
        from Weather Underground instead of NOAA.
    geoip_url : str
        freegeoip-compatible JSON endpoint.
    noaa_conditions_url : str
        Base URL for NOAA ``<station>.xml`` current observations.
    noaa_station_list_url : str
        NOAA station index XML.
    wu_base_url : str
        Weather Underground API base URL.
    station_cache_path : Path or None
        Where the NOAA station list is cached. ``None`` disables the cache.
    geo_update_interval : float
        Seconds between scheduled geolocation refreshes.
    weather_update_interval : float
        Seconds between scheduled conditions refreshes.
    geo_retry_delay : float
        Delay before the single geolocation retry of a cycle.
    sleep_check_interval : float
        Tick period of the sleep detector.
    sleep_gap_threshold : float
        Wall-clock gap between ticks that is treated as a wake from sleep.
    http_timeout : float
        Total timeout of each HTTP request.
    """

    template: str = DEFAULT_TEMPLATE
    station: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    wu_api_key: str | None = None
    geoip_url: str = GEOIP_URL
    noaa_conditions_url: str = NOAA_CONDITIONS_URL
    noaa_station_list_url: str = NOAA_STATION_LIST_URL
    wu_base_url: str = WU_BASE_URL
    station_cache_path: Path | None = dataclasses.field(default_factory=default_station_cache_path)
    geo_update_interval: float = GEO_UPDATE_INTERVAL
    weather_update_interval: float = WEATHER_UPDATE_INTERVAL
    geo_retry_delay: float = GEO_RETRY_DELAY
    sleep_check_interval: float = SLEEP_CHECK_INTERVAL
    sleep_gap_threshold: float = SLEEP_GAP_THRESHOLD
    http_timeout: float = HTTP_TIMEOUT

    def __post_init__(self) -> None:
        if not self.template:
            raise WeatherBarConfigError("template must not be empty")
        if (self.latitude is None) != (self.longitude is None):
            raise WeatherBarConfigError("latitude and longitude must be set together")
        if self.latitude is not None and not -90.0 <= self.latitude <= 90.0:
            raise WeatherBarConfigError(f"latitude must be between -90 and 90, got {self.latitude}")
        if self.longitude is not None and not -180.0 <= self.longitude <= 180.0:
            raise WeatherBarConfigError(f"longitude must be between -180 and 180, got {self.longitude}")
        if self.station is not None and not self.station.strip():
            raise WeatherBarConfigError("station must not be blank")
        for name in (
            "geo_update_interval",
            "weather_update_interval",
            "sleep_check_interval",
            "http_timeout",
        ):
            if getattr(self, name) <= 0:
                raise WeatherBarConfigError(f"{name} must be positive")

    @property
    def has_fixed_point(self) -> bool:
        """Whether the user supplied coordinates that override geolocation."""
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_file(cls, path: str | os.PathLike[str], **overrides: Any) -> WeatherBarConfig:
        """Create configuration from an INI file.

        Recognised keys::

            [weather]
            station = KSEA
            latitude = 47.6
            longitude = -122.3
            wu-api-key = ...

            [format]
            weather-format = %temperature-fahrenheit%F %wind-cardinal%

        Explicit keyword arguments override file values.
        """
        parser = configparser.ConfigParser(interpolation=None)
        try:
            with open(path, encoding="utf-8") as fh:
                parser.read_file(fh)
        except OSError as exc:
            raise WeatherBarConfigError(f"Cannot read config file {path}: {exc}") from exc
        except configparser.Error as exc:
            raise WeatherBarConfigError(f"Invalid config file {path}: {exc}") from exc

        weather = parser["weather"] if parser.has_section("weather") else {}
        fmt = parser["format"] if parser.has_section("format") else {}

        config_kwargs: dict[str, Any] = {
            "station": _optional_str(weather.get("station")),
            "latitude": _optional_float(weather.get("latitude"), "latitude"),
            "longitude": _optional_float(weather.get("longitude"), "longitude"),
            "wu_api_key": _optional_str(weather.get("wu-api-key")),
        }
        template = fmt.get("weather-format")
        if template is not None:
            config_kwargs["template"] = template

        config_kwargs.update(overrides)
        return cls(**config_kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> WeatherBarConfig:
        """Create configuration from ``WEATHERBAR_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "WEATHERBAR_TEMPLATE": "template",
            "WEATHERBAR_STATION": "station",
            "WEATHERBAR_WU_API_KEY": "wu_api_key",
            "WEATHERBAR_GEOIP_URL": "geoip_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_key, field_name in (
            ("WEATHERBAR_LATITUDE", "latitude"),
            ("WEATHERBAR_LONGITUDE", "longitude"),
        ):
            parsed = _optional_float(env.get(env_key), field_name)
            if parsed is not None:
                config_kwargs[field_name] = parsed

        cache_env = env.get("WEATHERBAR_STATION_CACHE")
        if cache_env is not None and "station_cache_path" not in overrides:
            config_kwargs["station_cache_path"] = Path(cache_env) if cache_env else None

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
