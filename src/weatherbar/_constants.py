"""Internal constants shared across the library."""

USER_AGENT = "noaa-weather-bar/0.3"

GEOIP_URL = "https://freegeoip.app/json/"
NOAA_CONDITIONS_URL = "https://w1.weather.gov/xml/current_obs"
NOAA_STATION_LIST_URL = "https://w1.weather.gov/xml/current_obs/index.xml"
WU_BASE_URL = "https://api.wunderground.com/api"

#: Mean Earth radius used for great-circle distances.
EARTH_RADIUS_KM = 6371.0

# ------------------------------------------------------------------
# Scheduling defaults (seconds)
# ------------------------------------------------------------------

#: Geolocation is re-polled once a day; waking from sleep forces an early poll.
GEO_UPDATE_INTERVAL: float = 24 * 3600
#: NOAA publishes conditions hourly, so polling more often gains nothing.
WEATHER_UPDATE_INTERVAL: float = 3600
GEO_RETRY_DELAY: float = 15.0
SLEEP_CHECK_INTERVAL: float = 1.0
SLEEP_GAP_THRESHOLD: float = 30.0
HTTP_TIMEOUT: float = 10.0

# ------------------------------------------------------------------
# Compass rose (16 points, starting at North)
# ------------------------------------------------------------------

CARDINAL_DIRECTIONS: tuple[str, ...] = (
    "  N", "NNE", " NE", "ENE",
    "  E", "ESE", " SE", "SSE",
    "  S", "SSW", " SW", "WSW",
    "  W", "WNW", " NW", "NNW",
)  # fmt: skip
COMPASS_SECTOR_DEGREES = 360.0 / len(CARDINAL_DIRECTIONS)
