"""Custom exception hierarchy for weatherbar."""

from __future__ import annotations


class WeatherBarError(Exception):
    """Base exception for all weatherbar errors."""


class WeatherBarConfigError(WeatherBarError):
    """Invalid or missing configuration."""


class WeatherBarTransportError(WeatherBarError):
    """HTTP-level failure (network, timeout, non-200)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class WeatherBarPayloadError(WeatherBarError):
    """Upstream payload could not be decoded (bad JSON/XML, missing fields)."""

    def __init__(self, message: str, *, source: str = "") -> None:
        self.source = source
        super().__init__(message)


class WeatherBarApiError(WeatherBarError):
    """Upstream service answered with an application-level error object."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        source: str = "",
    ) -> None:
        self.code = code
        self.source = source
        super().__init__(message)


class WeatherBarStartupError(WeatherBarError):
    """The process cannot start polling.

    Raised when the initial geolocation fails with no fixed station or
    coordinates configured, or when the station list is empty.
    """
