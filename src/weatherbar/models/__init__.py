"""Data models for weatherbar."""

from weatherbar.models.geo import GeoFix, Point
from weatherbar.models.observation import Observation
from weatherbar.models.station import Station

__all__ = [
    "GeoFix",
    "Observation",
    "Point",
    "Station",
]
