"""Render observations into a status line.

Placeholders recognised in the template:

==========================  ==========================================
``%temperature-fahrenheit%``  temperature as reported, one decimal
``%temperature-celsius%``     temperature converted, one decimal
                              (``%temperature-celcius%`` also accepted)
``%barometer%``               pressure in millibars, two decimals
``%wind-speed%``              wind speed in mph
``%wind-direction%``          wind direction in degrees
``%wind-cardinal%``           16-point compass label, three characters
``%station-id%``              reporting station identifier
==========================  ==========================================

Every rendering starts from the original template, so the same
observation always yields the same line.
"""

from __future__ import annotations

import math

from weatherbar._constants import CARDINAL_DIRECTIONS, COMPASS_SECTOR_DEGREES
from weatherbar.models.observation import Observation

MISSING = "--"


def compass_index(degrees: float) -> int:
    """Index of the compass sector containing *degrees* (0 is North)."""
    return math.floor((degrees + COMPASS_SECTOR_DEGREES / 2) / COMPASS_SECTOR_DEGREES) % len(CARDINAL_DIRECTIONS)


def compass_label(degrees: float) -> str:
    return CARDINAL_DIRECTIONS[compass_index(degrees)]


def fahrenheit_to_celsius(fahrenheit: float) -> float:
    return (fahrenheit - 32) * 5 / 9


def _fixed(value: float | None, places: int) -> str:
    if value is None:
        return MISSING
    return f"{value:.{places}f}"


def _number(value: float | None) -> str:
    """Shortest form: ``10.0`` renders as ``10``, ``5.5`` as ``5.5``."""
    if value is None:
        return MISSING
    if value.is_integer():
        return str(int(value))
    return repr(value)


def placeholder_values(obs: Observation) -> dict[str, str]:
    """Text for every placeholder, computed from *obs*."""
    celsius = fahrenheit_to_celsius(obs.temperature) if obs.temperature is not None else None
    cardinal = compass_label(obs.wind_direction) if obs.wind_direction is not None else f"{MISSING:>3}"
    return {
        "%temperature-fahrenheit%": _fixed(obs.temperature, 1),
        "%temperature-celsius%": _fixed(celsius, 1),
        "%temperature-celcius%": _fixed(celsius, 1),
        "%barometer%": _fixed(obs.pressure, 2),
        "%wind-speed%": _number(obs.wind_speed),
        "%wind-direction%": _number(obs.wind_direction),
        "%wind-cardinal%": cardinal,
        "%station-id%": obs.station_id,
    }


def render(template: str, obs: Observation) -> str:
    output = template
    for placeholder, text in placeholder_values(obs).items():
        output = output.replace(placeholder, text)
    return output
