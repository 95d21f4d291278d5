"""Base model and parsing helpers for upstream payloads.

Every payload model inherits from :class:`WeatherBarModel` which
provides:

* A ``model_validator(mode="before")`` that strips the sentinel
  values upstream services use for "not reported" (``""``, ``"NA"``,
  ``"--"``, NaN, infinities) so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

# Sentinel strings meaning "not available".
_SENTINELS = frozenset({"", "--", "NA", "N/A", "NaN", "nan"})


def safe_float(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip() in _SENTINELS:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


OptionalFloat = Annotated[float | None, BeforeValidator(safe_float)]
"""Float field that tolerates sentinels and unparseable text."""


class WeatherBarModel(BaseModel):
    """Base for upstream payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original payload dict."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and not math.isfinite(value):
                continue
            cleaned[key] = value
        # Keep the caller's raw when constructing with kwargs that include it.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
