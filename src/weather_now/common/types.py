"""Shared type aliases."""

from __future__ import annotations

from typing import TypeAlias

import numpy as np

# Latitude/longitude pair
LatLon: TypeAlias = tuple[float, float]

# JSON-like dict
JsonDict: TypeAlias = dict[str, object]

# Temperature suffix per OpenWeatherMap units parameter
UNIT_SYMBOLS: dict[str, str] = {
    "imperial": "°F",
    "metric": "°C",
    "standard": "K",
}


def to_float32(value: float) -> float:
    """Round a float to single precision and back."""
    return float(np.float32(value))
