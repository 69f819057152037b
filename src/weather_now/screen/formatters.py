"""Display text for weather readings."""

from __future__ import annotations

from weather_now.common.types import UNIT_SYMBOLS
from weather_now.weather.models import WeatherReading


def format_reading(reading: WeatherReading) -> str:
    """Format a reading as the multi-line block shown on screen."""
    symbol = UNIT_SYMBOLS.get(reading.units, "")
    lines = [
        f"City:        {reading.city_name}",
        f"Temperature: {reading.temperature}{symbol}",
        f"Feels like:  {reading.feels_like}{symbol}",
        f"Humidity:    {reading.humidity_percent}%",
        f"Description: {reading.description}",
    ]
    return "\n".join(lines)
