"""Weather data models."""

from __future__ import annotations

from dataclasses import dataclass

from weather_now.common.types import LatLon


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    @property
    def lat_lon(self) -> LatLon:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class WeatherReading:
    """Current conditions for one place, parsed from the weather API.

    Attributes:
        city_name: place name reported by the API
        temperature: air temperature in the requested units
        feels_like: apparent temperature in the requested units
        humidity_percent: relative humidity, 0-100
        description: condition text (e.g. "scattered clouds")
        icon_code: condition icon identifier (e.g. "04d")
        coord: coordinates echoed back by the API
        units: units parameter the reading was requested with
    """

    city_name: str
    temperature: float
    feels_like: float
    humidity_percent: int
    description: str
    icon_code: str
    coord: Coordinates | None = None
    units: str = "imperial"
