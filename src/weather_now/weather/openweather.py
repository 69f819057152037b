"""OpenWeatherMap current weather client."""

from __future__ import annotations

import logging

import httpx

from weather_now.common.http import HttpClient
from weather_now.common.types import JsonDict
from weather_now.config import get_settings
from weather_now.errors import WeatherFetchError
from weather_now.weather.models import Coordinates, WeatherReading

logger = logging.getLogger(__name__)

WEATHER_PATH = "/data/2.5/weather"


def parse_weather(data: JsonDict, units: str) -> WeatherReading:
    """Build a WeatherReading from a ``data/2.5/weather`` payload.

    Raises KeyError, IndexError, TypeError or ValueError on a malformed payload.
    """
    main = data["main"]
    condition = data["weather"][0]

    coord = None
    raw_coord = data.get("coord")
    if isinstance(raw_coord, dict) and "lat" in raw_coord and "lon" in raw_coord:
        coord = Coordinates(float(raw_coord["lat"]), float(raw_coord["lon"]))

    return WeatherReading(
        city_name=str(data["name"]),
        temperature=float(main["temp"]),
        feels_like=float(main["feels_like"]),
        humidity_percent=int(main["humidity"]),
        description=str(condition["description"]),
        icon_code=str(condition["icon"]),
        coord=coord,
        units=units,
    )


class WeatherClient:
    """Fetches current conditions for a coordinate pair."""

    def __init__(self, base_url: str | None = None) -> None:
        self._base_url = base_url or get_settings().openweather_api_url

    async def fetch_by_coordinates(
        self,
        lat: float,
        lon: float,
        units: str,
        api_key: str,
    ) -> WeatherReading | None:
        """Issue one GET against the weather endpoint.

        Returns None when the API answers with an empty or null body.

        Raises:
            WeatherFetchError: on network error, non-success status or a
                malformed payload.
        """
        params = {
            "lat": lat,
            "lon": lon,
            "units": units,
            "appid": api_key,
        }

        try:
            async with HttpClient(base_url=self._base_url) as client:
                resp = await client.get(WEATHER_PATH, params=params)
            if not resp.content or not resp.content.strip():
                return None
            data = resp.json()
        except httpx.HTTPError as exc:
            raise WeatherFetchError(f"Weather request failed for ({lat}, {lon}): {exc}") from exc
        except ValueError as exc:
            raise WeatherFetchError(f"Weather response is not JSON for ({lat}, {lon})") from exc

        if data is None:
            return None
        if not isinstance(data, dict):
            raise WeatherFetchError(f"Unexpected weather payload type: {type(data).__name__}")

        try:
            return parse_weather(data, units)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise WeatherFetchError(f"Malformed weather payload for ({lat}, {lon}): {exc!r}") from exc
