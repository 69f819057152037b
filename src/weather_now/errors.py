"""Error taxonomy for the weather screen.

Every error carries the fixed message the screen shows when it is caught.
"""

from __future__ import annotations

LOCATION_NOT_FOUND = "Location not found."
LOCATION_LOOKUP_FAILED = "Error fetching location data."
WEATHER_NOT_AVAILABLE = "Weather data not available."
WEATHER_FETCH_FAILED = "Error fetching weather data."
LOCATION_PERMISSION_NOT_GRANTED = "Location permission not granted."
LOCATION_PERMISSION_DENIED = "Location permission denied. Cannot fetch weather for your location."


class WeatherNowError(Exception):
    """Base error; ``user_message`` is what the screen displays."""

    user_message = WEATHER_FETCH_FAILED


class GeocodeIOError(WeatherNowError):
    """Geocoding backend could not be reached or failed."""

    user_message = LOCATION_LOOKUP_FAILED


class GeocodeEmptyResult(WeatherNowError):
    """Place name did not resolve to any coordinates."""

    user_message = LOCATION_NOT_FOUND


class WeatherFetchError(WeatherNowError):
    """Network error, non-success status or malformed weather payload."""

    user_message = WEATHER_FETCH_FAILED


class WeatherEmptyBody(WeatherNowError):
    """Weather API answered without a body."""

    user_message = WEATHER_NOT_AVAILABLE


class LocationPermissionError(WeatherNowError):
    """Location updates were requested without permission."""

    user_message = LOCATION_PERMISSION_NOT_GRANTED


class PermissionDenied(WeatherNowError):
    """User refused the location permission request."""

    user_message = LOCATION_PERMISSION_DENIED
