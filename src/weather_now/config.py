"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_UNITS = ("imperial", "metric", "standard")
_VALID_PERMISSIONS = ("granted", "denied", "undetermined")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # openweathermap.org API key
    openweather_api_key: str = ""

    # OpenWeatherMap base URL (the client appends /data/2.5/weather)
    openweather_api_url: str = "https://api.openweathermap.org"

    # Condition icon URL, {icon} is the icon code from the payload
    icon_url_template: str = "https://openweathermap.org/img/w/{icon}.png"

    # Units for temperature (imperial = Fahrenheit)
    units: str = "imperial"

    # SQLite database holding the persisted preferences
    db_path: Path = Path.home() / ".weather-now" / "preferences.db"

    # Disk cache for downloaded condition icons
    icon_cache_dir: Path = Path.home() / ".weather-now" / "icons"

    # Nominatim user agent string
    geocoder_user_agent: str = "weather-now"

    # IP geolocation endpoint used as the device location source
    ip_location_url: str = "http://ip-api.com/json"

    # Location update interval in milliseconds
    location_interval_ms: int = 10000

    # Initial location permission: granted, denied or undetermined
    location_permission: str = "undetermined"

    # Drop weather results older than the one already on screen
    discard_stale_results: bool = False

    # HTTP request timeout seconds
    http_timeout: float = 30.0

    @field_validator("units")
    @classmethod
    def _units_known(cls, v: str) -> str:
        if v not in _VALID_UNITS:
            raise ValueError(f"units must be one of {_VALID_UNITS}, got {v!r}")
        return v

    @field_validator("location_permission")
    @classmethod
    def _permission_known(cls, v: str) -> str:
        if v not in _VALID_PERMISSIONS:
            raise ValueError(f"location_permission must be one of {_VALID_PERMISSIONS}, got {v!r}")
        return v

    @field_validator("location_interval_ms")
    @classmethod
    def _interval_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"location_interval_ms must be > 0, got {v}")
        return v


def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
