"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from weather_now.config import Settings
from weather_now.location.models import PermissionRequest, PermissionState
from weather_now.location.provider import LocationSubscription
from weather_now.storage.coordinates import CoordinateStore
from weather_now.weather.models import Coordinates, WeatherReading

SEATTLE = Coordinates(47.6062, -122.3321)
PORTLAND = Coordinates(45.5152, -122.6784)


@pytest.fixture
def seattle_payload():
    """Current weather payload as returned by data/2.5/weather."""
    return {
        "coord": {"lon": -122.3321, "lat": 47.6062},
        "weather": [{"id": 804, "main": "Clouds", "description": "cloudy", "icon": "04d"}],
        "main": {"temp": 55.0, "feels_like": 52.0, "humidity": 80, "pressure": 1015},
        "name": "Seattle",
    }


@pytest.fixture
def seattle_reading():
    return WeatherReading(
        city_name="Seattle",
        temperature=55.0,
        feels_like=52.0,
        humidity_percent=80,
        description="cloudy",
        icon_code="04d",
        coord=SEATTLE,
    )


@pytest.fixture
def settings(tmp_path: Path):
    return Settings(
        _env_file=None,
        openweather_api_key="test-key",
        db_path=tmp_path / "prefs.db",
        icon_cache_dir=tmp_path / "icons",
    )


@pytest.fixture
def store(tmp_path: Path):
    return CoordinateStore(tmp_path / "prefs.db")


@pytest.fixture
def icon_loader(tmp_path: Path):
    loader = MagicMock()
    loader.load = AsyncMock(return_value=tmp_path / "icons" / "04d.png")
    return loader


def make_response(payload=None, content: bytes | None = None):
    """Mock httpx.Response with a JSON body."""
    resp = MagicMock()
    resp.json.return_value = payload
    resp.content = content if content is not None else b"{}"
    resp.raise_for_status = MagicMock()
    return resp


def mock_http_client(get):
    """Patchable replacement for HttpClient used as an async context manager."""
    instance = AsyncMock()
    instance.get = get
    instance.__aenter__ = AsyncMock(return_value=instance)
    instance.__aexit__ = AsyncMock(return_value=False)
    factory = MagicMock(return_value=instance)
    return factory, instance


class FakeLocationProvider:
    """Location provider driven by the test.

    ``deliver`` pushes an update to the subscribed callback.
    """

    def __init__(self, permission: PermissionState = PermissionState.GRANTED) -> None:
        self.permission = permission
        self.requests: list[PermissionRequest] = []
        self.subscriptions: list[LocationSubscription] = []
        self.location_requests = []
        self.refuse_subscribe = False
        self._callback = None

    def check_permission(self) -> PermissionState:
        return self.permission

    def request_permission(self, request_code, callback):
        def _on_result(granted: bool) -> None:
            self.permission = PermissionState.GRANTED if granted else PermissionState.DENIED
            callback(granted)

        request = PermissionRequest(request_code, _on_result)
        self.requests.append(request)
        return request

    def subscribe(self, request, callback):
        from weather_now.errors import LocationPermissionError

        if self.refuse_subscribe or self.permission is not PermissionState.GRANTED:
            raise LocationPermissionError("not granted")
        self.location_requests.append(request)
        self._callback = callback
        task = asyncio.get_running_loop().create_task(asyncio.sleep(3600))
        subscription = LocationSubscription(task)
        self.subscriptions.append(subscription)
        return subscription

    def deliver(self, coordinates: Coordinates) -> None:
        assert self._callback is not None, "no active subscription"
        self._callback(coordinates)
