"""Tests for location permission exchange and the IP location provider."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import typer

from conftest import make_response, mock_http_client
from weather_now.errors import LocationPermissionError
from weather_now.location.models import (
    LOCATION_PERMISSION_REQUEST,
    LocationRequest,
    PermissionRequest,
    PermissionState,
    Priority,
    RequestStatus,
)
from weather_now.location.provider import IpLocationProvider
from weather_now.weather.models import Coordinates


class TestPermissionRequest:
    def test_starts_pending(self):
        request = PermissionRequest(LOCATION_PERMISSION_REQUEST, MagicMock())
        assert request.pending
        assert request.status is RequestStatus.PENDING

    def test_resolve_granted(self):
        callback = MagicMock()
        request = PermissionRequest(LOCATION_PERMISSION_REQUEST, callback)
        request.resolve(True)
        assert request.status is RequestStatus.GRANTED
        callback.assert_called_once_with(True)

    def test_resolve_only_once(self):
        callback = MagicMock()
        request = PermissionRequest(LOCATION_PERMISSION_REQUEST, callback)
        request.resolve(False)
        request.resolve(True)
        assert request.status is RequestStatus.DENIED
        callback.assert_called_once_with(False)


def test_default_location_request():
    request = LocationRequest()
    assert request.priority is Priority.HIGH_ACCURACY
    assert request.interval_millis == 10000
    assert list(Priority) == [Priority.HIGH_ACCURACY]


class TestIpLocationProvider:
    def test_permission_from_argument(self):
        provider = IpLocationProvider(url="http://loc.example", permission=PermissionState.DENIED)
        assert provider.check_permission() is PermissionState.DENIED

    @pytest.mark.asyncio
    async def test_subscribe_without_permission_raises(self):
        provider = IpLocationProvider(url="http://loc.example", permission=PermissionState.UNDETERMINED)
        with pytest.raises(LocationPermissionError):
            provider.subscribe(LocationRequest(), MagicMock())

    @pytest.mark.asyncio
    async def test_request_without_prompt_stays_pending(self):
        provider = IpLocationProvider(url="http://loc.example", permission=PermissionState.UNDETERMINED)
        callback = MagicMock()

        request = provider.request_permission(LOCATION_PERMISSION_REQUEST, callback)
        await asyncio.sleep(0)

        assert request.pending
        callback.assert_not_called()

        request.resolve(True)
        assert provider.check_permission() is PermissionState.GRANTED
        callback.assert_called_once_with(True)

    @pytest.mark.asyncio
    async def test_request_answered_by_prompt(self):
        prompt = AsyncMock(return_value=False)
        provider = IpLocationProvider(
            prompt=prompt, url="http://loc.example", permission=PermissionState.UNDETERMINED,
        )
        answered = asyncio.Event()
        results = []

        def callback(granted):
            results.append(granted)
            answered.set()

        request = provider.request_permission(LOCATION_PERMISSION_REQUEST, callback)
        await asyncio.wait_for(answered.wait(), timeout=1)

        assert results == [False]
        assert request.status is RequestStatus.DENIED
        assert provider.check_permission() is PermissionState.DENIED

    @pytest.mark.asyncio
    async def test_failed_prompt_counts_as_denied(self):
        prompt = AsyncMock(side_effect=typer.Abort())
        provider = IpLocationProvider(
            prompt=prompt, url="http://loc.example", permission=PermissionState.UNDETERMINED,
        )
        answered = asyncio.Event()
        results = []

        def callback(granted):
            results.append(granted)
            answered.set()

        request = provider.request_permission(LOCATION_PERMISSION_REQUEST, callback)
        await asyncio.wait_for(answered.wait(), timeout=1)

        assert results == [False]
        assert request.status is RequestStatus.DENIED
        assert provider.check_permission() is PermissionState.DENIED

    @pytest.mark.asyncio
    async def test_subscription_delivers_updates(self):
        responses = [
            make_response({"status": "success", "lat": 47.6, "lon": -122.3}),
            make_response({"status": "fail", "message": "reserved range"}),
            make_response({"status": "success", "lat": 45.5, "lon": -122.7}),
        ]
        get = AsyncMock(side_effect=responses + [make_response({"lat": 0, "lon": 0})] * 100)
        factory, _ = mock_http_client(get)
        provider = IpLocationProvider(url="http://loc.example", permission=PermissionState.GRANTED)

        received = []
        two = asyncio.Event()

        def callback(coords):
            received.append(coords)
            if len(received) == 2:
                two.set()

        with patch("weather_now.location.provider.HttpClient", factory):
            subscription = provider.subscribe(LocationRequest(interval_millis=1), callback)
            await asyncio.wait_for(two.wait(), timeout=1)
            subscription.cancel()
            await asyncio.sleep(0)

        assert received[:2] == [Coordinates(47.6, -122.3), Coordinates(45.5, -122.7)]
        get.assert_any_await("http://loc.example")

    @pytest.mark.asyncio
    async def test_cancelled_subscription_is_inactive(self):
        get = AsyncMock(side_effect=httpx.ConnectError("offline"))
        factory, _ = mock_http_client(get)
        provider = IpLocationProvider(url="http://loc.example", permission=PermissionState.GRANTED)

        with patch("weather_now.location.provider.HttpClient", factory):
            subscription = provider.subscribe(LocationRequest(interval_millis=1), MagicMock())
            assert subscription.active
            subscription.cancel()
            await asyncio.sleep(0.05)

        assert not subscription.active
