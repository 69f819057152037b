"""Device location sources.

The screen only depends on the ``LocationProvider`` protocol. The bundled
implementation approximates the device position from its public IP address.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

import httpx

from weather_now.common.http import HttpClient
from weather_now.config import get_settings
from weather_now.errors import LocationPermissionError
from weather_now.location.models import LocationRequest, PermissionRequest, PermissionState
from weather_now.weather.models import Coordinates

logger = logging.getLogger(__name__)

LocationCallback = Callable[[Coordinates], None]
PermissionPrompt = Callable[[], Awaitable[bool]]


class LocationSubscription:
    """Handle for a running location update stream."""

    def __init__(self, task: asyncio.Task) -> None:
        self._task = task

    @property
    def active(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        self._task.cancel()


class LocationProvider(Protocol):
    def check_permission(self) -> PermissionState: ...

    def request_permission(
        self, request_code: int, callback: Callable[[bool], None],
    ) -> PermissionRequest: ...

    def subscribe(
        self, request: LocationRequest, callback: LocationCallback,
    ) -> LocationSubscription: ...


class IpLocationProvider:
    """Polls an IP geolocation endpoint for the current position.

    Permission starts from settings. A permission request is answered by
    ``prompt`` when one is given; otherwise it stays pending until the
    caller resolves the returned ``PermissionRequest``.
    """

    def __init__(
        self,
        prompt: PermissionPrompt | None = None,
        url: str | None = None,
        permission: PermissionState | None = None,
    ) -> None:
        settings = get_settings()
        self._url = url or settings.ip_location_url
        self._permission = permission or PermissionState(settings.location_permission)
        self._prompt = prompt
        self._prompts: set[asyncio.Task] = set()

    def check_permission(self) -> PermissionState:
        return self._permission

    def request_permission(
        self, request_code: int, callback: Callable[[bool], None],
    ) -> PermissionRequest:
        def _on_result(granted: bool) -> None:
            self._permission = PermissionState.GRANTED if granted else PermissionState.DENIED
            callback(granted)

        request = PermissionRequest(request_code, _on_result)
        if self._prompt is not None:
            task = asyncio.get_running_loop().create_task(self._ask(request))
            self._prompts.add(task)
            task.add_done_callback(self._prompts.discard)
        return request

    async def _ask(self, request: PermissionRequest) -> None:
        """Answer ``request`` from the prompt; a failed prompt counts as a refusal."""
        try:
            granted = await self._prompt()
        except Exception:
            logger.warning("Permission prompt failed, treating as denied", exc_info=True)
            granted = False
        request.resolve(granted)

    def subscribe(
        self, request: LocationRequest, callback: LocationCallback,
    ) -> LocationSubscription:
        """Start delivering updates to ``callback`` every request interval.

        Raises:
            LocationPermissionError: if permission has not been granted.
        """
        if self._permission is not PermissionState.GRANTED:
            raise LocationPermissionError(
                f"Location updates need permission (state: {self._permission.value})"
            )
        logger.debug(
            "Subscribing to location updates (%s, every %d ms)",
            request.priority.value, request.interval_millis,
        )
        task = asyncio.get_running_loop().create_task(self._poll(request, callback))
        return LocationSubscription(task)

    async def _poll(self, request: LocationRequest, callback: LocationCallback) -> None:
        interval = request.interval_millis / 1000.0
        async with HttpClient() as client:
            while True:
                try:
                    resp = await client.get(self._url)
                    data = resp.json()
                    coords = Coordinates(float(data["lat"]), float(data["lon"]))
                except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
                    logger.warning("Location update failed: %s", exc)
                else:
                    callback(coords)
                await asyncio.sleep(interval)
