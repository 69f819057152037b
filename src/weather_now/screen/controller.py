"""Weather screen controller.

Wires user actions (place name search, my-location requests, permission
results, screen start) to the geocoder, location provider, weather client,
icon loader and coordinate store, and updates the single display slot.
Everything runs on one event loop; independent triggers are not
serialised against each other.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Coroutine

import aiosqlite

from weather_now.config import Settings, get_settings
from weather_now.errors import (
    WEATHER_FETCH_FAILED,
    GeocodeEmptyResult,
    GeocodeIOError,
    LocationPermissionError,
    PermissionDenied,
    WeatherEmptyBody,
    WeatherNowError,
)
from weather_now.icons.loader import IconLoader, icon_url
from weather_now.location.models import (
    LOCATION_PERMISSION_REQUEST,
    LocationRequest,
    PermissionRequest,
    PermissionState,
    Priority,
)
from weather_now.location.provider import IpLocationProvider, LocationProvider, LocationSubscription
from weather_now.screen.state import DisplayState
from weather_now.storage.coordinates import CoordinateStore
from weather_now.weather.geocoding import Geocoder
from weather_now.weather.models import Coordinates, WeatherReading
from weather_now.weather.openweather import WeatherClient

logger = logging.getLogger(__name__)


class WeatherScreen:
    """Screen controller owning the display state and the collaborators."""

    def __init__(
        self,
        weather_client: WeatherClient | None = None,
        geocoder: Geocoder | None = None,
        store: CoordinateStore | None = None,
        location_provider: LocationProvider | None = None,
        icon_loader: IconLoader | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._settings = settings
        self._weather = weather_client or WeatherClient(settings.openweather_api_url)
        self._geocoder = geocoder or Geocoder(settings.geocoder_user_agent)
        self._store = store or CoordinateStore(settings.db_path)
        self._location = location_provider or IpLocationProvider(
            url=settings.ip_location_url,
            permission=PermissionState(settings.location_permission),
        )
        self._icons = icon_loader or IconLoader(settings.icon_cache_dir)
        self.state = DisplayState(discard_stale=settings.discard_stale_results)
        self.permission_request: PermissionRequest | None = None
        self._subscription: LocationSubscription | None = None
        self._tasks: set[asyncio.Task] = set()

    # ---- triggers ----

    async def on_start(self) -> Coordinates | None:
        """Show the weather for the last successfully fetched location, if any."""
        try:
            last = await self._store.load_last()
        except (aiosqlite.Error, OSError):
            logger.warning("Could not read last location", exc_info=True)
            return None
        if last is None:
            logger.debug("No saved location to display")
            return None
        await self.fetch_and_display(last)
        return last

    async def on_submit_place_name(self, text: str) -> None:
        await self.resolve_and_fetch(text)

    def on_request_my_location(self) -> None:
        """Start location updates, asking for permission first if needed."""
        if self._location.check_permission() is PermissionState.GRANTED:
            self.acquire_and_fetch()
            return
        logger.debug("Location permission missing, requesting it")
        self.permission_request = self._location.request_permission(
            LOCATION_PERMISSION_REQUEST, self.on_permission_result,
        )

    def on_permission_result(self, granted: bool) -> None:
        if granted:
            self.acquire_and_fetch()
        else:
            self.state.show_message(PermissionDenied.user_message)

    # ---- flows ----

    async def resolve_and_fetch(self, place_name: str) -> None:
        """Geocode ``place_name`` and show the weather for the best match."""
        generation = self.state.next_generation()
        try:
            matches = await self._geocoder.resolve(place_name, max_results=1)
            if not matches:
                raise GeocodeEmptyResult(f"No match for {place_name!r}")
        except (GeocodeIOError, GeocodeEmptyResult) as exc:
            logger.warning("Location lookup failed: %s", exc)
            self.state.show_message(exc.user_message, generation)
            return

        await self.fetch_and_display(matches[0], generation)

    def acquire_and_fetch(self) -> None:
        """Subscribe to location updates; every update triggers its own fetch."""
        self.stop_location_updates()
        request = LocationRequest(
            priority=Priority.HIGH_ACCURACY,
            interval_millis=self._settings.location_interval_ms,
        )
        try:
            self._subscription = self._location.subscribe(request, self._on_location)
        except LocationPermissionError as exc:
            logger.warning("Location subscription refused: %s", exc)
            self.state.show_message(exc.user_message)

    def _on_location(self, coordinates: Coordinates) -> None:
        generation = self.state.next_generation()
        self._spawn(self.fetch_and_display(coordinates, generation))

    async def fetch_and_display(
        self,
        coordinates: Coordinates,
        generation: int | None = None,
    ) -> WeatherReading | None:
        """Fetch weather for ``coordinates``, show it and remember the location.

        The location is persisted only after the reading is on screen.
        """
        if generation is None:
            generation = self.state.next_generation()

        try:
            reading = await self._weather.fetch_by_coordinates(
                coordinates.latitude,
                coordinates.longitude,
                self._settings.units,
                self._settings.openweather_api_key,
            )
            if reading is None:
                raise WeatherEmptyBody(f"Empty weather response for {coordinates}")
        except WeatherNowError as exc:
            logger.warning("Weather fetch failed: %s", exc)
            self.state.show_message(exc.user_message, generation)
            return None
        except Exception:
            logger.exception("Unexpected error fetching weather for %s", coordinates)
            self.state.show_message(WEATHER_FETCH_FAILED, generation)
            return None

        if not self.state.show_reading(reading, generation):
            return None

        self._spawn(self._load_icon(icon_url(reading.icon_code, self._settings.icon_url_template), generation))
        await self._store.save(coordinates)
        return reading

    async def _load_icon(self, url: str, generation: int) -> None:
        path = await self._icons.load(url)
        if path is not None:
            self.state.show_icon(path, generation)

    # ---- lifecycle ----

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until every fetch and icon load started so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def stop_location_updates(self) -> None:
        """Release the location subscription; fetches already started carry on."""
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    async def close(self) -> None:
        """Release the location subscription and cancel outstanding work."""
        self.stop_location_updates()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def __aenter__(self) -> WeatherScreen:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
