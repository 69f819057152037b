"""Shared async HTTP client."""

from __future__ import annotations

import httpx

from weather_now.config import get_settings


class HttpClient:
    """Async HTTP client shared by the weather, location and icon fetchers.

    The weather client passes the OpenWeatherMap base URL; the IP location
    poller and the icon loader call absolute URLs with no base. Non-success
    statuses raise ``httpx.HTTPStatusError`` so each caller maps every
    failure to its own error. A request is sent once and never retried.
    """

    def __init__(self, base_url: str = "") -> None:
        settings = get_settings()
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(settings.http_timeout),
        )

    async def get(self, url: str, params: dict | None = None) -> httpx.Response:
        resp = await self._client.get(url, params=params)
        resp.raise_for_status()
        return resp

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
