"""Condition icon download with a disk cache."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from urllib.parse import urlsplit

import httpx

from weather_now.common.http import HttpClient
from weather_now.config import get_settings

logger = logging.getLogger(__name__)


def icon_url(icon_code: str, template: str | None = None) -> str:
    """Build the icon URL for an OpenWeatherMap icon code."""
    template = template or get_settings().icon_url_template
    return template.format(icon=icon_code)


class IconLoader:
    """Fetches small images by URL and keeps them on disk.

    A cached file is returned without touching the network. Download
    failures are logged and yield None.
    """

    def __init__(self, cache_dir: Path | None = None) -> None:
        self._cache_dir = cache_dir or get_settings().icon_cache_dir

    def cache_path(self, url: str) -> Path:
        name = Path(urlsplit(url).path).name or "icon"
        digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:12]
        return self._cache_dir / f"{digest}-{name}"

    async def load(self, url: str) -> Path | None:
        path = self.cache_path(url)
        if path.is_file():
            logger.debug("Icon cache hit: %s", url)
            return path

        try:
            async with HttpClient() as client:
                resp = await client.get(url)
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".part")
            tmp.write_bytes(resp.content)
            tmp.replace(path)
        except (httpx.HTTPError, OSError) as exc:
            logger.warning("Icon load failed for %s: %s", url, exc)
            return None
        return path
