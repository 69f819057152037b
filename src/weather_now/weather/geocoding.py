"""Place name to coordinates geocoding using geopy Nominatim."""

from __future__ import annotations

import logging

from geopy.adapters import AioHTTPAdapter
from geopy.exc import GeocoderTimedOut, GeocoderServiceError, GeocoderUnavailable
from geopy.geocoders import Nominatim

from weather_now.config import get_settings
from weather_now.errors import GeocodeIOError
from weather_now.weather.models import Coordinates

logger = logging.getLogger(__name__)


class Geocoder:
    """Resolves free-text place names through Nominatim (free, no API key)."""

    def __init__(self, user_agent: str | None = None) -> None:
        self._user_agent = user_agent or get_settings().geocoder_user_agent

    async def resolve(self, place_name: str, max_results: int = 1) -> list[Coordinates]:
        """Convert a place name to at most ``max_results`` coordinate pairs.

        Best match first. Returns an empty list for blank or unrecognised
        input.

        Raises:
            GeocodeIOError: when the geocoding service cannot be used.
        """
        query = place_name.strip()
        if not query:
            logger.debug("Skipping geocode for blank place name")
            return []

        try:
            async with Nominatim(
                user_agent=self._user_agent,
                adapter_factory=AioHTTPAdapter,
            ) as geolocator:
                results = await geolocator.geocode(
                    query, exactly_one=False, limit=max_results,
                )
            matches = [
                Coordinates(latitude=float(r.latitude), longitude=float(r.longitude))
                for r in (results or [])[:max_results]
            ]
        except (GeocoderTimedOut, GeocoderServiceError, GeocoderUnavailable) as exc:
            logger.warning("Geocoding service error for %r: %s", query, exc)
            raise GeocodeIOError(f"Geocoding failed for {query!r}: {exc}") from exc
        except OSError as exc:
            logger.warning("Geocoding transport error for %r: %s", query, exc)
            raise GeocodeIOError(f"Geocoding failed for {query!r}: {exc}") from exc
        except (ValueError, TypeError) as exc:
            logger.warning("Geocoding parse error for %r: %s", query, exc)
            raise GeocodeIOError(f"Unreadable geocoding result for {query!r}: {exc}") from exc

        if not matches:
            logger.debug("Geocoding returned no results for %r", query)
        return matches
