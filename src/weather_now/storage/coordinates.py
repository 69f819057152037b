"""Last successfully fetched coordinates, persisted in SQLite."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from weather_now.common.types import to_float32
from weather_now.config import get_settings
from weather_now.weather.models import Coordinates

logger = logging.getLogger(__name__)

PREF_NAMESPACE = "weather_now.preferences"
LATITUDE_KEY = "lastSearchedLatitude"
LONGITUDE_KEY = "lastSearchedLongitude"

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS preferences (
    namespace TEXT NOT NULL,
    key TEXT NOT NULL,
    value REAL NOT NULL,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (namespace, key)
);
"""

_UPSERT = """
INSERT INTO preferences (namespace, key, value, updated_at)
VALUES (?, ?, ?, ?)
ON CONFLICT(namespace, key) DO UPDATE SET
    value = excluded.value,
    updated_at = excluded.updated_at
"""


class CoordinateStore:
    """Key-value store for the last searched latitude/longitude.

    Both values are kept at single precision. A location is present only
    when both keys exist, so (0.0, 0.0) is stored and loaded like any
    other point.
    """

    def __init__(self, db_path: Path | None = None, namespace: str = PREF_NAMESPACE) -> None:
        self._db_path = db_path or get_settings().db_path
        self._namespace = namespace

    async def _ensure_db(self, db: aiosqlite.Connection) -> None:
        await db.execute(_CREATE_TABLE)

    def _connect(self) -> aiosqlite.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        return aiosqlite.connect(str(self._db_path))

    async def save(self, coordinates: Coordinates) -> None:
        """Write both components; storage errors are logged, never raised."""
        now = datetime.now(timezone.utc).isoformat()
        rows = [
            (self._namespace, LATITUDE_KEY, to_float32(coordinates.latitude), now),
            (self._namespace, LONGITUDE_KEY, to_float32(coordinates.longitude), now),
        ]
        try:
            async with self._connect() as db:
                await self._ensure_db(db)
                await db.executemany(_UPSERT, rows)
                await db.commit()
        except (aiosqlite.Error, OSError):
            logger.warning("Failed to save last location %s", coordinates, exc_info=True)

    async def load_last(self) -> Coordinates | None:
        """Return the persisted coordinates, or None if nothing was saved."""
        async with self._connect() as db:
            await self._ensure_db(db)
            cursor = await db.execute(
                "SELECT key, value FROM preferences WHERE namespace = ? AND key IN (?, ?)",
                (self._namespace, LATITUDE_KEY, LONGITUDE_KEY),
            )
            rows = dict(await cursor.fetchall())

        if LATITUDE_KEY not in rows or LONGITUDE_KEY not in rows:
            return None
        return Coordinates(
            latitude=to_float32(rows[LATITUDE_KEY]),
            longitude=to_float32(rows[LONGITUDE_KEY]),
        )

    async def clear(self) -> None:
        """Forget the persisted location."""
        async with self._connect() as db:
            await self._ensure_db(db)
            await db.execute(
                "DELETE FROM preferences WHERE namespace = ? AND key IN (?, ?)",
                (self._namespace, LATITUDE_KEY, LONGITUDE_KEY),
            )
            await db.commit()
