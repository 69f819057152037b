"""Single-slot display state owned by the weather screen."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from weather_now.screen.formatters import format_reading
from weather_now.weather.models import WeatherReading

logger = logging.getLogger(__name__)


@dataclass
class DisplayState:
    """What the screen currently shows: one text block and one icon.

    Every change goes through a transition method. Each fetch takes a
    generation number from ``next_generation``; with ``discard_stale`` set,
    results carrying a generation older than the one on screen are dropped.
    Without it the last result to arrive wins.

    Attributes:
        text: text block on screen
        reading: reading behind ``text``, None when a message is shown
        icon_path: cached icon file on screen
        generation: generation of the result currently on screen
        revision: bumped on every text change
        discard_stale: drop results older than ``generation``
    """

    text: str = ""
    reading: WeatherReading | None = None
    icon_path: Path | None = None
    generation: int = 0
    revision: int = 0
    discard_stale: bool = False
    _issued: int = field(default=0, repr=False)
    _listeners: list[Callable[[DisplayState], None]] = field(default_factory=list, repr=False)

    def next_generation(self) -> int:
        self._issued += 1
        return self._issued

    def add_listener(self, listener: Callable[[DisplayState], None]) -> None:
        self._listeners.append(listener)

    def _accept(self, generation: int | None) -> bool:
        if generation is None:
            return True
        if self.discard_stale and generation < self.generation:
            logger.debug("Dropping stale result %d (showing %d)", generation, self.generation)
            return False
        self.generation = generation
        return True

    def _changed(self) -> None:
        for listener in self._listeners:
            listener(self)

    def show_message(self, text: str, generation: int | None = None) -> bool:
        if not self._accept(generation):
            return False
        self.text = text
        self.revision += 1
        self.reading = None
        self._changed()
        return True

    def show_reading(self, reading: WeatherReading, generation: int | None = None) -> bool:
        if not self._accept(generation):
            return False
        self.text = format_reading(reading)
        self.revision += 1
        self.reading = reading
        self._changed()
        return True

    def show_icon(self, path: Path, generation: int | None = None) -> bool:
        if generation is not None and self.discard_stale and generation < self.generation:
            return False
        self.icon_path = path
        self._changed()
        return True
