"""Cursor-driven reveal of hidden title markup.

States: hidden (``window is None``) and revealed (``window`` set).  Leaving
the window hides it again at once; entering a title is only noticed after a
short debounce, so scrolling through a buffer does not flicker.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Protocol

from .settings import LiterateSettings

logger = logging.getLogger(__name__)

REVEAL_DELAY_MS = 40


@dataclass(frozen=True, slots=True)
class RevealWindow:
    start: int
    end: int

    def contains(self, position: int) -> bool:
        return self.start <= int(position) < self.end

    def as_range(self) -> tuple[int, int]:
        return self.start, self.end


class DebounceScheduler(Protocol):
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        """Arm the single timer, replacing any pending callback."""
        ...

    def cancel(self) -> None:
        ...


class RevealController:
    def __init__(
        self,
        *,
        scheduler: DebounceScheduler,
        cursor_position: Callable[[], int],
        title_span_at: Callable[[int], tuple[int, int] | None],
        reannotate: Callable[[int, int], None],
        settings: Callable[[], LiterateSettings],
        delay_ms: int = REVEAL_DELAY_MS,
    ):
        self._scheduler = scheduler
        self._cursor_position = cursor_position
        self._title_span_at = title_span_at
        self._reannotate = reannotate
        self._settings = settings
        self.delay_ms = int(delay_ms)
        self.window: RevealWindow | None = None

    @property
    def revealed(self) -> tuple[int, int] | None:
        return None if self.window is None else self.window.as_range()

    def on_cursor_moved(self, position: int) -> None:
        window = self.window
        if window is not None and not window.contains(position):
            self.window = None
            logger.debug("Hiding title markup again in [%d, %d)", window.start, window.end)
            self._reannotate(window.start, window.end)
        self._scheduler.schedule(self.delay_ms, self.on_timer)

    def on_timer(self) -> None:
        if not self._settings().reveal_at_point:
            return
        position = int(self._cursor_position())
        span = self._title_span_at(position)
        if span is None:
            return
        window = RevealWindow(*span)
        if window == self.window or not window.contains(position):
            return
        previous = self.window
        self.window = window
        if previous is not None:
            self._reannotate(previous.start, previous.end)
        logger.debug("Revealing title markup in [%d, %d)", window.start, window.end)
        self._reannotate(window.start, window.end)

    def reset(self) -> None:
        self._scheduler.cancel()
        window = self.window
        self.window = None
        if window is not None:
            self._reannotate(window.start, window.end)


__all__ = ["DebounceScheduler", "REVEAL_DELAY_MS", "RevealController", "RevealWindow"]
