"""Line navigation and display-width helpers over plain strings."""

from __future__ import annotations

import unicodedata


def line_start(text: str, pos: int) -> int:
    pos = max(0, min(int(pos), len(text)))
    return text.rfind("\n", 0, pos) + 1


def line_end(text: str, pos: int) -> int:
    pos = max(0, min(int(pos), len(text)))
    end = text.find("\n", pos)
    return len(text) if end < 0 else end


def next_line_start(text: str, pos: int) -> int | None:
    end = line_end(text, pos)
    if end >= len(text):
        return None
    return end + 1


def previous_line_start(text: str, pos: int) -> int | None:
    start = line_start(text, pos)
    if start == 0:
        return None
    return line_start(text, start - 1)


def line_at(text: str, pos: int) -> tuple[int, int, str]:
    start = line_start(text, pos)
    end = line_end(text, start)
    return start, end, text[start:end]


def display_width(text: str) -> int:
    """Column width of ``text`` as rendered in a monospace editor."""
    width = 0
    for ch in str(text or ""):
        if unicodedata.combining(ch):
            continue
        if unicodedata.east_asian_width(ch) in ("W", "F"):
            width += 2
        else:
            width += 1
    return width


__all__ = [
    "display_width",
    "line_at",
    "line_end",
    "line_start",
    "next_line_start",
    "previous_line_start",
]
