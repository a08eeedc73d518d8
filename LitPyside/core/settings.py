"""Process-wide literate display settings with change subscribers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Mapping

from .grammar import DEFAULT_TITLE_STYLES, LiterateGrammar

logger = logging.getLogger(__name__)

# Keys may carry this prefix, as in ``"literate.hide_quotes"``.
PREFIX = "literate."

_TRUE_WORDS = frozenset({"1", "true", "yes", "on", "y"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off", "n", ""})


class LiterateSettingsError(ValueError):
    """Raised for unknown setting keys or values the engine cannot use."""


def _to_bool(name: str, value: object) -> bool:
    if isinstance(value, (bool, int, float)):
        return bool(value)
    word = str(value if value is not None else "").strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise LiterateSettingsError(f"{name} expects a boolean, got {value!r}.")


def _to_title_styles(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        styles = tuple(value)
    elif isinstance(value, (list, tuple)):
        styles = tuple(str(item) for item in value)
    else:
        raise LiterateSettingsError(f"title_styles must be a list of characters, got {type(value).__name__}.")
    try:
        LiterateGrammar(styles)
    except ValueError as exc:
        raise LiterateSettingsError(str(exc)) from exc
    return styles


@dataclass(frozen=True, slots=True)
class LiterateSettings:
    hide_title_markup: bool = False
    hide_quotes: bool = True
    reveal_at_point: bool = False
    title_styles: tuple[str, ...] = DEFAULT_TITLE_STYLES

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "LiterateSettings":
        """Snapshot from loose values; missing keys keep their defaults."""
        return cls().with_values(data or {})

    def with_values(self, values: Mapping[str, Any]) -> "LiterateSettings":
        changes: dict[str, Any] = {}
        for key, value in values.items():
            name = setting_name(key)
            if name == "title_styles":
                changes[name] = _to_title_styles(value)
            else:
                changes[name] = _to_bool(name, value)
        return replace(self, **changes)


SETTING_NAMES: tuple[str, ...] = tuple(f.name for f in fields(LiterateSettings))
TOGGLE_NAMES: tuple[str, ...] = tuple(name for name in SETTING_NAMES if name != "title_styles")


def setting_name(key: str) -> str:
    """``"hide_quotes"`` for both ``"hide_quotes"`` and ``"literate.hide_quotes"``."""
    name = str(key or "").strip()
    if name.startswith(PREFIX):
        name = name[len(PREFIX):]
    if name not in SETTING_NAMES:
        raise LiterateSettingsError(f"Unknown literate setting: {key!r}")
    return name


SettingsListener = Callable[[LiterateSettings], None]


class LiterateSettingsStore:
    """In-memory settings snapshot with subscribers.

    Every effective change notifies each subscriber with the new snapshot;
    setting a value it already has notifies nobody.
    """

    def __init__(self, defaults: LiterateSettings | None = None) -> None:
        self.defaults = defaults if defaults is not None else LiterateSettings()
        self._snapshot = self.defaults
        self._listeners: list[SettingsListener] = []

    def get(self, key: str) -> Any:
        value = getattr(self._snapshot, setting_name(key))
        return list(value) if isinstance(value, tuple) else value

    def snapshot(self) -> LiterateSettings:
        return self._snapshot

    def set(self, key: str, value: Any) -> bool:
        return self.update({key: value})

    def update(self, values: Mapping[str, Any]) -> bool:
        return self._publish(self._snapshot.with_values(values))

    def toggle(self, key: str) -> bool:
        name = setting_name(key)
        if name not in TOGGLE_NAMES:
            raise LiterateSettingsError(f"Setting {key!r} is not a boolean toggle.")
        value = not getattr(self._snapshot, name)
        self.set(name, value)
        return value

    def reset(self) -> bool:
        return self._publish(self.defaults)

    def _publish(self, snapshot: LiterateSettings) -> bool:
        if snapshot == self._snapshot:
            return False
        self._snapshot = snapshot
        logger.debug("Literate settings changed: %s", snapshot)
        for listener in list(self._listeners):
            listener(snapshot)
        return True

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        if listener not in self._listeners:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: SettingsListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)


_SHARED_STORE: LiterateSettingsStore | None = None


def shared_settings() -> LiterateSettingsStore:
    global _SHARED_STORE
    if _SHARED_STORE is None:
        _SHARED_STORE = LiterateSettingsStore()
    return _SHARED_STORE


__all__ = [
    "LiterateSettings",
    "LiterateSettingsError",
    "LiterateSettingsStore",
    "SETTING_NAMES",
    "setting_name",
    "shared_settings",
]
