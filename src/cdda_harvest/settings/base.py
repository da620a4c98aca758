"""
Shared helpers for settings subsystems.
"""

from typing import List, Optional, TYPE_CHECKING, cast

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

_TRUE_STRINGS = ("true", "1", "yes", "on")


class SettingsGroup:
    """Base class for one group of keys in a ``QSettings`` store.

    INI-backed settings come back as strings, and a one-item list comes back
    as a bare string, so every getter normalizes its value.
    """

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _raw(self, key: str, default: object) -> object:
        return self.settings.value(key, default)

    def _set(self, key: str, value: object) -> None:
        self.settings.setValue(key, value)
        self.settings.sync()

    def _get_str(self, key: str, default: str = "") -> str:
        value = self._raw(key, default)
        return default if value is None else str(value)

    def _get_bool(self, key: str, default: bool = False) -> bool:
        value = self._raw(key, default)
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)

    def _get_int(self, key: str, default: int = 0) -> int:
        try:
            return int(cast(int, self._raw(key, default)))
        except (TypeError, ValueError):
            return default

    def _get_list(self, key: str, default: Optional[List[str]] = None) -> List[str]:
        """Return a string list; a bare string is a one-item list."""
        fallback = [] if default is None else list(default)
        value = self._raw(key, fallback)
        if isinstance(value, str):
            return [value] if value else []
        if isinstance(value, list):
            return ["" if item is None else str(item) for item in cast(List[object], value)]
        return fallback
