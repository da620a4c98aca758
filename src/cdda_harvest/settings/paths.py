"""
Path-related settings for cdda_harvest.
"""

from pathlib import Path

from .base import SettingsGroup

DEFAULT_DATA_DIR = "data"


class PathSettings(SettingsGroup):
    """Manages path-related settings."""

    @property
    def data_dir(self) -> Path:
        """Get the directory holding harvested snapshots."""
        value = self._get_str("paths/data_dir", DEFAULT_DATA_DIR)
        return Path(value or DEFAULT_DATA_DIR)

    @data_dir.setter
    def data_dir(self, value: Path | str) -> None:
        """Set the directory holding harvested snapshots."""
        self._set("paths/data_dir", str(value))
