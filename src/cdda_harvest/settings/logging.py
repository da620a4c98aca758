"""
Logging settings for harvest runs.

Console output is meant for interactive runs; the rotating CSV log keeps the
history of scheduled pulls.
"""

import logging
from pathlib import Path

from .base import SettingsGroup

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE_PATH = "logs/cdda_harvest.csv"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(SettingsGroup):
    """Manages console and CSV file logging."""

    # === CONSOLE ===

    @property
    def console_logging(self) -> bool:
        """Check if log records are printed to the console."""
        return self._get_bool("logging/console_enabled", True)

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._set("logging/console_enabled", value)

    @property
    def console_log_level(self) -> str:
        """Get the console level name (the file always gets DEBUG)."""
        value = self._get_str("logging/console_level", "INFO").upper()
        return value if value in VALID_LEVELS else "INFO"

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        if value.upper() not in VALID_LEVELS:
            logger.warning(
                f"Invalid console log level: {value}, keeping {self.console_log_level}"
            )
            return
        self._set("logging/console_level", value.upper())

    @property
    def console_use_colors(self) -> bool:
        """Check if console level names are colored."""
        return self._get_bool("logging/console_use_colors", True)

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._set("logging/console_use_colors", value)

    # === CSV FILE ===

    @property
    def file_logging(self) -> bool:
        """Check if log records are appended to the CSV log file."""
        return self._get_bool("logging/file_enabled", False)

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._set("logging/file_enabled", value)

    @property
    def log_file_path(self) -> str:
        """Get the CSV log file path, relative to the working directory."""
        return self._get_str("logging/file_path", DEFAULT_LOG_FILE_PATH)

    @log_file_path.setter
    def log_file_path(self, value: str) -> None:
        self._set("logging/file_path", value)

    @property
    def log_file_absolute_path(self) -> Path:
        return Path(self.log_file_path).absolute()

    @property
    def max_bytes(self) -> int:
        """Get the size at which the CSV log is rotated."""
        return self._get_int("logging/max_bytes", DEFAULT_MAX_BYTES)

    @property
    def backup_count(self) -> int:
        """Get how many rotated CSV logs are kept."""
        return self._get_int("logging/backup_count", DEFAULT_BACKUP_COUNT)
