"""
Core settings management for cdda_harvest.
"""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QSettings

from .types import ValidationResult
from .validation import SettingsValidator
from .paths import PathSettings
from .source import SourceSettings
from .harvest import HarvestOptions
from .retention import RetentionSettings
from .logging import LoggingSettings

logger = logging.getLogger(__name__)

ORGANIZATION = "cdda_harvest"
APPLICATION = "cdda_harvest"


class HarvestSettings:
    """
    Configuration management using QSettings.

    Settings live in the platform's native per-user store, or in an INI
    file when ``settings_file`` is given.
    """

    def __init__(
        self, profile: str = "default", settings_file: Optional[str | Path] = None
    ):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            settings_file: Optional INI file to use instead of the native store
        """
        if settings_file is not None:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings(ORGANIZATION, APPLICATION)
        self.profile = profile

        # Use profile as a group: cdda_harvest/<profile>/...
        self.settings.beginGroup(profile)

        # Initialize subsystems
        self._validator = SettingsValidator(self)
        self._paths = PathSettings(self.settings)
        self._source = SourceSettings(self.settings)
        self._harvest = HarvestOptions(self.settings)
        self._retention = RetentionSettings(self.settings)
        self._logging = LoggingSettings(self.settings)

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def paths(self) -> PathSettings:
        """Access path settings subsystem."""
        return self._paths

    @property
    def source(self) -> SourceSettings:
        """Access upstream repository settings subsystem."""
        return self._source

    @property
    def harvest(self) -> HarvestOptions:
        """Access harvest behaviour settings subsystem."""
        return self._harvest

    @property
    def retention(self) -> RetentionSettings:
        """Access retention settings subsystem."""
        return self._retention

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
