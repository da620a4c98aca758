"""
Settings validation system for cdda_harvest.
"""

import logging
import re
from typing import List, TYPE_CHECKING

from .types import ConfigError, ValidationResult

if TYPE_CHECKING:
    from .core import HarvestSettings

logger = logging.getLogger(__name__)

_REPOSITORY_RE = re.compile(r"^[\w.-]+/[\w.-]+$")


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "HarvestSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        # Validate upstream repository
        repository = self.settings.source.repository
        if not _REPOSITORY_RE.match(repository):
            errors.append(f"Repository must look like 'owner/name': {repository}")

        if not self.settings.source.api_url.startswith(("http://", "https://")):
            errors.append(f"API URL is not an HTTP URL: {self.settings.source.api_url}")

        # Validate retention tiers
        try:
            self.settings.retention.tier_widths
        except ConfigError as e:
            errors.append(str(e))

        # Validate data directory
        data_dir = self.settings.paths.data_dir
        if not data_dir.exists():
            warnings.append(f"Data directory does not exist yet: {data_dir}")
        elif not data_dir.is_dir():
            errors.append(f"Data path is not a directory: {data_dir}")

        if self.settings.harvest.max_workers < 1:
            errors.append(
                f"Worker count must be positive: {self.settings.harvest.max_workers}"
            )

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
