"""
Upstream repository settings for cdda_harvest.
"""

import logging

from ..sources.releases import DEFAULT_API_URL, DEFAULT_REPOSITORY
from .base import SettingsGroup

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60


class SourceSettings(SettingsGroup):
    """Manages where releases are fetched from."""

    @property
    def repository(self) -> str:
        """Get the ``owner/name`` of the upstream repository."""
        return self._get_str("source/repository", DEFAULT_REPOSITORY)

    @repository.setter
    def repository(self, value: str) -> None:
        """Set the upstream repository."""
        self._set("source/repository", value)

    @property
    def api_url(self) -> str:
        """Get the GitHub API base URL."""
        return self._get_str("source/api_url", DEFAULT_API_URL)

    @api_url.setter
    def api_url(self, value: str) -> None:
        """Set the GitHub API base URL."""
        self._set("source/api_url", value)

    @property
    def timeout(self) -> int:
        """Get the HTTP timeout in seconds."""
        return self._get_int("source/timeout", DEFAULT_TIMEOUT)

    @timeout.setter
    def timeout(self, value: int) -> None:
        """Set the HTTP timeout in seconds."""
        if value <= 0:
            logger.warning(f"Invalid timeout: {value}, keeping current: {self.timeout}")
            return
        self._set("source/timeout", value)
