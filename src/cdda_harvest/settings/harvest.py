"""
Harvest behaviour settings for cdda_harvest.
"""

import logging
from typing import List

from ..translations.transliteration import DEFAULT_PREFIXES
from .base import SettingsGroup

logger = logging.getLogger(__name__)

# These releases shipped broken JSON
DEFAULT_FORBIDDEN_TAGS = [
    "cdda-experimental-2021-07-09-1837",
    "cdda-experimental-2021-07-09-1719",
]

DEFAULT_MAX_WORKERS = 8


class HarvestOptions(SettingsGroup):
    """Manages which releases are harvested and how."""

    @property
    def forbidden_tags(self) -> List[str]:
        """Get release tags that are never harvested."""
        return self._get_list("harvest/forbidden_tags", DEFAULT_FORBIDDEN_TAGS)

    @forbidden_tags.setter
    def forbidden_tags(self, value: List[str]) -> None:
        """Set release tags that are never harvested."""
        self._set("harvest/forbidden_tags", list(value))

    @property
    def skip_obsolete_mods(self) -> bool:
        """Check if mods flagged obsolete are left out of mod datasets."""
        return self._get_bool("harvest/skip_obsolete_mods", True)

    @skip_obsolete_mods.setter
    def skip_obsolete_mods(self, value: bool) -> None:
        """Set whether obsolete mods are left out."""
        self._set("harvest/skip_obsolete_mods", value)

    @property
    def transliterate_prefixes(self) -> List[str]:
        """Get locale prefixes that get a pinyin index."""
        return self._get_list(
            "harvest/transliterate_prefixes", list(DEFAULT_PREFIXES)
        )

    @transliterate_prefixes.setter
    def transliterate_prefixes(self, value: List[str]) -> None:
        """Set locale prefixes that get a pinyin index."""
        self._set("harvest/transliterate_prefixes", list(value))

    @property
    def max_workers(self) -> int:
        """Get the number of threads compiling catalogs."""
        return self._get_int("harvest/max_workers", DEFAULT_MAX_WORKERS)

    @max_workers.setter
    def max_workers(self, value: int) -> None:
        """Set the number of threads compiling catalogs."""
        if value < 1:
            logger.warning(
                f"Invalid worker count: {value}, keeping current: {self.max_workers}"
            )
            return
        self._set("harvest/max_workers", value)
