"""
Snapshot retention settings for cdda_harvest.
"""

from typing import Tuple

from ..snapshots.retention import DEFAULT_TIER_WIDTHS
from .base import SettingsGroup
from .types import ConfigError


def parse_tier_widths(value: str) -> Tuple[int, ...]:
    """Parse ``"30,60,120,240"`` into tier widths.

    Raises:
        ConfigError: if the value is not a list of positive integers
    """
    try:
        widths = tuple(int(part) for part in value.split(",") if part.strip())
    except ValueError as e:
        raise ConfigError(f"Invalid retention tier widths: {value!r}") from e
    if not widths or any(width <= 0 for width in widths):
        raise ConfigError(f"Invalid retention tier widths: {value!r}")
    return widths


class RetentionSettings(SettingsGroup):
    """Manages the retention tier widths."""

    @property
    def tier_widths_raw(self) -> str:
        """Get the tier widths exactly as stored."""
        default = ",".join(str(width) for width in DEFAULT_TIER_WIDTHS)
        # A comma-separated INI value may come back as a list
        return ",".join(self._get_list("retention/tier_widths", [default]))

    @property
    def tier_widths(self) -> Tuple[int, ...]:
        """Get the retention tier widths in days."""
        return parse_tier_widths(self.tier_widths_raw)

    @tier_widths.setter
    def tier_widths(self, value: Tuple[int, ...]) -> None:
        """Set the retention tier widths in days."""
        raw = ",".join(str(width) for width in value)
        parse_tier_widths(raw)
        self._set("retention/tier_widths", raw)
