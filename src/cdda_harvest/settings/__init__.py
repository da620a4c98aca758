"""
Settings package for cdda_harvest.

This package provides a modular, type-safe configuration management system
using Qt's QSettings for cross-platform storage.

Usage:
    from cdda_harvest.settings import HarvestSettings

    settings = HarvestSettings()
    result = settings.validate()
"""

from .core import HarvestSettings
from .types import ConfigError, ValidationResult
from .paths import PathSettings
from .source import SourceSettings
from .harvest import HarvestOptions
from .retention import RetentionSettings, parse_tier_widths
from .logging import LoggingSettings

__all__ = [
    "HarvestSettings",
    "ConfigError",
    "ValidationResult",
    "PathSettings",
    "SourceSettings",
    "HarvestOptions",
    "RetentionSettings",
    "parse_tier_widths",
    "LoggingSettings",
]
