"""
Configuration type definitions and exceptions for cdda_harvest.
"""

from dataclasses import dataclass, field
from typing import List

from ..errors import HarvestError


class ConfigError(HarvestError):
    """Raised when configuration is invalid or cannot be accessed."""
    pass


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
