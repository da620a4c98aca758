"""Utility helpers for cdda_harvest."""

from .logging_config import setup_logging

__all__ = ["setup_logging"]
