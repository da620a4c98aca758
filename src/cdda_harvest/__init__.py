"""
cdda_harvest: game data harvester for Cataclysm: Dark Days Ahead

Turns upstream releases into per-build JSON snapshots with translation
catalogs and pinyin indexes, and prunes old builds on a tiered schedule.
"""

__version__ = "0.1.0"
__author__ = "cdda_harvest Contributors"

# Core service imports
from .pipeline import HarvestService, ReleaseProcessor
from .utils.logging_config import setup_logging

# Main components
from .game_data import GameDataAggregator, ObjectScanner, scan_objects
from .translations import build_transliteration, compile_catalog
from .snapshots import RetentionPolicy, SnapshotTreeBuilder, plan_retention

__all__ = [
    # Services
    "HarvestService",
    "ReleaseProcessor",

    # Logging
    "setup_logging",

    # Components
    "GameDataAggregator",
    "ObjectScanner",
    "scan_objects",
    "build_transliteration",
    "compile_catalog",
    "RetentionPolicy",
    "SnapshotTreeBuilder",
    "plan_retention",
]
