"""
Module for working with CDDA game data.

Splits raw JSON files into individual objects with line provenance and
aggregates them into base-game and per-mod datasets.
"""

from .models import (
    GameDataObject,
    GameDataCollection,
    SourceSpan,
    ScannedObject,
    ModBucket,
    ModCollector,
    Dataset,
    METADATA_MOD_ID,
    METADATA_SOURCE_FILE,
    MOD_INFO_TYPE,
    BASE_DATA_PATTERN,
    MOD_DATA_PATTERN,
)
from .scanner import ObjectScanner, ScanState, scan_objects
from .aggregator import GameDataAggregator, mod_id_from_path

__all__ = [
    # Type aliases
    "GameDataObject",
    "GameDataCollection",
    # Models
    "SourceSpan",
    "ScannedObject",
    "ModBucket",
    "ModCollector",
    "Dataset",
    # Constants
    "METADATA_MOD_ID",
    "METADATA_SOURCE_FILE",
    "MOD_INFO_TYPE",
    "BASE_DATA_PATTERN",
    "MOD_DATA_PATTERN",
    # Components
    "ObjectScanner",
    "ScanState",
    "scan_objects",
    "GameDataAggregator",
    "mod_id_from_path",
]
