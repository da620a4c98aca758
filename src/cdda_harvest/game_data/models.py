"""
Data models for CDDA game data.

Contains type definitions and simple data structures used throughout
the game_data package. Keeps dict-based approach for flexibility while
providing clear type hints.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, TypeAlias

# Type aliases for clarity
GameDataObject: TypeAlias = Dict[str, Any]
"""A single game data object (e.g., monster, item, recipe) as a dict."""

GameDataCollection: TypeAlias = List[GameDataObject]
"""A collection of game data objects."""


# Provenance keys added to objects during aggregation
METADATA_SOURCE_FILE = "__filename"
METADATA_MOD_ID = "__mod"

# Discriminator of the per-mod metadata object
MOD_INFO_TYPE = "MOD_INFO"

# Mod metadata flag for mods kept only for save compatibility
OBSOLETE_KEY = "obsolete"

BASE_DATA_PATTERN = "data/json/**/*.json"
MOD_DATA_PATTERN = "data/mods/*/**/*.json"


@dataclass(frozen=True)
class SourceSpan:
    """Inclusive line range of one object in its source text."""

    start_line: int
    end_line: int

    def __post_init__(self) -> None:
        if self.start_line < 1 or self.end_line < self.start_line:
            raise ValueError(
                f"Invalid span L{self.start_line}-L{self.end_line}"
            )

    def anchor(self) -> str:
        """Return the span as a GitHub-style line anchor (``L3-L7``)."""
        return f"L{self.start_line}-L{self.end_line}"


@dataclass(frozen=True)
class ScannedObject:
    """A top-level JSON object cut out of a larger text.

    ``text[start:end]`` is exactly the object's source.
    """

    obj: GameDataObject
    span: SourceSpan
    start: int
    end: int


def format_origin(path: str, span: SourceSpan) -> str:
    """Format a provenance reference like ``data/json/items.json#L3-L7``."""
    return f"{path}#{span.anchor()}"


@dataclass
class ModCollector:
    """Mutable bucket filled while one mod's files are scanned."""

    info: Optional[GameDataObject] = None
    entries: GameDataCollection = field(default_factory=list)

    @property
    def is_obsolete(self) -> bool:
        return bool(self.info and self.info.get(OBSOLETE_KEY))

    def freeze(self) -> "ModBucket":
        return ModBucket(self.info, tuple(self.entries))


@dataclass(frozen=True)
class ModBucket:
    """Objects collected from one mod directory."""

    info: Optional[GameDataObject] = None
    entries: Tuple[GameDataObject, ...] = ()

    @property
    def is_obsolete(self) -> bool:
        return bool(self.info and self.info.get(OBSOLETE_KEY))

    def to_dict(self) -> Dict[str, Any]:
        return {"info": self.info, "data": list(self.entries)}


@dataclass(frozen=True)
class Dataset:
    """Base game objects plus per-mod buckets for one release."""

    base_entries: Tuple[GameDataObject, ...]
    mods: Mapping[str, ModBucket]

    @classmethod
    def build(
        cls, base_entries: GameDataCollection, mods: Mapping[str, ModCollector]
    ) -> "Dataset":
        frozen = {mod_id: collector.freeze() for mod_id, collector in mods.items()}
        return cls(tuple(base_entries), MappingProxyType(frozen))

    @property
    def mod_ids(self) -> List[str]:
        return list(self.mods.keys())

    def all_entries(self) -> GameDataCollection:
        """Return base entries followed by every mod's entries."""
        entries = list(self.base_entries)
        for bucket in self.mods.values():
            entries.extend(bucket.entries)
        return entries

    def mods_document(self) -> Dict[str, Dict[str, Any]]:
        return {mod_id: bucket.to_dict() for mod_id, bucket in self.mods.items()}
