"""
Aggregation of scanned game data into per-release datasets.

Base game files are folded into one ordered list; mod files are grouped into
one bucket per mod directory, with the ``MOD_INFO`` object held apart from
the mod's regular entries. Every object is tagged with where it came from.
"""

import logging
from typing import Dict, Iterable, List, Set, Tuple

from ..errors import MalformedObjectError
from .models import (
    Dataset,
    GameDataCollection,
    GameDataObject,
    METADATA_MOD_ID,
    METADATA_SOURCE_FILE,
    MOD_INFO_TYPE,
    ModCollector,
    ScannedObject,
    format_origin,
)
from .scanner import ObjectScanner

RawFile = Tuple[str, str]
"""A ``(path, raw_text)`` pair supplied by a file source."""


def mod_id_from_path(path: str) -> str:
    """Return the mod directory name from a path like ``data/mods/<id>/x.json``.

    Raises:
        ValueError: if the path is not inside a mod directory
    """
    parts = path.replace("\\", "/").split("/")
    for i in range(len(parts) - 2):
        if parts[i] == "mods" and (i == 0 or parts[i - 1] == "data"):
            return parts[i + 1]
    raise ValueError(f"Not a mod data path: {path}")


class GameDataAggregator:
    """Builds a ``Dataset`` from base and mod JSON files.

    Aggregation is all-or-nothing: a scanner failure on any file propagates
    and no partial dataset is returned.
    """

    def __init__(self, skip_obsolete: bool = True):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.skip_obsolete = skip_obsolete
        self.scanner = ObjectScanner()

    def aggregate(
        self, base_files: Iterable[RawFile], mod_files: Iterable[RawFile]
    ) -> Dataset:
        """Aggregate base and mod files into a dataset.

        Args:
            base_files: ``(path, text)`` pairs for base game files, in a stable order
            mod_files: ``(path, text)`` pairs for mod files, in a stable order

        Returns:
            The release dataset

        Raises:
            MalformedObjectError: if any file cannot be scanned
        """
        base_entries = self.collect_base(base_files)
        mods = self.collect_mods(mod_files)
        self.logger.info(
            f"Aggregated {len(base_entries)} base objects and "
            f"{sum(len(b.entries) for b in mods.values())} objects in {len(mods)} mods"
        )
        return Dataset.build(base_entries, mods)

    def collect_base(self, files: Iterable[RawFile]) -> GameDataCollection:
        """Scan base game files and tag each object with its origin."""
        entries: GameDataCollection = []
        for path, text in files:
            for scanned in self._scan_file(path, text):
                obj = scanned.obj
                obj[METADATA_SOURCE_FILE] = format_origin(path, scanned.span)
                entries.append(obj)
        return entries

    def collect_mods(self, files: Iterable[RawFile]) -> Dict[str, ModCollector]:
        """Scan mod files into one bucket per mod.

        ``MOD_INFO`` objects become the bucket's ``info`` (the last one wins);
        all other objects are appended to ``entries``. Mods flagged obsolete
        are dropped when ``skip_obsolete`` is set.
        """
        mods: Dict[str, ModCollector] = {}
        obsolete: Set[str] = set()

        for path, text in files:
            path = path.replace("\\", "/")
            mod_id = mod_id_from_path(path)
            if mod_id in obsolete:
                continue

            bucket = mods.get(mod_id)
            if bucket is None:
                bucket = mods[mod_id] = ModCollector()
                self.logger.debug(f"Collecting mod '{mod_id}' (from {path})")

            for scanned in self._scan_file(path, text):
                obj = scanned.obj
                obj[METADATA_MOD_ID] = mod_id
                obj[METADATA_SOURCE_FILE] = format_origin(path, scanned.span)
                if obj.get("type") == MOD_INFO_TYPE:
                    self._set_info(mod_id, bucket, obj)
                else:
                    bucket.entries.append(obj)

            if self.skip_obsolete and bucket.is_obsolete:
                self.logger.info(f"Skipping obsolete mod '{mod_id}'")
                obsolete.add(mod_id)
                del mods[mod_id]

        orphaned = [mod_id for mod_id, bucket in mods.items() if bucket.info is None]
        if orphaned:
            self.logger.debug(f"Mods without MOD_INFO: {orphaned}")

        return mods

    def _set_info(self, mod_id: str, bucket: ModCollector, obj: GameDataObject) -> None:
        if bucket.info is not None:
            self.logger.warning(
                f"Duplicate MOD_INFO in mod '{mod_id}': "
                f"{obj[METADATA_SOURCE_FILE]} replaces {bucket.info[METADATA_SOURCE_FILE]}"
            )
        bucket.info = obj

    def _scan_file(self, path: str, text: str) -> List[ScannedObject]:
        try:
            return self.scanner.scan(text)
        except MalformedObjectError as e:
            raise e.with_path(path) from e
