"""
Filesystem storage for harvested snapshots.

Layout under the data root::

    <tag>/all.json
    <tag>/all_mods.json
    <tag>/release.json    release metadata, read when listing snapshots
    <tag>/lang/<locale>.json
    <tag>/lang/<locale>_pinyin.json
    builds.json
    latest-build.json
    latest/...        plain copy of the newest release
    latest.gz/...     gzip-compressed copy of the newest release
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Any, List

import orjson

from ..errors import SnapshotStoreError
from .models import SnapshotDescriptor, sort_most_recent_first
from .tree import SnapshotTree, SnapshotTreeBuilder, dump_document

ALL_JSON = "all.json"
ALL_MODS_JSON = "all_mods.json"
RELEASE_JSON = "release.json"
LANG_DIR = "lang"
PINYIN_SUFFIX = "_pinyin"
INDEX_FILE = "builds.json"
LATEST_BUILD_FILE = "latest-build.json"
LATEST_DIR = "latest"
LATEST_GZ_DIR = "latest.gz"

RESERVED_NAMES = {LATEST_DIR, LATEST_GZ_DIR}


def snapshot_path(tag: str, *parts: str) -> str:
    """Return the tree path of a file inside the snapshot for ``tag``."""
    return "/".join((tag, *parts))


class FilesystemSnapshotStore:
    """Reads and writes snapshot trees below a data directory."""

    def __init__(self, root: str | Path):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.root = Path(root)

    # === WRITING ===

    def write_tree(self, tree: SnapshotTree) -> None:
        """Write every blob of a finalized tree.

        ``all.json`` files go last: a snapshot only counts as harvested once
        its ``all.json`` exists, so an interrupted write is retried next run.
        """
        ordered = sorted(tree, key=lambda item: item[0].endswith("/" + ALL_JSON))
        for rel_path, data in ordered:
            self._write_file(self.root / rel_path, data)
        self.logger.info(
            f"Wrote {len(tree)} files ({tree.total_bytes} bytes) to {self.root}"
        )

    def _write_file(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_name(path.name + ".tmp")
        temp_path.write_bytes(data)
        os.replace(temp_path, path)

    def write_document(self, rel_path: str, document: Any) -> None:
        self._write_file(self.root / rel_path, dump_document(document))

    def write_index(self, snapshots: List[SnapshotDescriptor]) -> None:
        """Write the snapshot index document (``builds.json``)."""
        self.write_document(INDEX_FILE, [s.to_index_entry() for s in snapshots])
        self.logger.info(f"Wrote info about {len(snapshots)} builds to {INDEX_FILE}")

    def publish_latest(self, tag: str) -> None:
        """Mirror a snapshot's ``all.json`` and catalogs as ``latest``/``latest.gz``."""
        source = self.root / tag
        if not (source / ALL_JSON).exists():
            raise SnapshotStoreError(f"Cannot publish missing snapshot: {tag}")

        builder = SnapshotTreeBuilder()
        files = [source / ALL_JSON]
        files.extend(sorted((source / LANG_DIR).glob("*.json")))
        for file in files:
            rel = file.relative_to(source).as_posix()
            data = file.read_bytes()
            builder.add_bytes(f"{LATEST_DIR}/{rel}", data)
            builder.add_gzipped(f"{LATEST_GZ_DIR}/{rel}", data)

        for name in RESERVED_NAMES:
            shutil.rmtree(self.root / name, ignore_errors=True)
        self.write_tree(builder.finalize())
        self.write_document(LATEST_BUILD_FILE, {"latest_build": tag})

    # === READING ===

    def has_snapshot(self, tag: str) -> bool:
        return (self.root / tag / ALL_JSON).is_file()

    def read_document(self, rel_path: str) -> Any:
        path = self.root / rel_path
        try:
            return orjson.loads(path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            raise SnapshotStoreError(f"Cannot read {path}: {e}") from e

    def snapshot_tags(self) -> List[str]:
        """Return the tags of all stored snapshot directories.

        Hidden directories (such as ``.git`` when the data root is a
        checkout) and the ``latest`` mirrors are not snapshots.
        """
        if not self.root.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.root.iterdir()
            if entry.is_dir()
            and not entry.name.startswith(".")
            and entry.name not in RESERVED_NAMES
        )

    def snapshot_langs(self, tag: str) -> List[str]:
        """Return the locales that have a compiled catalog in a snapshot."""
        lang_dir = self.root / tag / LANG_DIR
        if not lang_dir.is_dir():
            return []
        return sorted(
            f.stem
            for f in lang_dir.glob("*.json")
            if not f.stem.endswith(PINYIN_SUFFIX)
        )

    def read_release(self, tag: str) -> Any:
        """Return the release metadata stored with a snapshot.

        ``release.json`` is small; snapshots written without it fall back
        to the ``release`` key of their (much larger) ``all.json``.
        """
        if (self.root / tag / RELEASE_JSON).is_file():
            return self.read_document(snapshot_path(tag, RELEASE_JSON))
        document = self.read_document(snapshot_path(tag, ALL_JSON))
        return document.get("release") if isinstance(document, dict) else None

    def read_descriptor(self, tag: str) -> SnapshotDescriptor:
        """Read a stored snapshot's descriptor from its release metadata.

        Raises:
            SnapshotStoreError: if the metadata is missing or unreadable
        """
        release = self.read_release(tag)
        if not isinstance(release, dict):
            raise SnapshotStoreError(f"Snapshot {tag} has no release metadata")
        try:
            descriptor = SnapshotDescriptor.from_release(release, self.snapshot_langs(tag))
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotStoreError(
                f"Snapshot {tag} has invalid release metadata: {e}"
            ) from e
        if descriptor.id != tag:
            raise SnapshotStoreError(
                f"Snapshot {tag} holds metadata for release {descriptor.id}"
            )
        return descriptor

    def list_snapshots(self) -> List[SnapshotDescriptor]:
        """Return descriptors for every readable snapshot, newest first.

        Snapshots with unreadable metadata are logged and left out.
        """
        snapshots: List[SnapshotDescriptor] = []
        for tag in self.snapshot_tags():
            try:
                snapshots.append(self.read_descriptor(tag))
            except SnapshotStoreError as e:
                self.logger.error(f"Skipping snapshot {tag}: {e}")
        return sort_most_recent_first(snapshots)

    # === DELETION ===

    def remove_snapshot(self, tag: str) -> None:
        """Delete a snapshot directory and everything in it."""
        if tag in RESERVED_NAMES or not tag or "/" in tag or "\\" in tag:
            raise SnapshotStoreError(f"Refusing to remove {tag!r}")
        shutil.rmtree(self.root / tag)
        self.logger.info(f"Removed snapshot {tag}")
