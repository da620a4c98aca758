"""
Append-only builder for snapshot file trees.

Documents produced for one or more releases are collected in a
``SnapshotTreeBuilder`` that is passed through the pipeline. ``finalize``
freezes the collected blobs into a ``SnapshotTree`` that a store can write.
"""

import gzip
import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Tuple

import orjson

logger = logging.getLogger(__name__)


def _normalize_path(path: str) -> str:
    normalized = PurePosixPath(path.replace("\\", "/"))
    if normalized.is_absolute() or ".." in normalized.parts or not normalized.parts:
        raise ValueError(f"Invalid tree path: {path!r}")
    return normalized.as_posix()


def dump_document(document: Any) -> bytes:
    """Serialize a JSON document the way every snapshot file is written."""
    return orjson.dumps(document)


@dataclass(frozen=True)
class SnapshotTree:
    """Immutable mapping of relative file paths to file contents."""

    blobs: Mapping[str, bytes]

    def __len__(self) -> int:
        return len(self.blobs)

    def __iter__(self) -> Iterator[Tuple[str, bytes]]:
        return iter(self.blobs.items())

    @property
    def paths(self) -> List[str]:
        return list(self.blobs.keys())

    @property
    def total_bytes(self) -> int:
        return sum(len(blob) for blob in self.blobs.values())


class SnapshotTreeBuilder:
    """Collects snapshot documents until ``finalize`` is called.

    Paths are relative POSIX paths. Each path may be added once; nothing can
    be added after the tree has been finalized.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._blobs: Dict[str, bytes] = {}
        self._finalized = False

    def add_bytes(self, path: str, data: bytes) -> None:
        """Append a raw blob at ``path``."""
        if self._finalized:
            raise RuntimeError("Cannot add to a finalized snapshot tree")
        path = _normalize_path(path)
        if path in self._blobs:
            raise ValueError(f"Duplicate tree path: {path}")
        self._blobs[path] = data

    def add_document(self, path: str, document: Any) -> None:
        """Serialize ``document`` as JSON and append it at ``path``."""
        self.add_bytes(path, dump_document(document))

    def add_gzipped(self, path: str, data: bytes) -> None:
        """Append a gzip-compressed copy of ``data`` at ``path``."""
        self.add_bytes(path, gzip.compress(data, mtime=0))

    def __contains__(self, path: str) -> bool:
        return _normalize_path(path) in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    def finalize(self) -> SnapshotTree:
        """Freeze the collected blobs into a tree, sorted by path."""
        if self._finalized:
            raise RuntimeError("Snapshot tree already finalized")
        self._finalized = True
        tree = SnapshotTree(MappingProxyType(dict(sorted(self._blobs.items()))))
        self.logger.debug(
            f"Finalized snapshot tree with {len(tree)} files ({tree.total_bytes} bytes)"
        )
        return tree
