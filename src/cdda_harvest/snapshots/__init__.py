"""
Snapshot storage: descriptors, file trees, the filesystem store and the
retention planner that prunes old prerelease builds.
"""

from .models import (
    SnapshotDescriptor,
    format_timestamp,
    parse_timestamp,
    sort_most_recent_first,
    utc_day,
)
from .retention import (
    DEFAULT_TIER_WIDTHS,
    RetentionPolicy,
    apply_retention,
    plan_retention,
)
from .tree import SnapshotTree, SnapshotTreeBuilder, dump_document
from .store import FilesystemSnapshotStore, snapshot_path

__all__ = [
    "SnapshotDescriptor",
    "format_timestamp",
    "parse_timestamp",
    "sort_most_recent_first",
    "utc_day",
    "DEFAULT_TIER_WIDTHS",
    "RetentionPolicy",
    "apply_retention",
    "plan_retention",
    "SnapshotTree",
    "SnapshotTreeBuilder",
    "dump_document",
    "FilesystemSnapshotStore",
    "snapshot_path",
]
