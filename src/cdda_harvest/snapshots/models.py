"""
Snapshot descriptors and their serialized index form.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List

EPOCH_DAY = date(1970, 1, 1)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp such as GitHub's ``2024-01-02T03:04:05Z``."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    return utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_day(value: datetime) -> date:
    """Return the UTC calendar day of a timestamp."""
    return utc(value).date()


@dataclass(frozen=True)
class SnapshotDescriptor:
    """One stored release snapshot as listed in the snapshot index."""

    id: str
    created_at: datetime
    is_stable: bool
    langs: List[str] = field(default_factory=list)

    @property
    def day_number(self) -> int:
        """Days between the Unix epoch and the UTC day of creation."""
        return (utc_day(self.created_at) - EPOCH_DAY).days

    def to_index_entry(self) -> Dict[str, Any]:
        return {
            "build_number": self.id,
            "prerelease": not self.is_stable,
            "created_at": format_timestamp(self.created_at),
            "langs": list(self.langs),
        }

    @classmethod
    def from_release(
        cls, release: Dict[str, Any], langs: List[str]
    ) -> "SnapshotDescriptor":
        """Create a descriptor from GitHub release metadata."""
        return cls(
            id=release["tag_name"],
            created_at=parse_timestamp(release["created_at"]),
            is_stable=not release.get("prerelease", False),
            langs=langs,
        )


def sort_most_recent_first(
    snapshots: List[SnapshotDescriptor],
) -> List[SnapshotDescriptor]:
    """Sort by creation time, newest first; ties keep their input order."""
    return sorted(snapshots, key=lambda s: utc(s.created_at), reverse=True)
