"""
Retention planning for stored snapshots.

Policy:
1. Keep all stable releases.
2. In the first tier (30 days by default), keep every build.
3. In tier k (60, 120 and 240 days by default), keep the last build of each
   day whose number since the epoch is 0 mod 2**k.
4. Delete every build older than the sum of all tier widths.

With one build per day the defaults keep about 30 builds per tier.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

from .models import SnapshotDescriptor, sort_most_recent_first, utc_day

logger = logging.getLogger(__name__)

DEFAULT_TIER_WIDTHS: Tuple[int, ...] = (30, 60, 120, 240)


@dataclass(frozen=True)
class RetentionPolicy:
    """Exponential thinning over consecutive age tiers."""

    tier_widths: Tuple[int, ...] = DEFAULT_TIER_WIDTHS

    def __post_init__(self) -> None:
        if not self.tier_widths:
            raise ValueError("At least one retention tier is required")
        if any(width <= 0 for width in self.tier_widths):
            raise ValueError(f"Tier widths must be positive: {self.tier_widths}")

    @property
    def horizon(self) -> int:
        """Age in days beyond which prereleases are always deleted."""
        return sum(self.tier_widths)

    def tier_for_age(self, age_days: int) -> Optional[int]:
        """Return the tier index for an age, or None past the horizon."""
        if age_days > self.horizon:
            return None
        bound = 0
        for tier, width in enumerate(self.tier_widths):
            bound += width
            if age_days < bound:
                return tier
        return len(self.tier_widths) - 1

    def plan(
        self, snapshots: Iterable[SnapshotDescriptor], now: datetime
    ) -> FrozenSet[str]:
        """Return the ids of snapshots to delete.

        Args:
            snapshots: Snapshot descriptors, in any order
            now: Current time; only its UTC day matters

        Returns:
            Ids of prerelease snapshots that the policy does not retain
        """
        today = utc_day(now)
        seen_days: Set[int] = set()
        deleted: Set[str] = set()

        for snapshot in sort_most_recent_first(list(snapshots)):
            if snapshot.is_stable:
                continue
            age_days = (today - utc_day(snapshot.created_at)).days
            tier = self.tier_for_age(age_days)
            if tier is None:
                deleted.add(snapshot.id)
                continue
            if tier == 0:
                continue

            day_number = snapshot.day_number
            if day_number % (2**tier) == 0 and day_number not in seen_days:
                seen_days.add(day_number)
            else:
                deleted.add(snapshot.id)

        return frozenset(deleted)


def plan_retention(
    snapshots: Iterable[SnapshotDescriptor],
    now: datetime,
    tiers: Tuple[int, ...] = DEFAULT_TIER_WIDTHS,
) -> FrozenSet[str]:
    """Return the ids of snapshots to delete under the given tier widths."""
    return RetentionPolicy(tuple(tiers)).plan(snapshots, now)


def apply_retention(
    snapshots: Iterable[SnapshotDescriptor],
    now: datetime,
    tiers: Tuple[int, ...] = DEFAULT_TIER_WIDTHS,
) -> Tuple[List[SnapshotDescriptor], FrozenSet[str]]:
    """Plan retention and return the surviving snapshots, newest first.

    Returns:
        Tuple of (surviving descriptors, ids to delete)
    """
    snapshots = list(snapshots)
    deleted = plan_retention(snapshots, now, tiers)
    surviving = [s for s in sort_most_recent_first(snapshots) if s.id not in deleted]
    logger.info(f"Retention keeps {len(surviving)} snapshots, deletes {len(deleted)}")
    return surviving, deleted
