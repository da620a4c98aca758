"""
Main service for harvesting game data releases.

Provides the high-level runs: pulling new releases into snapshots,
backfilling pinyin indexes, pruning old snapshots and generating a dataset
from a local game checkout.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, TYPE_CHECKING

from ..errors import SnapshotStoreError
from ..game_data import GameDataAggregator, GameDataCollection
from ..snapshots import (
    DEFAULT_TIER_WIDTHS,
    FilesystemSnapshotStore,
    SnapshotDescriptor,
    SnapshotTreeBuilder,
    apply_retention,
    snapshot_path,
    utc_day,
)
from ..snapshots.store import ALL_JSON, ALL_MODS_JSON, RELEASE_JSON
from ..sources import DirectoryFileSource, ReleaseClient, ZipFileSource
from ..translations import build_transliteration, needs_transliteration
from ..translations.transliteration import DEFAULT_PREFIXES
from .release import ReleaseBuild, ReleaseProcessor, catalog_path

if TYPE_CHECKING:
    from ..settings import HarvestSettings


@dataclass
class HarvestReport:
    """What a ``pull`` run did."""

    latest_build: Optional[str] = None
    harvested: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    backfilled: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    surviving: List[SnapshotDescriptor] = field(default_factory=list)


class HarvestService:
    """Harvests upstream releases into a snapshot store.

    Each release is processed on its own: a failure is logged and recorded in
    the report, and the run continues with the next release. A release's
    documents are written only after the whole release was built.
    """

    def __init__(
        self,
        store: FilesystemSnapshotStore,
        client: Optional[ReleaseClient] = None,
        processor: Optional[ReleaseProcessor] = None,
        forbidden_tags: Sequence[str] = (),
        tier_widths: Tuple[int, ...] = DEFAULT_TIER_WIDTHS,
        transliterate_prefixes: Sequence[str] = DEFAULT_PREFIXES,
        dry_run: bool = False,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.store = store
        self.client = client or ReleaseClient()
        self.transliterate_prefixes = tuple(transliterate_prefixes)
        self.processor = processor or ReleaseProcessor(
            transliterate_prefixes=self.transliterate_prefixes
        )
        self.forbidden_tags = set(forbidden_tags)
        self.tier_widths = tuple(tier_widths)
        self.dry_run = dry_run

    @classmethod
    def from_settings(
        cls,
        settings: "HarvestSettings",
        dry_run: bool = False,
        client: Optional[ReleaseClient] = None,
        data_dir: Optional[str | Path] = None,
    ) -> "HarvestService":
        """Create a service configured from application settings.

        Args:
            settings: Application settings
            dry_run: Build everything but write nothing
            client: Release client to use instead of one built from settings
            data_dir: Store root overriding the configured data directory
        """
        if client is None:
            client = ReleaseClient(
                repository=settings.source.repository,
                api_url=settings.source.api_url,
                timeout=settings.source.timeout,
            )
        prefixes = settings.harvest.transliterate_prefixes
        processor = ReleaseProcessor(
            aggregator=GameDataAggregator(
                skip_obsolete=settings.harvest.skip_obsolete_mods
            ),
            max_workers=settings.harvest.max_workers,
            transliterate_prefixes=prefixes,
        )
        return cls(
            store=FilesystemSnapshotStore(data_dir or settings.paths.data_dir),
            client=client,
            processor=processor,
            forbidden_tags=settings.harvest.forbidden_tags,
            tier_widths=settings.retention.tier_widths,
            transliterate_prefixes=prefixes,
            dry_run=dry_run,
        )

    # === PULL ===

    def pull(
        self, limit: Optional[int] = None, now: Optional[datetime] = None
    ) -> HarvestReport:
        """Harvest new releases, backfill pinyin, prune and publish the index.

        Args:
            limit: Only consider this many of the most recent releases
            now: Current time for retention (defaults to the wall clock)

        Returns:
            Report of the run
        """
        report = HarvestReport()
        releases = self.client.list_releases()
        if releases:
            report.latest_build = releases[0]["tag_name"]

        for release in releases[:limit]:
            tag = release["tag_name"]
            if tag in self.forbidden_tags:
                self.logger.debug(f"Skipping forbidden build {tag}")
                report.skipped.append(tag)
                continue
            if self.store.has_snapshot(tag):
                report.skipped.append(tag)
                continue
            try:
                self.harvest_release(release)
                report.harvested.append(tag)
            except Exception as e:
                self.logger.exception(f"Error while processing {tag}")
                report.failed[tag] = str(e)

        report.backfilled = self.backfill_transliterations()

        surviving, deleted = self.prune(now)
        report.surviving = surviving
        report.deleted = sorted(deleted)

        if report.latest_build and not self.dry_run:
            if self.store.has_snapshot(report.latest_build):
                self.store.publish_latest(report.latest_build)
            else:
                self.logger.warning(
                    f"Latest build {report.latest_build} is not harvested, "
                    f"leaving latest mirrors unchanged"
                )

        self.logger.info(
            f"Harvested {len(report.harvested)} builds, "
            f"{len(report.failed)} failed, {len(report.deleted)} deleted"
        )
        return report

    def harvest_release(self, release: Dict[str, Any]) -> ReleaseBuild:
        """Download, build and write the snapshot for one release."""
        tag = release["tag_name"]
        archive = self.client.download_archive(tag)
        with ZipFileSource(archive) as source:
            build = self.processor.build(source)

        builder = SnapshotTreeBuilder()
        builder.add_document(
            snapshot_path(tag, ALL_JSON),
            {
                "build_number": tag,
                "release": release,
                "data": build.dataset.base_entries,
            },
        )
        builder.add_document(
            snapshot_path(tag, ALL_MODS_JSON),
            {
                "build_number": tag,
                "release": release,
                "data": build.dataset.mods_document(),
            },
        )
        builder.add_document(snapshot_path(tag, RELEASE_JSON), release)
        build.add_catalogs(builder, prefix=tag)
        tree = builder.finalize()

        if self.dry_run:
            self.logger.info(f"Dry run: not writing {len(tree)} files for {tag}")
        else:
            self.store.write_tree(tree)
        return build

    # === BACKFILL ===

    def backfill_transliterations(self) -> List[str]:
        """Add missing pinyin documents to stored snapshots.

        Returns:
            Tree paths of the pinyin documents that were (or would be) written
        """
        builder = SnapshotTreeBuilder()
        for descriptor in self.store.list_snapshots():
            missing = [
                locale
                for locale in descriptor.langs
                if needs_transliteration(locale, self.transliterate_prefixes)
                and not (
                    self.store.root / catalog_path(descriptor.id, locale, pinyin=True)
                ).exists()
            ]
            if not missing:
                continue

            try:
                entries = self._stored_entries(descriptor.id)
                for locale in missing:
                    self.logger.info(f"Backfilling pinyin for {descriptor.id} {locale}...")
                    table = self.store.read_document(catalog_path(descriptor.id, locale))
                    builder.add_document(
                        catalog_path(descriptor.id, locale, pinyin=True),
                        build_transliteration(entries, table),
                    )
            except SnapshotStoreError as e:
                self.logger.error(f"Cannot backfill {descriptor.id}: {e}")

        tree = builder.finalize()
        if len(tree) and not self.dry_run:
            self.store.write_tree(tree)
        return tree.paths

    def _stored_entries(self, tag: str) -> GameDataCollection:
        """Return a stored snapshot's base entries followed by its mod entries."""
        entries = list(self.store.read_document(snapshot_path(tag, ALL_JSON))["data"])
        mods_path = snapshot_path(tag, ALL_MODS_JSON)
        if (self.store.root / mods_path).exists():
            for bucket in self.store.read_document(mods_path)["data"].values():
                entries.extend(bucket["data"])
        return entries

    # === RETENTION ===

    def plan(
        self, now: Optional[datetime] = None
    ) -> Tuple[List[SnapshotDescriptor], FrozenSet[str]]:
        """Plan retention over the stored snapshots without deleting anything."""
        now = now or datetime.now(timezone.utc)
        return apply_retention(self.store.list_snapshots(), now, self.tier_widths)

    def prune(
        self, now: Optional[datetime] = None
    ) -> Tuple[List[SnapshotDescriptor], FrozenSet[str]]:
        """Delete snapshots the retention policy drops and rewrite the index."""
        now = now or datetime.now(timezone.utc)
        snapshots = self.store.list_snapshots()
        surviving, deleted = apply_retention(snapshots, now, self.tier_widths)

        today = utc_day(now)
        for snapshot in snapshots:
            if snapshot.id not in deleted:
                continue
            age_days = (today - utc_day(snapshot.created_at)).days
            self.logger.info(f"Deleting {snapshot.id} ({age_days} days old)")
            if not self.dry_run:
                self.store.remove_snapshot(snapshot.id)

        if not self.dry_run:
            self.store.write_index(surviving)
        return surviving, deleted

    # === LOCAL ===

    def generate_local(self, game_dir: str | Path) -> ReleaseBuild:
        """Build a dataset from a local game directory into the store's root.

        Writes ``all.json`` (with ``build_number`` and ``release`` set to
        ``"local"`` and a ``modlist``), ``all_mods.json`` and ``lang/``.
        """
        build = self.processor.build(DirectoryFileSource(game_dir))

        builder = SnapshotTreeBuilder()
        builder.add_document(
            ALL_JSON,
            {
                "build_number": "local",
                "release": "local",
                "data": build.dataset.base_entries,
                "modlist": build.dataset.mod_ids,
            },
        )
        builder.add_document(ALL_MODS_JSON, build.dataset.mods_document())
        build.add_catalogs(builder)
        tree = builder.finalize()

        if not self.dry_run:
            self.store.write_tree(tree)
        self.logger.info(f"Generated local data in {self.store.root}")
        return build
