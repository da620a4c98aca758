"""CLI entrypoints for cdda_harvest commands."""

import argparse
import logging
from datetime import datetime, timezone
from typing import List, Optional

from . import __version__
from .errors import HarvestError
from .pipeline import HarvestService
from .settings import HarvestSettings
from .snapshots import format_timestamp, parse_timestamp
from .utils.logging_config import setup_logging

DEFAULT_LOCAL_OUTPUT = "local-data"


def _parse_now(value: str) -> datetime:
    try:
        return parse_timestamp(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not an ISO-8601 timestamp: {value}") from e


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cdda-harvest",
        description="Harvest Cataclysm: DDA game data releases into JSON snapshots.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        help="INI settings file to use instead of the per-user settings store.",
    )
    parser.add_argument(
        "--profile",
        default="default",
        help="Settings profile name (defaults to 'default').",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log DEBUG messages to the console.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    pull_parser = subparsers.add_parser(
        "pull",
        help="Harvest new releases, prune old snapshots and refresh the index.",
    )
    pull_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build snapshots without writing or deleting anything.",
    )
    pull_parser.add_argument(
        "--limit",
        type=_positive_int,
        help="Only consider this many of the most recent releases.",
    )

    local_parser = subparsers.add_parser(
        "local",
        help="Generate data files from a local game directory.",
    )
    local_parser.add_argument("game_dir", help="Path to the game directory.")
    local_parser.add_argument(
        "output_dir",
        nargs="?",
        default=DEFAULT_LOCAL_OUTPUT,
        help=f"Output directory (defaults to {DEFAULT_LOCAL_OUTPUT}).",
    )

    plan_parser = subparsers.add_parser(
        "plan",
        help="Show which stored snapshots retention would keep and delete.",
    )
    plan_parser.add_argument(
        "--now",
        type=_parse_now,
        help="Plan as of this ISO-8601 time instead of the current time.",
    )

    subparsers.add_parser(
        "backfill",
        help="Write missing pinyin indexes for stored snapshots.",
    )

    return parser


def _run_pull(service: HarvestService, args: argparse.Namespace) -> int:
    report = service.pull(limit=args.limit)
    for tag in report.harvested:
        print(f"harvested {tag}")
    for tag, reason in report.failed.items():
        print(f"failed    {tag}: {reason}")
    for tag in report.deleted:
        print(f"deleted   {tag}")
    return 1 if report.failed else 0


def _run_plan(service: HarvestService, args: argparse.Namespace) -> int:
    now = args.now or datetime.now(timezone.utc)
    surviving, deleted = service.plan(now)
    for snapshot in surviving:
        kind = "stable" if snapshot.is_stable else "prerelease"
        print(f"keep   {snapshot.id} ({format_timestamp(snapshot.created_at)}, {kind})")
    for tag in sorted(deleted):
        print(f"delete {tag}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint for cdda_harvest commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logger = logging.getLogger(f"{__name__}.main")
    try:
        settings = HarvestSettings(profile=args.profile, settings_file=args.config)
        setup_logging(settings, console_level="DEBUG" if args.verbose else None)
        logger.info(f"Configuration loaded from {settings.get_settings_file_path()}")

        validation = settings.validate()
        for warning in validation.warnings:
            logger.warning(f"  {warning}")
        if not validation.is_valid:
            logger.error("Configuration validation failed:")
            for error in validation.errors:
                logger.error(f"  {error}")
            return 2

        if args.command == "pull":
            service = HarvestService.from_settings(settings, dry_run=args.dry_run)
            return _run_pull(service, args)
        if args.command == "local":
            service = HarvestService.from_settings(settings, data_dir=args.output_dir)
            service.generate_local(args.game_dir)
            print(f"Local data written to {args.output_dir}")
            return 0
        if args.command == "plan":
            return _run_plan(HarvestService.from_settings(settings), args)
        if args.command == "backfill":
            written = HarvestService.from_settings(settings).backfill_transliterations()
            print(f"Backfilled {len(written)} pinyin files")
            return 0
    except HarvestError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    except Exception:
        logger.exception("Unhandled exception in main")
        return 1
    return 0
