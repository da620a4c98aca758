"""Tests for the command line interface."""

from datetime import datetime, timezone
from pathlib import Path

import orjson
import pytest

from cdda_harvest.cli import _build_parser, main
from cdda_harvest.settings import HarvestSettings
from cdda_harvest.snapshots import FilesystemSnapshotStore, SnapshotTreeBuilder


def configure(tmp_path: Path) -> Path:
    """Write an INI settings file pointing at a data directory in ``tmp_path``."""
    settings_file = tmp_path / "settings.ini"
    settings = HarvestSettings(settings_file=settings_file)
    settings.paths.data_dir = tmp_path / "data"
    settings.sync()
    return settings_file


def store_snapshot(data_dir: Path, tag: str, created_at: str) -> None:
    builder = SnapshotTreeBuilder()
    builder.add_document(
        f"{tag}/all.json",
        {
            "build_number": tag,
            "release": {"tag_name": tag, "created_at": created_at, "prerelease": True},
            "data": [],
        },
    )
    FilesystemSnapshotStore(data_dir).write_tree(builder.finalize())


class TestParser:
    """Test argument parsing."""

    def test_pull_options(self) -> None:
        args = _build_parser().parse_args(["--profile", "ci", "pull", "--dry-run", "--limit", "3"])

        assert args.command == "pull"
        assert args.profile == "ci"
        assert args.dry_run is True
        assert args.limit == 3

    def test_local_default_output(self) -> None:
        args = _build_parser().parse_args(["local", "/games/cdda"])

        assert args.game_dir == "/games/cdda"
        assert args.output_dir == "local-data"

    def test_plan_now(self) -> None:
        args = _build_parser().parse_args(["plan", "--now", "2024-06-01T00:00:00Z"])

        assert args.now == datetime(2024, 6, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "argv", [[], ["pull", "--limit", "0"], ["plan", "--now", "yesterday"], ["local"]]
    )
    def test_invalid_arguments(self, argv) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args(argv)


@pytest.mark.usefixtures("restore_logging")
class TestMain:
    """Test running commands end to end."""

    def test_plan(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        settings_file = configure(tmp_path)
        store_snapshot(tmp_path / "data", "recent", "2024-05-31T00:00:00Z")
        store_snapshot(tmp_path / "data", "ancient", "2020-01-01T00:00:00Z")

        code = main(["--config", str(settings_file), "plan", "--now", "2024-06-01T00:00:00Z"])

        out = capsys.readouterr().out
        assert code == 0
        assert "keep   recent" in out
        assert "delete ancient" in out
        assert (tmp_path / "data" / "ancient").exists()

    def test_local(self, tmp_path: Path, game_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        settings_file = configure(tmp_path)
        output = tmp_path / "out"

        code = main(["--config", str(settings_file), "local", str(game_dir), str(output)])

        assert code == 0
        assert orjson.loads((output / "all.json").read_bytes())["build_number"] == "local"
        assert "Local data written" in capsys.readouterr().out

    def test_local_missing_game_dir(self, tmp_path: Path) -> None:
        settings_file = configure(tmp_path)

        assert main(["--config", str(settings_file), "local", str(tmp_path / "nope")]) == 1

    def test_invalid_configuration(self, tmp_path: Path) -> None:
        settings_file = configure(tmp_path)
        settings = HarvestSettings(settings_file=settings_file)
        settings.source.repository = "nope"
        settings.sync()

        assert main(["--config", str(settings_file), "plan"]) == 2

    def test_backfill_empty_store(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        settings_file = configure(tmp_path)

        assert main(["--config", str(settings_file), "backfill"]) == 0
        assert "Backfilled 0 pinyin files" in capsys.readouterr().out
