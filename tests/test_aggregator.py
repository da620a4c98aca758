"""Tests for aggregating scanned game data into datasets."""

import dataclasses
import logging

import pytest

from cdda_harvest.errors import MalformedObjectError
from cdda_harvest.game_data import (
    METADATA_MOD_ID,
    METADATA_SOURCE_FILE,
    GameDataAggregator,
    mod_id_from_path,
)


class TestModIdFromPath:
    """Test mod directory detection."""

    def test_data_mods_path(self) -> None:
        assert mod_id_from_path("data/mods/magiclysm/items/wands.json") == "magiclysm"

    def test_relative_mods_path(self) -> None:
        assert mod_id_from_path("mods/aftershock/modinfo.json") == "aftershock"

    def test_windows_separators(self) -> None:
        assert mod_id_from_path("data\\mods\\dinomod\\x.json") == "dinomod"

    def test_not_a_mod_path(self) -> None:
        with pytest.raises(ValueError):
            mod_id_from_path("data/json/items.json")


class TestBaseAggregation:
    """Test base game data collection."""

    def test_provenance_is_attached(self) -> None:
        """Every base object records its file and line range."""
        aggregator = GameDataAggregator()
        dataset = aggregator.aggregate(
            [("data/json/a.json", '[\n{"id": "x"},\n{"id": "y"}\n]')], []
        )

        assert [o[METADATA_SOURCE_FILE] for o in dataset.base_entries] == [
            "data/json/a.json#L2-L2",
            "data/json/a.json#L3-L3",
        ]
        assert METADATA_MOD_ID not in dataset.base_entries[0]

    def test_file_order_is_kept(self) -> None:
        """Objects come out in file order, then document order."""
        dataset = GameDataAggregator().aggregate(
            [
                ("data/json/a.json", '{"id": "a1"}{"id": "a2"}'),
                ("data/json/b.json", '{"id": "b1"}'),
            ],
            [],
        )

        assert [o["id"] for o in dataset.base_entries] == ["a1", "a2", "b1"]

    def test_malformed_file_names_the_path(self) -> None:
        """A scanner failure propagates with the failing file attached."""
        aggregator = GameDataAggregator()
        with pytest.raises(MalformedObjectError) as exc_info:
            aggregator.aggregate(
                [("data/json/ok.json", '{"id": 1}'), ("data/json/bad.json", '{"id": ')],
                [],
            )

        assert exc_info.value.path == "data/json/bad.json"


class TestModAggregation:
    """Test per-mod buckets."""

    def test_mod_info_is_held_apart(self) -> None:
        """MOD_INFO becomes the bucket's info and never an entry."""
        dataset = GameDataAggregator().aggregate(
            [],
            [
                ("data/mods/magic/modinfo.json", '[{"type": "MOD_INFO", "id": "magic"}]'),
                ("data/mods/magic/spells.json", '[{"type": "SPELL", "id": "fireball"}]'),
            ],
        )

        bucket = dataset.mods["magic"]
        assert bucket.info is not None
        assert bucket.info["id"] == "magic"
        assert [e["id"] for e in bucket.entries] == ["fireball"]
        assert all(e["type"] != "MOD_INFO" for e in bucket.entries)
        assert bucket.entries[0][METADATA_MOD_ID] == "magic"
        assert bucket.entries[0][METADATA_SOURCE_FILE] == "data/mods/magic/spells.json#L1-L1"

    def test_mod_without_info(self) -> None:
        """Objects of an unknown mod still get a bucket."""
        dataset = GameDataAggregator().aggregate(
            [], [("data/mods/loose/items.json", '{"id": "thing"}')]
        )

        assert dataset.mods["loose"].info is None
        assert len(dataset.mods["loose"].entries) == 1

    def test_obsolete_mod_is_dropped(self) -> None:
        """Obsolete mods contribute nothing, whatever the file order."""
        dataset = GameDataAggregator().aggregate(
            [],
            [
                ("data/mods/old/items.json", '[{"id": "a"}, {"id": "b"}]'),
                ("data/mods/old/modinfo.json", '{"type": "MOD_INFO", "id": "old", "obsolete": true}'),
                ("data/mods/old/zzz.json", '{"id": "c"}'),
                ("data/mods/new/modinfo.json", '{"type": "MOD_INFO", "id": "new"}'),
            ],
        )

        assert dataset.mod_ids == ["new"]
        assert all(e.get(METADATA_MOD_ID) != "old" for e in dataset.all_entries())

    def test_obsolete_mod_kept_when_not_skipping(self) -> None:
        dataset = GameDataAggregator(skip_obsolete=False).aggregate(
            [],
            [("data/mods/old/modinfo.json", '{"type": "MOD_INFO", "id": "old", "obsolete": true}')],
        )

        assert dataset.mods["old"].is_obsolete

    def test_duplicate_mod_info_last_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        """A second MOD_INFO replaces the first and logs a warning."""
        with caplog.at_level(logging.WARNING):
            dataset = GameDataAggregator().aggregate(
                [],
                [
                    ("data/mods/m/a.json", '{"type": "MOD_INFO", "id": "m", "name": "first"}'),
                    ("data/mods/m/b.json", '{"type": "MOD_INFO", "id": "m", "name": "second"}'),
                ],
            )

        info = dataset.mods["m"].info
        assert info is not None
        assert info["name"] == "second"
        assert dataset.mods["m"].entries == ()
        assert "Duplicate MOD_INFO" in caplog.text

    def test_dataset_is_read_only(self) -> None:
        """Returned datasets cannot gain or lose mods or mod entries."""
        dataset = GameDataAggregator().aggregate(
            [("data/json/a.json", '{"id": 1}')], [("data/mods/m/a.json", '{"id": 2}')]
        )

        assert isinstance(dataset.base_entries, tuple)
        with pytest.raises(TypeError):
            dataset.mods["other"] = dataset.mods["m"]  # type: ignore[index]

        bucket = dataset.mods["m"]
        assert isinstance(bucket.entries, tuple)
        with pytest.raises(AttributeError):
            bucket.entries.append({"id": "injected"})  # type: ignore[attr-defined]
        with pytest.raises(dataclasses.FrozenInstanceError):
            bucket.info = {"type": "MOD_INFO"}  # type: ignore[misc]
        assert [e["id"] for e in dataset.mods["m"].entries] == [2]

    def test_mods_document(self) -> None:
        dataset = GameDataAggregator().aggregate(
            [], [("data/mods/m/a.json", '{"type": "MOD_INFO", "id": "m"}{"id": 2}')]
        )

        document = dataset.mods_document()
        assert set(document) == {"m"}
        assert document["m"]["info"]["id"] == "m"
        assert [e["id"] for e in document["m"]["data"]] == [2]
