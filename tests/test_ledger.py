"""Tests for the asset ledger."""

import json

import pytest

from build_janitor.errors import LedgerError
from build_janitor.ledger import LEDGER_FORMAT_VERSION, AssetLedger, snapshot


class TestAssetLedger:
    """Tests for AssetLedger diffing."""

    def test_first_build_has_no_stale_assets(self):
        """Test a build cannot be stale relative to nothing."""
        ledger = AssetLedger()

        assert ledger.record_build(["bundle.js", "bundle.js.map"]) == []
        assert ledger.current == ("bundle.js", "bundle.js.map")

    def test_diff_correctness(self):
        """Test {a.js, b.js} followed by {b.js, c.js} makes a.js stale."""
        ledger = AssetLedger()
        ledger.record_build(["a.js", "b.js"])

        assert ledger.record_build(["b.js", "c.js"]) == ["a.js"]
        assert ledger.previous == ("a.js", "b.js")
        assert ledger.current == ("b.js", "c.js")

    def test_unchanged_build_is_idempotent(self):
        ledger = AssetLedger()
        ledger.record_build(["a.js", "b.js"])

        assert ledger.record_build(["b.js", "a.js"]) == []
        assert ledger.builds_recorded == 2

    def test_stale_list_is_sorted(self):
        ledger = AssetLedger()
        ledger.record_build(["z.js", "m.js", "a.js", "keep.js"])

        assert ledger.record_build(["keep.js"]) == ["a.js", "m.js", "z.js"]

    def test_stale_against_does_not_commit(self):
        """Test stale_against is a pure diff."""
        ledger = AssetLedger()
        ledger.commit(["a.js"])

        assert ledger.stale_against([]) == ["a.js"]
        assert ledger.current == ("a.js",)
        assert ledger.builds_recorded == 1

    def test_snapshot_deduplicates(self):
        assert snapshot(["b.js", "a.js", "b.js"]) == ("a.js", "b.js")


class TestLedgerPersistence:
    """Tests for saving and loading the ledger."""

    def test_save_and_load(self, tmp_path):
        """Test the current snapshot survives a restart."""
        path = tmp_path / "state" / "ledger.json"
        ledger = AssetLedger()
        ledger.record_build(["a.js", "b.js"])
        ledger.save(path)

        loaded = AssetLedger.load(path)

        assert loaded.current == ("a.js", "b.js")
        assert loaded.builds_recorded == 1
        assert loaded.record_build(["b.js"]) == ["a.js"]

    def test_load_missing_file_gives_empty_ledger(self, tmp_path):
        ledger = AssetLedger.load(tmp_path / "missing.json")

        assert ledger.current == ()
        assert ledger.builds_recorded == 0

    def test_load_corrupt_file(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("{not json")

        with pytest.raises(LedgerError):
            AssetLedger.load(path)

    def test_load_unknown_version(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text(json.dumps({"version": LEDGER_FORMAT_VERSION + 1, "assets": []}))

        with pytest.raises(LedgerError):
            AssetLedger.load(path)

    def test_load_rejects_non_string_assets(self):
        with pytest.raises(LedgerError):
            AssetLedger.from_dict({"version": LEDGER_FORMAT_VERSION, "assets": [1, 2]})
