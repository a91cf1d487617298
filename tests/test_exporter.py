"""Unit tests for exporter utilities - uses JSON fixtures."""

import json
from datetime import datetime
from pathlib import Path

import pytest

from socialchain.core.exporter import (
    load_json,
    merge_results,
    posts_to_df,
    save_json,
    save_posts_csv,
    to_dict,
    to_json,
)
from socialchain.models.result import InstructionResult


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> InstructionResult:
    """Load InstructionResult from JSON fixture."""
    return load_json(FIXTURES_DIR / f"{name}.json")


def failed_result() -> InstructionResult:
    return InstructionResult(
        success=False,
        instruction="follow_user",
        error_type="CapacityExceededError",
        error_message="Profile already follows 200 of at most 200 accounts",
        executed_at=datetime(2024, 1, 1),
        duration_ms=0.5,
    )


class TestToJson:
    """Test JSON string conversion."""

    def test_to_json_is_valid_json(self):
        parsed = json.loads(to_json(load_fixture("posts_result")))
        assert parsed["post_log"]["post_count"] == 2
        assert parsed["owner"] == "BPFLoaderUpgradeab1e11111111111111111111111"

    def test_to_json_preserves_posts(self):
        result = load_fixture("posts_result")
        parsed = json.loads(to_json(result))
        assert [p["content"] for p in parsed["post_log"]["posts"]] == [
            p.content for p in result.post_log.posts
        ]


class TestToDict:
    """Test dictionary conversion."""

    def test_to_dict_has_expected_keys(self):
        d = to_dict(load_fixture("posts_result"))
        for key in ("success", "instruction", "post_log", "executed_at", "duration_ms"):
            assert key in d

    def test_addresses_are_base58(self, alice, bob):
        result = InstructionResult(
            success=True,
            instruction="follow_user",
            owner=alice,
            accounts_written=[bob],
            executed_at=datetime(2024, 1, 1),
            duration_ms=1.0,
        )
        d = to_dict(result)
        assert d["owner"] == str(alice)
        assert d["accounts_written"] == [str(bob)]


class TestSaveLoadJson:
    """Test file I/O operations."""

    def test_save_and_load_roundtrip(self, tmp_path):
        original = load_fixture("posts_result")
        filepath = tmp_path / "result.json"

        save_json(original, filepath)
        loaded = load_json(filepath)

        assert loaded == original

    def test_save_creates_parent_dirs(self, tmp_path):
        filepath = tmp_path / "nested" / "dir" / "output.json"
        save_json(load_fixture("posts_result"), filepath)
        assert filepath.exists()

    def test_save_returns_path(self, tmp_path):
        filepath = tmp_path / "test.json"
        assert save_json(load_fixture("posts_result"), filepath) == filepath


class TestMergeResults:
    """Test merging multiple results."""

    def test_merge_counts(self):
        merged = merge_results([load_fixture("posts_result"), failed_result()])
        assert merged["results_count"] == 2
        assert merged["failed_count"] == 1
        assert len(merged["results"]) == 2

    def test_merge_has_metadata(self):
        merged = merge_results([])
        assert "exported_at" in merged
        assert merged["results"] == []


class TestPostsDataFrame:
    """Test DataFrame export of post logs."""

    @pytest.fixture(autouse=True)
    def _pandas(self):
        pytest.importorskip("pandas")

    def test_one_row_per_post(self):
        log = load_fixture("posts_result").post_log
        df = posts_to_df(log)
        assert len(df) == 2
        assert list(df.columns) == ["index", "content", "timestamp"]
        assert list(df["index"]) == [0, 1]

    def test_owner_column(self):
        log = load_fixture("posts_result").post_log
        df = posts_to_df(log, owner="someone")
        assert all(df["owner"] == "someone")

    def test_save_csv(self, tmp_path):
        log = load_fixture("posts_result").post_log
        path = save_posts_csv(log, tmp_path / "out" / "posts.csv")
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "index,content,timestamp"
        assert len(lines) == 3
