"""
Unit tests for the key-value backends.
"""

import pytest

from snapcards.storage.kv import (
    JsonFileKeyValueStore,
    MemoryKeyValueStore,
    SqliteKeyValueStore,
    create_kv_store,
)


@pytest.fixture(params=["file", "sqlite", "memory"])
def kv(request, tmp_path):
    return create_kv_store(request.param, tmp_path / "data")


class TestKeyValueContract:
    """Behavior shared by every backend."""

    def test_missing_key_is_none(self, kv):
        assert kv.get_item("flashcards") is None

    def test_set_then_get(self, kv):
        kv.set_item("flashcards", "[1, 2]")
        assert kv.get_item("flashcards") == "[1, 2]"

    def test_overwrite(self, kv):
        kv.set_item("flashcards", "old")
        kv.set_item("flashcards", "new")
        assert kv.get_item("flashcards") == "new"

    def test_remove(self, kv):
        kv.set_item("flashcards", "x")
        kv.remove_item("flashcards")
        kv.remove_item("flashcards")
        assert kv.get_item("flashcards") is None

    def test_unicode(self, kv):
        kv.set_item("flashcards", "光合作用 → 🌱")
        assert kv.get_item("flashcards") == "光合作用 → 🌱"


class TestJsonFileStore:

    def test_one_file_per_key(self, tmp_path):
        kv = JsonFileKeyValueStore(tmp_path)
        kv.set_item("flashcards", "[]")
        assert (tmp_path / "flashcards.json").read_text(encoding="utf-8") == "[]"
        assert not list(tmp_path.glob("*.tmp"))

    def test_rejects_path_like_keys(self, tmp_path):
        kv = JsonFileKeyValueStore(tmp_path)
        with pytest.raises(ValueError):
            kv.set_item("../escape", "x")

    def test_write_to_unwritable_location_raises_oserror(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        kv = JsonFileKeyValueStore(blocker / "data")
        with pytest.raises(OSError):
            kv.set_item("flashcards", "[]")


class TestSqliteStore:

    def test_persists_across_instances(self, tmp_path):
        SqliteKeyValueStore(tmp_path / "kv.db").set_item("flashcards", "[]")
        assert SqliteKeyValueStore(tmp_path / "kv.db").get_item("flashcards") == "[]"


class TestMemoryStore:

    def test_quota_blocks_oversized_write(self):
        kv = MemoryKeyValueStore(quota_bytes=5)
        kv.set_item("a", "123")
        with pytest.raises(OSError):
            kv.set_item("b", "456")
        assert kv.get_item("b") is None

    def test_quota_counts_replaced_value_once(self):
        kv = MemoryKeyValueStore(quota_bytes=5)
        kv.set_item("a", "12345")
        kv.set_item("a", "54321")
        assert kv.get_item("a") == "54321"


def test_unknown_backend():
    with pytest.raises(ValueError):
        create_kv_store("redis", None)
