"""Tests for the key-value stores behind the cookbook."""

import json

import pytest

from chefgenie.errors import StorageWriteError
from chefgenie.storage import Cookbook, JsonFileStore, MemoryStore


class TestMemoryStore:

    def test_get_set_remove(self):
        store = MemoryStore()
        assert store.get_item("k") is None
        store.set_item("k", "v")
        assert store.get_item("k") == "v"
        store.remove_item("k")
        assert store.get_item("k") is None

    def test_remove_missing_is_noop(self):
        MemoryStore().remove_item("k")

    def test_quota_rejects_and_keeps_old_value(self):
        store = MemoryStore(quota_bytes=10)
        store.set_item("k", "small")
        with pytest.raises(StorageWriteError):
            store.set_item("k", "x" * 50)
        assert store.get_item("k") == "small"


class TestJsonFileStore:

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "cookbook.json"
        JsonFileStore(path).set_item("k", "v")
        assert JsonFileStore(path).get_item("k") == "v"
        assert json.loads(path.read_text()) == {"k": "v"}

    def test_missing_file_reads_empty(self, tmp_path):
        assert JsonFileStore(tmp_path / "none.json").get_item("k") is None

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "cookbook.json"
        path.write_text("][")
        assert JsonFileStore(path).get_item("k") is None

    def test_keeps_other_keys(self, tmp_path):
        path = tmp_path / "cookbook.json"
        store = JsonFileStore(path)
        store.set_item("a", "1")
        store.set_item("b", "2")
        store.remove_item("a")
        assert json.loads(path.read_text()) == {"b": "2"}

    def test_quota(self, tmp_path):
        path = tmp_path / "cookbook.json"
        store = JsonFileStore(path, quota_bytes=20)
        store.set_item("k", "ok")
        with pytest.raises(StorageWriteError):
            store.set_item("k", "y" * 100)
        assert store.get_item("k") == "ok"

    def test_cookbook_on_disk(self, tmp_path, sample_recipe):
        path = tmp_path / "cookbook.json"
        Cookbook(JsonFileStore(path)).save(sample_recipe, rating=4)

        reopened = Cookbook(JsonFileStore(path)).list_saved()
        assert len(reopened) == 1
        assert reopened[0].rating == 4
