"""Tests for key-value storage backends."""

import pytest

from sample_discovery.infrastructure.environment import HostEnvironment, StaticEnvironment
from sample_discovery.infrastructure.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    StorageError,
)


class TestInMemoryKeyValueStore:
    """Test in-memory store."""

    def test_set_get_delete(self):
        """Test basic operations."""
        store = InMemoryKeyValueStore()

        store.set("key", "value")
        assert store.get("key") == "value"
        assert store.keys() == ["key"]

        store.delete("key")
        assert store.get("key") is None
        store.delete("missing")

    def test_fail_writes(self):
        """Test simulated write failures."""
        store = InMemoryKeyValueStore(fail_writes=True)

        with pytest.raises(StorageError):
            store.set("key", "value")


class TestJsonFileKeyValueStore:
    """Test JSON file store."""

    def test_roundtrip_across_instances(self, tmp_path):
        """Test values survive a new store instance."""
        path = tmp_path / "state" / "store.json"
        JsonFileKeyValueStore(path).set("key", "value")

        assert JsonFileKeyValueStore(path).get("key") == "value"
        assert not (tmp_path / "state" / "store.json.tmp").exists()

    def test_missing_file(self, tmp_path):
        """Test reading before anything was written."""
        assert JsonFileKeyValueStore(tmp_path / "none.json").get("key") is None

    def test_corrupt_file(self, tmp_path):
        """Test a corrupt document reads as empty."""
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")

        store = JsonFileKeyValueStore(path)

        assert store.get("key") is None
        store.set("key", "value")
        assert store.get("key") == "value"

    def test_delete(self, tmp_path):
        """Test deleting a key."""
        store = JsonFileKeyValueStore(tmp_path / "store.json")
        store.set("a", "1")
        store.set("b", "2")

        store.delete("a")

        assert store.get("a") is None
        assert store.get("b") == "2"

    def test_write_failure(self, tmp_path):
        """Test write errors surface as StorageError."""
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        store = JsonFileKeyValueStore(blocker / "store.json")

        with pytest.raises(StorageError):
            store.set("key", "value")


class TestHostEnvironment:
    """Test host environment signals."""

    def test_defaults_online(self):
        """Test the environment is online without a signal."""
        assert HostEnvironment("https://example.test", "agent").is_online() is True

    def test_connectivity_callable(self):
        """Test the signal is read on each call."""
        state = {"online": True}
        environment = HostEnvironment("u", "a", connectivity=lambda: state["online"])

        state["online"] = False
        assert environment.is_online() is False

    def test_static_environment(self):
        """Test the toggleable environment."""
        environment = StaticEnvironment(online=False)
        assert environment.is_online() is False

        environment.online = True
        assert environment.is_online() is True
