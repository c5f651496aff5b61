"""Tests for connection string persistence."""

import json

import pytest

from chartdeck.config.settings import CONNECTION_CONFIG
from chartdeck.session.connection_store import (
    ConnectionStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)

URI = "mongodb+srv://reader:pw@cluster0.example.net"


@pytest.fixture
def no_default_connection(monkeypatch):
    """Remove any configured default connection string."""
    monkeypatch.setitem(CONNECTION_CONFIG, "connection_string", None)


def test_empty_key_rejected():
    """The storage key must be non-empty."""
    with pytest.raises(ValueError, match="Connection store key cannot be empty"):
        ConnectionStore(InMemoryKeyValueStore(), key="  ")


def test_save_load_clear_in_memory(no_default_connection):
    """Values round-trip through the injected store."""
    backing = InMemoryKeyValueStore()
    store = ConnectionStore(backing, key="conn")

    assert store.load() is None

    store.save(f"  {URI}  ")
    assert store.load() == URI
    assert backing.get("conn") == URI

    store.clear()
    assert store.load() is None


def test_save_rejects_empty_connection():
    """Blank connection strings are not persisted."""
    store = ConnectionStore(InMemoryKeyValueStore(), key="conn")

    with pytest.raises(ValueError, match="Connection string cannot be empty"):
        store.save("   ")


def test_configured_default_used_when_nothing_saved(monkeypatch):
    """The environment-provided connection string is the fallback."""
    monkeypatch.setitem(CONNECTION_CONFIG, "connection_string", URI)

    assert ConnectionStore(InMemoryKeyValueStore(), key="conn").load() == URI


def test_json_file_store(tmp_path):
    """The file store keeps one JSON object and tolerates a missing file."""
    path = tmp_path / "nested" / "store.json"
    backing = JsonFileKeyValueStore(path)

    assert backing.get("conn") is None

    backing.set("conn", URI)
    backing.set("other", "x")
    assert json.loads(path.read_text()) == {"conn": URI, "other": "x"}

    backing.delete("conn")
    backing.delete("missing")
    assert json.loads(path.read_text()) == {"other": "x"}


def test_json_file_store_corrupt_file(tmp_path):
    """A corrupt file is reported, not silently replaced."""
    path = tmp_path / "store.json"
    path.write_text("[1, 2]")

    with pytest.raises(RuntimeError, match="expected an object"):
        JsonFileKeyValueStore(path).get("conn")
