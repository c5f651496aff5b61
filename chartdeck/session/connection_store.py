"""
ConnectionStore - persistence of the document store connection string.

The connection string is never held in ambient global state: it is read and
written through an injected key-value collaborator, so tests and embedding
applications choose where it lives.

Architecture:
    - KeyValueStore: minimal get/set/delete protocol
    - InMemoryKeyValueStore: process-local dict (tests, ephemeral sessions)
    - JsonFileKeyValueStore: a single JSON document on disk
    - ConnectionStore: typed load/save/clear for the connection string

Usage:
    >>> store = ConnectionStore(JsonFileKeyValueStore("~/.chartdeck/store.json"))
    >>> store.save("mongodb+srv://cluster.example.net")
    >>> store.load()
"""

import json
from pathlib import Path
from typing import Protocol

from loguru import logger

from chartdeck.config.settings import CONNECTION_CONFIG

# ============================================================================
# Key-value collaborators
# ============================================================================


class KeyValueStore(Protocol):
    """String key-value persistence."""

    def get(self, key: str) -> str | None:
        """Return the stored value or None."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a value."""
        ...

    def delete(self, key: str) -> None:
        """Remove a value if present."""
        ...


class InMemoryKeyValueStore:
    """Dict-backed store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileKeyValueStore:
    """
    Store backed by one JSON object on disk.

    The file is read on every access and rewritten on every change; a missing
    file behaves as an empty store.
    """

    __slots__ = ("path",)

    def __init__(self, path: str | Path):
        """
        Initialize file store.

        Args:
            path: JSON file location (``~`` is expanded)

        """
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            content = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Corrupt key-value store {self.path}: {e}") from e
        if not isinstance(content, dict):
            raise RuntimeError(f"Corrupt key-value store {self.path}: expected an object")
        return content

    def _write(self, values: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(values, indent=2), encoding="utf-8")

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def delete(self, key: str) -> None:
        values = self._read()
        if key in values:
            del values[key]
            self._write(values)


# ============================================================================
# ConnectionStore
# ============================================================================


class ConnectionStore:
    """
    Typed access to the persisted connection string.

    Does NOT Handle:
        - Validating the connection (providers report failures)
        - Encrypting the stored value
    """

    __slots__ = ("_store", "key")

    def __init__(self, store: KeyValueStore, key: str | None = None):
        """
        Initialize ConnectionStore.

        Args:
            store: Key-value collaborator
            key: Storage key (defaults to configuration)

        Raises:
            ValueError: If key is empty

        """
        key = key if key is not None else CONNECTION_CONFIG["store_key"]
        if not key or not key.strip():
            raise ValueError("Connection store key cannot be empty")
        self._store = store
        self.key = key

    def load(self) -> str | None:
        """Return the saved connection string, or the configured default."""
        value = self._store.get(self.key)
        if value:
            return value
        return CONNECTION_CONFIG["connection_string"] or None

    def save(self, connection: str) -> None:
        """
        Persist a connection string.

        Args:
            connection: Connection string (surrounding whitespace removed)

        Raises:
            ValueError: If the connection string is empty

        """
        connection = connection.strip() if connection else ""
        if not connection:
            raise ValueError("Connection string cannot be empty")
        self._store.set(self.key, connection)
        logger.info("Saved document store connection string")

    def clear(self) -> None:
        """Forget the saved connection string."""
        self._store.delete(self.key)
        logger.info("Cleared saved document store connection string")
