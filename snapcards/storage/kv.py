"""
Synchronous key-value backends.

Each backend stores text values under string keys, the way a browser's
localStorage does. Backends raise ``OSError`` (or ``sqlite3.Error``) on
failure; translating those into storage errors is the storage service's job.

Backends:
- JsonFileKeyValueStore: one file per key under a data directory (default)
- SqliteKeyValueStore: single ``kv`` table in a SQLite database
- MemoryKeyValueStore: process-local dict with an optional byte quota
"""

from __future__ import annotations

import os
import re
import sqlite3
import tempfile
from contextlib import closing
from pathlib import Path
from typing import Protocol

from loguru import logger

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Protocol for synchronous text key-value stores."""

    def get_item(self, key: str) -> str | None:
        """Return the stored text, or None when the key is absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store text under key, replacing any previous value."""
        ...

    def remove_item(self, key: str) -> None:
        """Delete key. Absent keys are ignored."""
        ...


def _check_key(key: str) -> str:
    if not _KEY_PATTERN.match(key):
        raise ValueError(f"Invalid storage key: {key!r}")
    return key


class JsonFileKeyValueStore:
    """
    File-per-key store.

    Values are written to ``{data_dir}/{key}.json`` through a temporary file
    and ``os.replace`` so a crash mid-write never leaves a half-written value.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir).expanduser()

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{_check_key(key)}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class SqliteKeyValueStore:
    """
    SQLite-backed store.

    Opens a short-lived connection per call so it is safe to use from the
    worker threads ``asyncio.to_thread`` hands out.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()
        logger.debug(f"SqliteKeyValueStore initialized at {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _init_schema(self) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

    def get_item(self, key: str) -> str | None:
        with closing(self._connect()) as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )

    def remove_item(self, key: str) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))


class MemoryKeyValueStore:
    """
    In-memory store.

    With ``quota_bytes`` set, a write that would push the total UTF-8 size of
    all values past the quota raises ``OSError`` and leaves the old value.
    """

    def __init__(self, quota_bytes: int | None = None, initial: dict[str, str] | None = None):
        self.quota_bytes = quota_bytes
        self._items: dict[str, str] = dict(initial or {})

    def _size_without(self, key: str) -> int:
        return sum(len(v.encode("utf-8")) for k, v in self._items.items() if k != key)

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            needed = self._size_without(key) + len(value.encode("utf-8"))
            if needed > self.quota_bytes:
                raise OSError(f"Quota exceeded: {needed} > {self.quota_bytes} bytes")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


def create_kv_store(
    backend: str,
    data_dir: Path,
    quota_bytes: int | None = None,
) -> KeyValueStore:
    """Build the backend named in settings."""
    if backend == "file":
        return JsonFileKeyValueStore(data_dir)
    if backend == "sqlite":
        return SqliteKeyValueStore(Path(data_dir).expanduser() / "snapcards.db")
    if backend == "memory":
        return MemoryKeyValueStore(quota_bytes=quota_bytes)
    raise ValueError(f"Unknown storage backend: {backend}")
