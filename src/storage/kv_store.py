"""Key-value persistence for opaque string blobs."""

import sqlite3
import threading
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from src.errors import StorageError

log = structlog.stdlib.get_logger()


class KeyValueStore(ABC):
    """Abstract interface for durable string-keyed blob storage.

    Implementations make no transactional guarantees across keys. Every
    failure is raised as StorageError.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the blob stored under key, or None if absent.

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous blob.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error.

        Raises:
            StorageError: If the delete fails
        """
        pass


class SqliteKeyValueStore(KeyValueStore):
    """SQLite implementation, durable across process restarts.

    One connection per call, so the store can be used from the worker
    threads that asyncio.to_thread dispatches to.
    """

    def __init__(self, path: str):
        """Initialize the store, creating the database file and table if needed.

        Args:
            path: Filesystem path of the SQLite database

        Raises:
            StorageError: If the database cannot be created
        """
        self._path = path
        self._write_lock = threading.Lock()

        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            self._execute(
                "CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
            )
        except (sqlite3.Error, OSError) as e:
            log.error("kv_store_initialization_failed", path=path, error=str(e))
            raise StorageError(f"Failed to initialize key-value store at {path}: {e}") from e

        log.info("kv_store_initialized", path=path)

    def _execute(self, sql: str, params: tuple = ()) -> list[tuple]:
        conn = sqlite3.connect(self._path, timeout=5.0)
        try:
            with conn:
                return conn.execute(sql, params).fetchall()
        finally:
            conn.close()

    def get(self, key: str) -> str | None:
        try:
            rows = self._execute("SELECT value FROM kv WHERE key = ?", (key,))
        except sqlite3.Error as e:
            log.error("kv_get_failed", key=key, error=str(e))
            raise StorageError(f"Failed to read '{key}': {e}") from e

        return rows[0][0] if rows else None

    def set(self, key: str, value: str) -> None:
        try:
            with self._write_lock:
                self._execute(
                    "INSERT INTO kv (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, value),
                )
        except sqlite3.Error as e:
            log.error("kv_set_failed", key=key, error=str(e))
            raise StorageError(f"Failed to write '{key}': {e}") from e

        log.debug("kv_set", key=key, size=len(value))

    def delete(self, key: str) -> None:
        try:
            with self._write_lock:
                self._execute("DELETE FROM kv WHERE key = ?", (key,))
        except sqlite3.Error as e:
            log.error("kv_delete_failed", key=key, error=str(e))
            raise StorageError(f"Failed to delete '{key}': {e}") from e

        log.debug("kv_deleted", key=key)


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store. Contents are lost on exit."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
