# src/taskpad/storage/kv_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import Iterable
from pathlib import Path

from ..core.errors import StorageFailure

logger = logging.getLogger(__name__)


class SQLiteKeyValueStore:
    """
    SQLite-backed key-value store (the durable, client-resident storage).

    One table, one row per key; values are opaque strings (callers store JSON).

    Thread-safety:
    - each method opens its own SQLite connection

    Every sqlite3.Error is re-raised as StorageFailure so callers can decide
    whether to fail open (reads) or surface the problem (writes).
    """

    def __init__(self, db_path: str | Path = "store.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = len(list(self.keys()))
        except StorageFailure:
            total = -1
        logger.info("KeyValueStore ready db=%s keys=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at REAL NOT NULL
                    )
                    """
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageFailure("open", str(self._db_path), e) from e

    # ---- public API ----

    def get(self, key: str) -> str | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageFailure("read", key, e) from e
        return None if row is None else str(row["value"])

    def set(self, key: str, value: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                                   updated_at = excluded.updated_at
                    """,
                    (key, value, time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageFailure("write", key, e) from e
        logger.debug("kv set key=%s bytes=%d", key, len(value))

    def remove(self, key: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageFailure("remove", key, e) from e
        logger.debug("kv remove key=%s", key)

    def keys(self) -> Iterable[str]:
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageFailure("read", "*", e) from e
        return [str(r["key"]) for r in rows]


class MemoryKeyValueStore:
    """Ephemeral in-process store (tests, TASKPAD_STORE_BACKEND=memory)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def close(self) -> None:
        return

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Iterable[str]:
        return sorted(self._data)
