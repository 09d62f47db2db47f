"""Key-value storage backends for the persisted snapshot.

Backends only move strings in and out of a named slot. Failures are raised as
:class:`StorageError`; deciding what a failure means is the caller's job.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

import duckdb

from shoresquad.shared.core.errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage, used for tests and the ``memory`` backend."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class DuckDBStorage:
    """Stores slots in a single ``kv_store`` table of a DuckDB file.

    The connection is opened lazily on first use and kept for the lifetime of
    the object. Pass ``":memory:"`` for a throwaway database.
    """

    def __init__(self, db_path: Union[str, Path] = ":memory:") -> None:
        self.db_path = str(db_path)
        self.conn: Optional[duckdb.DuckDBPyConnection] = None

    def connect(self) -> "DuckDBStorage":
        if self.conn is not None:
            return self
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self.conn = duckdb.connect(self.db_path)
            self._create_schema(self.conn)
        except (duckdb.Error, OSError) as e:
            self.conn = None
            raise StorageError(f"Could not open {self.db_path}: {e}") from e
        logger.info(f"Key-value storage initialized: {self.db_path}")
        return self

    def _create_schema(self, conn: duckdb.DuckDBPyConnection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key VARCHAR PRIMARY KEY,
                value VARCHAR NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    def get(self, key: str) -> Optional[str]:
        conn = self.connect().conn
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except duckdb.Error as e:
            raise StorageError(f"Read of '{key}' failed: {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self.connect().conn
        try:
            conn.execute("""
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT (key) DO UPDATE
                SET value = excluded.value, updated_at = now()
            """, (key, value))
        except duckdb.Error as e:
            raise StorageError(f"Write of '{key}' failed: {e}") from e

    def delete(self, key: str) -> None:
        conn = self.connect().conn
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        except duckdb.Error as e:
            raise StorageError(f"Delete of '{key}' failed: {e}") from e

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None
