"""DuckDB-backed key-value storage for store snapshots.

Plays the part of the browser's origin-scoped local storage: string keys,
JSON string values, one row per store.
"""

import logging
from pathlib import Path
from typing import List, Optional

import duckdb

logger = logging.getLogger(__name__)


class LocalStorage:
    """Persistent string key-value table."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or ":memory:"
        self.conn: Optional[duckdb.DuckDBPyConnection] = None

    def open(self) -> "LocalStorage":
        """Connect and create the key-value table if needed."""
        if self.conn is not None:
            return self
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = duckdb.connect(self.db_path)
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS local_storage (
                key VARCHAR PRIMARY KEY,
                value VARCHAR NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        logger.info(f"Local storage initialized: {self.db_path}")
        return self

    def _connection(self) -> duckdb.DuckDBPyConnection:
        if self.conn is None:
            self.open()
        return self.conn

    def get_item(self, key: str) -> Optional[str]:
        row = self._connection().execute(
            "SELECT value FROM local_storage WHERE key = ?",
            [key],
        ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        self._connection().execute("""
            INSERT INTO local_storage (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT (key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
        """, [key, value])

    def remove_item(self, key: str) -> None:
        self._connection().execute("DELETE FROM local_storage WHERE key = ?", [key])

    def keys(self) -> List[str]:
        rows = self._connection().execute("SELECT key FROM local_storage ORDER BY key").fetchall()
        return [row[0] for row in rows]

    def clear(self) -> None:
        self._connection().execute("DELETE FROM local_storage")

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
