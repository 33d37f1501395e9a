"""Local SQLite record store: append-only dataset plus a key/value table."""

import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from market_reaction.core.logger import logger


class RecordStore:
    """SQLite-backed stand-in for the hosting runtime's dataset and key/value store."""

    def __init__(self, db_path: str = "output/store.db") -> None:
        """
        Open (and create if needed) the store.

        Args:
            db_path (str): Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a connection to the SQLite database."""
        return sqlite3.connect(self.db_path, check_same_thread=False)

    def _init_db(self) -> None:
        """Create the dataset and key/value tables if they don't exist."""
        with self._get_connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS dataset (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    record TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS key_value (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    content_type TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

    def push_record(self, record: Dict[str, Any]) -> None:
        """
        Append one record to the dataset. Rows are never updated or removed.

        Args:
            record (Dict[str, Any]): JSON-serialisable row.
        """
        with self._get_connection() as conn:
            conn.execute("INSERT INTO dataset (record) VALUES (?)", (json.dumps(record),))
        logger.debug(f"RecordStore: appended record for {record.get('ticker')}")

    def list_records(self) -> List[Dict[str, Any]]:
        """Return every dataset row in insertion order."""
        with self._get_connection() as conn:
            rows = conn.execute("SELECT record FROM dataset ORDER BY id").fetchall()
        return [json.loads(row[0]) for row in rows]

    def set_value(self, key: str, value: Any, content_type: str = "application/json") -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        JSON content is serialised here; any other content type must be a string.
        """
        if content_type == "application/json":
            payload = json.dumps(value)
        elif isinstance(value, str):
            payload = value
        else:
            raise TypeError(f"value for {key!r} must be str when content_type={content_type}")

        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO key_value (key, value, content_type)
                VALUES (?, ?, ?)
                """,
                (key, payload, content_type),
            )
        logger.info(f"RecordStore: saved {key} ({content_type})")

    def get_value(self, key: str) -> Optional[Tuple[Any, str]]:
        """Return ``(value, content_type)`` for ``key`` or None when absent."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value, content_type FROM key_value WHERE key = ?", (key,)
            ).fetchone()
        if row is None:
            return None
        value, content_type = row
        if content_type == "application/json":
            return json.loads(value), content_type
        return value, content_type
