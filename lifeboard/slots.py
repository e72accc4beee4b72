"""
Key/value slot storage backing every LifeBoard collection.

Each slot holds one UTF-8 JSON document (a whole collection, or an auxiliary
value such as the theme). Writes replace a slot in a single committed upsert,
so readers never observe a half-written value.
"""
import logging
import sqlite3
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".local" / "share" / "lifeboard" / "lifeboard.db"


class SlotKey(str, Enum):
    """Persisted slot names."""
    TASKS = "tasks"
    NOTES = "notes"
    BOOKMARKS = "bookmarks"
    REMINDERS = "reminders"
    JOURNAL_ENTRIES = "journalEntries"
    DAILY_QUOTE = "dailyQuote"
    DAILY_QUOTE_DATE = "dailyQuoteDate"
    THEME = "theme"


def _key(key) -> str:
    return key.value if isinstance(key, SlotKey) else str(key)


class SlotBackend:
    """Interface for a durable key -> string store."""

    def get(self, key) -> Optional[str]:
        raise NotImplementedError

    def set(self, key, value: str) -> None:
        raise NotImplementedError

    def delete(self, key) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


class MemorySlots(SlotBackend):
    """In-process slots. Used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = {_key(k): v for k, v in (initial or {}).items()}

    def get(self, key) -> Optional[str]:
        return self._data.get(_key(key))

    def set(self, key, value: str) -> None:
        self._data[_key(key)] = value

    def delete(self, key) -> None:
        self._data.pop(_key(key), None)

    def keys(self) -> List[str]:
        return list(self._data)


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection in WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


class SqliteSlots(SlotBackend):
    """SQLite-backed slots: one row per key."""

    def __init__(self, db_path: Optional[str] = None):
        if db_path is None:
            db_path = str(DEFAULT_DB_PATH)
        self.db_path = str(db_path)
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self):
        with _connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS slots (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def get(self, key) -> Optional[str]:
        with _connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM slots WHERE key = ?", (_key(key),)
            ).fetchone()
        return row["value"] if row else None

    def set(self, key, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with _connect(self.db_path) as conn:
            conn.execute("""
                INSERT INTO slots (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
            """, (_key(key), value, now))
            conn.commit()
        logger.debug("slot %s written (%d bytes)", _key(key), len(value))

    def delete(self, key) -> None:
        with _connect(self.db_path) as conn:
            conn.execute("DELETE FROM slots WHERE key = ?", (_key(key),))
            conn.commit()

    def keys(self) -> List[str]:
        with _connect(self.db_path) as conn:
            rows = conn.execute("SELECT key FROM slots ORDER BY key").fetchall()
        return [row["key"] for row in rows]
