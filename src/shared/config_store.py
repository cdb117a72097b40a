"""
Persisted config store: one JSON value per named setting, kept in console.sqlite.

Falls back to memory-only storage for the session when the database is unusable.
"""
import json
import logging
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Optional

log = logging.getLogger(__name__)


class ConfigStore:
    """Key-value settings store with per-key defaults."""

    def __init__(self, db_path: Optional[Path]):
        """
        Initialize the store.

        Args:
            db_path: SQLite file to persist into, or None for memory-only
        """
        self.db_path = Path(db_path) if db_path is not None else None
        # key -> JSON text, so every read hands out a fresh copy
        self._cache: dict[str, str] = {}

        if self.db_path is not None:
            try:
                self._init_db()
            except (sqlite3.Error, OSError) as e:
                self._degrade("open", e)

    @property
    def is_persistent(self) -> bool:
        return self.db_path is not None

    def _init_db(self):
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def _degrade(self, action: str, error: Exception):
        log.warning(
            "Config store could not %s %s (%s); settings are kept in memory for this session",
            action, self.db_path, error,
        )
        self.db_path = None

    def get(self, key: str, default: Any = None) -> Any:
        """
        Read a setting.

        Args:
            key: Setting name
            default: Value returned when the key was never written

        Returns:
            A copy of the stored value, or default
        """
        raw = self._cache.get(key)

        if raw is None and self.db_path is not None:
            try:
                with sqlite3.connect(self.db_path) as conn:
                    row = conn.execute(
                        "SELECT value FROM settings WHERE key = ?", (key,)
                    ).fetchone()
            except sqlite3.Error as e:
                self._degrade("read", e)
                row = None
            if row:
                raw = row[0]
                self._cache[key] = raw

        if raw is None:
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            log.warning("Ignoring unreadable value for setting %r", key)
            self._cache.pop(key, None)
            return default

    def set(self, key: str, value: Any) -> None:
        """Replace the whole value stored under key."""
        raw = json.dumps(value)
        self._cache[key] = raw

        if self.db_path is None:
            return

        now = datetime.now(UTC).isoformat()
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute(
                    "INSERT INTO settings (key, value, updated_at) VALUES (?, ?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
                    (key, raw, now),
                )
                conn.commit()
        except sqlite3.Error as e:
            self._degrade("write", e)
