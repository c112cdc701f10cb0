"""Persistence for the single named settings record.

Both stores report failures through StoreResult instead of raising, so page
rendering can fall back to defaults when storage is down.
"""

import json
import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

CREATE_OPTIONS_TABLE = '''CREATE TABLE IF NOT EXISTS options
                          (name TEXT PRIMARY KEY,
                           value TEXT NOT NULL,
                           updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)'''


@dataclass
class StoreResult:
    ok: bool
    value: Optional[dict] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value=None):
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error):
        return cls(ok=False, error=str(error))


class SettingsStore:
    """Get/put a named record. Subclasses implement the storage."""

    def init_db(self):
        pass

    def get(self, name: str) -> StoreResult:
        raise NotImplementedError

    def put(self, name: str, record: dict) -> StoreResult:
        raise NotImplementedError


def _as_record(value: Any) -> Optional[dict]:
    """Stored values that are not a JSON object count as absent."""
    return dict(value) if isinstance(value, dict) else None


class SqliteSettingsStore(SettingsStore):
    def __init__(self, db_path='top_bar.db'):
        self.db_path = db_path

    def _connect(self):
        # Every connection ensures the options table exists.
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute(CREATE_OPTIONS_TABLE)
            conn.commit()
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def init_db(self):
        self._connect().close()
        logger.info("Options table ready in %s", self.db_path)

    def get(self, name):
        try:
            conn = self._connect()
            try:
                c = conn.cursor()
                c.execute("SELECT value FROM options WHERE name = ?", (name,))
                row = c.fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error("Could not read option %s: %s", name, e)
            return StoreResult.failure(e)

        if row is None:
            return StoreResult.success(None)

        try:
            value = json.loads(row[0])
        except ValueError as e:
            logger.warning("Option %s holds unreadable JSON: %s", name, e)
            return StoreResult.success(None)
        return StoreResult.success(_as_record(value))

    def put(self, name, record):
        try:
            payload = json.dumps(dict(record))
        except (TypeError, ValueError) as e:
            logger.error("Option %s is not serializable: %s", name, e)
            return StoreResult.failure(e)

        try:
            conn = self._connect()
            try:
                # One statement in one transaction: readers see the old or the new record.
                with conn:
                    conn.execute("""INSERT OR REPLACE INTO options (name, value, updated_at)
                                    VALUES (?, ?, CURRENT_TIMESTAMP)""", (name, payload))
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error("Could not save option %s: %s", name, e)
            return StoreResult.failure(e)

        return StoreResult.success(dict(record))


class MemorySettingsStore(SettingsStore):
    """In-process store. Set `available = False` to simulate an outage."""

    def __init__(self, initial=None):
        self._records = dict(initial or {})
        self.available = True

    def get(self, name):
        if not self.available:
            return StoreResult.failure('settings store unavailable')
        return StoreResult.success(_as_record(self._records.get(name)))

    def put(self, name, record):
        if not self.available:
            return StoreResult.failure('settings store unavailable')
        self._records[name] = dict(record)
        return StoreResult.success(dict(record))
