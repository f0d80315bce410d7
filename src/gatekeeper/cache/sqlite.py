"""CacheBackend implementation backed by a local SQLite database."""

from __future__ import annotations

import json
import sqlite3
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from gatekeeper.errors import CacheSerializationError

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS cache (
    key TEXT PRIMARY KEY,
    value_json TEXT NOT NULL,
    stored_at REAL NOT NULL,
    expires_at REAL
);
"""


class SQLiteCacheBackend:
    """CacheBackend that survives process restarts until the TTL runs out.

    Values must be JSON-serializable. Expired rows are removed when read
    and by ``purge_expired``.
    """

    def __init__(
        self,
        db_path: str = ".gatekeeper/cache.db",
        clock: Callable[[], float] = time.time,
    ) -> None:
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        self.db_path = str(path)
        self._clock = clock
        # autocommit; each statement is its own transaction
        self._conn = sqlite3.connect(
            self.db_path, isolation_level=None, timeout=5, check_same_thread=False
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    def exists(self, key: str) -> tuple[float, Any] | None:
        row = self._conn.execute(
            "SELECT value_json, stored_at, expires_at FROM cache WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        value_json, stored_at, expires_at = row
        if expires_at is not None and self._clock() >= expires_at:
            self._conn.execute("DELETE FROM cache WHERE key = ?", (key,))
            return None
        return stored_at, json.loads(value_json)

    def set(self, key: str, value: Any, ttl: float) -> None:
        try:
            value_json = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise CacheSerializationError(key, e) from e
        now = self._clock()
        expires_at = now + ttl if ttl > 0 else None
        self._conn.execute(
            "INSERT OR REPLACE INTO cache (key, value_json, stored_at, expires_at) "
            "VALUES (?, ?, ?, ?)",
            (key, value_json, now, expires_at),
        )

    def purge_expired(self) -> int:
        """Delete expired rows and return how many were removed."""
        cursor = self._conn.execute(
            "DELETE FROM cache WHERE expires_at IS NOT NULL AND expires_at <= ?",
            (self._clock(),),
        )
        return cursor.rowcount

    def close(self) -> None:
        self._conn.close()
