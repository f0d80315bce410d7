"""In-process cache backend."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any


class MemoryCacheBackend:
    """Dict-backed CacheBackend guarded by a lock.

    Entries are dropped lazily once their TTL has elapsed. A ttl of 0 or
    less keeps the entry until the process exits.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (stored_at, expires_at | None, value)
        self._entries: dict[str, tuple[float, float | None, Any]] = {}

    def exists(self, key: str) -> tuple[float, Any] | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, expires_at, value = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[key]
                return None
            return stored_at, value

    def set(self, key: str, value: Any, ttl: float) -> None:
        now = self._clock()
        expires_at = now + ttl if ttl > 0 else None
        with self._lock:
            self._entries[key] = (now, expires_at, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
