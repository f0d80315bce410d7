"""Cache backend interface."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Key/value store with advisory TTL.

    ``exists`` returns ``(stored_at, value)`` for a present key, or None.
    ``stored_at`` is a POSIX timestamp; callers re-check freshness against it.
    """

    def exists(self, key: str) -> tuple[float, Any] | None: ...

    def set(self, key: str, value: Any, ttl: float) -> None: ...
