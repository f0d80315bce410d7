"""TTL-gated memoization of generated rule sets."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from gatekeeper.cache._serialization import rules_to_targets, targets_to_rules
from gatekeeper.interfaces.cache import CacheBackend
from gatekeeper.rules.handlers import HandlerRef

logger = logging.getLogger(__name__)

KEY_PREFIX = "permissions_class_methods_"


def cache_key(class_identifier: str) -> str:
    return KEY_PREFIX + class_identifier


@dataclass(frozen=True)
class CacheEntry:
    """A cached rule set and the time it was stored."""

    rules: Mapping[str, HandlerRef] = field(default_factory=dict)
    stored_at: float = 0.0

    def is_fresh(self, ttl: float, now: float) -> bool:
        return now < self.stored_at + ttl


class RuleCache:
    """Stores rule sets in a CacheBackend.

    ``get`` hands back whatever the backend has, stale or not; the caller
    decides freshness with ``CacheEntry.is_fresh``.
    """

    def __init__(self, backend: CacheBackend, clock: Callable[[], float] = time.time) -> None:
        self._backend = backend
        self._clock = clock

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    def now(self) -> float:
        return self._clock()

    def get(self, key: str) -> CacheEntry | None:
        found = self._backend.exists(key)
        if found is None:
            logger.debug("Cache miss for %s", key)
            return None
        stored_at, targets = found
        return CacheEntry(rules=targets_to_rules(targets), stored_at=stored_at)

    def put(self, key: str, rules: Mapping[str, HandlerRef], ttl: float) -> None:
        self._backend.set(key, rules_to_targets(key, rules), ttl)
        logger.debug("Cached %d rules under %s for %ss", len(rules), key, ttl)
