"""Rule-set caching and cache backends."""

from gatekeeper.cache.memory import MemoryCacheBackend
from gatekeeper.cache.rule_cache import CacheEntry, RuleCache, cache_key
from gatekeeper.cache.sqlite import SQLiteCacheBackend

__all__ = [
    "CacheEntry",
    "MemoryCacheBackend",
    "RuleCache",
    "SQLiteCacheBackend",
    "cache_key",
]
