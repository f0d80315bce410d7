"""Gatekeeper - role-based authorization rules with inline and class-method handlers."""

from gatekeeper.cache import MemoryCacheBackend, RuleCache, SQLiteCacheBackend
from gatekeeper.checker import PermissionChecker, interpret_result, parse_permission
from gatekeeper.config import GatekeeperConfig, load_config
from gatekeeper.errors import (
    CacheSerializationError,
    DuplicateRuleError,
    GatekeeperError,
    MalformedPermissionError,
    UndefinedRuleError,
    UnknownTargetError,
)
from gatekeeper.reflect import ClassDispatcher, ReflectionIntrospector, ReflectiveRuleGenerator
from gatekeeper.rules import HandlerRef, HandlerResolver, Inline, NamedReference, RuleRegistry

__version__ = "0.1.0"

__all__ = [
    "CacheSerializationError",
    "ClassDispatcher",
    "DuplicateRuleError",
    "GatekeeperConfig",
    "GatekeeperError",
    "HandlerRef",
    "HandlerResolver",
    "Inline",
    "MalformedPermissionError",
    "MemoryCacheBackend",
    "NamedReference",
    "PermissionChecker",
    "ReflectionIntrospector",
    "ReflectiveRuleGenerator",
    "RuleCache",
    "RuleRegistry",
    "SQLiteCacheBackend",
    "UndefinedRuleError",
    "UnknownTargetError",
    "interpret_result",
    "load_config",
    "parse_permission",
]
