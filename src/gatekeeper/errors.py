"""Exception types raised by the rule engine."""

from __future__ import annotations


class GatekeeperError(Exception):
    """Base class for all gatekeeper errors."""


class DuplicateRuleError(GatekeeperError):
    """Raised when a rule name is defined twice without overwrite."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Rule already defined: {name}")


class UndefinedRuleError(GatekeeperError):
    """Raised when a permission refers to a rule that was never defined."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Permission not defined: {name}")


class MalformedPermissionError(GatekeeperError):
    """Raised in strict mode for permission strings with more than one '.'."""

    def __init__(self, permission: str) -> None:
        self.permission = permission
        super().__init__(
            f"Malformed permission {permission!r}: expected 'rule' or 'rule.action'"
        )


class UnknownTargetError(GatekeeperError):
    """Raised when a named reference or class identifier cannot be resolved."""

    def __init__(self, target: str, reason: str | None = None) -> None:
        self.target = target
        self.reason = reason
        msg = f"Cannot resolve target '{target}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class CacheSerializationError(GatekeeperError):
    """Raised when a cache backend cannot persist a rule set."""

    def __init__(self, key: str, cause: Exception | None = None) -> None:
        self.key = key
        msg = f"Cannot serialize rule set for cache key '{key}'"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
        if cause is not None:
            self.__cause__ = cause
