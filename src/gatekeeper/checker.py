"""Top-level permission checks against the current role."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from gatekeeper.cache.rule_cache import RuleCache
from gatekeeper.errors import MalformedPermissionError
from gatekeeper.interfaces.cache import CacheBackend
from gatekeeper.interfaces.dispatch import MethodDispatcher
from gatekeeper.interfaces.introspect import Introspector
from gatekeeper.reflect.dispatch import ClassDispatcher
from gatekeeper.reflect.generator import ReflectiveRuleGenerator
from gatekeeper.reflect.introspect import ReflectionIntrospector
from gatekeeper.rules.handlers import HandlerRef
from gatekeeper.rules.registry import RuleRegistry
from gatekeeper.rules.resolver import HandlerResolver

if TYPE_CHECKING:
    from gatekeeper.config.models import GatekeeperConfig

logger = logging.getLogger(__name__)

# Result shapes treated as a list of allowed actions
_ACTION_SEQUENCES = (list, tuple)


def parse_permission(permission: str, strict: bool = False) -> tuple[str, str]:
    """Split ``"rule.action"`` into ``(rule, action)``.

    Without a '.' the action is empty. Only the first two segments count:
    ``"a.b.c"`` parses as ``("a", "b")`` unless ``strict`` is set, in which
    case it raises MalformedPermissionError.
    """
    if "." not in permission:
        return permission, ""
    parts = permission.split(".")
    if strict and len(parts) > 2:
        raise MalformedPermissionError(permission)
    return parts[0], parts[1]


def interpret_result(result: Any, action: str) -> bool:
    """Turn a handler result into an allow/deny decision.

    A bool is the decision. A list of actions allows ``action`` when it is
    an exact member. Any other shape denies.
    """
    if isinstance(result, bool):
        return result
    if isinstance(result, _ACTION_SEQUENCES):
        return any(isinstance(a, str) and a == action for a in result)
    logger.debug("Unrecognized handler result %r treated as deny", type(result).__name__)
    return False


class PermissionChecker:
    """Decides whether the current role may perform an action.

    Usage::

        checker = PermissionChecker(role="editor")
        checker.define_rule("video", lambda ctx, role: ["read", "create"])
        checker.can("video.create")  # True
    """

    def __init__(
        self,
        role: str = "",
        context: Any = None,
        *,
        registry: RuleRegistry | None = None,
        dispatcher: MethodDispatcher | None = None,
        introspector: Introspector | None = None,
        cache_backend: CacheBackend | None = None,
        clock: Callable[[], float] | None = None,
        strict_permissions: bool = False,
        default_ttl: float = 0,
    ) -> None:
        self._role = role
        self._context = context
        self._strict = strict_permissions
        self._default_ttl = default_ttl
        self.registry = registry if registry is not None else RuleRegistry()
        self.dispatcher = dispatcher if dispatcher is not None else ClassDispatcher()
        self.introspector = introspector if introspector is not None else ReflectionIntrospector()

        cache = None
        if cache_backend is not None:
            cache = RuleCache(cache_backend, clock) if clock else RuleCache(cache_backend)
        self.cache = cache

        self._resolver = HandlerResolver(self.dispatcher)
        self._generator = ReflectiveRuleGenerator(
            self.registry, self.dispatcher, self.introspector, cache
        )

    @classmethod
    def from_config(cls, config: GatekeeperConfig, context: Any = None) -> PermissionChecker:
        """Build a checker, its cache backend, and (optionally) its policy from config.

        The checker owns the backend it creates; call ``close()`` or use it as
        a context manager when done.
        """
        backend: CacheBackend | None = None
        if config.cache.backend == "memory":
            from gatekeeper.cache.memory import MemoryCacheBackend

            backend = MemoryCacheBackend()
        elif config.cache.backend == "sqlite":
            from gatekeeper.cache.sqlite import SQLiteCacheBackend

            backend = SQLiteCacheBackend(config.cache.path)

        checker = cls(
            role=config.role,
            context=context,
            cache_backend=backend,
            strict_permissions=config.policy.strict_permissions,
            default_ttl=config.cache.default_ttl,
        )
        if config.policy.path:
            from gatekeeper.policy import load_policy

            try:
                load_policy(config.policy.path, checker)
            except Exception:
                checker.close()
                raise
        return checker

    def close(self) -> None:
        """Release the cache backend's resources (the SQLite connection, if any)."""
        if self.cache is None:
            return
        close = getattr(self.cache.backend, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> PermissionChecker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- role ------------------------------------------------------------------

    @property
    def current_role(self) -> str:
        return self._role

    @property
    def context(self) -> Any:
        return self._context

    def set_current_role(self, role: str) -> None:
        self._role = role

    def is_role(self, role: str) -> bool:
        return self._role == role

    # -- rule definition -------------------------------------------------------

    def define_rule(
        self,
        name: str,
        handler: HandlerRef | Callable[..., Any] | str,
        overwrite: bool = False,
    ) -> None:
        """Define a rule.

        ``handler`` is a callable taking ``(context, role, *extra_args)``, or
        a ``"<class>.<method>"`` string naming a method with the same
        signature. It returns True/False, or the list of allowed actions.
        """
        self.registry.define(name, handler, overwrite=overwrite)

    def define_rules_from_class_methods(
        self, class_identifier: str, ttl: float | None = None
    ) -> dict[str, HandlerRef]:
        """Define a ``"<class>.<method>"`` rule for every public method of a class."""
        if ttl is None:
            ttl = self._default_ttl
        return self._generator.generate(class_identifier, ttl)

    # -- checks ----------------------------------------------------------------

    def _split(self, permission: str) -> tuple[str, str]:
        """Find the rule and action a permission string refers to.

        Rule names generated from class methods contain a '.' themselves, so
        ``"C.publish"`` is that rule with no action and ``"C.publish.live"``
        is that rule with action ``live``. Anything else is split at the
        first '.'.
        """
        if "." in permission:
            if permission in self.registry:
                return permission, ""
            prefix, _, suffix = permission.rpartition(".")
            if prefix in self.registry:
                return prefix, suffix
        return parse_permission(permission, strict=self._strict)

    def can(self, permission: str, *extra_args: Any) -> bool:
        """Check ``"rule"`` or ``"rule.action"`` for the current role.

        Raises UndefinedRuleError when the rule does not exist.
        """
        name, action = self._split(permission)
        handler = self.registry.lookup(name)
        result = self._resolver.invoke(handler, self._context, self._role, *extra_args)
        allowed = interpret_result(result, action)
        logger.debug(
            "can(%r) role=%r -> %s", permission, self._role, "allow" if allowed else "deny"
        )
        return allowed

    def has(self, permission: str) -> bool:
        """Alias for ``can`` without extra arguments."""
        return self.can(permission)
