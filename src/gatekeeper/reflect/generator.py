"""Bulk rule generation from a class's public methods."""

from __future__ import annotations

import logging

from gatekeeper.cache.rule_cache import RuleCache, cache_key
from gatekeeper.interfaces.dispatch import MethodDispatcher
from gatekeeper.interfaces.introspect import Introspector
from gatekeeper.rules.handlers import HandlerRef, NamedReference
from gatekeeper.rules.registry import RuleRegistry

logger = logging.getLogger(__name__)


class ReflectiveRuleGenerator:
    """Derives one ``"<class>.<method>"`` rule per public capability method.

    Introspection can be costly, so with a cache and a positive ttl the
    rule set for a class is reused until ``stored_at + ttl``. A cache hit and
    a fresh scan produce equal rule sets.
    """

    def __init__(
        self,
        registry: RuleRegistry,
        dispatcher: MethodDispatcher,
        introspector: Introspector,
        cache: RuleCache | None = None,
    ) -> None:
        self._registry = registry
        self._dispatcher = dispatcher
        self._introspector = introspector
        self._cache = cache

    def generate(self, class_identifier: str, ttl: float = 0) -> dict[str, HandlerRef]:
        use_cache = self._cache is not None and ttl > 0
        key = cache_key(class_identifier)

        if use_cache:
            entry = self._cache.get(key)
            if entry is not None and entry.is_fresh(ttl, self._cache.now()):
                logger.debug("Using cached rules for %s", class_identifier)
                rules = dict(entry.rules)
                self._registry.merge(rules)
                return rules

        rules = self.scan(class_identifier)

        if use_cache:
            self._cache.put(key, rules, ttl)

        self._registry.merge(rules)
        return rules

    def scan(self, class_identifier: str) -> dict[str, HandlerRef]:
        """Build the rule set for a class without touching cache or registry."""
        cls = self._dispatcher.resolve_class(class_identifier)
        methods = self._introspector.public_methods(cls)
        logger.debug("Scanned %s: %d public methods", class_identifier, len(methods))
        rules: dict[str, HandlerRef] = {}
        for method in methods:
            name = f"{class_identifier}.{method}"
            rules[name] = NamedReference(name)
        return rules
