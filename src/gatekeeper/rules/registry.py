"""In-memory rule registry with duplicate protection."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from gatekeeper.errors import DuplicateRuleError, UndefinedRuleError
from gatekeeper.rules.handlers import HandlerRef, as_handler

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Maps rule names to handler references.

    Rules are only added, never removed. ``define`` refuses to replace an
    existing rule unless asked to; ``merge`` always replaces.
    """

    def __init__(self) -> None:
        self._rules: dict[str, HandlerRef] = {}

    def define(
        self,
        name: str,
        handler: HandlerRef | Callable[..., Any] | str,
        overwrite: bool = False,
    ) -> None:
        """Register ``handler`` under ``name``."""
        if not overwrite and name in self._rules:
            raise DuplicateRuleError(name)
        self._rules[name] = as_handler(handler)
        logger.debug("Defined rule %r (overwrite=%s)", name, overwrite)

    def merge(self, rules: Mapping[str, HandlerRef]) -> None:
        """Bulk insert, replacing any rule with the same name."""
        self._rules.update({name: as_handler(h) for name, h in rules.items()})
        logger.debug("Merged %d rules", len(rules))

    def lookup(self, name: str) -> HandlerRef:
        try:
            return self._rules[name]
        except KeyError:
            raise UndefinedRuleError(name) from None

    @property
    def rules(self) -> Mapping[str, HandlerRef]:
        """Read-only view of the current rules."""
        return MappingProxyType(self._rules)

    def names(self) -> list[str]:
        return sorted(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)
