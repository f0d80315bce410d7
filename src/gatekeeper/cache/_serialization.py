"""Rule-set serialization shared by the cache backends."""

from __future__ import annotations

from collections.abc import Mapping

from gatekeeper.errors import CacheSerializationError
from gatekeeper.rules.handlers import HandlerRef, NamedReference


def rules_to_targets(key: str, rules: Mapping[str, HandlerRef]) -> dict[str, str]:
    """Flatten a rule set to ``{rule_name: target}``.

    Only named references can be stored; inline handlers have no portable form.
    """
    out: dict[str, str] = {}
    for name, handler in rules.items():
        if not isinstance(handler, NamedReference):
            raise CacheSerializationError(
                key, TypeError(f"rule {name!r} is not a named reference")
            )
        out[name] = handler.target
    return out


def targets_to_rules(targets: Mapping[str, str]) -> dict[str, HandlerRef]:
    """Rebuild a rule set from ``{rule_name: target}``."""
    return {name: NamedReference(target) for name, target in targets.items()}
