"""Rule definitions, registry, and handler resolution."""

from gatekeeper.rules.handlers import HandlerRef, Inline, NamedReference, as_handler
from gatekeeper.rules.registry import RuleRegistry
from gatekeeper.rules.resolver import HandlerResolver

__all__ = [
    "HandlerRef",
    "HandlerResolver",
    "Inline",
    "NamedReference",
    "RuleRegistry",
    "as_handler",
]
