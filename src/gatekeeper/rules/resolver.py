"""Uniform invocation of inline and named-reference handlers."""

from __future__ import annotations

from typing import Any

from gatekeeper.interfaces.dispatch import MethodDispatcher
from gatekeeper.rules.handlers import HandlerRef, Inline, NamedReference


class HandlerResolver:
    """Calls a handler with ``(context, role, *extra_args)`` whatever its shape.

    Inline handlers are called directly; named references go through the
    dispatcher with the same argument list. Exceptions raised by the
    handler propagate unchanged.
    """

    def __init__(self, dispatcher: MethodDispatcher) -> None:
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> MethodDispatcher:
        return self._dispatcher

    def invoke(self, handler: HandlerRef, context: Any, role: str, *extra_args: Any) -> Any:
        args = (context, role, *extra_args)
        if isinstance(handler, Inline):
            return handler.func(*args)
        if isinstance(handler, NamedReference):
            return self._dispatcher.call(handler.target, args)
        raise TypeError(f"Unsupported handler reference: {handler!r}")
