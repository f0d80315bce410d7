"""Named-target dispatch interface."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MethodDispatcher(Protocol):
    """Resolves ``"<class_identifier>.<method>"`` targets and calls them."""

    def resolve_class(self, class_identifier: str) -> type: ...

    def call(self, target: str, args: Sequence[Any]) -> Any: ...
