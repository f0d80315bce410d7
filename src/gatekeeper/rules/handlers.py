"""Handler references: the two shapes a rule's decision function can take."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Inline:
    """A directly invocable handler: ``func(context, role, *extra_args)``."""

    func: Callable[..., Any]

    def __post_init__(self) -> None:
        if not callable(self.func):
            raise TypeError(f"Inline handler must be callable, got {self.func!r}")


@dataclass(frozen=True)
class NamedReference:
    """A handler named by a ``"<class_identifier>.<method>"`` target string.

    The target is resolved and invoked by a MethodDispatcher at check time.
    """

    target: str

    def __post_init__(self) -> None:
        if not self.target or "." not in self.target:
            raise ValueError(
                f"Named reference must look like '<class>.<method>', got {self.target!r}"
            )

    @property
    def class_identifier(self) -> str:
        return self.target.rsplit(".", 1)[0]

    @property
    def method_name(self) -> str:
        return self.target.rsplit(".", 1)[1]


HandlerRef = Union[Inline, NamedReference]


def as_handler(value: HandlerRef | Callable[..., Any] | str) -> HandlerRef:
    """Coerce a bare callable or target string into a HandlerRef."""
    if isinstance(value, (Inline, NamedReference)):
        return value
    if isinstance(value, str):
        return NamedReference(value)
    if callable(value):
        return Inline(value)
    raise TypeError(f"Expected a callable or a '<class>.<method>' string, got {value!r}")
