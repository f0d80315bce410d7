"""Resolution of class identifiers and named-reference targets."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Sequence
from typing import Any

from gatekeeper.errors import UnknownTargetError

logger = logging.getLogger(__name__)


def split_target(target: str) -> tuple[str, str]:
    """``"pkg.mod:Videos.create"`` -> ``("pkg.mod:Videos", "create")``."""
    class_identifier, sep, method = target.rpartition(".")
    if not sep or not class_identifier or not method:
        raise UnknownTargetError(target, "expected '<class>.<method>'")
    return class_identifier, method


class ClassDispatcher:
    """MethodDispatcher over registered classes and ``module:Class`` paths.

    Each call builds a fresh instance with ``factory(cls)`` (default: the
    no-argument constructor) and invokes the named method on it.
    """

    def __init__(self, factory: Callable[[type], Any] | None = None) -> None:
        self._classes: dict[str, type] = {}
        self._factory = factory or (lambda cls: cls())

    def register(self, cls: type, name: str | None = None) -> str:
        """Make ``cls`` resolvable under ``name`` (default: its ``__name__``)."""
        identifier = name or cls.__name__
        self._classes[identifier] = cls
        return identifier

    def resolve_class(self, class_identifier: str) -> type:
        cls = self._classes.get(class_identifier)
        if cls is not None:
            return cls

        module_path, sep, qualname = class_identifier.partition(":")
        if not sep:
            raise UnknownTargetError(class_identifier, "not registered")
        try:
            obj: Any = importlib.import_module(module_path)
            for attr in qualname.split("."):
                obj = getattr(obj, attr)
        except (ImportError, AttributeError) as e:
            raise UnknownTargetError(class_identifier, str(e)) from e
        if not isinstance(obj, type):
            raise UnknownTargetError(class_identifier, "not a class")
        self._classes[class_identifier] = obj
        return obj

    def call(self, target: str, args: Sequence[Any]) -> Any:
        class_identifier, method_name = split_target(target)
        cls = self.resolve_class(class_identifier)
        method = getattr(self._factory(cls), method_name, None)
        if not callable(method):
            raise UnknownTargetError(target, f"no method {method_name!r}")
        logger.debug("Dispatching %s", target)
        return method(*args)
