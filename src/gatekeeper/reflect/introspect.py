"""Enumeration of a class's public capability methods."""

from __future__ import annotations

import inspect

CAPABILITIES_HOOK = "exposed_capabilities"

_CONSTRUCTORS = frozenset({"__init__", "__new__", "__init_subclass__"})


def is_public_name(name: str) -> bool:
    """False for constructors and any underscore-prefixed name."""
    return bool(name) and name not in _CONSTRUCTORS and not name.startswith("_")


class ReflectionIntrospector:
    """Introspector that reads methods off the class object.

    A class can declare its capabilities explicitly with an
    ``exposed_capabilities()`` classmethod or staticmethod; the declared
    names are used instead of scanning, filtered by the same rules. A hook
    defined as a plain instance method raises TypeError.
    """

    def __init__(self) -> None:
        self.scans = 0

    def public_methods(self, cls: type) -> list[str]:
        self.scans += 1
        hook = inspect.getattr_static(cls, CAPABILITIES_HOOK, None)
        if hook is not None:
            if not isinstance(hook, (classmethod, staticmethod)):
                raise TypeError(
                    f"{cls.__name__}.{CAPABILITIES_HOOK} must be a classmethod or staticmethod"
                )
            names = list(getattr(cls, CAPABILITIES_HOOK)())
        else:
            names = [
                name
                for name, _ in inspect.getmembers(cls, predicate=inspect.isroutine)
                if name != CAPABILITIES_HOOK
            ]
        return sorted({n for n in names if is_public_name(n)})
