"""Capability enumeration interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Introspector(Protocol):
    """Lists the publicly exposed capability methods of a class.

    Constructors and reserved/internal names are never returned.
    """

    def public_methods(self, cls: type) -> list[str]: ...
