"""Collaborator interfaces for cache backends, dispatch, and introspection."""

from gatekeeper.interfaces.cache import CacheBackend
from gatekeeper.interfaces.dispatch import MethodDispatcher
from gatekeeper.interfaces.introspect import Introspector

__all__ = [
    "CacheBackend",
    "Introspector",
    "MethodDispatcher",
]
