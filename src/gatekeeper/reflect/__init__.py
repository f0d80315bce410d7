"""Reflective rule generation and named-target dispatch."""

from gatekeeper.reflect.dispatch import ClassDispatcher, split_target
from gatekeeper.reflect.generator import ReflectiveRuleGenerator
from gatekeeper.reflect.introspect import ReflectionIntrospector, is_public_name

__all__ = [
    "ClassDispatcher",
    "ReflectionIntrospector",
    "ReflectiveRuleGenerator",
    "is_public_name",
    "split_target",
]
