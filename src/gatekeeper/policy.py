"""Policy files: declaring rules in YAML instead of code."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

if TYPE_CHECKING:
    from gatekeeper.checker import PermissionChecker

logger = logging.getLogger(__name__)


class RuleSpec(BaseModel):
    """One rule in a policy file. Exactly one of the fields must be set."""

    actions: dict[str, list[str]] | None = None
    allow: list[str] | None = None
    handler: str | None = None
    overwrite: bool = False

    @model_validator(mode="after")
    def check_one_kind(self) -> RuleSpec:
        kinds = [k for k in ("actions", "allow", "handler") if getattr(self, k) is not None]
        if len(kinds) != 1:
            raise ValueError(
                f"rule needs exactly one of actions/allow/handler, got {kinds or 'none'}"
            )
        return self


class ClassSpec(BaseModel):
    identifier: str = Field(min_length=1)
    ttl: float | None = Field(default=None, ge=0)


class Policy(BaseModel):
    rules: dict[str, RuleSpec] = Field(default_factory=dict)
    classes: list[ClassSpec] = Field(default_factory=list)


def _actions_handler(actions: dict[str, list[str]]) -> Callable[..., list[str]]:
    def handler(context: Any, role: str, *args: Any) -> list[str]:
        return list(actions.get(role, []))

    return handler


def _allow_handler(roles: list[str]) -> Callable[..., bool]:
    allowed = frozenset(roles)

    def handler(context: Any, role: str, *args: Any) -> bool:
        return role in allowed

    return handler


def read_policy(path: str | Path) -> Policy:
    """Parse and validate a policy file."""
    path = Path(path)
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return Policy(**raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    except ValidationError as e:
        raise ValueError(f"Invalid policy in {path}: {e}") from e


def apply_policy(policy: Policy, checker: PermissionChecker) -> None:
    """Define every rule and class from ``policy`` on ``checker``."""
    for name, spec in policy.rules.items():
        if spec.actions is not None:
            handler: Any = _actions_handler(spec.actions)
        elif spec.allow is not None:
            handler = _allow_handler(spec.allow)
        else:
            handler = spec.handler
        checker.define_rule(name, handler, overwrite=spec.overwrite)

    for cls_spec in policy.classes:
        checker.define_rules_from_class_methods(cls_spec.identifier, cls_spec.ttl)

    logger.info(
        "Loaded policy: %d rules, %d classes", len(policy.rules), len(policy.classes)
    )


def load_policy(path: str | Path, checker: PermissionChecker) -> Policy:
    policy = read_policy(path)
    apply_policy(policy, checker)
    return policy
