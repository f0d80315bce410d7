"""Tests for gatekeeper.checker — parsing, result interpretation, roles, checks."""

from __future__ import annotations

import sqlite3
from unittest.mock import patch

import pytest

from gatekeeper.cache.memory import MemoryCacheBackend
from gatekeeper.cache.sqlite import SQLiteCacheBackend
from gatekeeper.checker import PermissionChecker, interpret_result, parse_permission
from gatekeeper.config.models import CacheConfig, GatekeeperConfig, PolicyConfig
from gatekeeper.errors import MalformedPermissionError, UndefinedRuleError


# -- parse_permission ---------------------------------------------------------


@pytest.mark.parametrize(
    "permission, expected",
    [
        ("video", ("video", "")),
        ("video.create", ("video", "create")),
        ("video.", ("video", "")),
        ("a.b.c", ("a", "b")),
    ],
)
def test_parse_permission(permission, expected):
    assert parse_permission(permission) == expected


def test_parse_permission_strict_rejects_extra_dots():
    with pytest.raises(MalformedPermissionError) as exc_info:
        parse_permission("a.b.c", strict=True)
    assert exc_info.value.permission == "a.b.c"


def test_parse_permission_strict_allows_single_dot():
    assert parse_permission("video.read", strict=True) == ("video", "read")


# -- interpret_result ---------------------------------------------------------


class TestInterpretResult:
    def test_bool_ignores_action(self):
        assert interpret_result(True, "anything") is True
        assert interpret_result(False, "") is False

    def test_list_membership(self):
        assert interpret_result(["read", "create"], "read") is True
        assert interpret_result(["read", "create"], "delete") is False

    def test_tuple_membership(self):
        assert interpret_result(("read",), "read") is True

    def test_case_sensitive(self):
        assert interpret_result(["Read"], "read") is False

    def test_strict_equality(self):
        assert interpret_result([1, True], "1") is False

    def test_empty_action_against_list(self):
        assert interpret_result(["read"], "") is False
        assert interpret_result([""], "") is True

    @pytest.mark.parametrize(
        "result", [None, 1, "read", {"read": True}, {"read"}, frozenset({"read"}), object()]
    )
    def test_other_shapes_deny(self, result):
        assert interpret_result(result, "read") is False


# -- roles --------------------------------------------------------------------


class TestRoles:
    def test_initial_role(self):
        checker = PermissionChecker(role="viewer")
        assert checker.is_role("viewer")
        assert not checker.is_role("admin")

    def test_default_role_empty(self):
        assert PermissionChecker().current_role == ""

    def test_set_current_role(self, checker):
        checker.set_current_role("admin")
        assert checker.is_role("admin")
        assert not checker.is_role("editor")

    def test_role_is_strict(self, checker):
        assert not checker.is_role("Editor")


# -- can / has ----------------------------------------------------------------


class TestCan:
    def test_list_result(self, checker):
        checker.define_rule("video", lambda ctx, role: ["read", "create"])
        assert checker.can("video.read") is True
        assert checker.can("video.delete") is False

    def test_bool_short_circuits_action(self, checker):
        checker.define_rule("admin", lambda ctx, role: True)
        assert checker.can("admin.anything") is True
        assert checker.can("admin") is True

    def test_undefined_rule_raises(self, checker):
        with pytest.raises(UndefinedRuleError) as exc_info:
            checker.can("x")
        assert exc_info.value.name == "x"

    def test_undefined_base_with_action_raises(self, checker):
        with pytest.raises(UndefinedRuleError):
            checker.can("x.read")

    def test_handler_gets_context_role_and_args(self, checker):
        calls = []

        def handler(ctx, role, *args):
            calls.append((ctx, role, args))
            return True

        checker.define_rule("post", handler)
        checker.can("post.edit", 42, "draft")
        assert calls == [({"app": "test"}, "editor", (42, "draft"))]

    def test_role_change_takes_effect(self, checker):
        checker.define_rule("video", lambda ctx, role: ["delete"] if role == "admin" else ["read"])
        assert checker.can("video.delete") is False
        checker.set_current_role("admin")
        assert checker.can("video.delete") is True

    def test_unrecognized_result_denies(self, checker):
        checker.define_rule("weird", lambda ctx, role: "read")
        assert checker.can("weird.read") is False

    def test_multi_dot_truncates(self, checker):
        checker.define_rule("video", lambda ctx, role: ["read"])
        assert checker.can("video.read.extra") is True

    def test_strict_mode_rejects_multi_dot(self):
        checker = PermissionChecker(strict_permissions=True)
        checker.define_rule("video", lambda ctx, role: ["read"])
        with pytest.raises(MalformedPermissionError):
            checker.can("video.read.extra")

    def test_repeated_calls_are_stable(self, checker):
        checker.define_rule("video", lambda ctx, role: ["read"])
        results = {checker.can("video.read") for _ in range(5)}
        assert results == {True}

    def test_has_is_can_without_args(self, checker):
        checker.define_rule("video", lambda ctx, role, *args: ["read"] if not args else [])
        assert checker.has("video.read") is True
        assert checker.has("video.delete") is False

    def test_duplicate_rule(self, checker):
        from gatekeeper.errors import DuplicateRuleError

        checker.define_rule("video", lambda ctx, role: True)
        with pytest.raises(DuplicateRuleError):
            checker.define_rule("video", lambda ctx, role: False)
        checker.define_rule("video", lambda ctx, role: False, overwrite=True)
        assert checker.can("video") is False

    def test_named_reference_rule(self, checker):
        checker.define_rule("upload", "Video.create")
        assert checker.can("upload") is True
        checker.set_current_role("viewer")
        assert checker.can("upload") is False


# -- class-method rules -------------------------------------------------------


class TestClassMethodRules:
    def test_generated_rule_names(self, checker):
        rules = checker.define_rules_from_class_methods("Video")
        assert set(rules) == {"Video.create", "Video.delete", "Video.owns"}

    def test_generated_rule_checked_by_full_name(self, checker):
        checker.define_rules_from_class_methods("Video")
        assert checker.can("Video.create") is True
        assert checker.can("Video.delete") is False

    def test_generated_rule_extra_args(self, checker):
        checker.define_rules_from_class_methods("Video")
        assert checker.can("Video.owns", "alice", "alice") is True
        assert checker.can("Video.owns", "alice", "bob") is False

    def test_list_result_from_method_allows_listed_action(self, checker):
        checker.define_rules_from_class_methods("Declared")
        checker.set_current_role("admin")
        assert checker.can("Declared.publish.draft") is True
        assert checker.can("Declared.publish.live") is True

    def test_list_result_from_method_denies_unlisted_action(self, checker):
        checker.define_rules_from_class_methods("Declared")
        # editor only gets "draft"
        assert checker.can("Declared.publish.live") is False
        assert checker.can("Declared.publish.delete") is False

    def test_method_rule_without_action(self, checker):
        checker.define_rules_from_class_methods("Declared")
        assert checker.can("Declared.publish") is False

    def test_method_rule_through_alias(self, checker):
        checker.define_rule("publish", "Declared.publish")
        assert checker.can("publish.draft") is True
        assert checker.can("publish.live") is False

    def test_unknown_method_still_undefined(self, checker):
        checker.define_rules_from_class_methods("Declared")
        with pytest.raises(UndefinedRuleError) as exc_info:
            checker.can("Declared.unpublish.draft")
        assert exc_info.value.name == "Declared"

    def test_ttl_skips_rescan(self, checker, introspector, clock):
        first = checker.define_rules_from_class_methods("Video", ttl=60)
        clock.advance(30)
        second = checker.define_rules_from_class_methods("Video", ttl=60)
        assert introspector.scans == 1
        assert first == second
        clock.advance(31)
        checker.define_rules_from_class_methods("Video", ttl=60)
        assert introspector.scans == 2

    def test_role_not_part_of_cache(self, checker, introspector):
        checker.define_rules_from_class_methods("Video", ttl=60)
        checker.set_current_role("admin")
        checker.define_rules_from_class_methods("Video", ttl=60)
        assert introspector.scans == 1
        assert checker.can("Video.delete") is True

    def test_no_backend_always_scans(self, dispatcher, introspector):
        checker = PermissionChecker(dispatcher=dispatcher, introspector=introspector)
        checker.define_rules_from_class_methods("Video", ttl=60)
        checker.define_rules_from_class_methods("Video", ttl=60)
        assert introspector.scans == 2

    def test_default_ttl(self, dispatcher, introspector):
        checker = PermissionChecker(
            dispatcher=dispatcher,
            introspector=introspector,
            cache_backend=MemoryCacheBackend(),
            default_ttl=300,
        )
        checker.define_rules_from_class_methods("Video")
        checker.define_rules_from_class_methods("Video")
        assert introspector.scans == 1


# -- from_config --------------------------------------------------------------


class TestFromConfig:
    def test_defaults(self, sample_config):
        checker = PermissionChecker.from_config(sample_config)
        assert checker.current_role == ""
        assert isinstance(checker.cache.backend, MemoryCacheBackend)

    def test_no_cache(self):
        cfg = GatekeeperConfig(cache=CacheConfig(backend="none"))
        assert PermissionChecker.from_config(cfg).cache is None

    def test_sqlite_cache(self, tmp_path):
        cfg = GatekeeperConfig(
            role="admin",
            cache=CacheConfig(backend="sqlite", path=str(tmp_path / "c.db")),
        )
        checker = PermissionChecker.from_config(cfg, context="ctx")
        assert isinstance(checker.cache.backend, SQLiteCacheBackend)
        assert checker.is_role("admin")
        assert checker.context == "ctx"

    def test_policy_loaded(self, tmp_path):
        policy = tmp_path / "policy.yaml"
        policy.write_text("rules:\n  dashboard:\n    allow: [admin]\n")
        cfg = GatekeeperConfig(role="admin", policy=PolicyConfig(path=str(policy)))
        checker = PermissionChecker.from_config(cfg)
        assert checker.can("dashboard") is True

    def test_strict_flag(self):
        cfg = GatekeeperConfig(policy=PolicyConfig(strict_permissions=True))
        checker = PermissionChecker.from_config(cfg)
        checker.define_rule("a", lambda ctx, role: True)
        with pytest.raises(MalformedPermissionError):
            checker.can("a.b.c")


# -- close ----------------------------------------------------------------------


class TestClose:
    def test_close_releases_sqlite_connection(self, tmp_path):
        cfg = GatekeeperConfig(cache=CacheConfig(backend="sqlite", path=str(tmp_path / "c.db")))
        checker = PermissionChecker.from_config(cfg)
        backend = checker.cache.backend
        checker.close()
        with pytest.raises(sqlite3.ProgrammingError):
            backend.exists("k")

    def test_context_manager_closes(self, tmp_path):
        cfg = GatekeeperConfig(cache=CacheConfig(backend="sqlite", path=str(tmp_path / "c.db")))
        with PermissionChecker.from_config(cfg) as checker:
            backend = checker.cache.backend
            checker.define_rule("a", lambda ctx, role: True)
            assert checker.can("a") is True
        with pytest.raises(sqlite3.ProgrammingError):
            backend.exists("k")

    def test_close_without_cache_or_close_method(self, sample_config):
        PermissionChecker().close()
        PermissionChecker.from_config(sample_config).close()

    def test_failed_policy_closes_backend(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("rules:\n  video: {}\n")
        cfg = GatekeeperConfig(
            cache=CacheConfig(backend="sqlite", path=str(tmp_path / "c.db")),
            policy=PolicyConfig(path=str(bad)),
        )
        with patch.object(PermissionChecker, "close", autospec=True) as close:
            with pytest.raises(ValueError):
                PermissionChecker.from_config(cfg)
        close.assert_called_once()
