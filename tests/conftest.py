"""Shared test fixtures for gatekeeper."""

import pytest

from gatekeeper.cache.memory import MemoryCacheBackend
from gatekeeper.checker import PermissionChecker
from gatekeeper.config.models import GatekeeperConfig
from gatekeeper.reflect.dispatch import ClassDispatcher
from gatekeeper.reflect.introspect import ReflectionIntrospector


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class VideoPermissions:
    """Capability class: every public method is a rule."""

    def __init__(self):
        self.created = True

    def create(self, context, role, *args):
        return role in ("admin", "editor")

    def delete(self, context, role, *args):
        return role == "admin"

    def owns(self, context, role, owner=None, user=None):
        return owner is not None and owner == user

    def _helper(self):
        return True

    def __repr__(self):
        return "VideoPermissions()"


class DeclaredPermissions:
    """Capability class that lists its own capabilities."""

    @classmethod
    def exposed_capabilities(cls):
        return ["publish", "__init__", "_internal"]

    def publish(self, context, role):
        return ["draft", "live"] if role == "admin" else ["draft"]

    def archive(self, context, role):
        return True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def dispatcher():
    d = ClassDispatcher()
    d.register(VideoPermissions, "Video")
    d.register(DeclaredPermissions, "Declared")
    return d


@pytest.fixture
def introspector():
    return ReflectionIntrospector()


@pytest.fixture
def backend(clock):
    return MemoryCacheBackend(clock=clock)


@pytest.fixture
def checker(dispatcher, introspector, backend, clock):
    return PermissionChecker(
        role="editor",
        context={"app": "test"},
        dispatcher=dispatcher,
        introspector=introspector,
        cache_backend=backend,
        clock=clock,
    )


@pytest.fixture
def sample_config():
    return GatekeeperConfig()


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch):
    monkeypatch.delenv("GATEKEEPER_CONFIG", raising=False)
