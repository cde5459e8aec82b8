"""Shared test fixtures for the nsdebug test suite."""

import io

import pytest

from nsdebug import registry as _registry_mod
from nsdebug.registry import LoggerRegistry, init_registry


# ---------------------------------------------------------------------------
# Clock and sink
# ---------------------------------------------------------------------------
class FakeClock:
    """Millisecond clock that only moves when told to.

    Counts reads so tests can prove a disabled logger never looks at it.
    """

    def __init__(self, now=0):
        self.now = now
        self.reads = 0

    def __call__(self):
        self.reads += 1
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def clock():
    """A FakeClock frozen at the epoch (1970-01-01T00:00:00.000Z)."""
    return FakeClock()


@pytest.fixture
def messages():
    """List collecting every string handed to the sink."""
    return []


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------
@pytest.fixture
def registry(clock, messages):
    """A fresh, plain-mode registry sinking into ``messages``."""
    return LoggerRegistry(log=messages.append, clock=clock)


@pytest.fixture
def environ():
    """An isolated environment mapping for init_registry()."""
    return {}


@pytest.fixture
def default_registry(monkeypatch, environ, clock, messages):
    """Swap the module-level registry for one bound to ``environ``.

    The original singleton is restored after the test.
    """
    monkeypatch.setattr(_registry_mod, "_registry", None)
    return init_registry(environ=environ, stream=io.StringIO(),
                         log=messages.append, clock=clock)
