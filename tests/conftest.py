"""
Shared fixtures.

Every test gets a clean process-wide scheduler and mode, so a default
installed by one test never leaks into another.
"""

import pytest

from pledge.core.modes import MODE_ENV_VAR, init_lenient_mode, init_strict_mode, set_mode
from pledge.core.scheduler import DeferredQueue, reset_default_scheduler


@pytest.fixture(autouse=True)
def _isolate_globals(monkeypatch):
    monkeypatch.delenv(MODE_ENV_VAR, raising=False)
    reset_default_scheduler()
    set_mode(None)
    yield
    reset_default_scheduler()
    set_mode(None)


@pytest.fixture
def queue():
    """A fresh DeferredQueue, drained explicitly by the test."""
    return DeferredQueue()


@pytest.fixture
def lenient():
    return init_lenient_mode()


@pytest.fixture
def strict():
    return init_strict_mode()
