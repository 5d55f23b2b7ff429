"""Root conftest for pytest configuration and shared fixtures.

This conftest is loaded before both testpaths (tests/ and eventsync/domains/),
making its fixtures available to centralized tests AND colocated domain tests.
"""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables: must be set before any eventsync module import
# Uses setdefault so real env vars (CI, e2e) are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("LOG_FORMAT", "text")


# ---------------------------------------------------------------------------
# Shared fake fixtures: individual protocol fakes
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_observer():
    """Fake SyncObserver that records emitted events."""
    from eventsync.domains.sync.fakes.observer import FakeSyncObserver

    return FakeSyncObserver()


@pytest.fixture
def fake_sleeper():
    """Fake sleeper that records backoff waits without waiting."""
    from eventsync.domains.sync.fakes.sleeper import FakeSleeper

    return FakeSleeper()
