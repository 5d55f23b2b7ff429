"""Fake implementations for sync domain testing."""

from eventsync.domains.sync.fakes.fetcher import FakePageFetcher
from eventsync.domains.sync.fakes.observer import FakeSyncObserver
from eventsync.domains.sync.fakes.sleeper import FakeSleeper

__all__ = ["FakePageFetcher", "FakeSleeper", "FakeSyncObserver"]
