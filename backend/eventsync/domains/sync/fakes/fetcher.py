"""Fake page fetcher for testing.

Replays scripted outcomes in order and records every call.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from eventsync.domains.sync.protocols import PageFetcherProtocol
from eventsync.domains.sync.types import FetchOutcome


class FakePageFetcher(PageFetcherProtocol):
    """Test implementation of PageFetcherProtocol.

    Usage:
        fetcher = FakePageFetcher([RateLimited(2), FetchSuccess(items=[...], has_more=False)])
        driver = SyncDriver(lambda _descriptor: fetcher, ...)

        assert fetcher.calls == [("events/1/attendees/", None), ("events/1/attendees/", None)]
    """

    def __init__(self, outcomes: Iterable[FetchOutcome] = ()) -> None:
        """Initialize with the outcomes to return, one per call."""
        self._outcomes: List[FetchOutcome] = list(outcomes)
        self.calls: List[Tuple[str, Optional[str]]] = []

    def enqueue(self, *outcomes: FetchOutcome) -> None:
        """Append more scripted outcomes."""
        self._outcomes.extend(outcomes)

    @property
    def call_count(self) -> int:
        """Number of fetches issued so far."""
        return len(self.calls)

    @property
    def tokens(self) -> List[Optional[str]]:
        """Continuation tokens passed to each fetch, in order."""
        return [token for _, token in self.calls]

    async def fetch(self, resource_path: str, token: Optional[str] = None) -> FetchOutcome:
        """Record the call and return the next scripted outcome."""
        self.calls.append((resource_path, token))
        if not self._outcomes:
            raise AssertionError(f"Unexpected fetch #{len(self.calls)} for {resource_path}")
        return self._outcomes.pop(0)
