"""Fake sleeper for testing backoff without waiting."""

from typing import List


class FakeSleeper:
    """Async callable that records requested waits and returns immediately."""

    def __init__(self) -> None:
        """Initialize with no recorded waits."""
        self.waits: List[float] = []

    async def __call__(self, seconds: float) -> None:
        """Record the wait."""
        self.waits.append(seconds)
