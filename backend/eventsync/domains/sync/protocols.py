"""Sync domain protocols.

PageFetcherProtocol: one GET, one classified outcome, no retries.
SyncObserverProtocol: receives structured events at fixed points of a sync.
TokenProvider: hands out a bearer credential for each request.
"""

from typing import Awaitable, Callable, Optional, Protocol, runtime_checkable

from eventsync.domains.sync.types import FetchOutcome

Sleeper = Callable[[float], Awaitable[None]]


@runtime_checkable
class PageFetcherProtocol(Protocol):
    """Fetches a single page of a listing endpoint."""

    async def fetch(self, resource_path: str, token: Optional[str] = None) -> FetchOutcome:
        """Issue exactly one GET and classify the response.

        Never raises for HTTP-level failures; those come back as
        ``HardFailure``, ``RateLimited`` or ``MalformedResponse``.
        """
        ...


@runtime_checkable
class SyncObserverProtocol(Protocol):
    """Structured observability hooks for the sync driver.

    Implementations must not raise; the driver does not guard the calls.
    """

    def page_fetched(
        self,
        *,
        resource: str,
        resource_id: str,
        page_number: int,
        item_count: int,
        has_more: bool,
    ) -> None:
        """A page was fetched and mapped."""
        ...

    def retry_scheduled(
        self,
        *,
        resource: str,
        resource_id: str,
        attempt: int,
        max_attempts: int,
        wait_seconds: float,
    ) -> None:
        """A 429 was received and the same page will be refetched after a wait."""
        ...

    def pagination_halted(self, *, resource: str, resource_id: str, reason: str) -> None:
        """The API claimed more items but gave no usable token; the sync stops early."""
        ...

    def row_skipped(
        self, *, resource: str, resource_id: str, row_id: str, reason: str
    ) -> None:
        """A mapped row was dropped, e.g. its id was already emitted in this call."""
        ...

    def sync_completed(
        self,
        *,
        resource: str,
        resource_id: str,
        row_count: int,
        page_count: int,
        continuation: Optional[str],
    ) -> None:
        """A sync call returned successfully."""
        ...

    def sync_failed(self, *, resource: str, resource_id: str, error: BaseException) -> None:
        """A sync call is about to raise ``error``."""
        ...


@runtime_checkable
class TokenProvider(Protocol):
    """Supplies a valid bearer token; refresh is the provider's business."""

    async def get_valid_token(self) -> str:
        """Return a token usable for the next request."""
        ...
