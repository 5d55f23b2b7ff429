"""Sync driver: turns page fetches into one logical incremental sync step.

Pages are fetched strictly one after another. HTTP 429 is the only outcome
that is retried; each page gets a fresh retry budget. Everything else ends
the call with a typed error from ``eventsync.domains.sync.exceptions``.
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, List, Optional, Set, Union

from tenacity import AsyncRetrying, RetryCallState, RetryError, stop_after_attempt

from eventsync.core.config import Settings, settings
from eventsync.domains.sync.exceptions import (
    AuthError,
    ProtocolError,
    RateLimitExceededError,
    SourceApiError,
    SyncCancelledError,
    SyncError,
)
from eventsync.domains.sync.observer import LoggingSyncObserver
from eventsync.domains.sync.protocols import (
    PageFetcherProtocol,
    Sleeper,
    SyncObserverProtocol,
)
from eventsync.domains.sync.resources import ResourceDescriptor, get_resource
from eventsync.domains.sync.retry import retry_if_rate_limited, wait_retry_after
from eventsync.domains.sync.types import (
    FetchOutcome,
    FetchSuccess,
    HardFailure,
    MalformedResponse,
    NormalizedRow,
    ResourceType,
    SyncMode,
    SyncResult,
)

AUTH_STATUS_CODES = frozenset({401, 403})

FetcherFactory = Callable[[ResourceDescriptor], PageFetcherProtocol]


@dataclass(frozen=True)
class SyncDriverConfig:
    """Knobs of the driver; build from settings or pass explicitly in tests."""

    max_rate_limit_retries: int = 3
    default_mode: SyncMode = SyncMode.SINGLE_PAGE
    timeout_seconds: Optional[float] = None

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "SyncDriverConfig":
        """Read the sync section of the application settings."""
        source = source or settings
        return cls(
            max_rate_limit_retries=source.SYNC_MAX_RATE_LIMIT_RETRIES,
            default_mode=SyncMode(source.SYNC_DEFAULT_MODE),
            timeout_seconds=source.SYNC_TIMEOUT_SECONDS,
        )


@dataclass(frozen=True)
class _SyncScope:
    resource: str
    resource_id: str


class SyncDriver:
    """Drains (or steps through) a paginated Eventbrite listing.

    Args:
        fetcher_factory: Builds the page fetcher for a resource descriptor
        config: Retry bound, default mode and deadline
        observer: Receives structured events; defaults to logging them
        sleep: Awaitable used for backoff waits; ``asyncio.sleep`` by default
    """

    def __init__(
        self,
        fetcher_factory: FetcherFactory,
        *,
        config: Optional[SyncDriverConfig] = None,
        observer: Optional[SyncObserverProtocol] = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """Wire collaborators; nothing is fetched until ``sync`` is awaited."""
        self._fetcher_factory = fetcher_factory
        self._config = config or SyncDriverConfig.from_settings()
        self._observer = observer or LoggingSyncObserver()
        self._sleep = sleep

    @property
    def config(self) -> SyncDriverConfig:
        """Active driver configuration."""
        return self._config

    async def sync(
        self,
        resource: Union[ResourceType, str],
        resource_id: Optional[str],
        start_token: Optional[str] = None,
        *,
        mode: Optional[SyncMode] = None,
    ) -> SyncResult:
        """Run one sync step for ``resource`` starting at ``start_token``.

        Args:
            resource: Which listing to sync
            resource_id: Event/organization ID or URL; ``me`` for user-scoped resources
            start_token: Continuation token from the previous call, None to start over
            mode: Override the resource's default sync mode

        Returns:
            SyncResult with the mapped rows and the next continuation token

        Raises:
            InvalidArgumentError: Unknown resource or unusable resource ID
            ProtocolError: Malformed page or item
            RateLimitExceededError: 429 persisted through the whole retry budget
            AuthError: Credential rejected (401/403)
            SourceApiError: Any other failed request
            SyncCancelledError: The configured deadline passed
            asyncio.CancelledError: The calling task was cancelled; reported, then re-raised
        """
        descriptor = get_resource(resource)
        scope = _SyncScope(resource=descriptor.resource_type.value, resource_id=resource_id or "")
        timeout = self._config.timeout_seconds

        try:
            scope = _SyncScope(scope.resource, descriptor.extract_id(resource_id))
            run = self._run(descriptor, scope, start_token, self._resolve_mode(descriptor, mode))
            if timeout is not None:
                return await asyncio.wait_for(run, timeout=timeout)
            return await run
        except asyncio.TimeoutError as e:
            error = SyncCancelledError(f"Sync timed out after {timeout} seconds")
            self._report_failure(scope, error)
            raise error from e
        except asyncio.CancelledError as e:
            # The caller's own cancellation propagates unchanged.
            self._report_failure(scope, e)
            raise
        except SyncError as e:
            self._report_failure(scope, e)
            raise

    def _resolve_mode(self, descriptor: ResourceDescriptor, mode: Optional[SyncMode]) -> SyncMode:
        if mode is not None:
            return SyncMode(mode)
        return descriptor.default_mode or self._config.default_mode

    async def _run(
        self,
        descriptor: ResourceDescriptor,
        scope: _SyncScope,
        start_token: Optional[str],
        mode: SyncMode,
    ) -> SyncResult:
        fetcher = self._fetcher_factory(descriptor)
        path = descriptor.path_for(scope.resource_id)

        rows: List[NormalizedRow] = []
        seen_ids: Set[str] = set()
        fetched_tokens: Set[Optional[str]] = set()
        token = start_token
        continuation: Optional[str] = None
        pages = 0

        while True:
            fetched_tokens.add(token)
            page = await self._fetch_page(fetcher, path, token, scope)
            pages += 1
            self._collect(descriptor, page, rows, seen_ids, scope)
            self._observer.page_fetched(
                resource=scope.resource,
                resource_id=scope.resource_id,
                page_number=pages,
                item_count=len(page.items),
                has_more=page.has_more,
            )

            if not page.has_more:
                break
            if not page.next_token:
                self._observer.pagination_halted(
                    resource=scope.resource,
                    resource_id=scope.resource_id,
                    reason=(
                        "API indicates more items but provided no continuation token. "
                        "Halting sync to prevent infinite loop."
                    ),
                )
                break
            if page.next_token in fetched_tokens:
                self._observer.pagination_halted(
                    resource=scope.resource,
                    resource_id=scope.resource_id,
                    reason="API returned a continuation token that was already fetched.",
                )
                break
            if mode == SyncMode.SINGLE_PAGE:
                continuation = page.next_token
                break
            token = page.next_token

        result = SyncResult(rows=rows, continuation=continuation, pages_fetched=pages)
        self._observer.sync_completed(
            resource=scope.resource,
            resource_id=scope.resource_id,
            row_count=len(rows),
            page_count=pages,
            continuation=continuation,
        )
        return result

    def _collect(
        self,
        descriptor: ResourceDescriptor,
        page: FetchSuccess,
        rows: List[NormalizedRow],
        seen_ids: Set[str],
        scope: _SyncScope,
    ) -> None:
        for item in page.items:
            if not isinstance(item, dict):
                raise ProtocolError(
                    f"Invalid API response format: {descriptor.items_key} entry is not an object."
                )
            row = descriptor.mapper(item)
            if row.id in seen_ids:
                self._observer.row_skipped(
                    resource=scope.resource,
                    resource_id=scope.resource_id,
                    row_id=row.id,
                    reason="duplicate id",
                )
                continue
            seen_ids.add(row.id)
            rows.append(row)

    async def _fetch_page(
        self,
        fetcher: PageFetcherProtocol,
        path: str,
        token: Optional[str],
        scope: _SyncScope,
    ) -> FetchSuccess:
        """Fetch one page, retrying only on ``RateLimited`` with a fresh budget."""
        retrying = AsyncRetrying(
            retry=retry_if_rate_limited,
            stop=stop_after_attempt(self._config.max_rate_limit_retries + 1),
            wait=wait_retry_after,
            sleep=self._sleep,
            before_sleep=self._before_sleep(scope),
        )
        try:
            outcome = await retrying(fetcher.fetch, path, token)
        except RetryError as e:
            last = e.last_attempt.result()
            raise RateLimitExceededError(
                attempts=e.last_attempt.attempt_number,
                retry_after=getattr(last, "retry_after_seconds", None),
            ) from None
        return self._unwrap(outcome)

    def _before_sleep(self, scope: _SyncScope) -> Callable[[RetryCallState], None]:
        max_retries = self._config.max_rate_limit_retries

        def before_sleep(retry_state: RetryCallState) -> None:
            wait_time = retry_state.next_action.sleep if retry_state.next_action else 0.0
            self._observer.retry_scheduled(
                resource=scope.resource,
                resource_id=scope.resource_id,
                attempt=retry_state.attempt_number,
                max_attempts=max_retries,
                wait_seconds=wait_time,
            )

        return before_sleep

    @staticmethod
    def _unwrap(outcome: FetchOutcome) -> FetchSuccess:
        if isinstance(outcome, FetchSuccess):
            return outcome
        if isinstance(outcome, HardFailure):
            if outcome.status_code in AUTH_STATUS_CODES:
                raise AuthError(outcome.status_code, outcome.message)
            raise SourceApiError(outcome.status_code, outcome.message)
        if isinstance(outcome, MalformedResponse):
            raise ProtocolError(outcome.reason)
        raise ProtocolError(f"Unexpected fetch outcome: {type(outcome).__name__}")

    def _report_failure(self, scope: _SyncScope, error: BaseException) -> None:
        self._observer.sync_failed(
            resource=scope.resource, resource_id=scope.resource_id, error=error
        )
