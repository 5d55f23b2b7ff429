"""Default sync observer: writes each sync event to the contextual logger.

Dimensions go into the record as structured fields (``sync_event``,
``resource``, ``resource_id`` and the event's own numbers); the message is
a short human-readable line.
"""

from typing import Optional

from eventsync.core.logging import ContextualLogger, logger


class LoggingSyncObserver:
    """SyncObserverProtocol implementation backed by ``ContextualLogger``."""

    def __init__(self, logger_: Optional[ContextualLogger] = None) -> None:
        """Use the given logger, or the package logger tagged with ``component=sync``."""
        self._logger = logger_ or logger.with_context(component="sync")

    def _scoped(self, resource: str, resource_id: str, event: str) -> ContextualLogger:
        return self._logger.with_context(
            sync_event=event, resource=resource, resource_id=resource_id
        )

    def page_fetched(
        self,
        *,
        resource: str,
        resource_id: str,
        page_number: int,
        item_count: int,
        has_more: bool,
    ) -> None:
        """Log at debug level; pages are frequent."""
        self._scoped(resource, resource_id, "page_fetched").debug(
            f"Fetched page {page_number} ({item_count} items, has_more={has_more})",
            extra={"page_number": page_number, "item_count": item_count, "has_more": has_more},
        )

    def retry_scheduled(
        self,
        *,
        resource: str,
        resource_id: str,
        attempt: int,
        max_attempts: int,
        wait_seconds: float,
    ) -> None:
        """Log a warning for each 429 backoff."""
        self._scoped(resource, resource_id, "retry_scheduled").warning(
            f"Eventbrite API rate limit hit. Retrying in {wait_seconds:.0f} seconds "
            f"(Retry {attempt}/{max_attempts}).",
            extra={"attempt": attempt, "max_attempts": max_attempts, "wait_seconds": wait_seconds},
        )

    def pagination_halted(self, *, resource: str, resource_id: str, reason: str) -> None:
        """Log a warning; the sync still completes."""
        self._scoped(resource, resource_id, "pagination_halted").warning(
            reason, extra={"reason": reason}
        )

    def row_skipped(self, *, resource: str, resource_id: str, row_id: str, reason: str) -> None:
        """Log a warning naming the dropped row."""
        self._scoped(resource, resource_id, "row_skipped").warning(
            f"Skipped row {row_id}: {reason}", extra={"row_id": row_id, "reason": reason}
        )

    def sync_completed(
        self,
        *,
        resource: str,
        resource_id: str,
        row_count: int,
        page_count: int,
        continuation: Optional[str],
    ) -> None:
        """Log at info level with totals."""
        self._scoped(resource, resource_id, "sync_completed").info(
            f"Sync completed: {row_count} rows from {page_count} pages "
            f"({'more pages pending' if continuation else 'drained'})",
            extra={
                "row_count": row_count,
                "page_count": page_count,
                "has_continuation": continuation is not None,
            },
        )

    def sync_failed(self, *, resource: str, resource_id: str, error: BaseException) -> None:
        """Log at error level with the error kind."""
        kind = getattr(error, "kind", None)
        self._scoped(resource, resource_id, "sync_failed").error(
            f"Sync failed: {error}",
            extra={
                "error_type": type(error).__name__,
                "error_kind": kind.value if kind is not None else None,
            },
        )
