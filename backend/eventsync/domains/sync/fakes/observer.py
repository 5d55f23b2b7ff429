"""Fake sync observer for testing.

Records every event as ``(name, fields)`` for assertions.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from eventsync.domains.sync.protocols import SyncObserverProtocol


class FakeSyncObserver(SyncObserverProtocol):
    """Test implementation of SyncObserverProtocol.

    Usage:
        observer = FakeSyncObserver()
        await driver.sync(...)

        assert observer.names() == ["page_fetched", "sync_completed"]
    """

    def __init__(self) -> None:
        """Initialize empty recording state."""
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def names(self) -> List[str]:
        """Event names in emission order."""
        return [name for name, _ in self.events]

    def of(self, name: str) -> List[Dict[str, Any]]:
        """Fields of every event called ``name``."""
        return [fields for event, fields in self.events if event == name]

    def page_fetched(
        self,
        *,
        resource: str,
        resource_id: str,
        page_number: int,
        item_count: int,
        has_more: bool,
    ) -> None:
        """Record a fetched page."""
        self.events.append(
            (
                "page_fetched",
                {
                    "resource": resource,
                    "resource_id": resource_id,
                    "page_number": page_number,
                    "item_count": item_count,
                    "has_more": has_more,
                },
            )
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
        """Record a scheduled retry."""
        self.events.append(
            (
                "retry_scheduled",
                {
                    "resource": resource,
                    "resource_id": resource_id,
                    "attempt": attempt,
                    "max_attempts": max_attempts,
                    "wait_seconds": wait_seconds,
                },
            )
        )

    def pagination_halted(self, *, resource: str, resource_id: str, reason: str) -> None:
        """Record an early halt."""
        self.events.append(
            (
                "pagination_halted",
                {"resource": resource, "resource_id": resource_id, "reason": reason},
            )
        )

    def row_skipped(self, *, resource: str, resource_id: str, row_id: str, reason: str) -> None:
        """Record a dropped row."""
        self.events.append(
            (
                "row_skipped",
                {
                    "resource": resource,
                    "resource_id": resource_id,
                    "row_id": row_id,
                    "reason": reason,
                },
            )
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
        """Record a completed sync."""
        self.events.append(
            (
                "sync_completed",
                {
                    "resource": resource,
                    "resource_id": resource_id,
                    "row_count": row_count,
                    "page_count": page_count,
                    "continuation": continuation,
                },
            )
        )

    def sync_failed(self, *, resource: str, resource_id: str, error: BaseException) -> None:
        """Record a failed sync."""
        self.events.append(
            ("sync_failed", {"resource": resource, "resource_id": resource_id, "error": error})
        )

