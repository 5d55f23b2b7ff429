"""Sync domain exceptions.

The driver raises exactly these; provider-specific errors (httpx.*) never
bubble out of a sync call. Each error carries a ``kind`` so a boundary layer
can translate the closed set without isinstance ladders.
"""

import asyncio
from enum import Enum
from typing import Optional

from eventsync.core.exceptions import EventSyncException

SERVICE_NAME = "Eventbrite"


class SyncErrorKind(str, Enum):
    """Closed set of failure kinds a sync call can surface."""

    INVALID_ARGUMENT = "invalid_argument"
    PROTOCOL_ERROR = "protocol_error"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    SOURCE_API_ERROR = "source_api_error"
    AUTH_ERROR = "auth_error"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class SyncError(EventSyncException):
    """Base exception for all sync errors."""

    kind: SyncErrorKind

    def __init__(self, message: str = "Sync failed"):
        """Initialize with message."""
        super().__init__(message)


# ---------------------------------------------------------------------------
# Caller input
# ---------------------------------------------------------------------------


class InvalidArgumentError(SyncError):
    """Empty or unparseable resource identifier, or an unknown resource."""

    kind = SyncErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str = "Invalid argument"):
        """Initialize with message."""
        super().__init__(message)


# ---------------------------------------------------------------------------
# Response validation
# ---------------------------------------------------------------------------


class ProtocolError(SyncError):
    """The Source API answered with data that breaks its own contract."""

    kind = SyncErrorKind.PROTOCOL_ERROR

    def __init__(self, message: str = "Invalid API response format."):
        """Initialize with message."""
        super().__init__(message)


# ---------------------------------------------------------------------------
# Provider communication
# ---------------------------------------------------------------------------


class RateLimitExceededError(SyncError):
    """HTTP 429 persisted after the whole retry budget was spent."""

    kind = SyncErrorKind.RATE_LIMIT_EXCEEDED

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        attempts: int = 0,
        retry_after: Optional[float] = None,
    ):
        """Initialize with message, the number of attempts made, and the last hint."""
        if message is None:
            message = (
                f"{SERVICE_NAME} API rate limit exceeded after multiple retries. "
                "Please try again later."
            )
        self.attempts = attempts
        self.retry_after = retry_after
        super().__init__(message)


class SourceApiError(SyncError):
    """Non-success response (other than 429) or a transport failure."""

    kind = SyncErrorKind.SOURCE_API_ERROR

    def __init__(self, status_code: int, message: Optional[str] = None):
        """Initialize with the HTTP status code (0 for transport failures) and message."""
        if message is None:
            message = f"{SERVICE_NAME} API error {status_code}"
        self.status_code = status_code
        self.service_name = SERVICE_NAME
        super().__init__(message)


class AuthError(SourceApiError):
    """The credential was rejected (HTTP 401/403)."""

    kind = SyncErrorKind.AUTH_ERROR


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


class SyncCancelledError(asyncio.CancelledError):
    """The sync call hit its configured deadline; partial rows are discarded.

    Subclasses ``asyncio.CancelledError`` so an ``except Exception`` in the
    caller cannot swallow a cancellation.
    """

    kind = SyncErrorKind.CANCELLED

    def __init__(self, message: str = "Sync cancelled"):
        """Initialize with message."""
        self.message = message
        super().__init__(message)
