"""Sync domain types.

Fetch outcomes, sync results and the normalized row models. No IO here;
everything is plain data.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNNAMED_ATTENDEE = "Unnamed Attendee"
UNNAMED_EVENT = "Unnamed Event"
UNNAMED_ORGANIZATION = "Unnamed Organization"


class SyncMode(str, Enum):
    """How far one sync call walks the pagination chain."""

    FULL_DRAIN = "full_drain"
    SINGLE_PAGE = "single_page"


class ResourceType(str, Enum):
    """Listing endpoints the driver knows how to sync."""

    REGISTRATIONS = "registrations"
    ATTENDEES = "attendees"
    USER_EVENTS = "user_events"
    ORGANIZATION_EVENTS = "organization_events"
    ORGANIZATIONS = "organizations"


# ---------------------------------------------------------------------------
# Fetch outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FetchSuccess:
    """One page of raw items plus its pagination metadata."""

    items: List[Dict[str, Any]]
    has_more: bool
    next_token: Optional[str] = None


@dataclass(frozen=True)
class RateLimited:
    """HTTP 429 with the number of seconds to wait before refetching."""

    retry_after_seconds: int


@dataclass(frozen=True)
class HardFailure:
    """Any non-success status other than 429, or a transport failure (status 0)."""

    status_code: int
    message: str


@dataclass(frozen=True)
class MalformedResponse:
    """A success status whose body is not a valid page."""

    reason: str


FetchOutcome = Union[FetchSuccess, RateLimited, HardFailure, MalformedResponse]


# ---------------------------------------------------------------------------
# Normalized rows
# ---------------------------------------------------------------------------


class NormalizedRow(BaseModel):
    """Base for all rows: a stable ``id`` and a display ``name``.

    Python attributes are snake_case; ``model_dump(by_alias=True)`` emits the
    camelCase names the sync tables expose.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(..., description="Stable identifier, unique within one resource.")
    name: str = Field(..., description="Human-readable display name.")


class RegistrationRow(NormalizedRow):
    """An attendee registration for one event."""

    email: Optional[str] = Field(None, description="Attendee email.")
    event_id: Optional[str] = Field(None, description="Eventbrite event ID.")
    status: Optional[str] = Field(None, description="Registration status (Attending, ...).")
    registered_at: str = Field(..., description="Registration time, UTC ISO-8601.")
    ticket_class: Optional[str] = Field(None, description="Ticket class name.")


class EventRow(NormalizedRow):
    """An Eventbrite event."""

    url: Optional[str] = Field(None, description="Public event URL.")
    start_time: Optional[str] = Field(None, description="Start time, UTC, as sent by the API.")
    end_time: Optional[str] = Field(None, description="End time, UTC, as sent by the API.")


class AttendeeRow(NormalizedRow):
    """A lightweight attendee listing entry."""

    email: Optional[str] = Field(None, description="Attendee email.")
    ticket_class: Optional[str] = Field(None, description="Ticket class name.")


class OrganizationRow(NormalizedRow):
    """An organization the current user belongs to."""


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class SyncResult:
    """Rows gathered by one sync call and where to resume.

    ``continuation`` is set only when more pages exist; pass it back
    unmodified on the next call.
    """

    rows: List[NormalizedRow] = field(default_factory=list)
    continuation: Optional[str] = None
    pages_fetched: int = 0

    @property
    def is_drained(self) -> bool:
        """True when the resource has no further pages."""
        return self.continuation is None

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for a host boundary: camelCase rows plus the continuation."""
        return {
            "rows": [row.model_dump(by_alias=True) for row in self.rows],
            "continuation": self.continuation,
        }
