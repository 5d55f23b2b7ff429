"""Row mappers: raw Eventbrite items to normalized rows.

Pure functions, no IO. The only failure path is ``ProtocolError`` for an
item without an id or with an unparseable registration timestamp.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from eventsync.domains.sync.exceptions import ProtocolError
from eventsync.domains.sync.types import (
    UNNAMED_ATTENDEE,
    UNNAMED_EVENT,
    UNNAMED_ORGANIZATION,
    AttendeeRow,
    EventRow,
    OrganizationRow,
    RegistrationRow,
)


def _require_id(item: Mapping[str, Any], kind: str) -> str:
    value = item.get("id")
    if value is None or str(value).strip() == "":
        raise ProtocolError(f"Invalid API response format: {kind} without 'id'.")
    return str(value)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, dict) else {}


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def full_name(first: Any, last: Any) -> str:
    """Join first and last name with one space, skipping blanks."""
    parts = [str(p).strip() for p in (first, last) if p is not None and str(p).strip()]
    return " ".join(parts).strip()


def normalize_timestamp(value: Any) -> str:
    """Re-emit an ISO-8601 timestamp as UTC with milliseconds and a ``Z`` suffix.

    Naive timestamps are taken as UTC. ``2024-03-01T10:00:00-05:00`` becomes
    ``2024-03-01T15:00:00.000Z``.

    Raises:
        ProtocolError: If ``value`` is missing or not a parseable timestamp
    """
    if not isinstance(value, str) or not value.strip():
        raise ProtocolError(f"Invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ProtocolError(f"Invalid timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    utc = parsed.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def map_registration(item: Dict[str, Any]) -> RegistrationRow:
    """Map an attendee record to a registration row."""
    row_id = _require_id(item, "attendee")
    profile = _as_mapping(item.get("profile"))
    name = full_name(profile.get("first_name"), profile.get("last_name"))
    return RegistrationRow(
        id=row_id,
        name=name or UNNAMED_ATTENDEE,
        email=_optional_str(profile.get("email")),
        event_id=_optional_str(item.get("event_id")),
        status=_optional_str(item.get("status")),
        registered_at=normalize_timestamp(item.get("created")),
        ticket_class=_optional_str(item.get("ticket_class_name")),
    )


def map_attendee(item: Dict[str, Any]) -> AttendeeRow:
    """Map an attendee record to a lightweight attendee row."""
    row_id = _require_id(item, "attendee")
    profile = _as_mapping(item.get("profile"))
    name = str(profile.get("name") or "").strip()
    if not name:
        name = full_name(profile.get("first_name"), profile.get("last_name"))
    return AttendeeRow(
        id=row_id,
        name=name or UNNAMED_ATTENDEE,
        email=_optional_str(profile.get("email")),
        ticket_class=_optional_str(item.get("ticket_class_name")),
    )


def map_event(item: Dict[str, Any]) -> EventRow:
    """Map an event record; start and end are copied verbatim from their ``utc`` fields."""
    row_id = _require_id(item, "event")
    title = str(_as_mapping(item.get("name")).get("text") or "").strip()
    return EventRow(
        id=row_id,
        name=title or UNNAMED_EVENT,
        url=_optional_str(item.get("url")),
        start_time=_optional_str(_as_mapping(item.get("start")).get("utc")),
        end_time=_optional_str(_as_mapping(item.get("end")).get("utc")),
    )


def map_organization(item: Dict[str, Any]) -> OrganizationRow:
    """Map an organization record."""
    row_id = _require_id(item, "organization")
    name = str(item.get("name") or "").strip()
    return OrganizationRow(id=row_id, name=name or UNNAMED_ORGANIZATION)
