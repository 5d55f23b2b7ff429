"""Resource registry: one descriptor per listing endpoint.

The driver is resource-agnostic; everything that differs between
registrations, events and organizations lives in a ``ResourceDescriptor``.
"""

import re
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Optional, Union

from eventsync.domains.sync.exceptions import InvalidArgumentError
from eventsync.domains.sync.mappers import (
    map_attendee,
    map_event,
    map_organization,
    map_registration,
)
from eventsync.domains.sync.types import NormalizedRow, ResourceType, SyncMode

_DIGITS = re.compile(r"^\d+$")
_EID_PARAM = re.compile(r"eid=(\d+)")
_DIGIT_RUN = re.compile(r"(\d+)")

CURRENT_USER = "me"


def extract_numeric_id(raw: Optional[str], label: str = "Event ID") -> str:
    """Extract a numeric Eventbrite ID from a bare ID or a URL.

    ``"1234567890"`` is returned as-is. For URLs the ``eid=`` query parameter
    wins; otherwise the first run of digits is used.

    Raises:
        InvalidArgumentError: If ``raw`` is empty or contains no digits
    """
    value = (raw or "").strip()
    if not value:
        raise InvalidArgumentError(
            f"{label} is empty. Please provide a valid numeric {label} or a full "
            "Eventbrite URL containing the numeric ID."
        )
    if _DIGITS.match(value):
        return value
    match = _EID_PARAM.search(value) or _DIGIT_RUN.search(value)
    if not match:
        raise InvalidArgumentError(
            f'Invalid {label}: "{value}". Ensure it is a numeric string or a valid '
            "Eventbrite URL containing the numeric ID."
        )
    return match.group(1)


def extract_user_id(raw: Optional[str], label: str = "User ID") -> str:
    """Accept ``me`` (the token's owner) or a numeric user ID."""
    value = (raw or "").strip()
    if value.lower() == CURRENT_USER:
        return CURRENT_USER
    return extract_numeric_id(value, label)


@dataclass(frozen=True)
class ResourceDescriptor:
    """Everything the driver needs to sync one kind of listing."""

    resource_type: ResourceType
    path_template: str
    items_key: str
    mapper: Callable[[Dict[str, Any]], NormalizedRow]
    extract_id: Callable[[Optional[str]], str] = extract_numeric_id
    # None defers to the driver's configured default.
    default_mode: Optional[SyncMode] = None
    description: str = ""

    def path_for(self, resource_id: str) -> str:
        """Render the listing path for an already extracted ID."""
        return self.path_template.format(resource_id=resource_id)


RESOURCES: Dict[ResourceType, ResourceDescriptor] = {
    ResourceType.REGISTRATIONS: ResourceDescriptor(
        resource_type=ResourceType.REGISTRATIONS,
        path_template="events/{resource_id}/attendees/",
        items_key="attendees",
        mapper=map_registration,
        description="Registrations for one event.",
    ),
    ResourceType.ATTENDEES: ResourceDescriptor(
        resource_type=ResourceType.ATTENDEES,
        path_template="events/{resource_id}/attendees/",
        items_key="attendees",
        mapper=map_attendee,
        default_mode=SyncMode.FULL_DRAIN,
        description="All attendees of one event, drained in a single call.",
    ),
    ResourceType.USER_EVENTS: ResourceDescriptor(
        resource_type=ResourceType.USER_EVENTS,
        path_template="users/{resource_id}/events/",
        items_key="events",
        mapper=map_event,
        extract_id=extract_user_id,
        description="Events owned by a user.",
    ),
    ResourceType.ORGANIZATION_EVENTS: ResourceDescriptor(
        resource_type=ResourceType.ORGANIZATION_EVENTS,
        path_template="organizations/{resource_id}/events/",
        items_key="events",
        mapper=map_event,
        extract_id=partial(extract_numeric_id, label="Organization ID"),
        description="Events of one organization.",
    ),
    ResourceType.ORGANIZATIONS: ResourceDescriptor(
        resource_type=ResourceType.ORGANIZATIONS,
        path_template="users/{resource_id}/organizations/",
        items_key="organizations",
        mapper=map_organization,
        extract_id=extract_user_id,
        default_mode=SyncMode.FULL_DRAIN,
        description="Organizations a user belongs to.",
    ),
}


def get_resource(resource: Union[ResourceType, str]) -> ResourceDescriptor:
    """Look up a descriptor by enum member or its string value.

    Raises:
        InvalidArgumentError: If the resource is unknown
    """
    try:
        resource_type = ResourceType(resource)
    except ValueError as e:
        known = ", ".join(r.value for r in ResourceType)
        raise InvalidArgumentError(
            f"Unknown resource '{resource}'. Expected one of: {known}"
        ) from e
    return RESOURCES[resource_type]
