"""Unit tests for the resource registry and ID extraction."""

from dataclasses import dataclass
from typing import Optional

import pytest

from eventsync.domains.sync.exceptions import InvalidArgumentError
from eventsync.domains.sync.mappers import map_attendee, map_registration
from eventsync.domains.sync.resources import (
    RESOURCES,
    extract_numeric_id,
    extract_user_id,
    get_resource,
)
from eventsync.domains.sync.types import ResourceType, SyncMode


# ---------------------------------------------------------------------------
# extract_numeric_id()
# ---------------------------------------------------------------------------


@dataclass
class ExtractCase:
    desc: str
    raw: Optional[str]
    expect: Optional[str] = None  # None → expect InvalidArgumentError
    match: str = ""


EXTRACT_CASES = [
    ExtractCase("bare id", "1234567890", "1234567890"),
    ExtractCase("padded id", "  42  ", "42"),
    ExtractCase(
        "event page url",
        "https://www.eventbrite.com/e/spring-meetup-tickets-987654321",
        "987654321",
    ),
    ExtractCase(
        "eid query param wins",
        "https://www.eventbrite.com/myevent/2024-edition?eid=555&ref=abc",
        "555",
    ),
    ExtractCase("bare eid query", "https://x/?eid=1234567890", "1234567890"),
    ExtractCase("empty", "", match="is empty"),
    ExtractCase("whitespace", "   ", match="is empty"),
    ExtractCase("none", None, match="is empty"),
    ExtractCase("no digits", "spring-meetup", match='Invalid Event ID: "spring-meetup"'),
]


@pytest.mark.parametrize("case", EXTRACT_CASES, ids=lambda c: c.desc)
def test_extract_numeric_id(case: ExtractCase):
    if case.expect is None:
        with pytest.raises(InvalidArgumentError, match=case.match):
            extract_numeric_id(case.raw)
    else:
        assert extract_numeric_id(case.raw) == case.expect


def test_extract_numeric_id_label_in_message():
    with pytest.raises(InvalidArgumentError, match="Organization ID is empty"):
        extract_numeric_id("", label="Organization ID")


@pytest.mark.parametrize("raw", ["me", "ME", " Me "])
def test_extract_user_id_accepts_me(raw: str):
    assert extract_user_id(raw) == "me"


def test_extract_user_id_numeric():
    assert extract_user_id("31415") == "31415"


def test_extract_user_id_rejects_garbage():
    with pytest.raises(InvalidArgumentError, match="Invalid User ID"):
        extract_user_id("someone")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


@dataclass
class DescriptorCase:
    desc: str
    resource: ResourceType
    resource_id: str
    expect_path: str
    expect_items_key: str
    expect_mode: Optional[SyncMode]


DESCRIPTOR_CASES = [
    DescriptorCase(
        "registrations",
        ResourceType.REGISTRATIONS,
        "1",
        "events/1/attendees/",
        "attendees",
        None,
    ),
    DescriptorCase(
        "attendees",
        ResourceType.ATTENDEES,
        "1",
        "events/1/attendees/",
        "attendees",
        SyncMode.FULL_DRAIN,
    ),
    DescriptorCase(
        "user events",
        ResourceType.USER_EVENTS,
        "me",
        "users/me/events/",
        "events",
        None,
    ),
    DescriptorCase(
        "organization events",
        ResourceType.ORGANIZATION_EVENTS,
        "77",
        "organizations/77/events/",
        "events",
        None,
    ),
    DescriptorCase(
        "organizations",
        ResourceType.ORGANIZATIONS,
        "me",
        "users/me/organizations/",
        "organizations",
        SyncMode.FULL_DRAIN,
    ),
]


@pytest.mark.parametrize("case", DESCRIPTOR_CASES, ids=lambda c: c.desc)
def test_descriptor(case: DescriptorCase):
    descriptor = get_resource(case.resource)

    assert descriptor.resource_type == case.resource
    assert descriptor.path_for(case.resource_id) == case.expect_path
    assert descriptor.items_key == case.expect_items_key
    assert descriptor.default_mode == case.expect_mode


def test_every_resource_type_is_registered():
    assert set(RESOURCES) == set(ResourceType)


def test_same_endpoint_different_mappers():
    assert get_resource("registrations").mapper is map_registration
    assert get_resource("attendees").mapper is map_attendee


def test_organization_events_label():
    with pytest.raises(InvalidArgumentError, match="Organization ID"):
        get_resource(ResourceType.ORGANIZATION_EVENTS).extract_id("acme")


def test_unknown_resource():
    with pytest.raises(InvalidArgumentError, match="Unknown resource 'tickets'"):
        get_resource("tickets")
