"""Unit tests for the row mappers and the normalized row models."""

from dataclasses import dataclass
from typing import Any

import pytest

from eventsync.domains.sync.exceptions import ProtocolError
from eventsync.domains.sync.mappers import (
    full_name,
    map_attendee,
    map_event,
    map_organization,
    map_registration,
    normalize_timestamp,
)
from eventsync.domains.sync.tests.conftest import make_attendee
from eventsync.domains.sync.types import (
    UNNAMED_ATTENDEE,
    UNNAMED_EVENT,
    UNNAMED_ORGANIZATION,
    RegistrationRow,
    SyncResult,
)


# ---------------------------------------------------------------------------
# normalize_timestamp()
# ---------------------------------------------------------------------------


@dataclass
class TimestampCase:
    desc: str
    value: str
    expect: str


TIMESTAMP_CASES = [
    TimestampCase("utc z suffix", "2024-03-01T10:00:00Z", "2024-03-01T10:00:00.000Z"),
    TimestampCase("negative offset", "2024-03-01T10:00:00-05:00", "2024-03-01T15:00:00.000Z"),
    TimestampCase("positive offset", "2024-03-01T01:30:00+02:00", "2024-02-29T23:30:00.000Z"),
    TimestampCase("naive is utc", "2024-03-01T10:00:00", "2024-03-01T10:00:00.000Z"),
    TimestampCase("fraction truncated", "2024-03-01T10:00:00.123456Z", "2024-03-01T10:00:00.123Z"),
]


@pytest.mark.parametrize("case", TIMESTAMP_CASES, ids=lambda c: c.desc)
def test_normalize_timestamp(case: TimestampCase):
    assert normalize_timestamp(case.value) == case.expect


@pytest.mark.parametrize("value", [None, "", "   ", "yesterday", 1709287200])
def test_normalize_timestamp_rejects(value: Any):
    with pytest.raises(ProtocolError, match="Invalid timestamp"):
        normalize_timestamp(value)


# ---------------------------------------------------------------------------
# full_name()
# ---------------------------------------------------------------------------


@dataclass
class NameCase:
    desc: str
    first: Any
    last: Any
    expect: str


NAME_CASES = [
    NameCase("both", "Ada", "Lovelace", "Ada Lovelace"),
    NameCase("first only", "Ada", None, "Ada"),
    NameCase("last only", None, "Lovelace", "Lovelace"),
    NameCase("blank parts", "  ", "", ""),
    NameCase("padding trimmed", " Ada ", " Lovelace ", "Ada Lovelace"),
]


@pytest.mark.parametrize("case", NAME_CASES, ids=lambda c: c.desc)
def test_full_name(case: NameCase):
    assert full_name(case.first, case.last) == case.expect


# ---------------------------------------------------------------------------
# map_registration()
# ---------------------------------------------------------------------------


class TestMapRegistration:
    def test_maps_all_fields(self):
        row = map_registration(make_attendee("a1", created="2024-03-01T10:00:00-05:00"))

        assert row == RegistrationRow(
            id="a1",
            name="Ada Lovelace",
            email="ada@example.com",
            event_id="123",
            status="Attending",
            registered_at="2024-03-01T15:00:00.000Z",
            ticket_class="General Admission",
        )

    def test_blank_names_use_placeholder(self):
        row = map_registration(make_attendee(first_name=None, last_name=" "))

        assert row.name == UNNAMED_ATTENDEE

    def test_last_name_only_is_trimmed(self):
        row = map_registration(make_attendee(first_name="", last_name="  Lovelace "))

        assert row.name == "Lovelace"

    def test_missing_profile(self):
        item = make_attendee()
        del item["profile"]

        row = map_registration(item)

        assert row.name == UNNAMED_ATTENDEE
        assert row.email is None

    def test_numeric_id_is_stringified(self):
        row = map_registration(make_attendee(attendee_id=98765))

        assert row.id == "98765"

    def test_missing_created_is_protocol_error(self):
        item = make_attendee()
        del item["created"]

        with pytest.raises(ProtocolError):
            map_registration(item)

    @pytest.mark.parametrize("bad_id", [None, "", "  "])
    def test_missing_id_is_protocol_error(self, bad_id):
        item = make_attendee()
        item["id"] = bad_id

        with pytest.raises(ProtocolError, match="attendee without 'id'"):
            map_registration(item)

    def test_payload_uses_camel_case(self):
        result = SyncResult(rows=[map_registration(make_attendee("a1"))], continuation="c1")

        payload = result.to_payload()

        assert payload["continuation"] == "c1"
        assert payload["rows"] == [
            {
                "id": "a1",
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "eventId": "123",
                "status": "Attending",
                "registeredAt": "2024-03-01T10:00:00.000Z",
                "ticketClass": "General Admission",
            }
        ]


# ---------------------------------------------------------------------------
# map_attendee()
# ---------------------------------------------------------------------------


class TestMapAttendee:
    def test_profile_name_wins(self):
        item = make_attendee()
        item["profile"]["name"] = "Countess Lovelace"

        row = map_attendee(item)

        assert row.name == "Countess Lovelace"
        assert row.ticket_class == "General Admission"

    def test_falls_back_to_first_and_last(self):
        assert map_attendee(make_attendee()).name == "Ada Lovelace"

    def test_placeholder_when_no_name(self):
        assert map_attendee(make_attendee(first_name="", last_name=None)).name == UNNAMED_ATTENDEE

    def test_created_is_not_required(self):
        item = make_attendee()
        del item["created"]

        assert map_attendee(item).id == "a1"


# ---------------------------------------------------------------------------
# map_event() / map_organization()
# ---------------------------------------------------------------------------


class TestMapEvent:
    def test_maps_all_fields(self):
        row = map_event(
            {
                "id": "e1",
                "name": {"text": "Spring Meetup", "html": "<p>Spring Meetup</p>"},
                "url": "https://www.eventbrite.com/e/e1",
                "start": {"utc": "2024-05-01T18:00:00Z", "timezone": "Europe/Berlin"},
                "end": {"utc": "2024-05-01T21:00:00Z"},
            }
        )

        assert row.id == "e1"
        assert row.name == "Spring Meetup"
        assert row.url == "https://www.eventbrite.com/e/e1"
        assert row.start_time == "2024-05-01T18:00:00Z"
        assert row.end_time == "2024-05-01T21:00:00Z"

    def test_missing_parts(self):
        row = map_event({"id": "e2", "name": None})

        assert row.name == UNNAMED_EVENT
        assert row.url is None
        assert row.start_time is None
        assert row.end_time is None

    def test_missing_id(self):
        with pytest.raises(ProtocolError, match="event without 'id'"):
            map_event({"name": {"text": "x"}})

    def test_payload_keys(self):
        row = map_event({"id": "e1", "name": {"text": "x"}})

        assert set(row.model_dump(by_alias=True)) == {"id", "name", "url", "startTime", "endTime"}


class TestMapOrganization:
    def test_maps_name(self):
        row = map_organization({"id": "o1", "name": "Acme Events"})

        assert (row.id, row.name) == ("o1", "Acme Events")

    def test_placeholder(self):
        assert map_organization({"id": "o1"}).name == UNNAMED_ORGANIZATION
