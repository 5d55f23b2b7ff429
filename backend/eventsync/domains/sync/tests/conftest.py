"""Sync domain test fixtures and helpers.

Raw item builders shaped like Eventbrite v3 payloads, plus a driver wired to
the fakes so tests never touch the network or the clock.
"""

from typing import Any, Dict, List, Optional

import pytest

from eventsync.domains.sync.driver import SyncDriver, SyncDriverConfig
from eventsync.domains.sync.fakes.fetcher import FakePageFetcher
from eventsync.domains.sync.types import FetchSuccess


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_attendee(
    attendee_id: str = "a1",
    *,
    first_name: Optional[str] = "Ada",
    last_name: Optional[str] = "Lovelace",
    email: Optional[str] = "ada@example.com",
    created: str = "2024-03-01T10:00:00Z",
    event_id: str = "123",
    status: str = "Attending",
    ticket_class_name: Optional[str] = "General Admission",
) -> Dict[str, Any]:
    """Build a raw attendee item."""
    return {
        "id": attendee_id,
        "profile": {"first_name": first_name, "last_name": last_name, "email": email},
        "created": created,
        "event_id": event_id,
        "status": status,
        "ticket_class_name": ticket_class_name,
    }


def make_page(
    items: List[Dict[str, Any]],
    next_token: Optional[str] = None,
    *,
    has_more: Optional[bool] = None,
) -> FetchSuccess:
    """Build a successful page; ``has_more`` defaults to whether a token is given."""
    if has_more is None:
        has_more = next_token is not None
    return FetchSuccess(items=items, has_more=has_more, next_token=next_token)


def row_ids(result) -> List[str]:
    return [row.id for row in result.rows]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def driver_config():
    return SyncDriverConfig(max_rate_limit_retries=3)


@pytest.fixture
def fetcher():
    return FakePageFetcher()


@pytest.fixture
def driver(fetcher, driver_config, fake_observer, fake_sleeper):
    """SyncDriver over the fake fetcher, observer and sleeper."""
    return SyncDriver(
        lambda _descriptor: fetcher,
        config=driver_config,
        observer=fake_observer,
        sleep=fake_sleeper,
    )
