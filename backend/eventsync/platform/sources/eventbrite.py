"""Eventbrite source implementation.

Exposes the Eventbrite v3 listings as incremental sync tables (registrations,
events) plus full-drain helpers (attendees, organizations) and connection
checks against ``users/me``.
API reference: https://www.eventbrite.com/platform/api
"""

import asyncio
from typing import Any, Dict, List, Optional, Union

import httpx

from eventsync.core.config import Settings, settings
from eventsync.domains.sync.driver import SyncDriver, SyncDriverConfig
from eventsync.domains.sync.exceptions import (
    SERVICE_NAME,
    AuthError,
    ProtocolError,
    SourceApiError,
    SyncError,
)
from eventsync.domains.sync.fetcher import EventbritePageFetcher, describe_error
from eventsync.domains.sync.protocols import Sleeper, SyncObserverProtocol
from eventsync.domains.sync.resources import CURRENT_USER, ResourceDescriptor
from eventsync.domains.sync.types import (
    AttendeeRow,
    OrganizationRow,
    ResourceType,
    SyncMode,
    SyncResult,
)
from eventsync.platform.sources._base import BaseSource

DEFAULT_CONNECTION_NAME = "Eventbrite Account"
AUTH_STATUS_CODES = frozenset({401, 403})


class EventbriteSource(BaseSource):
    """Eventbrite source connector.

    Every public sync call opens one HTTP client, runs one ``SyncDriver``
    step over it and closes it again; nothing is cached between calls
    except configuration.
    """

    def __init__(self, app_settings: Optional[Settings] = None):
        """Initialize with application settings."""
        super().__init__()
        self._settings = app_settings or settings
        self.base_url: str = self._settings.EVENTBRITE_API_BASE_URL
        self.sync_mode: Optional[SyncMode] = None
        self._driver_config = SyncDriverConfig.from_settings(self._settings)
        self._observer: Optional[SyncObserverProtocol] = None
        self._sleep: Sleeper = asyncio.sleep

    @property
    def _request_timeout(self) -> float:
        return self._settings.EVENTBRITE_REQUEST_TIMEOUT_SECONDS

    @classmethod
    async def create(
        cls, access_token: Any, config: Optional[Dict[str, Any]] = None
    ) -> "EventbriteSource":
        """Create and configure the Eventbrite source.

        Args:
            access_token: OAuth access token (string), or an auth config object
                exposing ``access_token``.
            config: Optional config: ``sync_mode`` (full_drain/single_page) and
                ``base_url``.

        Returns:
            Configured EventbriteSource instance.
        """
        instance = cls()
        if isinstance(access_token, str):
            instance.access_token = access_token
        elif hasattr(access_token, "access_token"):
            instance.access_token = access_token.access_token
        else:
            raise ValueError(
                "credentials must be a string (access token) or an auth config with access_token"
            )
        if config:
            if config.get("sync_mode"):
                instance.sync_mode = SyncMode(config["sync_mode"])
            if config.get("base_url"):
                instance.base_url = str(config["base_url"]).rstrip("/")
        return instance

    def set_observer(self, observer: Optional[SyncObserverProtocol]) -> None:
        """Replace the default logging observer."""
        self._observer = observer

    def set_sleeper(self, sleep: Sleeper) -> None:
        """Replace ``asyncio.sleep`` for rate limit backoff."""
        self._sleep = sleep

    def set_driver_config(self, config: SyncDriverConfig) -> None:
        """Override retry bound, default mode or deadline."""
        self._driver_config = config

    def _fetcher_factory(self, client: httpx.AsyncClient):
        def build(descriptor: ResourceDescriptor) -> EventbritePageFetcher:
            return EventbritePageFetcher(
                client,
                items_key=descriptor.items_key,
                credentials=self.credentials,
                base_url=self.base_url,
                timeout=self._request_timeout,
                default_retry_after=self._settings.SYNC_DEFAULT_RETRY_AFTER_SECONDS,
                max_retry_after=self._settings.SYNC_MAX_RETRY_AFTER_SECONDS,
                logger_=self.logger.with_context(component="page_fetcher"),
            )

        return build

    async def sync(
        self,
        resource: Union[ResourceType, str],
        resource_id: Optional[str],
        continuation: Optional[str] = None,
        mode: Optional[SyncMode] = None,
    ) -> SyncResult:
        """Run one sync step for any registered resource.

        Args:
            resource: Resource name or ``ResourceType``
            resource_id: Event/organization ID or URL, or ``me``
            continuation: Token returned by the previous call
            mode: Sync mode override

        Returns:
            SyncResult with rows and the next continuation token
        """
        async with self.http_client(timeout=self._request_timeout) as client:
            driver = SyncDriver(
                self._fetcher_factory(client),
                config=self._driver_config,
                observer=self._observer,
                sleep=self._sleep,
            )
            return await driver.sync(resource, resource_id, continuation, mode=mode)

    async def sync_registrations(
        self, event_id: str, continuation: Optional[str] = None
    ) -> SyncResult:
        """Registrations sync table: one page per call unless ``sync_mode`` says otherwise."""
        return await self.sync(
            ResourceType.REGISTRATIONS, event_id, continuation, mode=self.sync_mode
        )

    async def sync_events(self, continuation: Optional[str] = None) -> SyncResult:
        """Events sync table for the token's owner."""
        return await self.sync(
            ResourceType.USER_EVENTS, CURRENT_USER, continuation, mode=self.sync_mode
        )

    async def sync_organization_events(
        self, organization_id: str, continuation: Optional[str] = None
    ) -> SyncResult:
        """Events sync table for one organization."""
        return await self.sync(
            ResourceType.ORGANIZATION_EVENTS,
            organization_id,
            continuation,
            mode=self.sync_mode,
        )

    async def list_attendees(self, event_id: str) -> List[AttendeeRow]:
        """All attendees of an event in one call."""
        result = await self.sync(ResourceType.ATTENDEES, event_id, mode=SyncMode.FULL_DRAIN)
        return list(result.rows)

    async def list_organizations(self) -> List[OrganizationRow]:
        """All organizations the token's owner belongs to."""
        result = await self.sync(
            ResourceType.ORGANIZATIONS, CURRENT_USER, mode=SyncMode.FULL_DRAIN
        )
        return list(result.rows)

    async def _get_current_user(self) -> Dict[str, Any]:
        """GET ``users/me/`` and return the decoded body.

        Raises:
            AuthError: On 401/403
            SourceApiError: On any other failure, status 0 when no usable response arrived
            ProtocolError: If the body is not a JSON object
        """
        headers = {"Accept": "application/json"}
        token = await self.get_access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = f"{self.base_url}/users/{CURRENT_USER}/"

        async with self.http_client(timeout=self._request_timeout) as client:
            try:
                response = await client.get(url, headers=headers)
            except httpx.RequestError as e:
                raise SourceApiError(
                    0, f"Error fetching from {SERVICE_NAME}: {str(e) or type(e).__name__}"
                ) from e

        if response.status_code in AUTH_STATUS_CODES:
            raise AuthError(response.status_code, describe_error(response))
        if not 200 <= response.status_code < 300:
            raise SourceApiError(response.status_code, describe_error(response))
        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolError("Invalid API response format: body is not JSON.") from e
        if not isinstance(body, dict):
            raise ProtocolError("Invalid API response format: body is not an object.")
        return body

    async def get_connection_name(self) -> str:
        """Display name for the connected account."""
        user = await self._get_current_user()
        name = user.get("name")
        if isinstance(name, str) and name.strip():
            return name
        return DEFAULT_CONNECTION_NAME

    async def test_connection(self) -> str:
        """Check the credential and report who it belongs to.

        Raises:
            ProtocolError: If the user record has no name
            AuthError: If the credential is rejected
            SourceApiError: On any other failed request
        """
        user = await self._get_current_user()
        name = user.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ProtocolError(
                f"Connected to {SERVICE_NAME}, but the user profile has no name."
            )
        message = f"Successfully connected to {SERVICE_NAME} as: {name}"
        self.logger.info(message)
        return message

    async def validate(self) -> bool:
        """Validate credentials by calling ``users/me``."""
        try:
            await self.test_connection()
        except SyncError as e:
            self.logger.warning(f"{SERVICE_NAME} validation failed: {e}")
            return False
        return True
