"""Page fetcher for Eventbrite listing endpoints.

One ``fetch`` call is one GET. The response is classified, never retried:
retry policy belongs to the driver.
"""

from typing import Any, Dict, Optional, Union

import httpx

from eventsync.core.logging import ContextualLogger, logger
from eventsync.domains.sync.exceptions import SERVICE_NAME
from eventsync.domains.sync.protocols import TokenProvider
from eventsync.domains.sync.retry import (
    DEFAULT_RETRY_AFTER_SECONDS,
    retry_after_from_headers,
)
from eventsync.domains.sync.types import (
    FetchOutcome,
    FetchSuccess,
    HardFailure,
    MalformedResponse,
    RateLimited,
)

CONTINUATION_PARAM = "continuation"


class EventbritePageFetcher:
    """Fetches one page of an Eventbrite listing and classifies the outcome.

    Args:
        client: Open ``httpx.AsyncClient``; its lifecycle belongs to the caller
        items_key: Body key holding the item list (``attendees``, ``events``, ...)
        credentials: Static bearer token or a ``TokenProvider``
        base_url: API root, e.g. ``https://www.eventbriteapi.com/v3``
        timeout: Per-request timeout in seconds
        default_retry_after: Wait used when a 429 has no usable hint
        max_retry_after: Upper bound on a server supplied wait
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        items_key: str,
        credentials: Union[str, TokenProvider, None],
        base_url: str,
        timeout: float = 30.0,
        default_retry_after: int = DEFAULT_RETRY_AFTER_SECONDS,
        max_retry_after: Optional[int] = None,
        logger_: Optional[ContextualLogger] = None,
    ) -> None:
        """Store collaborators; no IO happens here."""
        self._client = client
        self._items_key = items_key
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._default_retry_after = default_retry_after
        self._max_retry_after = max_retry_after
        self._logger = logger_ or logger.with_context(component="page_fetcher")

    def build_url(self, resource_path: str) -> str:
        """Join the API root and a listing path."""
        return f"{self._base_url}/{resource_path.lstrip('/')}"

    async def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        token: Optional[str]
        if self._credentials is None or isinstance(self._credentials, str):
            token = self._credentials
        else:
            token = await self._credentials.get_valid_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def fetch(self, resource_path: str, token: Optional[str] = None) -> FetchOutcome:
        """Issue one GET for ``resource_path`` resuming at ``token``."""
        params = {CONTINUATION_PARAM: token} if token else None
        url = self.build_url(resource_path)
        try:
            response = await self._client.get(
                url,
                headers=await self._headers(),
                params=params,
                timeout=self._timeout,
            )
        except httpx.RequestError as e:
            self._logger.warning(f"Request failed fetching {url}: {type(e).__name__}")
            detail = str(e) or type(e).__name__
            return HardFailure(
                status_code=0, message=f"Error fetching from {SERVICE_NAME}: {detail}"
            )
        return self.classify(response)

    def classify(self, response: httpx.Response) -> FetchOutcome:
        """Turn an HTTP response into a fetch outcome."""
        status = response.status_code

        if status == 429:
            return RateLimited(
                retry_after_seconds=retry_after_from_headers(
                    response.headers,
                    default=self._default_retry_after,
                    maximum=self._max_retry_after,
                )
            )

        if not 200 <= status < 300:
            return HardFailure(status_code=status, message=describe_error(response))

        try:
            body = response.json()
        except ValueError:
            return MalformedResponse(reason="Invalid API response format: body is not JSON.")
        return self.parse_page(body)

    def parse_page(self, body: Any) -> FetchOutcome:
        """Validate a decoded body and extract items plus pagination."""
        if not isinstance(body, dict):
            return MalformedResponse(reason="Invalid API response format: body is not an object.")

        pagination = body.get("pagination")
        if not isinstance(pagination, dict):
            return MalformedResponse(
                reason="Invalid API response format: Missing pagination information."
            )

        items = body.get(self._items_key)
        if not isinstance(items, list):
            return MalformedResponse(
                reason=(
                    f"Invalid API response format: {self._items_key.capitalize()} "
                    "data is not an array."
                )
            )

        next_token = pagination.get(CONTINUATION_PARAM)
        if next_token is not None:
            next_token = str(next_token)
        return FetchSuccess(
            items=items,
            has_more=bool(pagination.get("has_more_items")),
            next_token=next_token or None,
        )


def describe_error(response: httpx.Response) -> str:
    """Compose the user-facing message for a non-success response."""
    message = f"{SERVICE_NAME} API error {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return message
    description = body.get("error_description") if isinstance(body, dict) else None
    if description:
        message += f": {description}"
    return message
