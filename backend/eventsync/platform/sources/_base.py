"""Base source class."""

from abc import abstractmethod
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, Optional

import httpx

from eventsync.core.logging import ContextualLogger, logger
from eventsync.domains.sync.protocols import TokenProvider


class BaseSource:
    """Base class for all sources."""

    def __init__(self):
        """Initialize the base source."""
        self._logger = logger.with_context(source=type(self).__name__)
        self._token_manager: Optional[TokenProvider] = None
        self._http_client_factory: Optional[Callable] = None  # Factory for creating HTTP clients
        self.access_token: Optional[str] = None

    @property
    def logger(self) -> ContextualLogger:
        """Get the logger for this source, tagged with the source class."""
        return self._logger

    @property
    def token_manager(self) -> Optional[TokenProvider]:
        """Get the token manager for this source."""
        return self._token_manager

    def set_token_manager(self, token_manager: Optional[TokenProvider]) -> None:
        """Set a token manager for this source.

        Args:
            token_manager: Anything with ``async get_valid_token() -> str``
        """
        self._token_manager = token_manager

    def set_http_client_factory(self, factory: Optional[Callable]) -> None:
        """Set the HTTP client factory for creating HTTP clients.

        Args:
            factory: Callable that creates HTTP clients, or None for vanilla httpx
        """
        self._http_client_factory = factory
        if factory:
            self.logger.debug("HTTP client factory configured")

    @asynccontextmanager
    async def http_client(self, **kwargs):
        """Get HTTP client with proper lifecycle management.

        Args:
            **kwargs: Standard httpx.AsyncClient parameters

        Usage:
            async with self.http_client() as client:
                response = await client.get(url, headers=headers)

        Yields:
            HTTP client (factory-provided or vanilla httpx)
        """
        if self._http_client_factory:
            client = self._http_client_factory(**kwargs)
            if hasattr(client, "__aenter__"):
                async with client as managed_client:
                    yield managed_client
            else:
                try:
                    yield client
                finally:
                    if hasattr(client, "aclose"):
                        await client.aclose()
        else:
            async with httpx.AsyncClient(**kwargs) as client:
                yield client

    @property
    def credentials(self):
        """What request code should authenticate with: the token manager, else the raw token."""
        return self._token_manager or self.access_token

    async def get_access_token(self) -> Optional[str]:
        """Get a valid access token.

        Returns:
            A token from the token manager if one is set, else the static token
        """
        if self._token_manager:
            return await self._token_manager.get_valid_token()
        return self.access_token

    @classmethod
    @abstractmethod
    async def create(
        cls, credentials: Optional[Any] = None, config: Optional[Dict[str, Any]] = None
    ) -> "BaseSource":
        """Create a new source instance.

        Args:
            credentials: Access token string or an auth config carrying one
            config: Optional configuration parameters

        Returns:
            A configured source instance
        """
        pass

    @abstractmethod
    async def validate(self) -> bool:
        """Validate that this source is reachable and credentials are usable."""
        raise NotImplementedError
