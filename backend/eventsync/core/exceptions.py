"""Shared exceptions module."""

from typing import Optional


class EventSyncException(Exception):
    """Base exception for eventsync services."""

    def __init__(self, message: Optional[str] = "Eventsync error"):
        """Create a new EventSyncException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)
