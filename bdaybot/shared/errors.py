"""Error taxonomy shared by the store, command and scan layers."""

from __future__ import annotations


class BdayBotError(Exception):
    """Base class for all bdaybot errors."""


class ValidationError(BdayBotError):
    """Malformed user input (bad date, wrong argument count)."""


class NotFoundError(BdayBotError):
    """The requested record does not exist."""


class StoreError(BdayBotError):
    """A query or write against the record store failed."""


class DeliverySendError(BdayBotError):
    """A message could not be delivered to a chat."""

    def __init__(self, chat_id: int, reason: str) -> None:
        super().__init__(f"Failed to deliver to chat {chat_id}: {reason}")
        self.chat_id = chat_id
        self.reason = reason


class SchedulingError(BdayBotError):
    """The daily trigger could not be registered."""
