"""Delivery sinks: where scan messages are sent."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import discord

from bdaybot.shared.errors import DeliverySendError

logger = logging.getLogger(__name__)


class DeliverySink(Protocol):
    async def send(self, chat_id: int, text: str) -> None:
        """Send ``text`` to ``chat_id`` or raise :class:`DeliverySendError`."""
        ...


class DiscordDeliverySink:
    """Posts to a channel, using the gateway cache before the REST API."""

    def __init__(self, client: Any) -> None:
        self.client = client

    async def send(self, chat_id: int, text: str) -> None:
        try:
            channel = self.client.get_channel(chat_id)
            if channel is None:
                channel = await self.client.fetch_channel(chat_id)
            if not callable(getattr(channel, "send", None)):
                raise DeliverySendError(chat_id, "channel does not accept messages")
            await channel.send(text)
        except discord.NotFound as e:
            raise DeliverySendError(chat_id, "channel not found") from e
        except discord.Forbidden as e:
            raise DeliverySendError(chat_id, "missing permissions") from e
        except discord.HTTPException as e:
            raise DeliverySendError(chat_id, f"HTTP {e.status}: {e.text}") from e


class LoggingDeliverySink:
    """Logs messages instead of sending them (dry runs)."""

    def __init__(self) -> None:
        self.sent: list[tuple[int, str]] = []

    async def send(self, chat_id: int, text: str) -> None:
        logger.info(f"[dry run] chat {chat_id}: {text}")
        self.sent.append((chat_id, text))
