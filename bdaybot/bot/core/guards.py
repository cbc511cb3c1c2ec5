"""Command gate: decides whether a command may run in a chat."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Protocol

from discord.ext import commands

from bdaybot.shared.errors import StoreError
from bdaybot.shared.models.birthday import ReminderState

LOGGER = logging.getLogger("CommandGuard")

# Commands that stay callable while reminders are disabled, so a group can
# always turn them back on.
CONTROL_COMMANDS = frozenset({"enable", "disable", "help", "start"})


class _HasSettings(Protocol):
    async def get_setting(self, group_id: int) -> ReminderState: ...


class ChatKind(Enum):
    DIRECT = "direct"
    GROUP = "group"


class RemindersDisabled(commands.CheckFailure):
    """Raised by the cog check when the gate denies a command."""

    def __init__(self, chat_id: int) -> None:
        super().__init__(f"Reminders are disabled in chat {chat_id}")
        self.chat_id = chat_id


def chat_kind_of(ctx: Any) -> ChatKind:
    """Direct for DMs, group for anything inside a guild."""
    return ChatKind.DIRECT if getattr(ctx, "guild", None) is None else ChatKind.GROUP


class CommandGate:
    """Allow/deny policy for incoming commands.

    Stateless apart from the store handle: every gated call reads the
    current setting, so enable/disable take effect immediately.
    """

    def __init__(self, store: _HasSettings) -> None:
        self.store = store

    async def allow(self, chat_kind: ChatKind, chat_id: int, command_name: str) -> bool:
        if chat_kind is ChatKind.DIRECT:
            return True

        if command_name.lower() in CONTROL_COMMANDS:
            return True

        try:
            state = await self.store.get_setting(chat_id)
        except StoreError as e:
            LOGGER.warning(f"Setting lookup failed for chat {chat_id}, allowing '{command_name}': {e}")
            return True

        return state.is_enabled
