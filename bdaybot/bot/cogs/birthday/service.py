"""Birthday commands, independent of the chat transport.

Every method returns the text to show the user. Store failures are logged
here and turned into a generic failure reply; nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from bdaybot.shared.errors import NotFoundError, StoreError, ValidationError
from bdaybot.shared.models.birthday import Birthday

from . import constants as text
from .dates import parse_day_month

logger = logging.getLogger(__name__)


class BirthdayStore(Protocol):
    async def find_by_group(self, group_id: int) -> list[Birthday]: ...

    async def upsert_birthday(self, group_id: int, name: str, day: int, month: int) -> None: ...

    async def delete_birthday(self, group_id: int, name: str) -> int: ...

    async def set_enabled(self, group_id: int, enabled: bool) -> None: ...


class BirthdayService:
    """The add/list/remove/enable/disable/help/start command surface."""

    def __init__(self, store: BirthdayStore, prefix: str = "!") -> None:
        self.store = store
        self.prefix = prefix

    # ==================== Birthdays ====================

    def _parse_add_args(self, args: Sequence[str]) -> tuple[str, int, int]:
        if len(args) != 2:
            raise ValidationError(text.ADD_USAGE.format(prefix=self.prefix))
        name, date_str = args
        day, month = parse_day_month(date_str)
        return name, day, month

    async def add(self, group_id: int, args: Sequence[str]) -> str:
        try:
            name, day, month = self._parse_add_args(args)
        except ValidationError as e:
            return str(e)

        try:
            await self.store.upsert_birthday(group_id, name, day, month)
        except StoreError:
            logger.exception(f"Add failed in chat {group_id}")
            return text.SAVE_FAILED

        logger.info(f"Saved birthday {name} ({day:02d}-{month:02d}) in chat {group_id}")
        return text.ADDED.format(name=name, day=day, month=month)

    async def list_birthdays(self, group_id: int) -> str:
        try:
            birthdays = await self.store.find_by_group(group_id)
        except StoreError:
            logger.exception(f"List failed in chat {group_id}")
            return text.LIST_FAILED

        if not birthdays:
            return text.LIST_EMPTY.format(prefix=self.prefix)

        lines = [text.LIST_HEADER]
        lines.extend(text.LIST_LINE.format(name=b.name, day=b.day, month=b.month) for b in birthdays)
        return "\n".join(lines)

    async def _remove_one(self, group_id: int, name: str) -> None:
        if await self.store.delete_birthday(group_id, name) == 0:
            raise NotFoundError(text.NOT_FOUND.format(name=name))

    async def remove(self, group_id: int, args: Sequence[str]) -> str:
        if len(args) != 1:
            return text.REMOVE_USAGE.format(prefix=self.prefix)

        name = args[0]
        try:
            await self._remove_one(group_id, name)
        except NotFoundError as e:
            return str(e)
        except StoreError:
            logger.exception(f"Remove failed in chat {group_id}")
            return text.REMOVE_FAILED

        logger.info(f"Removed birthday {name} in chat {group_id}")
        return text.REMOVED.format(name=name)

    # ==================== Reminder Control ====================

    async def enable(self, group_id: int) -> str:
        try:
            await self.store.set_enabled(group_id, True)
        except StoreError:
            logger.exception(f"Enable failed in chat {group_id}")
            return text.ENABLE_FAILED
        logger.info(f"Reminders enabled in chat {group_id}")
        return text.ENABLED

    async def disable(self, group_id: int) -> str:
        try:
            await self.store.set_enabled(group_id, False)
        except StoreError:
            logger.exception(f"Disable failed in chat {group_id}")
            return text.DISABLE_FAILED
        logger.info(f"Reminders disabled in chat {group_id}")
        return text.DISABLED

    # ==================== Info ====================

    def help(self) -> str:
        return text.HELP_TEXT.format(prefix=self.prefix)

    def start(self) -> str:
        return text.START_TEXT.format(prefix=self.prefix)

    def hello(self) -> str:
        return text.HELLO_TEXT

    def disabled_notice(self) -> str:
        return text.DISABLED_NOTICE.format(prefix=self.prefix)
