"""Repository for the birthdays and group_settings tables."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from bdaybot.shared.errors import StoreError
from bdaybot.shared.models.birthday import Birthday, GroupSettings, ReminderState

_STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


def _rows_affected(status: str) -> int:
    """Parse the row count from an asyncpg status string like ``DELETE 1``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError) as e:
        raise StoreError(f"unexpected command status: {status!r}") from e


class BirthdayRepository:
    """Pure SQL operations for birthday entries and group settings.

    Every driver-level failure is re-raised as :class:`StoreError`. Nothing
    here is cached; each call is one round-trip.
    """

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    @asynccontextmanager
    async def _connection(self, operation: str) -> AsyncIterator[asyncpg.Connection]:
        try:
            async with self.pool.acquire() as conn:
                yield conn
        except _STORE_ERRORS as e:
            raise StoreError(f"{operation} failed: {type(e).__name__}: {e}") from e

    # ==================== Birthday Operations ====================

    async def find_by_group(self, group_id: int) -> list[Birthday]:
        """List a group's birthdays ordered by calendar date."""
        async with self._connection("find_by_group") as conn:
            rows = await conn.fetch(
                """
                SELECT id, group_id, name, day, month
                FROM birthdays
                WHERE group_id = $1
                ORDER BY month, day, name
                """,
                group_id,
            )
        return [Birthday(**dict(row)) for row in rows]

    async def upsert_birthday(self, group_id: int, name: str, day: int, month: int) -> None:
        """Insert a birthday or overwrite the date of an existing name."""
        async with self._connection("upsert_birthday") as conn:
            await conn.execute(
                """
                INSERT INTO birthdays (group_id, name, day, month)
                VALUES ($1, $2, $3, $4)
                ON CONFLICT (group_id, name) DO UPDATE SET
                    day   = EXCLUDED.day,
                    month = EXCLUDED.month
                """,
                group_id,
                name,
                day,
                month,
            )

    async def delete_birthday(self, group_id: int, name: str) -> int:
        """Delete a birthday by name. Returns the number of rows deleted."""
        async with self._connection("delete_birthday") as conn:
            status: str = await conn.execute(
                "DELETE FROM birthdays WHERE group_id = $1 AND name = $2",
                group_id,
                name,
            )
        return _rows_affected(status)

    # ==================== Settings Operations ====================

    async def find_settings(self, group_id: int) -> GroupSettings | None:
        """Get a group's settings row, or None if it was never configured."""
        async with self._connection("find_settings") as conn:
            row = await conn.fetchrow(
                "SELECT group_id, enabled, created_at FROM group_settings WHERE group_id = $1",
                group_id,
            )
        return GroupSettings(**dict(row)) if row else None

    async def get_setting(self, group_id: int) -> ReminderState:
        """Look up the reminder flag for a group."""
        settings = await self.find_settings(group_id)
        if settings is None:
            return ReminderState.NOT_CONFIGURED
        return ReminderState.ENABLED if settings.enabled else ReminderState.DISABLED

    async def set_enabled(self, group_id: int, enabled: bool) -> None:
        """Create or update the group's settings row in one statement."""
        async with self._connection("set_enabled") as conn:
            await conn.execute(
                """
                INSERT INTO group_settings (group_id, enabled)
                VALUES ($1, $2)
                ON CONFLICT (group_id) DO UPDATE SET enabled = EXCLUDED.enabled
                """,
                group_id,
                enabled,
            )

    # ==================== Query Operations ====================

    async def find_due_birthdays(self, day: int, month: int) -> list[Birthday]:
        """Get birthdays on ``day``/``month`` for every group not disabled.

        Groups without a settings row are included.
        """
        async with self._connection("find_due_birthdays") as conn:
            rows = await conn.fetch(
                """
                SELECT b.id, b.group_id, b.name, b.day, b.month
                FROM birthdays b
                WHERE b.day = $1 AND b.month = $2
                  AND b.group_id NOT IN (
                    SELECT group_id FROM group_settings WHERE enabled = FALSE
                  )
                ORDER BY b.group_id, b.id
                """,
                day,
                month,
            )
        return [Birthday(**dict(row)) for row in rows]
