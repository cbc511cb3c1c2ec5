"""Once-a-day trigger for the birthday scan."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import time
from typing import Any

from discord.ext import tasks

from bdaybot.shared.errors import SchedulingError

logger = logging.getLogger(__name__)


class DailyScanScheduler:
    """Run ``callback`` once per day at ``fire_time``.

    ``fire_time`` must be timezone-aware. A trigger missed while the process
    was down is not replayed, and a trigger that arrives while a scan is
    still running is skipped.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        fire_time: time,
        before_first_run: Callable[[], Awaitable[Any]] | None = None,
    ) -> None:
        self.callback = callback
        self.fire_time = fire_time
        self.before_first_run = before_first_run
        self._lock = asyncio.Lock()
        self._loop: tasks.Loop | None = None

    @property
    def is_running(self) -> bool:
        return self._loop is not None and self._loop.is_running()

    @property
    def scan_in_progress(self) -> bool:
        return self._lock.locked()

    def start(self) -> None:
        """Register the daily trigger. Raises :class:`SchedulingError`."""
        if self.fire_time.tzinfo is None:
            raise SchedulingError("Daily scan time must carry a time zone")
        if self.is_running:
            raise SchedulingError("Daily scan is already scheduled")

        try:
            loop = tasks.loop(time=self.fire_time)(self._tick)
            if self.before_first_run is not None:
                loop.before_loop(self.before_first_run)
            loop.start()
        except (TypeError, ValueError, RuntimeError) as e:
            raise SchedulingError(f"Could not schedule daily scan: {e}") from e

        self._loop = loop
        logger.info(f"Daily birthday scan scheduled at {self.fire_time.strftime('%H:%M')} ({self.fire_time.tzinfo})")

    def stop(self) -> None:
        if self._loop is not None:
            self._loop.cancel()
            self._loop = None

    async def run_now(self) -> bool:
        """Trigger a scan immediately. Returns False if one is already running."""
        return await self._tick()

    async def _tick(self) -> bool:
        if self._lock.locked():
            logger.warning("Previous birthday scan still running, skipping this trigger")
            return False

        async with self._lock:
            try:
                await self.callback()
            except Exception:
                # Keep the loop alive for tomorrow's run
                logger.exception("Birthday scan failed")
        return True
