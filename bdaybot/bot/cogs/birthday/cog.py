"""Birthday feature cog."""

from __future__ import annotations

import logging
from typing import Any

from discord.ext import commands

from bdaybot.bot.core.config import BotSettings
from bdaybot.bot.core.guards import CommandGate, RemindersDisabled, chat_kind_of
from bdaybot.shared.repositories.birthday import BirthdayRepository

from .delivery import DeliverySink, DiscordDeliverySink
from .dispatch import ReminderDispatcher, ScanReport
from .scheduler import DailyScanScheduler
from .service import BirthdayService

logger = logging.getLogger(__name__)

# Served even in chats with reminders disabled
UNGATED_COMMANDS = frozenset({"hello"})


class BirthdayCog(commands.Cog):
    """Birthday commands and the daily reminder scan"""

    def __init__(
        self,
        bot: commands.Bot,
        repo: Any,
        settings: BotSettings,
        sink: DeliverySink | None = None,
    ) -> None:
        self.bot = bot
        tz = settings.timezone
        self.service = BirthdayService(repo, prefix=settings.command_prefix)
        self.gate = CommandGate(repo)
        self.dispatcher = ReminderDispatcher(
            repo,
            sink or DiscordDeliverySink(bot),
            tz,
            leap_day_fallback=settings.leap_day_fallback,
        )
        self.scheduler = DailyScanScheduler(
            self.run_daily_scan,
            settings.fire_time(tz),
            before_first_run=self._wait_ready,
        )

    @classmethod
    def from_bot(cls, bot: Any) -> BirthdayCog:
        """Build the cog from the bot's database and settings."""
        return cls(bot, BirthdayRepository(bot.database.pool), bot.settings)

    async def cog_load(self) -> None:
        # SchedulingError propagates and aborts startup
        self.scheduler.start()
        logger.info("Birthday cog loaded")

    async def cog_unload(self) -> None:
        self.scheduler.stop()

    async def _wait_ready(self) -> None:
        await self.bot.wait_until_ready()

    async def run_daily_scan(self) -> ScanReport:
        report = await self.dispatcher.run()
        self.bot.last_scan = report  # type: ignore[attr-defined]
        return report

    # ==================== Gate ====================

    async def cog_check(self, ctx: commands.Context) -> bool:  # type: ignore[override]
        command_name = ctx.command.name if ctx.command else ""
        if command_name in UNGATED_COMMANDS:
            return True
        if await self.gate.allow(chat_kind_of(ctx), ctx.channel.id, command_name):
            return True
        raise RemindersDisabled(ctx.channel.id)

    async def cog_command_error(self, ctx: commands.Context, error: Exception) -> None:  # type: ignore[override]
        if isinstance(error, RemindersDisabled):
            await ctx.send(self.service.disabled_notice())
            return
        if isinstance(error, commands.CommandInvokeError):
            logger.exception(f"Command '{ctx.command}' failed", exc_info=error.original)
            await ctx.send("Something went wrong while running that command.")
            return
        logger.warning(f"Command '{ctx.command}' error: {error}")

    # ==================== Commands ====================

    @commands.command(name="add")
    async def add(self, ctx: commands.Context, *args: str) -> None:
        await ctx.send(await self.service.add(ctx.channel.id, args))

    @commands.command(name="list")
    async def list_(self, ctx: commands.Context) -> None:
        await ctx.send(await self.service.list_birthdays(ctx.channel.id))

    @commands.command(name="remove")
    async def remove(self, ctx: commands.Context, *args: str) -> None:
        await ctx.send(await self.service.remove(ctx.channel.id, args))

    @commands.command(name="enable")
    async def enable(self, ctx: commands.Context) -> None:
        await ctx.send(await self.service.enable(ctx.channel.id))

    @commands.command(name="disable")
    async def disable(self, ctx: commands.Context) -> None:
        await ctx.send(await self.service.disable(ctx.channel.id))

    @commands.command(name="help")
    async def help_(self, ctx: commands.Context) -> None:
        await ctx.send(self.service.help())

    @commands.command(name="start")
    async def start(self, ctx: commands.Context) -> None:
        await ctx.send(self.service.start())

    @commands.command(name="hello")
    async def hello(self, ctx: commands.Context) -> None:
        await ctx.send(self.service.hello())
