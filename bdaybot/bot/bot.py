"""
bdaybot Discord bot
Prefix commands for managing birthdays plus a daily reminder scan.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

import discord
from discord.ext import commands
from dotenv import load_dotenv
from pydantic import ValidationError as SettingsError

from bdaybot.bot.cogs.birthday import BirthdayCog, ScanReport
from bdaybot.bot.core.config import BotSettings, get_settings
from bdaybot.bot.core.health_server import HealthCheckServer
from bdaybot.bot.core.logging import setup_logging
from bdaybot.shared.database import DatabaseManager, PoolConfig
from bdaybot.shared.errors import SchedulingError
from bdaybot.shared.migrations.runner import MigrationRunner

logger = logging.getLogger("bdaybot")


class BirthdayBot(commands.Bot):
    """bdaybot Discord client"""

    def __init__(self, settings: BotSettings, database: DatabaseManager):
        intents = discord.Intents.default()
        intents.message_content = True  # prefix commands read message text

        super().__init__(
            command_prefix=commands.when_mentioned_or(settings.command_prefix),
            intents=intents,
            help_command=None,  # the birthday cog provides help
        )
        self.settings = settings
        self.database = database
        self.last_scan: ScanReport | None = None
        self.health_server: HealthCheckServer | None = None
        if settings.health_server_enabled:
            self.health_server = HealthCheckServer(self, database, port=settings.port)

    async def setup_hook(self) -> None:
        await MigrationRunner(self.database.pool).run_pending()
        await self.add_cog(BirthdayCog.from_bot(self))
        if self.health_server:
            await self.health_server.start()
        logger.info("Connecting to Discord...")

    async def close(self) -> None:
        if self.health_server:
            await self.health_server.stop()
        await super().close()

    async def on_ready(self) -> None:
        logger.info(f"Bot ready: {self.user} (ID: {self.user.id if self.user else '?'})")
        logger.info(f"Connected to {len(self.guilds)} guild(s) | discord.py {discord.__version__}")

    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:  # type: ignore[override]
        if ctx.cog is not None and ctx.cog.has_error_handler():
            return
        if isinstance(error, commands.CommandNotFound):
            return
        logger.error(f"Command error: {error}", exc_info=error)


async def main() -> int:
    """Start the bot; returns the process exit code"""
    load_dotenv(encoding="utf-8")
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))

    try:
        settings = get_settings()
    except SettingsError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    database = DatabaseManager(settings.database_url, PoolConfig(ssl=settings.database_ssl))
    await database.connect()

    try:
        async with BirthdayBot(settings, database) as bot:
            await bot.start(settings.discord_bot_token)
    except SchedulingError as e:
        logger.critical(f"Could not schedule the daily birthday scan: {e}")
        return 1
    finally:
        await database.disconnect()
    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Bot stopped")
