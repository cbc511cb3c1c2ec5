"""Run one birthday scan by hand, outside the daily schedule.

The scan runs without the scheduler's overlap guard. Sending for today when
the scheduled scan has already run delivers every reminder a second time, so
a live scan of today needs ``--force``.

Usage:
    python -m bdaybot.scripts.run_scan --dry          # Log today's messages instead of sending
    python -m bdaybot.scripts.run_scan --date 05-06   # Send as if today were 5 June
    python -m bdaybot.scripts.run_scan --force        # Send today's reminders again
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, tzinfo

import discord
from dotenv import load_dotenv

from bdaybot.bot.cogs.birthday.constants import LEAP_REFERENCE_YEAR
from bdaybot.bot.cogs.birthday.dates import parse_day_month
from bdaybot.bot.cogs.birthday.delivery import DiscordDeliverySink, LoggingDeliverySink
from bdaybot.bot.cogs.birthday.dispatch import ReminderDispatcher
from bdaybot.bot.core.config import get_settings
from bdaybot.bot.core.logging import setup_logging
from bdaybot.shared.database import DatabaseManager, PoolConfig
from bdaybot.shared.errors import ValidationError
from bdaybot.shared.repositories.birthday import BirthdayRepository

logger = logging.getLogger("bdaybot.run_scan")


def scan_moment(date_str: str | None, tz: tzinfo) -> datetime | None:
    """Noon on ``DD-MM`` of the current year in ``tz``, or None for now."""
    if date_str is None:
        return None
    day, month = parse_day_month(date_str)
    year = datetime.now(tz).year
    try:
        return datetime(year, month, day, 12, tzinfo=tz)
    except ValueError:
        return datetime(LEAP_REFERENCE_YEAR, month, day, 12, tzinfo=tz)


def resends_today(dry: bool, date_str: str | None, force: bool) -> bool:
    """True when the run would deliver today's reminders without ``--force``."""
    return not dry and date_str is None and not force


async def main(dry: bool, date_str: str | None, force: bool = False) -> int:
    settings = get_settings()
    setup_logging(settings.log_level)
    tz = settings.timezone

    if resends_today(dry, date_str, force):
        logger.error("Refusing to send today's reminders outside the schedule; pass --force or --dry")
        return 2

    try:
        now = scan_moment(date_str, tz)
    except ValidationError as e:
        logger.error(str(e))
        return 2

    database = DatabaseManager(settings.database_url, PoolConfig(min_size=1, max_size=2, ssl=settings.database_ssl))
    await database.connect()
    client: discord.Client | None = None
    try:
        repo = BirthdayRepository(database.pool)
        if dry:
            sink = LoggingDeliverySink()
        else:
            # REST-only login is enough to fetch channels and send messages
            client = discord.Client(intents=discord.Intents.none())
            await client.login(settings.discord_bot_token)
            sink = DiscordDeliverySink(client)

        dispatcher = ReminderDispatcher(repo, sink, tz, leap_day_fallback=settings.leap_day_fallback)
        report = await dispatcher.run(now)
        logger.info(f"Scan report: {report.as_dict()}")
        return 1 if report.query_failed else 0
    finally:
        if client is not None:
            await client.close()
        await database.disconnect()


if __name__ == "__main__":
    load_dotenv()
    parser = argparse.ArgumentParser(description="Run one birthday reminder scan")
    parser.add_argument("--dry", action="store_true", help="log messages instead of sending them")
    parser.add_argument("--date", metavar="DD-MM", help="scan for this day instead of today")
    parser.add_argument("--force", action="store_true", help="send today's reminders even if already sent")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.dry, args.date, args.force)))
