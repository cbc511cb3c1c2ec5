"""Daily reminder scan: find due birthdays and send one message per group."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any, Protocol

from bdaybot.shared.errors import DeliverySendError, StoreError
from bdaybot.shared.models.birthday import Birthday

from .constants import NAME_SEPARATOR, REMINDER_TEMPLATE
from .dates import due_dates
from .delivery import DeliverySink

logger = logging.getLogger(__name__)


class DueBirthdayStore(Protocol):
    async def find_due_birthdays(self, day: int, month: int) -> list[Birthday]: ...


@dataclass
class ScanReport:
    """Outcome of one scan."""

    scan_date: date
    delivered: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    query_failed: bool = False

    @property
    def attempted(self) -> int:
        return len(self.delivered) + len(self.failed)

    def as_dict(self) -> dict[str, Any]:
        return {
            "date": self.scan_date.isoformat(),
            "delivered": len(self.delivered),
            "failed": len(self.failed),
            "query_failed": self.query_failed,
        }


def group_names(birthdays: Iterable[Birthday]) -> dict[int, list[str]]:
    """Group names by chat, dropping repeated names.

    Both chats and names keep first-seen order.
    """
    grouped: dict[int, list[str]] = {}
    for birthday in birthdays:
        names = grouped.setdefault(birthday.group_id, [])
        if birthday.name not in names:
            names.append(birthday.name)
    return grouped


def format_reminder(names: Sequence[str]) -> str:
    return REMINDER_TEMPLATE.format(names=NAME_SEPARATOR.join(names))


class ReminderDispatcher:
    """Runs the scan against a store and a delivery sink.

    Holds no state between scans; every run queries the store afresh.
    """

    def __init__(
        self,
        store: DueBirthdayStore,
        sink: DeliverySink,
        tz: tzinfo,
        leap_day_fallback: bool = False,
    ) -> None:
        self.store = store
        self.sink = sink
        self.tz = tz
        self.leap_day_fallback = leap_day_fallback

    def today(self, now: datetime | None = None) -> date:
        """Today's date in the configured zone."""
        moment = now.astimezone(self.tz) if now else datetime.now(self.tz)
        return moment.date()

    async def _find_due(self, today: date) -> list[Birthday]:
        birthdays: list[Birthday] = []
        for day, month in due_dates(today, self.leap_day_fallback):
            birthdays.extend(await self.store.find_due_birthdays(day, month))
        return birthdays

    async def run(self, now: datetime | None = None) -> ScanReport:
        today = self.today(now)
        report = ScanReport(scan_date=today)
        logger.info(f"Birthday scan started for {today.isoformat()}")

        try:
            birthdays = await self._find_due(today)
        except StoreError as e:
            logger.error(f"Birthday scan query failed: {e}")
            report.query_failed = True
            return report

        grouped = group_names(birthdays)
        if not grouped:
            logger.info("No birthdays today")
            return report

        logger.info(f"Found {len(birthdays)} birthday record(s) in {len(grouped)} group(s)")

        for group_id, names in grouped.items():
            message = format_reminder(names)
            try:
                await self.sink.send(group_id, message)
            except DeliverySendError as e:
                logger.warning(str(e))
                report.failed.append(group_id)
                continue
            except Exception:
                logger.exception(f"Unexpected error delivering to chat {group_id}")
                report.failed.append(group_id)
                continue
            logger.debug(f"Sent reminder to chat {group_id}: {message}")
            report.delivered.append(group_id)

        logger.info(
            f"Birthday scan finished: {len(report.delivered)} delivered, "
            f"{len(report.failed)} failed"
        )
        return report
