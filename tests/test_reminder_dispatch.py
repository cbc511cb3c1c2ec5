from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from bdaybot.bot.cogs.birthday.dispatch import ReminderDispatcher, format_reminder, group_names
from bdaybot.bot.core.config import BotSettings
from bdaybot.shared.models.birthday import Birthday
from tests.fakes import InMemoryBirthdayStore, RecordingSink

IST = ZoneInfo("Asia/Kolkata")
G1 = -100
G2 = -200
JUNE_5 = datetime(2025, 6, 5, 0, 5, tzinfo=IST)


class GroupNamesTests(unittest.TestCase):
    def test_groups_and_dedups_in_first_seen_order(self):
        rows = [
            Birthday(group_id=G2, name="Carol", day=5, month=6),
            Birthday(group_id=G1, name="Bob", day=5, month=6),
            Birthday(group_id=G2, name="Carol", day=5, month=6),
            Birthday(group_id=G1, name="Alice", day=5, month=6),
            Birthday(group_id=G1, name="Bob", day=5, month=6),
        ]
        grouped = group_names(rows)
        self.assertEqual(list(grouped), [G2, G1])
        self.assertEqual(grouped[G1], ["Bob", "Alice"])
        self.assertEqual(grouped[G2], ["Carol"])

    def test_format_reminder(self):
        self.assertEqual(format_reminder(["Alice", "Bob"]), "🎉 Happy Birthday Alice, Bob! 🎂🥳")


class ReminderDispatcherTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = InMemoryBirthdayStore()
        self.store.insert_raw(G1, "Alice", 5, 6)
        self.store.insert_raw(G1, "Bob", 5, 6)
        self.store.insert_raw(G2, "Carol", 1, 1)
        self.sink = RecordingSink()
        self.dispatcher = ReminderDispatcher(self.store, self.sink, IST)

    async def test_one_message_per_group_with_due_birthdays(self):
        report = await self.dispatcher.run(JUNE_5)
        self.assertEqual(len(self.sink.sent), 1)
        chat_id, message = self.sink.sent[0]
        self.assertEqual(chat_id, G1)
        self.assertEqual(message.count("Alice"), 1)
        self.assertEqual(message.count("Bob"), 1)
        self.assertEqual(report.delivered, [G1])
        self.assertEqual(report.failed, [])

    async def test_disabled_group_receives_nothing(self):
        self.store.settings[G1] = False
        report = await self.dispatcher.run(JUNE_5)
        self.assertEqual(self.sink.sent, [])
        self.assertEqual(report.attempted, 0)

    async def test_explicitly_enabled_group_matches_unconfigured(self):
        self.store.settings[G1] = True
        await self.dispatcher.run(JUNE_5)
        self.assertEqual([chat for chat, _ in self.sink.sent], [G1])

    async def test_duplicate_rows_collapse_to_one_name(self):
        self.store.insert_raw(G1, "Alice", 5, 6)
        await self.dispatcher.run(JUNE_5)
        self.assertEqual(self.sink.sent, [(G1, "🎉 Happy Birthday Alice, Bob! 🎂🥳")])

    async def test_no_due_birthdays_sends_nothing(self):
        report = await self.dispatcher.run(datetime(2025, 7, 4, 0, 5, tzinfo=IST))
        self.assertEqual(self.sink.sent, [])
        self.assertFalse(report.query_failed)

    async def test_failed_group_does_not_block_others(self):
        self.store.insert_raw(G2, "Dave", 5, 6)
        self.store.insert_raw(-300, "Erin", 5, 6)
        self.sink.failing.add(G1)
        self.sink.crashing.add(G2)
        with self.assertLogs("bdaybot.bot.cogs.birthday.dispatch", level="WARNING"):
            report = await self.dispatcher.run(JUNE_5)
        self.assertCountEqual(report.failed, [G1, G2])
        self.assertEqual(report.delivered, [-300])
        self.assertEqual(self.sink.sent, [(-300, "🎉 Happy Birthday Erin! 🎂🥳")])

    async def test_query_failure_ends_scan(self):
        self.store.fail.add("find_due_birthdays")
        with self.assertLogs("bdaybot.bot.cogs.birthday.dispatch", level="ERROR"):
            report = await self.dispatcher.run(JUNE_5)
        self.assertTrue(report.query_failed)
        self.assertEqual(self.sink.sent, [])

    async def test_today_uses_configured_zone(self):
        # 20:00 UTC on 4 June is already 5 June in India
        utc_evening = datetime(2025, 6, 4, 20, 0, tzinfo=timezone.utc)
        self.assertEqual(self.dispatcher.today(utc_evening).isoformat(), "2025-06-05")
        await self.dispatcher.run(utc_evening)
        self.assertEqual([chat for chat, _ in self.sink.sent], [G1])

    async def test_fixed_offset_zone(self):
        dispatcher = ReminderDispatcher(self.store, self.sink, timezone(timedelta(hours=5, minutes=30)))
        self.assertEqual(dispatcher.today(datetime(2025, 6, 4, 19, 0, tzinfo=timezone.utc)).day, 5)

    async def test_leap_day_birthdays_join_march_first_message(self):
        self.store.insert_raw(G2, "Leap", 29, 2)
        self.store.insert_raw(G2, "March", 1, 3)
        dispatcher = ReminderDispatcher(self.store, self.sink, IST, leap_day_fallback=True)
        await dispatcher.run(datetime(2025, 3, 1, 0, 5, tzinfo=IST))
        self.assertEqual(self.sink.sent, [(G2, "🎉 Happy Birthday Leap, March! 🎂🥳")])

    async def test_leap_day_only_group_gets_nothing_on_march_first_by_default(self):
        settings = BotSettings(discord_bot_token="token", database_url="postgresql://localhost/bdaybot")
        store = InMemoryBirthdayStore()
        store.insert_raw(G2, "Leap", 29, 2)
        dispatcher = ReminderDispatcher(
            store, self.sink, IST, leap_day_fallback=settings.leap_day_fallback
        )
        report = await dispatcher.run(datetime(2025, 3, 1, 0, 5, tzinfo=IST))
        self.assertEqual(self.sink.sent, [])
        self.assertEqual(report.attempted, 0)

    async def test_report_as_dict(self):
        report = await self.dispatcher.run(JUNE_5)
        self.assertEqual(
            report.as_dict(),
            {"date": "2025-06-05", "delivered": 1, "failed": 0, "query_failed": False},
        )


if __name__ == "__main__":
    unittest.main()
