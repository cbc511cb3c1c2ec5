from __future__ import annotations

import unittest

from bdaybot.bot.cogs.birthday import constants as text
from bdaybot.bot.cogs.birthday.service import BirthdayService
from bdaybot.bot.core.guards import ChatKind, CommandGate
from bdaybot.shared.models.birthday import ReminderState
from tests.fakes import InMemoryBirthdayStore

GROUP = -1001


class BirthdayServiceTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = InMemoryBirthdayStore()
        self.service = BirthdayService(self.store, prefix="!")

    async def test_add_saves_birthday(self):
        reply = await self.service.add(GROUP, ["Alice", "05-06"])
        self.assertEqual(reply, "Added Alice's birthday on 05-06 to list!")
        self.assertEqual([(b.name, b.day, b.month) for b in self.store.rows], [("Alice", 5, 6)])

    async def test_add_rejects_invalid_dates_without_writing(self):
        for value in ("31-02", "31-06", "13-13", "00-01", "1-1", "tomorrow"):
            with self.subTest(value=value):
                reply = await self.service.add(GROUP, ["Alice", value])
                self.assertEqual(reply, text.INVALID_DATE)
        self.assertEqual(self.store.rows, [])

    async def test_add_wrong_argument_count_shows_usage(self):
        for args in ([], ["Alice"], ["Alice", "05-06", "extra"]):
            with self.subTest(args=args):
                self.assertEqual(await self.service.add(GROUP, args), "Usage: !add [name] [DD-MM]")
        self.assertEqual(self.store.rows, [])

    async def test_add_same_name_twice_updates_single_row(self):
        await self.service.add(GROUP, ["Alice", "05-06"])
        await self.service.add(GROUP, ["Alice", "07-08"])
        self.assertEqual(len(self.store.rows), 1)
        self.assertEqual((self.store.rows[0].day, self.store.rows[0].month), (7, 8))

    async def test_same_name_in_two_groups_is_two_rows(self):
        await self.service.add(GROUP, ["Alice", "05-06"])
        await self.service.add(GROUP - 1, ["Alice", "05-06"])
        self.assertEqual(len(self.store.rows), 2)

    async def test_add_store_failure_reports_generic_error(self):
        self.store.fail.add("upsert_birthday")
        with self.assertLogs("bdaybot.bot.cogs.birthday.service", level="ERROR"):
            reply = await self.service.add(GROUP, ["Alice", "05-06"])
        self.assertEqual(reply, text.SAVE_FAILED)

    async def test_list_empty(self):
        self.assertEqual(await self.service.list_birthdays(GROUP), "No birthdays in list yet. Use !add to start!")

    async def test_list_is_sorted_by_calendar_date(self):
        await self.service.add(GROUP, ["Carol", "01-12"])
        await self.service.add(GROUP, ["Alice", "05-06"])
        await self.service.add(GROUP, ["Bob", "01-01"])
        await self.service.add(GROUP - 1, ["Dave", "02-02"])
        reply = await self.service.list_birthdays(GROUP)
        self.assertTrue(reply.startswith(text.LIST_HEADER))
        self.assertEqual(
            reply.splitlines()[-3:],
            ["- Bob: 01-01", "- Alice: 05-06", "- Carol: 01-12"],
        )
        self.assertNotIn("Dave", reply)

    async def test_list_store_failure(self):
        self.store.fail.add("find_by_group")
        with self.assertLogs("bdaybot.bot.cogs.birthday.service", level="ERROR"):
            self.assertEqual(await self.service.list_birthdays(GROUP), text.LIST_FAILED)

    async def test_remove_missing_name_reports_not_found(self):
        await self.service.add(GROUP, ["Alice", "05-06"])
        reply = await self.service.remove(GROUP, ["Bob"])
        self.assertEqual(reply, "I couldn't find anyone named 'Bob' in this group.")
        self.assertEqual(len(self.store.rows), 1)

    async def test_remove_existing_name_deletes_one_row(self):
        await self.service.add(GROUP, ["Alice", "05-06"])
        await self.service.add(GROUP, ["Bob", "06-06"])
        self.assertEqual(await self.service.remove(GROUP, ["Alice"]), "Removed Alice's birthday from list!")
        listing = await self.service.list_birthdays(GROUP)
        self.assertNotIn("Alice", listing)
        self.assertIn("Bob", listing)

    async def test_remove_wrong_argument_count(self):
        self.assertEqual(await self.service.remove(GROUP, []), "Usage: !remove [name]")

    async def test_remove_store_failure(self):
        self.store.fail.add("delete_birthday")
        with self.assertLogs("bdaybot.bot.cogs.birthday.service", level="ERROR"):
            self.assertEqual(await self.service.remove(GROUP, ["Alice"]), text.REMOVE_FAILED)

    async def test_disable_on_untouched_group_stores_disabled(self):
        self.assertEqual(await self.service.disable(GROUP), text.DISABLED)
        self.assertIs(await self.store.get_setting(GROUP), ReminderState.DISABLED)

    async def test_enable_is_idempotent(self):
        await self.service.enable(GROUP)
        self.assertEqual(await self.service.enable(GROUP), text.ENABLED)
        self.assertEqual(self.store.settings, {GROUP: True})

    async def test_enable_then_disable_then_gated_command_is_denied(self):
        gate = CommandGate(self.store)
        await self.service.enable(GROUP)
        await self.service.disable(GROUP)
        self.assertFalse(await gate.allow(ChatKind.GROUP, GROUP, "add"))
        self.assertTrue(await gate.allow(ChatKind.GROUP, GROUP, "enable"))

    async def test_toggle_store_failures(self):
        self.store.fail.add("set_enabled")
        with self.assertLogs("bdaybot.bot.cogs.birthday.service", level="ERROR"):
            self.assertEqual(await self.service.enable(GROUP), text.ENABLE_FAILED)
            self.assertEqual(await self.service.disable(GROUP), text.DISABLE_FAILED)

    def test_info_texts_use_prefix(self):
        self.assertIn("!add [name] [DD-MM]", self.service.help())
        self.assertIn("!disable", self.service.help())
        self.assertIn("!add", self.service.start())
        self.assertIn("!enable", self.service.disabled_notice())
        self.assertEqual(self.service.hello(), text.HELLO_TEXT)


if __name__ == "__main__":
    unittest.main()
