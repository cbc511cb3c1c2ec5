from __future__ import annotations

import unittest
from datetime import timedelta

from pydantic import ValidationError

from bdaybot.bot.core.config import BotSettings, resolve_timezone

REQUIRED = {"discord_bot_token": "token", "database_url": "postgresql://localhost/bdaybot"}


class BotSettingsTests(unittest.TestCase):
    def test_defaults(self):
        settings = BotSettings(**REQUIRED)
        self.assertEqual(settings.reminder_time, "00:05")
        self.assertEqual(settings.reminder_timezone, "Asia/Kolkata")
        self.assertFalse(settings.leap_day_fallback)

    def test_fire_time_is_aware(self):
        settings = BotSettings(**REQUIRED, reminder_time="9:30")
        fire = settings.fire_time()
        self.assertEqual((fire.hour, fire.minute), (9, 30))
        self.assertIsNotNone(fire.tzinfo)
        self.assertEqual(settings.reminder_time, "09:30")

    def test_bad_reminder_time_rejected(self):
        for value in ("24:00", "12:60", "noon", "1230"):
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    BotSettings(**REQUIRED, reminder_time=value)

    def test_database_url_scheme(self):
        with self.assertRaises(ValidationError):
            BotSettings(discord_bot_token="token", database_url="mysql://localhost/db")

    def test_invalid_log_level_defaults_to_info(self):
        self.assertEqual(BotSettings(**REQUIRED, log_level="loud").log_level, "INFO")


class ResolveTimezoneTests(unittest.TestCase):
    def test_unknown_zone_uses_fixed_offset(self):
        with self.assertLogs("bdaybot.bot.core.config", level="WARNING"):
            tz = resolve_timezone("Nowhere/Atlantis", 330)
        self.assertEqual(tz.utcoffset(None), timedelta(hours=5, minutes=30))


if __name__ == "__main__":
    unittest.main()
