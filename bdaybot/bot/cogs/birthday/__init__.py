"""Birthday feature module."""

from .cog import BirthdayCog
from .dispatch import ReminderDispatcher, ScanReport
from .scheduler import DailyScanScheduler
from .service import BirthdayService

__all__ = [
    "BirthdayCog",
    "BirthdayService",
    "DailyScanScheduler",
    "ReminderDispatcher",
    "ScanReport",
]
