"""Day/month parsing and due-date calculation."""

from __future__ import annotations

import calendar
import re
from datetime import date

from bdaybot.shared.errors import ValidationError

from .constants import INVALID_DATE, LEAP_REFERENCE_YEAR

_DAY_MONTH_RE = re.compile(r"^(\d{2})-(\d{2})$")


def parse_day_month(text: str) -> tuple[int, int]:
    """Parse ``DD-MM`` into ``(day, month)``.

    Both parts must be two digits and form a real calendar date in a leap
    year, so ``29-02`` is valid and ``31-04`` is not.
    """
    match = _DAY_MONTH_RE.match(text.strip())
    if not match:
        raise ValidationError(INVALID_DATE)

    day, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(INVALID_DATE)
    if not 1 <= day <= calendar.monthrange(LEAP_REFERENCE_YEAR, month)[1]:
        raise ValidationError(INVALID_DATE)
    return day, month


def due_dates(today: date, leap_day_fallback: bool = False) -> list[tuple[int, int]]:
    """The ``(day, month)`` pairs celebrated on ``today``.

    With ``leap_day_fallback`` set, 29 February birthdays are celebrated on
    1 March in a non-leap year.
    """
    dates = [(today.day, today.month)]
    if leap_day_fallback and (today.month, today.day) == (3, 1) and not calendar.isleap(today.year):
        dates.insert(0, (29, 2))
    return dates
