"""Data models for the birthday tables."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass
class Birthday:
    """A named birth date saved in one group."""

    group_id: int
    name: str
    day: int
    month: int
    id: int | None = None


@dataclass
class GroupSettings:
    """Per-group reminder settings."""

    group_id: int
    enabled: bool = True
    created_at: datetime | None = None


class ReminderState(Enum):
    """Result of a settings lookup for one group.

    ``NOT_CONFIGURED`` means the group has no settings row. Callers decide
    what that means; the reminder policy treats it as enabled.
    """

    ENABLED = "enabled"
    DISABLED = "disabled"
    NOT_CONFIGURED = "not_configured"

    @property
    def is_enabled(self) -> bool:
        return self is not ReminderState.DISABLED
