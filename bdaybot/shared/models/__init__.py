"""Shared data models for bdaybot."""

from .birthday import Birthday, GroupSettings, ReminderState

__all__ = [
    "Birthday",
    "GroupSettings",
    "ReminderState",
]
