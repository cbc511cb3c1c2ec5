"""Shared repository layer for bdaybot."""

from .birthday import BirthdayRepository

__all__ = [
    "BirthdayRepository",
]
