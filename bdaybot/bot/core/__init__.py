"""Core modules for the Discord bot."""

from .config import BOT_NAME, BotSettings, get_settings, resolve_timezone
from .guards import CONTROL_COMMANDS, ChatKind, CommandGate, RemindersDisabled, chat_kind_of
from .health_server import HealthCheckServer
from .logging import setup_logging

__all__ = [
    # Config
    "BOT_NAME",
    "BotSettings",
    "get_settings",
    "resolve_timezone",
    # Gate
    "CONTROL_COMMANDS",
    "ChatKind",
    "CommandGate",
    "RemindersDisabled",
    "chat_kind_of",
    # Services
    "HealthCheckServer",
    # Logging
    "setup_logging",
]
