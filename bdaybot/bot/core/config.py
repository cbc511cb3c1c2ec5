"""Bot configuration"""

import logging
from datetime import time, timedelta, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

BOT_NAME = "bdaybot"


def resolve_timezone(name: str, fallback_offset_minutes: int) -> tzinfo:
    """Load an IANA zone, or a fixed offset when the host has no zone data."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        fallback = timezone(timedelta(minutes=fallback_offset_minutes), name)
        logger.warning(
            f"Time zone data for '{name}' unavailable, using fixed offset "
            f"{fallback_offset_minutes:+d} minutes"
        )
        return fallback


class BotSettings(BaseSettings):
    """Bot settings loaded from environment variables and ``.env``"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Discord
    discord_bot_token: str = Field(..., description="Discord bot token")
    command_prefix: str = Field(default="!", description="Prefix for text commands")

    # Database
    database_url: str = Field(..., description="PostgreSQL database URL")
    database_ssl: str | None = Field(default=None, description="asyncpg ssl mode, e.g. 'require'")

    # Reminders
    reminder_time: str = Field(default="00:05", description="Daily scan time, HH:MM")
    reminder_timezone: str = Field(default="Asia/Kolkata", description="Zone for all date math")
    timezone_fallback_offset_minutes: int = Field(
        default=330, description="UTC offset used when zone data is missing"
    )
    leap_day_fallback: bool = Field(
        default=False, description="Celebrate 29 Feb birthdays on 1 Mar in non-leap years"
    )

    # Health server
    health_server_enabled: bool = Field(default=True, description="Serve /health and /status")
    port: int = Field(default=8080, description="Health server port")

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v.startswith(("postgresql://", "postgres://")):
            raise ValueError("DATABASE_URL must start with 'postgresql://'")
        return v

    @field_validator("reminder_time")
    @classmethod
    def validate_reminder_time(cls, v: str) -> str:
        hour, sep, minute = v.strip().partition(":")
        if not sep or not hour.isdigit() or not minute.isdigit():
            raise ValueError("REMINDER_TIME must look like HH:MM")
        if not (0 <= int(hour) <= 23 and 0 <= int(minute) <= 59):
            raise ValueError("REMINDER_TIME is out of range")
        return f"{int(hour):02d}:{int(minute):02d}"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @property
    def timezone(self) -> tzinfo:
        return resolve_timezone(self.reminder_timezone, self.timezone_fallback_offset_minutes)

    def fire_time(self, tz: tzinfo | None = None) -> time:
        """The daily scan time as an aware ``datetime.time``."""
        hour, minute = (int(part) for part in self.reminder_time.split(":"))
        return time(hour=hour, minute=minute, tzinfo=tz or self.timezone)


@lru_cache
def get_settings() -> BotSettings:
    """Get cached settings instance"""
    return BotSettings()  # type: ignore[call-arg]
