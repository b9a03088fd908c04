"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings

# A team that has created more events than this is almost certainly spam.
DEFAULT_MAX_EVENTS_PER_TEAM = 5000


class Settings(BaseSettings):
    """Rookie Roster application configuration.

    All values can be overridden via environment variables or .env file.
    """

    # Database
    database_url: str = "sqlite+aiosqlite:///rookieroster.db"

    # Environment
    rookieroster_env: str = "development"

    # Display
    rookieroster_timezone: str = "UTC"  # local time used for recent-game dates

    # Limits
    rookieroster_max_events_per_team: int = DEFAULT_MAX_EVENTS_PER_TEAM

    # Logging
    rookieroster_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @field_validator("rookieroster_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        """Reject timezone names the zoneinfo database doesn't know."""
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"Unknown timezone: {value!r}"
            raise ValueError(msg) from exc
        return value

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.rookieroster_timezone)
