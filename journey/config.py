"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    slow_request_ms: int = 1000  # requests slower than this are logged at WARNING

    # API Settings
    api_v1_prefix: str = "/api/v1"
    project_name: str = "Learning Journey Progression Service"
    version: str = "1.0.0"

    # Dates shown to admins in validation messages
    display_timezone: str = "Asia/Jerusalem"

    # Leaderboard
    leaderboard_tie_break: Literal["earliest_completion", "input_order"] = "earliest_completion"
    leaderboard_limit: int = 0  # 0 = no limit


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
