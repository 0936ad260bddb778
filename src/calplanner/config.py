"""Configuration management for CalPlanner."""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

DEFAULT_COLOR = "#4c6ef5"
DEFAULT_PRODUCT_ID = "-//CalPlanner//Project Export//FR"


class AppConfig(BaseSettings):
    """Application configuration."""

    # Storage
    database_url: str = Field(
        default="sqlite:///calplanner.db", validation_alias="DATABASE_URL"
    )
    database_echo: bool = Field(default=False, validation_alias="DATABASE_ECHO")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: Optional[Path] = Field(default=None, validation_alias="LOG_FILE")

    # Feed fetching; no timeout unless one is configured
    feed_timeout: Optional[float] = Field(default=None, validation_alias="FEED_TIMEOUT")
    feed_user_agent: str = Field(
        default="CalPlanner/1.0", validation_alias="FEED_USER_AGENT"
    )

    # Calendars and export
    default_color: str = Field(
        default=DEFAULT_COLOR, validation_alias="DEFAULT_CALENDAR_COLOR"
    )
    product_id: str = Field(default=DEFAULT_PRODUCT_ID, validation_alias="ICS_PRODUCT_ID")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_parse_none_str="",  # Treat empty string as None
    )


# Global config instance
config = AppConfig()
