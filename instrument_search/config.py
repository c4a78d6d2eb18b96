"""
Configuration module for instrument search.

Centralized configuration management using Pydantic settings.
All configuration values can be overridden via environment variables or .env file.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings for instrument search.

    Attributes:
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: "json" for machine-readable logs, "console" for development
        REDIS_URL: Redis connection URL for the query history store
        HISTORY_KEY: Key the query history is stored under
        HISTORY_CAPACITY: Maximum number of remembered queries
        MAX_RESULTS_PER_GROUP: Optional cap on results per category group
        DESCRIPTION_FUZZY_MATCH: Allow one-edit typos in description words
    """

    # Logging configuration
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    LOG_FORMAT: Literal["json", "console"] = Field(
        default="json",
        description="Log renderer",
    )

    # History store
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for the history store",
    )
    HISTORY_KEY: str = Field(
        default="stockSearchHistory",
        min_length=1,
        description="Key the query history is persisted under",
    )
    HISTORY_CAPACITY: int = Field(
        default=10,
        ge=1,
        le=10,
        description="Maximum number of remembered queries",
    )

    # Ranking
    MAX_RESULTS_PER_GROUP: Optional[int] = Field(
        default=None,
        ge=1,
        description="Truncate each result group to this many results",
    )
    DESCRIPTION_FUZZY_MATCH: bool = Field(
        default=False,
        description="Score one-edit typos against description words",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings (cached after first call)
    """
    return Settings()
