"""Client settings using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LEARNHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="learnhub", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Environment name"
    )

    # Backend API
    api_base_url: str = Field(
        default="http://localhost:8000/api",
        description="Base URL of the LMS REST API (no trailing slash)",
    )
    api_timeout_seconds: float = Field(
        default=30.0, description="Timeout for a single request"
    )
    api_token_refresh_path: str = Field(
        default="/token/refresh/", description="Refresh endpoint path"
    )
    api_token_leeway_seconds: int = Field(
        default=10,
        description="Refresh access tokens this many seconds before they expire",
    )

    # Session
    session_file: str | None = Field(
        default=None,
        description="Optional JSON file that persists tokens and user data",
    )

    # Quiz
    quiz_tick_seconds: float = Field(
        default=60.0, description="Seconds per countdown tick (one quiz minute)"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log format"
    )
    log_include_caller_info: bool = Field(
        default=False, description="Include caller info"
    )
    log_to_file: bool = Field(default=False, description="Also write JSON log files")
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Max size per log file (10MB default)"
    )
    log_file_backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
