"""Centralized configuration management using Pydantic Settings."""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class BrowserType(str, Enum):
    """Supported browser types."""

    CHROME = "chrome"
    FIREFOX = "firefox"
    EDGE = "edge"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="ScrapeFlow", description="Application name")
    app_env: Environment = Field(default=Environment.DEVELOPMENT, description="Environment")
    debug: bool = Field(default=True, description="Debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    logs_path: str = Field(default="./logs", description="Directory for log files")

    # Browser
    browser_type: BrowserType = Field(default=BrowserType.CHROME, description="Browser type")
    selenium_headless: bool = Field(default=True, description="Run browser in headless mode")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User agent sent by sessions")

    # Timeouts (seconds)
    navigation_timeout: float = Field(default=60.0, gt=0, description="Navigation timeout")
    operation_timeout: float = Field(
        default=30.0, gt=0, description="Timeout for other page operations"
    )
    field_timeout: float = Field(
        default=10.0, gt=0, description="Wait for a field selector to appear"
    )
    next_selector_timeout: float = Field(
        default=10.0, gt=0, description="Wait for the next-page control to appear"
    )

    # Runs
    preview_sample_size: int = Field(
        default=5, ge=1, description="Items returned by a preview run"
    )

    @field_validator("field_timeout")
    @classmethod
    def validate_field_timeout(cls, v: float, info) -> float:
        """Ensure field wait fits inside the operation timeout."""
        operation_timeout = info.data.get("operation_timeout", 30.0)
        if v > operation_timeout:
            raise ValueError("field_timeout must be <= operation_timeout")
        return v

    @property
    def logs_dir(self) -> Path:
        """Get logs directory path."""
        path = Path(self.logs_path)
        path.mkdir(parents=True, exist_ok=True)
        return path


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
