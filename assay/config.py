"""Configuration loading for the assay test engine.

This module provides centralized configuration management:
- Load settings from ASSAY_* environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv. Command-line flags given to
    ``assay`` take precedence over these values.
    """

    model_config = SettingsConfigDict(
        env_prefix="ASSAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reporting
    reporter: Literal["summary", "markdown", "silent"] = Field(
        default="summary",
        description="Reporter receiving results",
    )
    report_output_dir: str = Field(
        default="./test-reports",
        description="Output directory for markdown reports",
    )

    # Suite location
    test_path: str = Field(
        default="./tests",
        description="Directory holding helper*.py and test*.py files",
    )
    code_path: str = Field(
        default="./src",
        description="Directory of the code under test, watched in auto-test mode",
    )
    test_filter: str | None = Field(
        default=None,
        description="Regular expression selecting test files by bare name",
    )

    # Run mode
    run_mode: Literal["run", "watch"] = Field(
        default="run",
        description="Run the suite once, or re-run it on every change",
    )
    watch_interval_seconds: float = Field(
        default=1.0,
        description="Delay between two polls of the watched directories",
    )
    fingerprint_mode: Literal["hash", "mtime"] = Field(
        default="hash",
        description="Detect changes by content hash or by modification time",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("watch_interval_seconds")
    @classmethod
    def validate_watch_interval(cls, v: float) -> float:
        """Ensure watch interval is positive."""
        if v <= 0:
            raise ValueError("watch_interval_seconds must be positive")
        return v

    @field_validator("test_filter")
    @classmethod
    def validate_test_filter(cls, v: str | None) -> str | None:
        """Treat an empty filter as no filter."""
        return v or None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, v: object) -> object:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
