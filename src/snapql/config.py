"""Configuration for snapql."""

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_root_dir() -> Path:
    return Path.home() / "SnapQL"


class Settings(BaseSettings):
    """Process settings loaded from SNAPQL_* environment variables.

    Constructed once by the entry point and passed to the service; tests
    build their own instance pointed at a temporary root.
    """

    model_config = SettingsConfigDict(
        env_prefix="SNAPQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    root_dir: Path = Field(
        default_factory=default_root_dir,
        description="Root configuration directory (settings.json, connections/)",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    auto_migrate: bool = Field(
        default=True,
        description="Migrate legacy single-connection layouts on startup",
    )
    default_openai_model: str = Field(
        default="gpt-4o",
        description="OpenAI model used when none is configured",
    )
    default_claude_model: str = Field(
        default="claude-sonnet-4-0",
        description="Claude model used when none is configured",
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure logging before anything else."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
