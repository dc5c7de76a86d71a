"""Configuration settings for apkstage.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > config file > env vars >
defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_explicit_markers() -> list[str]:
    """Return the task-name fragments that mark an explicit build."""
    return ["assemble", "build"]


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the APKSTAGE_ prefix.
    CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="APKSTAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Files
    config_file: Path = Field(
        default=Path("apkstage.yaml"),
        description="Staging config file, relative to the parent project",
    )
    artifact_extension: str = Field(
        default=".apk",
        min_length=1,
        description="File name suffix of a packaged artifact",
    )

    # Build intent
    explicit_task_markers: list[str] = Field(
        default_factory=_default_explicit_markers,
        description="Task-name fragments that classify an invocation as explicit",
    )

    # Walk limits
    max_walk_depth: int = Field(
        default=16,
        ge=1,
        le=256,
        description="Maximum directory depth searched below a candidate root",
    )
    follow_symlinks: bool = Field(
        default=False,
        description="Descend into symlinked directories while walking",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = ["Settings", "get_settings", "print_settings_json"]
