"""Configuration management for taskboard."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote Task Store Configuration
    task_store_url: str = Field(default="http://localhost:8000", description="Base URL of the remote task store")
    task_store_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Transport timeout for task store requests (in seconds)"
    )
    seed_on_fetch_failure: bool = Field(
        default=True,
        description="Load the built-in seed tasks when the initial fetch fails (otherwise start empty)",
    )

    # Project Registry Persistence
    projects_store_path: Path = Field(
        default=Path(".taskboard/projects.json"),
        description="JSON file holding the project list and project colors",
    )
    redis_url: str | None = Field(
        default=None, description="Redis connection URL; when set, projects persist to Redis instead of a file"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment name")


# Application Constants
class Constants:
    """Application-wide constants."""

    # Board
    ALL_PROJECTS: str = "All"  # Project filter sentinel
    DEFAULT_PROJECT_COLOR: str = "#94a3b8"  # Used for projects missing from the registry

    # Project registry storage keys
    PROJECTS_KEY: str = "availableProjects"
    PROJECT_COLORS_KEY: str = "projectColors"
    REDIS_KEY_PREFIX: str = "taskboard:"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
