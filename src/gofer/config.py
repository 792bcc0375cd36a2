"""Configuration management for gofer."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GOFER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_file: Path = Field(
        default=Path("gofer.yaml"),
        description="Project file listing search paths and task modules",
    )
    search_paths: list[Path] = Field(
        default_factory=list,
        description="Directories searched for task packages (overrides the project file)",
    )
    package_name: str = Field(
        default="tasks",
        description="Name of the directories that hold task modules",
    )
    expected_import: str = Field(
        default="gofer",
        description="Package a module must import to be loaded as a task module",
    )
    verbose: bool = Field(
        default=False,
        description="Enable debug logging",
    )


# Global settings instance
settings = Settings()
