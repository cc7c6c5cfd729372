"""Configuration management using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SIDE_LAUNCHER_",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional rotating log file path",
    )

    # Task sources
    config_dir: Path = Field(
        default_factory=lambda: Path.home() / ".config",
        description="User configuration directory",
    )
    tool_name: str = Field(
        default="vscode-side-launcher",
        description="Directory name of the external task file under config_dir",
    )
    settings_key: str = Field(
        default="sideLauncher",
        description="Settings section holding the task list",
    )
    # Raw value; HostSettingsSource decodes it
    tasks: Any = Field(
        default=None,
        description="Host-level task list (JSON array text in the environment)",
    )

    # Execution
    terminal_session: str = Field(
        default="side-launcher",
        description="tmux session used for shellOnVSCode tasks",
    )
    shell: str | None = Field(
        default=None,
        description="Command interpreter override (platform default if unset)",
    )

    @property
    def external_tasks_path(self) -> Path:
        """Path of the user-level task file."""
        return self.config_dir.expanduser() / self.tool_name / "tasks.json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from environment.

    Example:
        >>> settings = get_settings()
        >>> settings.settings_key
        'sideLauncher'
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
