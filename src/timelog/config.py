"""Configuration management for timelog."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LOG_PATH = Path.home() / ".timelog"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TIMELOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_path: Path = Field(
        default=DEFAULT_LOG_PATH,
        description="CSV file holding the start/stop event log",
    )
    verbose: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    def get_log_path(self) -> Path:
        """Get the event log path with ``~`` expanded."""
        return self.log_path.expanduser()


# Global settings instance
settings = Settings()
