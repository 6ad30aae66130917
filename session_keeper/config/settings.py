"""Configuration settings for session-keeper."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Store settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Backend selection
    STORE_BACKEND: str = Field(
        default="memory", description="Session backend: 'memory', 'file', 'sqlite' or 'redis'"
    )

    # Eviction
    CLEANUP_INTERVAL_SECONDS: float = Field(
        default=300.0, ge=0, description="Expired session sweep interval in seconds (0 disables)"
    )
    SWEEP_BATCH_SIZE: int = Field(
        default=500, ge=1, description="Expired tokens removed per lock acquisition"
    )

    # File store
    FILE_STORE_PATH: Path = Field(
        default=Path("./data/sessions.json"), description="File store snapshot path"
    )

    # SQLite store
    SQLITE_DATABASE_PATH: Path = Field(
        default=Path("./data/sessions.db"), description="SQLite database path"
    )

    # Redis store
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0", description="Redis connection URL"
    )
    REDIS_KEY_PREFIX: str = Field(
        default="scs:session:", description="Prefix applied to every session key"
    )

    def create_directories(self) -> None:
        """Create parent directories for the file-backed stores."""
        self.FILE_STORE_PATH.parent.mkdir(parents=True, exist_ok=True)
        self.SQLITE_DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)

    @property
    def sweeper_enabled(self) -> bool:
        """Whether a background sweeper should run for in-process backends."""
        return self.CLEANUP_INTERVAL_SECONDS > 0

    def __repr__(self) -> str:
        """String representation of settings."""
        return (
            f"Settings(backend={self.STORE_BACKEND}, "
            f"cleanup_interval={self.CLEANUP_INTERVAL_SECONDS}, debug={self.DEBUG})"
        )
