"""Application settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration, read from ``LIFTBOOK_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LIFTBOOK_",
        env_file=".env",
        extra="ignore",
    )

    data_dir: Path = Path("data")
    db_filename: str = "liftbook.db"

    # Connection budget and how long a request may wait for a slot
    pool_size: int = 10
    acquire_timeout: float = 2.0

    log_level: str = "INFO"
    log_file: str | None = None

    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def db_path(self) -> Path:
        """Full path to the SQLite database file."""
        return self.data_dir / self.db_filename


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings."""
    return Settings()
