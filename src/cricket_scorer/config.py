"""Configuration management for the cricket scorer."""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load environment from .env if present
load_dotenv(override=False)


class DatabaseSettings(BaseSettings):
    """Snapshot database configuration settings."""

    model_config = SettingsConfigDict(env_prefix="SCORER_DB_")

    url: str = Field(default="sqlite:///cricket_scorer.db", description="SQLAlchemy database URL")
    echo: bool = Field(default=False, description="Echo SQL statements")


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="SCORER_LOG_")

    level: str = Field(default="INFO")
    file: Optional[str] = Field(default=None)


class MatchSettings(BaseSettings):
    """Rules applied when matches are created and stored."""

    model_config = SettingsConfigDict(env_prefix="SCORER_MATCH_")

    # Two teams of two, so each side can field an opening pair
    min_players: int = Field(default=4, ge=2)
    share_leftover_player: bool = Field(default=False)
    snapshot_key: str = Field(default="store", min_length=1, max_length=50)
    autosave: bool = Field(default=True)


class Settings(BaseSettings):
    """Main application settings."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    match: MatchSettings = Field(default_factory=MatchSettings)


# Global settings instance
settings = Settings()
