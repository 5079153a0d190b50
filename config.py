"""
Application configuration and logging setup.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    app_name: str = "Legal-Ease AI API"
    app_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    # CORS settings
    cors_origins: list[str] = ["*"]

    # Corpus
    data_path: Path = Path("data/legal-cases.json")


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


def setup_logging(level: str = "INFO"):
    """Configure root logging to stream to stderr."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
