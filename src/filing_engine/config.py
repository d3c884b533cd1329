"""Configuration management for the filing engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    database_url: str
    database_url_sync: str
    engine_version: str
    host: str
    port: int
    debug: bool
    log_level: str
    chief_accountant_percent: Decimal
    snapshot_language: str

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        language = os.getenv("SNAPSHOT_LANGUAGE", "uz").lower()
        if language not in ("uz", "ru"):
            raise ValueError("SNAPSHOT_LANGUAGE must be 'uz' or 'ru'")

        return cls(
            database_url=os.getenv(
                "DATABASE_URL",
                "sqlite+aiosqlite:///./filing_engine.db",
            ),
            database_url_sync=os.getenv(
                "DATABASE_URL_SYNC",
                "sqlite:///./filing_engine.db",
            ),
            engine_version=os.getenv("ENGINE_VERSION", "1.0.0"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            chief_accountant_percent=Decimal(os.getenv("CHIEF_ACCOUNTANT_PERCENT", "7")),
            snapshot_language=language,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
