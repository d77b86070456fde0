"""
Application configuration.

Every setting comes from an environment variable, optionally
provided through a .env file.
"""

import os
from datetime import date
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Station Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql+asyncpg://localhost:5432/station_ledger"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_JSON: bool = os.getenv("LOG_JSON", "false").lower() == "true"

    # Ledger
    # Debits and credits closer than this are considered equal.
    BALANCE_TOLERANCE: Decimal = Decimal(
        os.getenv("LEDGER_BALANCE_TOLERANCE", "0.01")
    )
    # Start date for the all-time profit used as retained earnings.
    REPORT_EPOCH: date = date.fromisoformat(
        os.getenv("LEDGER_REPORT_EPOCH", "1900-01-01")
    )


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
