"""Application configuration from environment variables.

Settings are read from the process environment and an optional ``.env``
file in the working directory. Environment variables win over ``.env``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(
        default="sqlite:///./finance.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = Field(default=False, description="Log SQL queries")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Path to server log file")

    # Locale (currency and number formatting in user-facing messages)
    locale: str = Field(default="pt_BR", description="Babel locale identifier")

    # Ledger
    ledger_external_payments: bool = Field(
        default=False,
        description="Record debt payments made without a reserve as ledger outflows",
    )

    # API
    api_title: str = Field(default="Finance Tracker API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")


# Global settings instance
settings = Settings()


__all__ = ["Settings", "settings"]
