"""
Application settings loaded from environment variables.
Uses pydantic-settings for validation and .env file support.
"""
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./laundry.db",
        description="SQLAlchemy connection string (PostgreSQL in production)"
    )
    auto_create_tables: bool = Field(
        default=True,
        description="Create missing tables on application startup"
    )

    # Application
    app_name: str = Field(default="Laundry Desk", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    cors_origins: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Origins allowed to call the API from a browser"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    json_logs: bool = Field(default=True, description="Emit logs as JSON lines")

    # Business rules
    currency_symbol: str = Field(
        default="R",
        description="Prefix used when formatting and parsing prices"
    )
    business_timezone: str = Field(
        default="Africa/Johannesburg",
        description="Timezone used to decide what 'today' is for collections"
    )


# Global settings instance
settings = Settings()
