"""
Application configuration settings.

Central configuration module using Pydantic BaseSettings with environment variable support.
Loads from .env file and environment variables.
"""
import json
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if it exists (python-dotenv)
env_path = Path(".env")
if env_path.exists():
    load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # App settings
    APP_NAME: str = "SMART OSH"
    APP_ENV: str = Field(default="local")
    DEBUG: bool = Field(default=False)

    # Database settings - generic connection string (highest priority)
    DATABASE_URL: Optional[str] = Field(
        default=None,
        description="Database connection URL (full SQLAlchemy URL)",
    )

    # Hosted Postgres raw vars (PG*)
    PGUSER: Optional[str] = None
    PGPASSWORD: Optional[str] = None
    PGHOST: Optional[str] = None
    PGPORT: Optional[str] = None
    PGDATABASE: Optional[str] = None

    # Local docker-compose Postgres settings (fallback for local dev)
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_HOST: Optional[str] = None
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "smart_osh"

    @property
    def sqlalchemy_database_uri(self) -> str:
        """
        Build SQLAlchemy database URI with priority:
        1. DATABASE_URL
        2. PG* vars
        3. Local docker-compose Postgres (POSTGRES_*)
        4. SQLite (local development without Docker)
        """
        if self.DATABASE_URL:
            # Hosted providers hand out postgres:// URLs, which SQLAlchemy 2 rejects
            if self.DATABASE_URL.startswith("postgres://"):
                return self.DATABASE_URL.replace("postgres://", "postgresql+psycopg2://", 1)
            return self.DATABASE_URL

        if self.PGUSER and self.PGHOST and self.PGDATABASE:
            password = quote_plus(self.PGPASSWORD or "")
            port = self.PGPORT or "5432"
            return f"postgresql+psycopg2://{self.PGUSER}:{password}@{self.PGHOST}:{port}/{self.PGDATABASE}"

        if os.getenv("POSTGRES_HOST") and self.POSTGRES_USER and self.POSTGRES_PASSWORD:
            password = quote_plus(self.POSTGRES_PASSWORD)
            return (
                f"postgresql+psycopg2://"
                f"{self.POSTGRES_USER}:{password}@"
                f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        return "sqlite:///./smart_osh.db"

    # CORS settings
    CORS_ORIGINS: Union[str, List[str]] = Field(
        default='["http://localhost:8501", "http://localhost:8000"]',
    )

    @field_validator("CORS_ORIGINS")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from string or list."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    LOG_DIR: str = Field(default="logs", description="Directory for the rotating log file")

    # Sessions and passwords
    SESSION_TTL_HOURS: int = Field(default=24, ge=1, description="Lifetime of a login session")
    PASSWORD_MIN_LENGTH: int = Field(default=8, ge=1)
    PASSWORD_RESET_TTL_MINUTES: int = Field(
        default=60,
        ge=1,
        description="Validity of a password reset token (stated in the reset email)",
    )
    RESET_PASSWORD_URL: str = Field(
        default="http://localhost:8501/?page=reset-password&token={token}",
        description="Reset link template; {token} is replaced with the reset token",
    )

    # Outgoing mail (SMTP). Leave SMTP_HOST empty to log emails instead of sending.
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    MAIL_SENDER_ADDRESS: str = "no-reply@smart-osh.local"
    MAIL_SENDER_NAME: str = "SMART OSH"

    # AI settings (OpenAI) - Optional
    OPENAI_API_KEY: Optional[str] = Field(
        default=None,
        description="OpenAI API key for AI-written HIRADC narratives (optional)",
    )
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")

    def is_openai_available(self) -> bool:
        """Check if OpenAI API key is configured and not empty."""
        return (
            self.OPENAI_API_KEY is not None
            and isinstance(self.OPENAI_API_KEY, str)
            and self.OPENAI_API_KEY.strip() != ""
        )

    def is_smtp_configured(self) -> bool:
        """Check if an SMTP relay is configured."""
        return bool(self.SMTP_HOST and self.SMTP_HOST.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
