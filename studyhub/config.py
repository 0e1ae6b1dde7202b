"""Application settings loaded from the environment.

Secrets and the database URL have no defaults: a missing value fails
startup with a validation error instead of falling back to a literal.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide configuration, built once at startup."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required
    DATABASE_URL: str = Field(min_length=1)
    JWT_SECRET: str = Field(min_length=1)
    OPENAI_API_KEY: str = Field(min_length=1)

    # Auth
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_SECONDS: int = 7 * 24 * 60 * 60

    # AI assistant
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TIMEOUT: float = 30.0
    AI_MAX_TOKENS: int = 300
    AI_TEMPERATURE: float = 0.7
    ENFORCE_ASSIGNMENT_OWNERSHIP: bool = False

    # Uploads
    UPLOADS_DIR: Path = Path("uploads")
    MAX_UPLOAD_FILES: int = 5
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Server
    LOG_LEVEL: str = "INFO"
    PORT: int = 3005


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
