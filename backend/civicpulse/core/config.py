"""Application configuration and settings management."""
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "super-secret-key"


class Settings(BaseSettings):
    """Global application settings loaded from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=(Path(__file__).resolve().parent.parent / ".." / ".env"),
        env_file_encoding="utf-8",
        env_prefix="CIVICPULSE_",
        extra="ignore",
    )

    app_name: str = "CivicPulse"

    # Security
    secret_key: str = DEFAULT_SECRET_KEY
    access_token_expire_minutes: int = 60 * 24 * 90
    bcrypt_rounds: int = 12

    # Database
    database_url: str = "sqlite+aiosqlite:///./civicpulse.db"

    allowed_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "https://localhost:3000",
        "https://127.0.0.1:3000",
    ]

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Optional administrator created at startup
    admin_email: str | None = None
    admin_password: str | None = None
    admin_name: str = "Administrator"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: List[str] | str) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @property
    def uses_default_secret(self) -> bool:
        return self.secret_key == DEFAULT_SECRET_KEY


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()
