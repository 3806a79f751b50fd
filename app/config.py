from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables with validation."""

    model_config = SettingsConfigDict(
        env_file=(str(Path(__file__).resolve().parents[1] / ".env"), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    app_name: str = Field(default="TipStorm API", alias="APP_NAME")
    app_env: Literal["development", "staging", "production", "test"] = Field(
        default="production",
        alias="APP_ENV",
    )
    app_debug: bool = Field(default=False, alias="APP_DEBUG")
    secret_key: SecretStr = Field(
        default=SecretStr("change-me-in-production"),
        alias="SECRET_KEY",
    )
    token_ttl_minutes: int = Field(default=60 * 12, ge=1, alias="TOKEN_TTL_MINUTES")

    # Bootstrap admin, seeded at startup when both are set.
    admin_email: str = Field(default="", alias="ADMIN_EMAIL")
    admin_password_hash: SecretStr = Field(default=SecretStr(""), alias="ADMIN_PASSWORD_HASH")

    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        alias="CORS_ORIGINS",
    )

    database_url: str = Field(default="sqlite:///./tipstorm.db", alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, ge=1, le=100, alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, ge=0, le=200, alias="DB_MAX_OVERFLOW")

    password_min_length: int = Field(default=4, ge=1, alias="PASSWORD_MIN_LENGTH")
    activation_requires_reapproval: bool = Field(
        default=True, alias="ACTIVATION_REQUIRES_REAPPROVAL"
    )
    min_slip_total_odds: float = Field(default=0.0, ge=0, alias="MIN_SLIP_TOTAL_ODDS")

    expiry_sweep_enabled: bool = Field(default=True, alias="EXPIRY_SWEEP_ENABLED")
    expiry_sweep_cron: str = Field(default="*/5 * * * *", alias="EXPIRY_SWEEP_CRON")
    expiry_sweep_poll_seconds: int = Field(
        default=30, ge=1, le=3600, alias="EXPIRY_SWEEP_POLL_SECONDS"
    )

    frontend_dir: str = Field(default="", alias="FRONTEND_DIR")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, value: str | list[str]) -> list[str]:
        """Support comma-separated CORS origins from environment variables."""
        if isinstance(value, str):
            if not value.strip():
                return []
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, value: str) -> str:
        """Validate database URL is a PostgreSQL or SQLite SQLAlchemy connection string."""
        lowered = value.lower()
        if lowered.startswith("postgres://"):
            # Heroku/Render style URLs are not accepted by SQLAlchemy 2.
            return "postgresql://" + value[len("postgres://"):]
        if not (lowered.startswith("postgresql") or lowered.startswith("sqlite")):
            raise ValueError("DATABASE_URL must be a postgresql:// or sqlite:// URL")
        return value

    @field_validator("admin_email")
    @classmethod
    def normalize_admin_email(cls, value: str) -> str:
        return value.strip().lower()


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()


settings: Settings = get_settings()
