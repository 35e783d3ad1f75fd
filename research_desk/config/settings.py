"""Settings for database, Redis, identity, brokerage and application configuration."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from the environment and an optional .env file."""

    # Application configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    api_title: str = Field(default="Research Desk", alias="API_TITLE")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    # Database configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./research_desk.db",
        alias="DATABASE_URL",
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # Redis configuration (rendered page cache)
    redis_enabled: bool = Field(default=False, alias="REDIS_ENABLED")
    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")
    redis_db: int = Field(default=0, alias="REDIS_DB")
    redis_password: Optional[str] = Field(default=None, alias="REDIS_PASSWORD")
    page_cache_ttl_seconds: int = Field(default=300, alias="PAGE_CACHE_TTL_SECONDS")

    # Identity provider tokens
    auth_jwt_secret: str = Field(
        default="change-this-secret-key-in-production-use-openssl-rand-hex-32",
        alias="AUTH_JWT_SECRET",
    )
    auth_jwt_algorithm: str = Field(default="HS256", alias="AUTH_JWT_ALGORITHM")
    auth_jwt_audience: Optional[str] = Field(default="authenticated", alias="AUTH_JWT_AUDIENCE")
    auth_cookie_name: str = Field(default="access_token", alias="AUTH_COOKIE_NAME")
    auth_token_expire_minutes: int = Field(default=60, alias="AUTH_TOKEN_EXPIRE_MINUTES")

    # Alpaca paper trading
    alpaca_api_key: Optional[str] = Field(default=None, alias="ALPACA_API_KEY")
    alpaca_api_secret: Optional[str] = Field(default=None, alias="ALPACA_API_SECRET")
    alpaca_paper: bool = Field(default=True, alias="ALPACA_PAPER")
    alpaca_base_url: Optional[str] = Field(default=None, alias="ALPACA_BASE_URL")

    # Market order fill polling
    order_fill_poll_attempts: int = Field(default=10, alias="ORDER_FILL_POLL_ATTEMPTS")
    order_fill_poll_interval_seconds: float = Field(
        default=0.5, alias="ORDER_FILL_POLL_INTERVAL_SECONDS"
    )

    # Cancellation reconciler
    reconciler_enabled: bool = Field(default=False, alias="RECONCILER_ENABLED")
    reconciler_interval_seconds: int = Field(default=60, alias="RECONCILER_INTERVAL_SECONDS")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
    }

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate and normalize database URL."""
        # Convert sync SQLite URLs to async
        if v.startswith("sqlite:///") and "aiosqlite" not in v:
            v = v.replace("sqlite:///", "sqlite+aiosqlite:///")
        # Convert sync PostgreSQL URLs to async
        if v.startswith("postgresql://") and "asyncpg" not in v:
            v = v.replace("postgresql://", "postgresql+asyncpg://")
        return v


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
