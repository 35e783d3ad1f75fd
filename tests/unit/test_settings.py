"""Unit tests for application settings."""

from research_desk.config.settings import Settings


def test_sync_sqlite_url_is_made_async():
    settings = Settings(database_url="sqlite:///./local.db")

    assert settings.database_url == "sqlite+aiosqlite:///./local.db"


def test_sync_postgres_url_is_made_async():
    settings = Settings(database_url="postgresql://u:p@db:5432/research")

    assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/research"


def test_environment_aliases(monkeypatch):
    monkeypatch.setenv("ALPACA_API_KEY", "key")
    monkeypatch.setenv("ALPACA_API_SECRET", "secret")
    monkeypatch.setenv("ORDER_FILL_POLL_ATTEMPTS", "4")

    settings = Settings()

    assert settings.alpaca_api_key == "key"
    assert settings.alpaca_api_secret == "secret"
    assert settings.order_fill_poll_attempts == 4


def test_defaults():
    settings = Settings()

    assert settings.auth_jwt_audience == "authenticated"
    assert settings.order_fill_poll_interval_seconds == 0.5
    assert settings.reconciler_enabled is False
