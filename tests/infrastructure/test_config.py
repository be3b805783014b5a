"""Settings — environment-driven configuration."""

from rwa_market.config import Settings


def test_postgres_url_is_converted_for_asyncpg():
    settings = Settings(database_url="postgresql://u:p@host:5432/db")
    assert settings.database_url == "postgresql+asyncpg://u:p@host:5432/db"


def test_sqlite_url_is_left_alone():
    settings = Settings(database_url="sqlite+aiosqlite:///:memory:")
    assert settings.database_url == "sqlite+aiosqlite:///:memory:"


def test_address_length_defaults(monkeypatch):
    monkeypatch.delenv("ADDRESS_MIN_LENGTH", raising=False)
    monkeypatch.delenv("ADDRESS_MAX_LENGTH", raising=False)
    settings = Settings()
    assert settings.address_min_length == 3
    assert settings.address_max_length == 90
