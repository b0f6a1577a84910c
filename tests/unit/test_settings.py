"""Tests for configuration module."""

from boilerplate_api.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        settings = Settings(_env_file=None, environment="development")
        assert settings.port == 3001
        assert settings.db_pool_size == 10
        assert settings.otel_service_name == "boilerplate-api"

    def test_url_assembled_from_pg_variables(self):
        settings = Settings(
            _env_file=None,
            database_url="",
            pghost="db",
            pgport=6543,
            pguser="app",
            pgpassword="secret",
            pgdatabase="users",
        )
        assert settings.sqlalchemy_url == "postgresql+asyncpg://app:secret@db:6543/users"

    def test_explicit_database_url_wins(self):
        settings = Settings(_env_file=None, database_url="sqlite+aiosqlite:///x.db")
        assert settings.sqlalchemy_url == "sqlite+aiosqlite:///x.db"

    def test_csv_lists_from_environment(self, monkeypatch):
        monkeypatch.setenv("CLERK_AUTHORIZED_PARTIES", "http://localhost:3000, https://app.example.com")
        monkeypatch.setenv("CORS_ORIGINS", "https://app.example.com")

        settings = Settings(_env_file=None)

        assert settings.clerk_authorized_parties == [
            "http://localhost:3000",
            "https://app.example.com",
        ]
        assert settings.allowed_origins == ["https://app.example.com"]

    def test_allowed_origins_default_by_environment(self):
        assert Settings(_env_file=None, environment="development").allowed_origins == ["*"]
        assert Settings(_env_file=None, environment="production").allowed_origins == []

    def test_metrics_auth_needs_both_credentials(self):
        assert not Settings(_env_file=None, metrics_username="prom").metrics_auth_enabled
        assert Settings(
            _env_file=None, metrics_username="prom", metrics_password="pw"
        ).metrics_auth_enabled


class TestGetSettings:
    def test_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()
