"""Tests for environment-driven settings."""

import pytest

from podcatalog.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("PORT", "HOST", "LOG_LEVEL", "LOG_JSON", "DATABASE_URL", "DATABASE_ECHO", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(var, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.port == 3000
        assert settings.host == "0.0.0.0"
        assert settings.log_level == "INFO"
        assert settings.database.url == "sqlite:///./podcatalog.db"
        assert settings.cors.allow_origins == ["*"]
        assert settings.cors.allow_methods == ["GET", "POST", "PUT", "DELETE"]
        assert settings.cors.allow_headers == ["Content-Type", "Authorization"]

    def test_port_from_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        assert Settings(_env_file=None).port == 8080

    def test_database_url_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://catalog@localhost/podcasts")
        assert Settings(_env_file=None).database.url == "postgresql://catalog@localhost/podcasts"

    def test_cors_origins_from_env(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", '["https://app.example"]')
        assert Settings(_env_file=None).cors.allow_origins == ["https://app.example"]

    def test_invalid_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()

    def test_dotenv_reaches_nested_sections(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text(
            "PORT=4000\n"
            "DATABASE_URL=sqlite:///./other.db\n"
            "DATABASE_ECHO=true\n"
            'CORS_ALLOW_ORIGINS=["https://app.example"]\n'
        )
        monkeypatch.chdir(tmp_path)

        settings = Settings()
        assert settings.port == 4000
        assert settings.database.url == "sqlite:///./other.db"
        assert settings.database.echo is True
        assert settings.cors.allow_origins == ["https://app.example"]

    def test_env_var_overrides_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("DATABASE_URL=sqlite:///./other.db\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DATABASE_URL", "sqlite:///./from-env.db")

        assert Settings().database.url == "sqlite:///./from-env.db"
