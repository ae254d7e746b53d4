"""Tests for settings loading."""

import pytest

from shaho_engine.config import Settings, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in (
            "DATABASE_URL",
            "LOG_LEVEL",
            "CHANGE_HISTORY_WINDOW_DAYS",
            "NOTIFICATION_DEADLINE_DAYS",
            "DEBUG",
        ):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setattr("shaho_engine.config.load_dotenv", lambda: False)

        settings = Settings.from_env()

        assert settings.database_url.startswith("postgresql+asyncpg://")
        assert settings.log_level == "INFO"
        assert settings.change_history_window_days == 5
        assert settings.notification_deadline_days == 5
        assert settings.debug is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("CHANGE_HISTORY_WINDOW_DAYS", "10")
        monkeypatch.setenv("DEBUG", "TRUE")

        settings = Settings.from_env()

        assert settings.database_url == "sqlite+aiosqlite:///:memory:"
        assert settings.log_level == "DEBUG"
        assert settings.change_history_window_days == 10
        assert settings.debug is True

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()
