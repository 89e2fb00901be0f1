"""
Test environment-driven settings.
"""

import pytest

from school_backend.exceptions import ConfigurationError
from school_backend.settings import BackendSettings, settings


@pytest.fixture
def restore_settings():
    saved = dict(vars(settings))
    yield settings
    settings.__dict__.clear()
    settings.__dict__.update(saved)


@pytest.mark.unit
class TestBackendSettings:

    def test_singleton(self):
        assert BackendSettings() is settings

    def test_defaults(self, restore_settings, monkeypatch):
        for name in ("CACHE_BACKEND", "CACHE_VERIFY_RETRIES", "CACHE_VERIFY_DELAY", "DATABASE_URL", "CORS_ORIGINS"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("POSTGRES_USER", "school")
        monkeypatch.setenv("POSTGRES_PASSWORD", "pw")
        monkeypatch.setenv("POSTGRES_DB", "school")

        settings.load()

        assert settings.CACHE_BACKEND == "memory"
        assert settings.CACHE_VERIFY_RETRIES == 3
        assert settings.CACHE_VERIFY_DELAY == 0.5
        assert settings.CORS_ORIGINS == ["*"]
        assert settings.DATABASE_URL.startswith("postgresql+psycopg2://school:pw@")

    def test_database_url_overrides_postgres_parts(self, restore_settings, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///school.db")

        settings.load()

        assert settings.DATABASE_URL == "sqlite:///school.db"

    def test_invalid_backend(self, restore_settings, monkeypatch):
        monkeypatch.setenv("CACHE_BACKEND", "memcached")

        with pytest.raises(ConfigurationError):
            settings.load()

    @pytest.mark.parametrize("name,value", [
        ("CACHE_VERIFY_RETRIES", "three"),
        ("CACHE_VERIFY_DELAY", "-1"),
        ("REDIS_PORT", "port"),
    ])
    def test_invalid_numbers(self, restore_settings, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(ConfigurationError):
            settings.load()

    def test_debug_info_switch(self, restore_settings, monkeypatch):
        monkeypatch.setenv("DEBUG_MODE", "development")
        monkeypatch.setenv("DISABLE_API_DEBUG_INFO", "true")
        settings.load()
        assert settings.include_debug_info is False

        monkeypatch.setenv("DEBUG_MODE", "production")
        monkeypatch.setenv("DISABLE_API_DEBUG_INFO", "false")
        settings.load()
        assert settings.include_debug_info is False

        monkeypatch.setenv("DEBUG_MODE", "local")
        settings.load()
        assert settings.include_debug_info is True
