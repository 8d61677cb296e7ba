"""
Tests for configuration management.
"""

import pytest


def test_settings_defaults():
    """Test that settings have sensible defaults."""
    from src.web_backend.config import Settings

    settings = Settings()

    assert settings.APP_NAME == "SlothBoost API"
    assert settings.APP_VERSION == "1.0.0"
    assert settings.API_PREFIX == "/api"
    assert settings.MAX_LIVE_SESSIONS >= 1
    assert settings.HISTORY_PAGE_SIZE == 20


def test_settings_cors_origins():
    """Test CORS origins configuration."""
    from src.web_backend.config import Settings

    settings = Settings()

    assert isinstance(settings.CORS_ORIGINS, list)
    assert any("localhost" in origin for origin in settings.CORS_ORIGINS)


def test_settings_database_url():
    """Test database URL configuration."""
    from src.web_backend.config import Settings

    settings = Settings()

    assert settings.DATABASE_URL is not None
    assert "sqlite" in settings.DATABASE_URL or "postgresql" in settings.DATABASE_URL


def test_settings_generation_timeout_must_be_positive():
    """Test generation timeout validation."""
    from pydantic import ValidationError
    from src.web_backend.config import Settings

    with pytest.raises(ValidationError):
        Settings(GENERATION_TIMEOUT_SECONDS=0)


def test_settings_environment_override(monkeypatch):
    """Test that settings can be overridden via environment."""
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("DEFAULT_LLM_PROVIDER", "gemini")

    from src.web_backend.config import Settings
    settings = Settings()

    assert settings.DEBUG is True
    assert settings.PORT == 9000
    assert settings.DEFAULT_LLM_PROVIDER == "gemini"
