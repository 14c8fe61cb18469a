"""Unit tests that do not require a running API or external services."""
from app.config import settings


def test_settings_load():
    """Settings load from environment (e.g. CI env vars)."""
    assert settings.API_PREFIX == "/api"
    assert settings.APP_NAME == "IntroAqua Backend"
    assert settings.NUMBER_GENERATION_ATTEMPTS >= 1
    assert settings.MAX_REPORT_ATTACHMENTS == 5


def test_environment_flag():
    """Environment flags reflect ENVIRONMENT value."""
    assert settings.ENVIRONMENT.lower() in ("development", "test", "production")
    assert settings.is_development == (settings.ENVIRONMENT.lower() == "development")
    assert settings.is_production == (settings.ENVIRONMENT.lower() == "production")


def test_cors_lists_parsed():
    assert isinstance(settings.ALLOWED_ORIGINS, list)
    assert "GET" in settings.ALLOWED_METHODS
