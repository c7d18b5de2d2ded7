"""Unit tests for configuration management."""

import pytest
from pydantic import ValidationError

from collectionhub.core.config import Settings, get_settings


def test_default_settings():
    """Test default configuration values."""
    settings = Settings()

    assert settings.app_name == "CollectionHub"
    assert settings.api_prefix == "/v2"
    assert settings.cache_ttl_seconds == 1800
    assert settings.max_icon_size == 256 * 1024
    assert settings.icon_namespace == "data"
    assert settings.storage_backend == "local"


def test_settings_from_env(monkeypatch):
    """Test loading settings from environment variables."""
    monkeypatch.setenv("COLLECTIONHUB_ENVIRONMENT", "production")
    monkeypatch.setenv("COLLECTIONHUB_MAX_ICON_SIZE", "1024")
    monkeypatch.setenv("COLLECTIONHUB_CDN_URL", "https://cdn.example.com")

    settings = Settings()

    assert settings.is_production
    assert not settings.is_development
    assert settings.max_icon_size == 1024
    assert settings.cdn_url == "https://cdn.example.com"


def test_cdn_url_trailing_slash_is_stripped():
    settings = Settings(cdn_url="https://cdn.example.com/")

    assert settings.cdn_url == "https://cdn.example.com"


def test_sqlite_rejects_multiple_workers():
    with pytest.raises(ValidationError, match="SQLite does not support multiple worker"):
        Settings(database_url="sqlite+aiosqlite:///./test.db", workers=4)


def test_postgres_allows_multiple_workers():
    settings = Settings(database_url="postgresql+asyncpg://u:p@localhost/db", workers=4)

    assert settings.workers == 4


def test_s3_backend_requires_bucket():
    with pytest.raises(ValidationError, match="requires s3_bucket"):
        Settings(storage_backend="s3")


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
