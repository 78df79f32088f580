"""Tests for the settings module."""

from snippet_board.config.settings import Settings, get_settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.STORE_PATH == "serverdb.json"
    assert settings.STATIC_DIR is None
    assert settings.REDDIT_TIMEOUT_SECONDS == 10.0
    assert settings.CORS_ORIGINS == ["*"]


def test_comma_separated_lists_are_split():
    settings = Settings(_env_file=None, CORS_ORIGINS="http://a.test, http://b.test", CORS_ALLOW_METHODS="GET,POST")

    assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]
    assert settings.CORS_ALLOW_METHODS == ["GET", "POST"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("STORE_PATH", "/tmp/other.json")
    monkeypatch.setenv("REDDIT_TIMEOUT_SECONDS", "2.5")

    settings = Settings(_env_file=None)

    assert settings.STORE_PATH == "/tmp/other.json"
    assert settings.REDDIT_TIMEOUT_SECONDS == 2.5


def test_get_settings_is_cached():
    get_settings.cache_clear()

    assert get_settings() is get_settings()
