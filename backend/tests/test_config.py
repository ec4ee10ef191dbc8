import logging

import pytest

from eggs_access.config import Settings, get_settings, reset_settings
from eggs_access.utils.log_config import configure_logging, resolve_log_level

# Tests for Settings.from_env() and the lazy settings accessor


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ("APP_NAME", "DEBUG", "API_TOKEN", "REQUEST_TIMEOUT_SECONDS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("API_BASE_URL", "https://erp.mreggs.id/")
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    """Test that only API_BASE_URL is required."""
    settings = Settings.from_env()

    assert settings.api_base_url == "https://erp.mreggs.id"
    assert settings.request_timeout_seconds == 30.0
    assert settings.api_token is None
    assert settings.debug is False
    assert settings.log_level == "INFO"
    assert settings.app_name == "Mr. Eggs Access"


def test_missing_base_url(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("API_BASE_URL", "  ")

    with pytest.raises(ValueError, match="API_BASE_URL environment variable must be set"):
        Settings.from_env()


@pytest.mark.parametrize("value", ["erp.mreggs.id", "ftp://erp.mreggs.id", "https://"])
def test_base_url_must_be_http_with_host(clean_env: pytest.MonkeyPatch, value: str) -> None:
    clean_env.setenv("API_BASE_URL", value)

    with pytest.raises(ValueError, match="valid http/https URL"):
        Settings.from_env()


def test_timeout_override(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("REQUEST_TIMEOUT_SECONDS", "12.5")

    assert Settings.from_env().request_timeout_seconds == 12.5


@pytest.mark.parametrize("value,message", [("soon", "must be a number"), ("0", "greater than 0")])
def test_timeout_rejects_invalid(clean_env: pytest.MonkeyPatch, value: str, message: str) -> None:
    clean_env.setenv("REQUEST_TIMEOUT_SECONDS", value)

    with pytest.raises(ValueError, match=message):
        Settings.from_env()


def test_debug_parsing(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("DEBUG", "Yes")
    assert Settings.from_env().debug is True

    clean_env.setenv("DEBUG", "maybe")
    with pytest.raises(ValueError, match="DEBUG must be a boolean value"):
        Settings.from_env()


def test_token_and_log_level(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("API_TOKEN", " abc ")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.api_token == "abc"
    assert settings.log_level == "DEBUG"


def test_get_settings_is_cached_until_reset(clean_env: pytest.MonkeyPatch) -> None:
    first = get_settings()
    clean_env.setenv("APP_NAME", "Other")
    assert get_settings() is first

    reset_settings()
    assert get_settings().app_name == "Other"


def test_resolve_log_level_falls_back_to_info() -> None:
    assert resolve_log_level("warning") == logging.WARNING
    assert resolve_log_level("chatty") == logging.INFO


def test_configure_logging_sets_package_level() -> None:
    logger = configure_logging("ERROR")
    try:
        assert logger.name == "eggs_access"
        assert logger.level == logging.ERROR
    finally:
        logger.setLevel(logging.NOTSET)
