import os
import threading
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()


class Settings(BaseModel):
    app_name: str = Field(default="Mr. Eggs Access")
    debug: bool = Field(default=False)
    api_base_url: str = Field(default="")
    api_token: str | None = Field(default=None)
    request_timeout_seconds: float = Field(default=30.0)
    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls) -> "Settings":
        api_base_url = os.getenv("API_BASE_URL", "").strip()
        if not api_base_url:
            raise ValueError("API_BASE_URL environment variable must be set")

        parsed = urlparse(api_base_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("API_BASE_URL must be a valid http/https URL with host")

        raw_timeout = os.getenv(
            "REQUEST_TIMEOUT_SECONDS", str(cls.model_fields["request_timeout_seconds"].default)
        ).strip()
        try:
            request_timeout_seconds = float(raw_timeout)
        except ValueError:
            raise ValueError("REQUEST_TIMEOUT_SECONDS must be a number") from None
        if request_timeout_seconds <= 0:
            raise ValueError("REQUEST_TIMEOUT_SECONDS must be greater than 0")

        raw_debug = os.getenv("DEBUG", "false").strip().lower()
        if raw_debug in {"1", "true", "yes", "on"}:
            debug = True
        elif raw_debug in {"0", "false", "no", "off", ""}:
            debug = False
        else:
            raise ValueError("DEBUG must be a boolean value")

        api_token = os.getenv("API_TOKEN", "").strip() or None

        return cls(
            app_name=os.getenv("APP_NAME", cls.model_fields["app_name"].default),
            debug=debug,
            api_base_url=api_base_url.rstrip("/"),
            api_token=api_token,
            request_timeout_seconds=request_timeout_seconds,
            log_level=os.getenv("LOG_LEVEL", cls.model_fields["log_level"].default).strip().upper(),
        )


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_settings() -> Settings:
    """Get settings instance, creating it on first access.

    Importing this module never validates the environment; validation
    happens on first call.

    Raises:
        ValueError: If required environment variables are missing or invalid
    """
    global _settings_instance

    if _settings_instance is not None:
        return _settings_instance

    with _settings_lock:
        if _settings_instance is None:
            _settings_instance = Settings.from_env()

    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None
