"""Shared test fixtures and configuration."""
import os

import pytest

# Modules that read settings lazily still need a base URL to validate against
os.environ.setdefault("API_BASE_URL", "http://erp.test")


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _fresh_settings():
    from eggs_access.config import reset_settings

    reset_settings()
    yield
    reset_settings()
