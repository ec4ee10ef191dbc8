from __future__ import annotations

import httpx

from ..config import Settings
from ._http import ApiRequester
from .directory import HttpUserDirectory
from .identity import HttpIdentityProvider
from .reset import HttpResetClient


def build_requester(
    settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
) -> ApiRequester:
    return ApiRequester(
        base_url=settings.api_base_url,
        timeout_seconds=settings.request_timeout_seconds,
        token=settings.api_token,
        transport=transport,
    )


__all__ = [
    "ApiRequester",
    "HttpIdentityProvider",
    "HttpResetClient",
    "HttpUserDirectory",
    "build_requester",
]
