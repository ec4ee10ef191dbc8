from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..errors import ApiError, ApiErrorKind, resolve_error_code

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Tidak dapat terhubung ke server"
TIMEOUT_ERROR_MESSAGE = "Permintaan ke server melebihi batas waktu"
DECODE_ERROR_MESSAGE = "Respons server tidak valid"


def extract_error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, Mapping):
        return None
    error = body.get("error")
    if isinstance(error, str) and error:
        return error
    if isinstance(error, Mapping) and isinstance(error.get("message"), str):
        return error["message"]
    return None


class ApiRequester:
    """JSON over HTTP with a bounded timeout and no automatic retry.

    Every failure is raised as ApiError; the kind tells timeouts, transport
    failures, error statuses and undecodable bodies apart.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = 30.0,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._headers = {"Accept": "application/json", **dict(headers or {})}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._transport = transport

    async def get_json(
        self, path: str, *, params: Mapping[str, str] | None = None
    ) -> Any:
        return await self._request("GET", path, params=params)

    async def post_json(self, path: str, payload: Mapping[str, Any]) -> Any:
        return await self._request("POST", path, json=payload)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self._build_url(path)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                headers=self._headers,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            logger.error("request timed out method=%s url=%s", method, url)
            raise ApiError(
                TIMEOUT_ERROR_MESSAGE, kind=ApiErrorKind.TIMEOUT, code="TIMEOUT"
            ) from exc
        except httpx.RequestError as exc:
            logger.error("request failed method=%s url=%s error=%s", method, url, exc)
            raise ApiError(
                NETWORK_ERROR_MESSAGE, kind=ApiErrorKind.NETWORK, code="NETWORK_ERROR"
            ) from exc

        if response.is_error:
            message = extract_error_message(response) or response.reason_phrase or None
            logger.warning(
                "request rejected method=%s url=%s status=%s message=%s",
                method,
                url,
                response.status_code,
                message,
            )
            raise ApiError(
                message,
                kind=ApiErrorKind.SERVER,
                code=resolve_error_code(response.status_code),
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                DECODE_ERROR_MESSAGE, kind=ApiErrorKind.DECODE, code="DECODE_ERROR"
            ) from exc

    def _build_url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"
