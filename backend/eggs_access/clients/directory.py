from __future__ import annotations

from typing import Any

from ..errors import ApiError, ApiErrorKind
from ..schemas.identity import DirectoryRecord, UnreadableRecord, parse_directory_rows
from ._http import ApiRequester


class HttpUserDirectory:
    def __init__(self, requester: ApiRequester) -> None:
        self._requester = requester

    async def me(self) -> dict[str, Any]:
        payload = await self._requester.get_json("/api/users/me")
        return payload if isinstance(payload, dict) else {}

    async def list_users(self) -> list[DirectoryRecord | UnreadableRecord]:
        payload = await self._requester.get_json("/api/users")
        if not isinstance(payload, list):
            raise ApiError(
                "Daftar user tidak valid", kind=ApiErrorKind.DECODE, code="DECODE_ERROR"
            )
        # One malformed row must not hide the rest of the directory
        return parse_directory_rows(payload)
