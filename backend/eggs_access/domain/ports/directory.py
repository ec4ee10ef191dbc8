from __future__ import annotations

from typing import Any, Protocol, Sequence

from ...schemas.identity import DirectoryRecord, UnreadableRecord


class UserDirectoryPort(Protocol):
    async def me(self) -> dict[str, Any]:
        ...

    async def list_users(self) -> Sequence[DirectoryRecord | UnreadableRecord]:
        ...
