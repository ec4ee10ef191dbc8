from __future__ import annotations

from typing import Protocol

from ...schemas.identity import Identity


class IdentityProviderPort(Protocol):
    async def current_identity(self) -> Identity | None:
        ...
