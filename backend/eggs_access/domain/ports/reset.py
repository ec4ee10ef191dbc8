from __future__ import annotations

from typing import Protocol

from ...schemas.reset import ResetPreviewResponse, ResetRequest, ResetResult


class ResetPort(Protocol):
    async def fetch_preview(self) -> ResetPreviewResponse:
        ...

    async def execute(self, request: ResetRequest) -> ResetResult:
        ...
