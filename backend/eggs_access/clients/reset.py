from __future__ import annotations

from pydantic import ValidationError as SchemaValidationError

from ..errors import ApiError, ApiErrorKind
from ..schemas.reset import ResetPreviewResponse, ResetRequest, ResetResult
from ._http import ApiRequester

PREVIEW_PATH = "/api/system/reset-preview"
RESET_PATH = "/api/system/reset-data"


class HttpResetClient:
    def __init__(self, requester: ApiRequester) -> None:
        self._requester = requester

    async def fetch_preview(self) -> ResetPreviewResponse:
        payload = await self._requester.get_json(PREVIEW_PATH)
        try:
            return ResetPreviewResponse.model_validate(payload)
        except SchemaValidationError as exc:
            raise ApiError(
                "Preview reset tidak valid", kind=ApiErrorKind.DECODE, code="DECODE_ERROR"
            ) from exc

    async def execute(self, request: ResetRequest) -> ResetResult:
        payload = await self._requester.post_json(
            RESET_PATH, request.model_dump(mode="json")
        )
        try:
            return ResetResult.model_validate(payload)
        except SchemaValidationError as exc:
            raise ApiError(
                "Hasil reset tidak valid", kind=ApiErrorKind.DECODE, code="DECODE_ERROR"
            ) from exc
