from __future__ import annotations

import logging

from fastapi import status
from pydantic import ValidationError as SchemaValidationError

from ..errors import ApiError, ApiErrorKind
from ..schemas.identity import Identity
from ._http import ApiRequester

logger = logging.getLogger(__name__)


class HttpIdentityProvider:
    """Reads the signed-in identity from ``GET /api/users/me``."""

    def __init__(self, requester: ApiRequester) -> None:
        self._requester = requester

    async def current_identity(self) -> Identity | None:
        try:
            payload = await self._requester.get_json("/api/users/me")
        except ApiError as exc:
            if exc.kind is ApiErrorKind.SERVER and exc.status_code == status.HTTP_401_UNAUTHORIZED:
                return None
            raise
        if not payload:
            return None
        try:
            return Identity.model_validate(payload)
        except SchemaValidationError as exc:
            logger.error("identity payload rejected: %s", exc)
            raise ApiError(
                "Respons identitas tidak valid", kind=ApiErrorKind.DECODE, code="DECODE_ERROR"
            ) from exc
