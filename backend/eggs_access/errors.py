from enum import Enum
from typing import Any

from fastapi import status


class AppError(Exception):
    code: str = "APP_ERROR"
    message: str = "Application error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    details: Any | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        if details is not None:
            self.details = details

        super().__init__(self.message)


class AuthError(AppError):
    code = "AUTH_ERROR"
    message = "Anda perlu login untuk mengakses halaman ini"
    status_code = status.HTTP_401_UNAUTHORIZED


class AccessDeniedError(AppError):
    code = "PERMISSION_DENIED"
    message = "Anda tidak memiliki izin untuk mengakses fitur ini"
    status_code = status.HTTP_403_FORBIDDEN


class ServiceUnavailableError(AppError):
    code = "SERVICE_UNAVAILABLE"
    message = "Memeriksa akses..."
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class ApiErrorKind(str, Enum):
    SERVER = "server"
    NETWORK = "network"
    TIMEOUT = "timeout"
    DECODE = "decode"


class ApiError(AppError):
    """A collaborator call failed.

    ``message`` is what the user sees: the server's own error text when the
    server sent one.
    """

    code = "API_ERROR"
    message = "Upstream service unavailable"
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(
        self,
        message: str | None = None,
        *,
        kind: ApiErrorKind = ApiErrorKind.SERVER,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ):
        super().__init__(message, code=code, status_code=status_code, details=details)
        self.kind = kind


ERROR_CODE_BY_STATUS: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: AuthError.code,
    status.HTTP_403_FORBIDDEN: AccessDeniedError.code,
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_409_CONFLICT: "CONFLICT_ERROR",
}


def error_payload(
    code: str,
    message: str,
    details: Any | None = None,
) -> dict[str, Any]:
    return {"error": {"code": code, "message": message, "details": details}}


def resolve_error_code(status_code: int) -> str:
    if status_code in ERROR_CODE_BY_STATUS:
        return ERROR_CODE_BY_STATUS[status_code]
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "INTERNAL_ERROR"
    return "UNKNOWN_ERROR"
