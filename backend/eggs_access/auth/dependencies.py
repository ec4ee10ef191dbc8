"""
Route boundary for the Access Guard.

The application resolves the caller's AccessContext (identity provider +
user directory) in its own middleware and stores it on
``request.state.access_context``. Routes then declare what they need:

    @router.get("/financial", dependencies=[Depends(require_access("view_financial"))])

Verdict mapping:
- PENDING -> 503 (authorization state not resolved yet)
- UNAUTHENTICATED -> 401
- ROLE_INSUFFICIENT / PERMISSION_INSUFFICIENT -> 403
"""
from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from ..errors import (
    AccessDeniedError,
    AppError,
    AuthError,
    ServiceUnavailableError,
    error_payload,
)
from .catalog import Permission, Role
from .evaluator import ANONYMOUS, AccessContext
from .guard import DenialReason, Outcome, describe_requirement, evaluate, require

logger = logging.getLogger(__name__)


def get_access_context(request: Request) -> AccessContext:
    context = getattr(request.state, "access_context", None)
    if isinstance(context, AccessContext):
        return context
    return ANONYMOUS


def require_access(
    *permissions: Permission | str,
    role: Role | str | None = None,
) -> Callable:
    """
    Build a dependency that enforces an access requirement.

    Args:
        *permissions: Any one of these grants access (empty: no restriction)
        role: Minimum role, checked before permissions

    Returns:
        Dependency returning the AccessContext when access is allowed

    Raises:
        ValueError: If a permission or role name is unknown
    """
    requirement = require(*permissions, role=role)

    async def dependency(
        request: Request,
        context: AccessContext = Depends(get_access_context),
    ) -> AccessContext:
        decision = evaluate(context, requirement)
        if decision.allowed:
            return context

        if decision.outcome is Outcome.PENDING:
            raise ServiceUnavailableError(decision.message)

        logger.warning(
            "access denied method=%s path=%s reason=%s requirement=%s",
            request.method,
            request.url.path,
            decision.reason.value if decision.reason else None,
            describe_requirement(requirement),
        )
        if decision.reason is DenialReason.UNAUTHENTICATED:
            raise AuthError(decision.message, details=decision.details or None)
        raise AccessDeniedError(
            decision.message,
            details={"reason": decision.reason.value, **decision.details},
        )

    return dependency


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc.code, exc.message, exc.details),
    )
