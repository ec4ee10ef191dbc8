"""
Access Guard - resolve an authorization requirement to a single decision.

The guard is a pure function: evaluate(context, requirement) -> Decision.
Presentation layers (route dependencies, console screens, templates) decide
how to show each outcome.

Evaluation order is fixed and determines the surfaced denial reason:
1. pending (authorization state still resolving)
2. authentication (no identity)
3. required role, when one is set
4. permissions, when a non-empty list is set (any one suffices)
"""
from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from .catalog import ROLE_LABELS, Permission, Role, parse_permission, parse_role
from .evaluator import AccessContext, has_any_permission, meets_role, role_label

logger = logging.getLogger(__name__)

T = TypeVar("T")

PENDING_MESSAGE = "Memeriksa akses..."


class Outcome(str, Enum):
    PENDING = "pending"
    DENIED = "denied"
    ALLOWED = "allowed"


class DenialReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    ROLE_INSUFFICIENT = "role_insufficient"
    PERMISSION_INSUFFICIENT = "permission_insufficient"


DENIAL_TITLES: dict[DenialReason, str] = {
    DenialReason.UNAUTHENTICATED: "Akses Ditolak",
    DenialReason.ROLE_INSUFFICIENT: "Akses Terbatas",
    DenialReason.PERMISSION_INSUFFICIENT: "Akses Tidak Diizinkan",
}


@dataclass(frozen=True)
class AccessRequirement:
    """What a protected boundary needs.

    ``fallback`` replaces the denial message when access is denied.
    With ``show_error`` False and no fallback, a denial resolves to nothing.
    """

    permissions: tuple[Permission, ...] = ()
    required_role: Role | None = None
    fallback: Any = None
    show_error: bool = True

    def __post_init__(self) -> None:
        # Reject unknown names when the requirement is declared
        object.__setattr__(
            self, "permissions", tuple(parse_permission(p) for p in self.permissions)
        )
        if self.required_role is not None:
            object.__setattr__(self, "required_role", parse_role(self.required_role))


@dataclass(frozen=True)
class Decision:
    outcome: Outcome
    reason: DenialReason | None = None
    message: str | None = None
    fallback: Any = None
    show_error: bool = True
    details: dict[str, str] = field(default_factory=dict)

    @property
    def allowed(self) -> bool:
        return self.outcome is Outcome.ALLOWED

    @property
    def pending(self) -> bool:
        return self.outcome is Outcome.PENDING

    @property
    def title(self) -> str | None:
        return DENIAL_TITLES.get(self.reason) if self.reason else None

    def resolve(self, content: T) -> T | Any:
        """Pick what to show: content, fallback, a message, or None."""
        if self.outcome is Outcome.ALLOWED:
            return content
        if self.outcome is Outcome.PENDING:
            return self.message
        if self.fallback is not None:
            return self.fallback
        if not self.show_error:
            return None
        return self.message


def _deny(
    requirement: AccessRequirement,
    reason: DenialReason,
    message: str,
    **details: str,
) -> Decision:
    return Decision(
        outcome=Outcome.DENIED,
        reason=reason,
        message=message,
        fallback=requirement.fallback,
        show_error=requirement.show_error,
        details=details,
    )


def evaluate(context: AccessContext, requirement: AccessRequirement) -> Decision:
    if context.loading:
        return Decision(outcome=Outcome.PENDING, message=PENDING_MESSAGE)

    if not context.is_authenticated:
        return _deny(
            requirement,
            DenialReason.UNAUTHENTICATED,
            "Anda perlu login untuk mengakses halaman ini",
        )

    if requirement.required_role is not None and not meets_role(
        context, requirement.required_role
    ):
        required = requirement.required_role.value
        current = role_label(context)
        return _deny(
            requirement,
            DenialReason.ROLE_INSUFFICIENT,
            f"Halaman ini memerlukan role minimal: {required}. "
            f"Role Anda saat ini: {current}",
            required_role=required,
            current_role=current,
        )

    if requirement.permissions and not has_any_permission(context, requirement.permissions):
        current = role_label(context)
        return _deny(
            requirement,
            DenialReason.PERMISSION_INSUFFICIENT,
            f"Anda tidak memiliki izin untuk mengakses fitur ini. Role Anda: {current}",
            current_role=current,
        )

    return Decision(outcome=Outcome.ALLOWED)


def require(
    *permissions: Permission | str,
    role: Role | str | None = None,
    fallback: Any = None,
    show_error: bool = True,
) -> AccessRequirement:
    return AccessRequirement(
        permissions=tuple(permissions),
        required_role=role,
        fallback=fallback,
        show_error=show_error,
    )


def admin_only(fallback: Any = None) -> AccessRequirement:
    return require(role=Role.ADMIN, fallback=fallback, show_error=False)


def super_admin_only(fallback: Any = None) -> AccessRequirement:
    return require(role=Role.SUPER_ADMIN, fallback=fallback, show_error=False)


def manager_only(fallback: Any = None) -> AccessRequirement:
    return require(role=Role.MANAGER, fallback=fallback, show_error=False)


def with_access_guard(
    permissions: Iterable[Permission | str] = (),
    required_role: Role | str | None = None,
) -> Callable[[Callable[..., T]], Callable[..., Any]]:
    """Guard a callable whose first argument is the AccessContext.

    The wrapped callable only runs when the guard allows; otherwise the
    decision's resolved value (message, or None) is returned instead.
    """
    requirement = require(*permissions, role=required_role)

    def decorator(func: Callable[..., T]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(context: AccessContext, *args: Any, **kwargs: Any) -> Any:
            decision = evaluate(context, requirement)
            if not decision.allowed:
                logger.info(
                    "guarded call blocked",
                    extra={
                        "target": func.__qualname__,
                        "outcome": decision.outcome.value,
                        "reason": decision.reason.value if decision.reason else None,
                    },
                )
                return decision.resolve(None)
            return func(context, *args, **kwargs)

        wrapper.access_requirement = requirement  # type: ignore[attr-defined]
        return wrapper

    return decorator


def describe_requirement(requirement: AccessRequirement) -> str:
    parts = []
    if requirement.required_role is not None:
        parts.append(f"role>={ROLE_LABELS[requirement.required_role.value]}")
    if requirement.permissions:
        parts.append("any of " + ", ".join(p.value for p in requirement.permissions))
    return "; ".join(parts) or "authenticated"
