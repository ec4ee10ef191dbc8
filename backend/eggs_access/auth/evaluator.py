"""
Authorization Evaluator - pure permission, role and menu decisions.

Every function takes an explicit AccessContext; there is no ambient session
state. A missing application user is a legitimate input ("pending setup")
and always resolves to the least-privileged outcome, except for the fixed
bootstrap sets defined in the catalog.

SECURITY:
- No identity: every permission check is False, whatever app_user says
- Identity without application user: bootstrap permissions/menus only
- Identity whose directory binding could not be read: the dashboard only,
  never the bootstrap sets
- Inactive application user: no permissions
- Unknown permission: no access (fail-closed)
- Unknown menu path: visible (default-allow)
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..schemas.identity import ApplicationUser, Identity
from .catalog import (
    BOOTSTRAP_MENUS,
    BOOTSTRAP_PERMISSIONS,
    DASHBOARD_MENU,
    GUEST_ROLE,
    MENU_PERMISSIONS,
    NAVIGATION,
    NAVIGATION_CATEGORIES,
    PENDING_SETUP_LABEL,
    PERMISSION_CATEGORIES,
    PERMISSION_LABELS,
    ROLE_HIERARCHY,
    ROLE_LABELS,
    ROLE_PERMISSIONS,
    UNKNOWN_ROLE_LABEL,
    NavigationItem,
    Permission,
    Role,
)


@dataclass(frozen=True)
class AccessContext:
    """Snapshot of who is asking.

    ``loading`` is True while the application user is still being resolved;
    guards report PENDING until it clears. ``binding_error`` is set when the
    directory does hold a record for the identity but it could not be turned
    into an application user (unknown role, malformed row).
    """

    identity: Identity | None = None
    app_user: ApplicationUser | None = None
    loading: bool = False
    binding_error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def is_unprovisioned(self) -> bool:
        return (
            self.identity is not None
            and self.app_user is None
            and self.binding_error is None
        )

    @property
    def has_broken_binding(self) -> bool:
        return self.identity is not None and self.binding_error is not None


ANONYMOUS = AccessContext()


def has_permission(context: AccessContext, permission: Permission | str) -> bool:
    """Check a single permission.

    Args:
        context: Current identity and application user
        permission: Permission to check; unknown values grant nothing

    Returns:
        bool: True if the permission is granted
    """
    try:
        permission = Permission(permission)
    except ValueError:
        return False

    if context.identity is None or context.has_broken_binding:
        return False

    app_user = context.app_user
    if app_user is None:
        return permission in BOOTSTRAP_PERMISSIONS
    if not app_user.is_active:
        return False
    return permission in ROLE_PERMISSIONS.get(app_user.role, frozenset())


def has_any_permission(
    context: AccessContext, permissions: Iterable[Permission | str]
) -> bool:
    """True if at least one permission is granted.

    An empty iterable is False here. Treating "no permissions listed" as
    "no restriction" is the caller's job (see guard.evaluate).
    """
    return any(has_permission(context, permission) for permission in permissions)


def can_access_menu(context: AccessContext, menu_key: str) -> bool:
    required = MENU_PERMISSIONS.get(menu_key)
    if not required:
        return True

    if menu_key == DASHBOARD_MENU and context.identity is not None:
        return True

    if context.is_unprovisioned:
        return menu_key in BOOTSTRAP_MENUS

    return has_any_permission(context, required)


def role_rank(role: Role | str | None) -> int:
    """Hierarchy level of a role; 0 for unknown or missing roles."""
    if role is None:
        return 0
    try:
        return ROLE_HIERARCHY.get(Role(role), 0)
    except ValueError:
        return 0


def meets_role(context: AccessContext, required_role: Role | str) -> bool:
    user_role = context.app_user.role if context.app_user else None
    return role_rank(user_role) >= role_rank(required_role)


def is_admin(context: AccessContext) -> bool:
    return context.app_user is not None and context.app_user.role in (
        Role.ADMIN,
        Role.SUPER_ADMIN,
    )


def is_super_admin(context: AccessContext) -> bool:
    return context.app_user is not None and context.app_user.role == Role.SUPER_ADMIN


def current_role(context: AccessContext) -> str:
    return context.app_user.role.value if context.app_user else GUEST_ROLE


def role_label(context: AccessContext) -> str:
    if context.is_unprovisioned:
        return PENDING_SETUP_LABEL
    if context.has_broken_binding:
        return UNKNOWN_ROLE_LABEL
    return ROLE_LABELS.get(current_role(context), UNKNOWN_ROLE_LABEL)


def granted_permissions(context: AccessContext) -> frozenset[Permission]:
    return frozenset(p for p in Permission if has_permission(context, p))


def needs_setup(context: AccessContext) -> bool:
    """Whether to tell the user their account still needs configuring."""
    return not context.loading and context.is_unprovisioned


def visible_navigation(context: AccessContext) -> list[NavigationItem]:
    return [item for item in NAVIGATION if can_access_menu(context, item.path)]


def group_navigation(items: Iterable[NavigationItem]) -> dict[str, list[NavigationItem]]:
    """Group items by category label, keeping category order and dropping empty ones."""
    grouped: dict[str, list[NavigationItem]] = {label: [] for label in NAVIGATION_CATEGORIES.values()}
    for item in items:
        grouped[NAVIGATION_CATEGORIES[item.category]].append(item)
    return {label: entries for label, entries in grouped.items() if entries}


def permission_matrix(role: Role | str) -> dict[str, list[tuple[Permission, str, bool]]]:
    """Per category: (permission, label, granted) for the given role.

    Raises:
        ValueError: If role is not a known role
    """
    granted = ROLE_PERMISSIONS[Role(role)]
    return {
        category: [
            (permission, PERMISSION_LABELS[permission], permission in granted)
            for permission in permissions
        ]
        for category, permissions in PERMISSION_CATEGORIES.items()
    }
