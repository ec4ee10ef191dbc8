"""Resolve and hold the current caller's AccessContext.

The application user is fetched once per identity: on load(), when
set_identity() sees a different identity, or on an explicit refresh().
Role or activation changes made elsewhere are NOT picked up until one of
those happens; there is no polling.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..auth import evaluator
from ..auth.catalog import NavigationItem, Permission, Role
from ..auth.evaluator import AccessContext
from ..domain.errors import DirectoryBindingError
from ..domain.ports.directory import UserDirectoryPort
from ..domain.ports.identity import IdentityProviderPort
from ..errors import ApiError
from ..schemas.identity import ApplicationUser, DirectoryRecord, Identity, UnreadableRecord

logger = logging.getLogger(__name__)


def resolve_app_user(
    records: Sequence[DirectoryRecord | UnreadableRecord], identity: Identity
) -> ApplicationUser | None:
    """Find the application user bound to an identity.

    Inactive users stay bound (and get no permissions) so that deactivating
    an account never drops it back to the bootstrap grants.

    Raises:
        DirectoryBindingError: If the bound record is unreadable or carries
            an unknown role
    """
    matches = [record for record in records if record.binds(identity)]
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            "identity bound to several directory records, using first identity_id=%s",
            identity.id,
        )
    record = matches[0]
    if isinstance(record, UnreadableRecord):
        raise DirectoryBindingError(f"Directory record is unreadable: {record.reason}")
    try:
        return record.to_app_user()
    except ValueError as exc:
        raise DirectoryBindingError(str(exc)) from exc


class PermissionSession:
    def __init__(
        self,
        identity_provider: IdentityProviderPort,
        directory: UserDirectoryPort,
    ) -> None:
        self._identity_provider = identity_provider
        self._directory = directory
        self._identity: Identity | None = None
        self._app_user: ApplicationUser | None = None
        self._binding_error: str | None = None
        self._loading = True
        self.last_error: str | None = None

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def app_user(self) -> ApplicationUser | None:
        return self._app_user

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def context(self) -> AccessContext:
        return AccessContext(
            identity=self._identity,
            app_user=self._app_user,
            loading=self._loading,
            binding_error=self._binding_error,
        )

    async def load(self) -> AccessContext:
        """Ask the identity provider who is signed in and resolve their user."""
        try:
            identity = await self._identity_provider.current_identity()
        except ApiError as exc:
            logger.error("identity lookup failed: %s", exc.message)
            self.last_error = exc.message
            identity = None
        await self._apply_identity(identity)
        return self.context

    async def set_identity(self, identity: Identity | None) -> AccessContext:
        """Switch identity (login/logout); re-resolves only when it changed."""
        current_id = self._identity.id if self._identity else None
        new_id = identity.id if identity else None
        if current_id == new_id and not self._loading:
            return self.context
        await self._apply_identity(identity)
        return self.context

    async def refresh(self) -> AccessContext:
        await self._apply_identity(self._identity)
        return self.context

    async def _apply_identity(self, identity: Identity | None) -> None:
        self._identity = identity
        self._binding_error = None
        if identity is None:
            self._app_user = None
            self._loading = False
            return

        self._loading = True
        try:
            await self._directory.me()
            records = await self._directory.list_users()
            self._app_user = resolve_app_user(records, identity)
            self.last_error = None
        except ApiError as exc:
            logger.exception("error fetching app user identity_id=%s", identity.id)
            self._app_user = None
            self.last_error = exc.message
        except DirectoryBindingError as exc:
            logger.error("unusable directory record identity_id=%s: %s", identity.id, exc)
            self._app_user = None
            self._binding_error = str(exc)
            self.last_error = str(exc)
        finally:
            self._loading = False

        if self._app_user is None and self._binding_error is None:
            logger.info("identity has no application user", extra={"identity_id": identity.id})

    # Shorthands over the current context

    def has_permission(self, permission: Permission | str) -> bool:
        return evaluator.has_permission(self.context, permission)

    def has_any_permission(self, permissions: Iterable[Permission | str]) -> bool:
        return evaluator.has_any_permission(self.context, permissions)

    def can_access_menu(self, menu_key: str) -> bool:
        return evaluator.can_access_menu(self.context, menu_key)

    def meets_role(self, required_role: Role | str) -> bool:
        return evaluator.meets_role(self.context, required_role)

    def is_admin(self) -> bool:
        return evaluator.is_admin(self.context)

    def is_super_admin(self) -> bool:
        return evaluator.is_super_admin(self.context)

    def role_label(self) -> str:
        return evaluator.role_label(self.context)

    def visible_navigation(self) -> list[NavigationItem]:
        return evaluator.visible_navigation(self.context)
