"""Tests for resolving the caller's application user."""
import pytest

from eggs_access.auth.catalog import Role
from eggs_access.domain.errors import DirectoryBindingError
from eggs_access.errors import ApiError, ApiErrorKind
from eggs_access.schemas.identity import DirectoryRecord, Identity, UnreadableRecord
from eggs_access.services.permission_session import PermissionSession, resolve_app_user

from tests.access_helpers import IDENTITY, FakeDirectory, FakeIdentityProvider, directory_row


class TestResolveAppUser:
    def test_matches_on_identity_binding(self):
        records = [
            DirectoryRecord.model_validate(directory_row("staff", identity_id="someone-else")),
            DirectoryRecord.model_validate(directory_row("manager")),
        ]
        user = resolve_app_user(records, IDENTITY)
        assert user is not None
        assert user.role is Role.MANAGER

    def test_no_binding(self):
        records = [DirectoryRecord.model_validate(directory_row("staff", identity_id="x"))]
        assert resolve_app_user(records, IDENTITY) is None

    def test_inactive_user_stays_bound(self):
        records = [DirectoryRecord.model_validate(directory_row("admin", is_active=0))]
        user = resolve_app_user(records, IDENTITY)
        assert user is not None
        assert user.is_active is False

    def test_unknown_role_is_a_binding_error(self):
        records = [DirectoryRecord.model_validate(directory_row("owner"))]
        with pytest.raises(DirectoryBindingError, match="Invalid role"):
            resolve_app_user(records, IDENTITY)

    def test_unreadable_bound_row_is_a_binding_error(self):
        records = [UnreadableRecord(identity_id=IDENTITY.id, reason="role missing")]
        with pytest.raises(DirectoryBindingError, match="unreadable"):
            resolve_app_user(records, IDENTITY)

    def test_unreadable_row_of_someone_else_is_ignored(self):
        records = [
            UnreadableRecord(identity_id="someone-else", reason="role missing"),
            DirectoryRecord.model_validate(directory_row("staff")),
        ]
        assert resolve_app_user(records, IDENTITY).role is Role.STAFF


class TestPermissionSession:
    def test_starts_pending(self):
        session = PermissionSession(FakeIdentityProvider(), FakeDirectory([]))
        assert session.context.loading is True

    @pytest.mark.anyio
    async def test_load_resolves_role(self):
        session = PermissionSession(FakeIdentityProvider(), FakeDirectory([directory_row("admin")]))

        context = await session.load()

        assert context.loading is False
        assert context.app_user.role is Role.ADMIN
        assert session.is_admin()
        assert session.has_permission("manage_bank_accounts")
        assert not session.has_permission("manage_users")
        assert session.role_label() == "Admin"

    @pytest.mark.anyio
    async def test_signed_out(self):
        directory = FakeDirectory([directory_row("admin")])
        session = PermissionSession(FakeIdentityProvider(None), directory)

        context = await session.load()

        assert context.identity is None
        assert context.loading is False
        assert directory.list_calls == 0
        assert not session.can_access_menu("/")

    @pytest.mark.anyio
    async def test_unprovisioned_identity(self):
        session = PermissionSession(FakeIdentityProvider(), FakeDirectory([]))

        await session.load()

        assert session.role_label() == "Pending Setup"
        assert session.has_any_permission(["manage_users"])
        assert [item.path for item in session.visible_navigation()] == [
            "/",
            "/users",
            "/access-control",
            "/system-settings",
        ]

    @pytest.mark.anyio
    async def test_identity_lookup_failure_is_signed_out(self):
        error = ApiError("down", kind=ApiErrorKind.NETWORK)
        session = PermissionSession(FakeIdentityProvider(error), FakeDirectory([]))

        context = await session.load()

        assert context.identity is None
        assert session.last_error == "down"

    @pytest.mark.anyio
    async def test_directory_failure_leaves_identity_unprovisioned(self):
        error = ApiError("directory down", kind=ApiErrorKind.SERVER, status_code=500)
        session = PermissionSession(FakeIdentityProvider(), FakeDirectory(error))

        context = await session.load()

        assert context.identity == IDENTITY
        assert context.app_user is None
        assert context.loading is False
        assert session.last_error == "directory down"

    @pytest.mark.anyio
    async def test_same_identity_is_not_refetched(self):
        directory = FakeDirectory([directory_row("staff")])
        session = PermissionSession(FakeIdentityProvider(), directory)
        await session.load()

        await session.set_identity(Identity(id=IDENTITY.id, email=IDENTITY.email))

        assert directory.list_calls == 1

    @pytest.mark.anyio
    async def test_role_change_seen_only_after_refresh(self):
        directory = FakeDirectory([directory_row("staff")])
        session = PermissionSession(FakeIdentityProvider(), directory)
        await session.load()

        directory.rows = [directory_row("super_admin")]
        assert not session.is_super_admin()

        await session.refresh()
        assert session.is_super_admin()

    @pytest.mark.anyio
    async def test_logout_clears_user(self):
        session = PermissionSession(FakeIdentityProvider(), FakeDirectory([directory_row("manager")]))
        await session.load()

        context = await session.set_identity(None)

        assert context.app_user is None
        assert not session.meets_role(Role.STAFF)

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "row",
        [
            directory_row("owner"),
            {"id": 7, "mocha_user_id": IDENTITY.id, "email": "owner@mreggs.id"},
        ],
        ids=["unknown-role", "malformed-row"],
    )
    async def test_unusable_binding_grants_nothing(self, row):
        session = PermissionSession(FakeIdentityProvider(), FakeDirectory([row]))

        context = await session.load()

        assert context.identity == IDENTITY
        assert context.app_user is None
        assert context.binding_error
        assert session.last_error == context.binding_error
        assert not session.has_permission("manage_users")
        assert not session.has_permission("system_settings")
        assert not session.has_any_permission(["view_dashboard"])
        assert not session.can_access_menu("/users")
        assert not session.can_access_menu("/access-control")
        assert session.role_label() == "Unknown"

    @pytest.mark.anyio
    async def test_fixed_binding_recovers_on_refresh(self):
        directory = FakeDirectory([directory_row("owner")])
        session = PermissionSession(FakeIdentityProvider(), directory)
        await session.load()

        directory.rows = [directory_row("manager")]
        context = await session.refresh()

        assert context.binding_error is None
        assert session.last_error is None
        assert session.has_permission("view_sales")
