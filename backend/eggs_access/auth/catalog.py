"""
Permission Catalog - static role/permission model for the Mr. Eggs ERP.

This module defines the complete authorization vocabulary:
- Roles and their strict hierarchy (staff < manager < admin < super_admin)
- Permissions (19 explicit capability grants, no wildcards)
- Role-to-Permission grants, enumerated literally per role
- Menu-path requirements (any one listed permission grants access)
- Display tables (role labels, permission labels and categories, navigation)

The grants are hand-enumerated per role and are NOT derived from the
hierarchy. Keep them literal.

SECURITY:
- Unknown permissions grant nothing (fail-closed)
- Unknown menu paths are visible (default-allow, see MENU_PERMISSIONS)
- The whole catalog is validated at import time
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final


# ============================================================================
# ROLES
# ============================================================================

class Role(str, Enum):
    """Application roles, ordered by ROLE_HIERARCHY."""
    STAFF = "staff"
    MANAGER = "manager"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


ROLE_HIERARCHY: Final[dict[Role, int]] = {
    Role.STAFF: 1,
    Role.MANAGER: 2,
    Role.ADMIN: 3,
    Role.SUPER_ADMIN: 4,
}

GUEST_ROLE: Final[str] = "guest"


# ============================================================================
# PERMISSIONS
# ============================================================================

class Permission(str, Enum):
    # Core
    VIEW_DASHBOARD = "view_dashboard"
    MANAGE_USERS = "manage_users"
    MANAGE_EMPLOYEES = "manage_employees"
    # Inventory
    MANAGE_SUPPLIERS = "manage_suppliers"
    MANAGE_RAW_MATERIALS = "manage_raw_materials"
    MANAGE_PRODUCTS = "manage_products"
    VIEW_INVENTORY = "view_inventory"
    # Operations
    MANAGE_PURCHASES = "manage_purchases"
    MANAGE_PRODUCTION = "manage_production"
    VIEW_OPERATIONS = "view_operations"
    # Sales
    MANAGE_CUSTOMERS = "manage_customers"
    MANAGE_SALES = "manage_sales"
    MANAGE_PRICING = "manage_pricing"
    VIEW_SALES = "view_sales"
    # Finance
    MANAGE_FINANCIAL = "manage_financial"
    VIEW_FINANCIAL = "view_financial"
    MANAGE_BANK_ACCOUNTS = "manage_bank_accounts"
    # System
    SYSTEM_SETTINGS = "system_settings"
    VIEW_REPORTS = "view_reports"


P = Permission

ROLE_PERMISSIONS: Final[dict[Role, frozenset[Permission]]] = {
    Role.SUPER_ADMIN: frozenset(Permission),

    # Everything except user management and system settings
    Role.ADMIN: frozenset({
        P.VIEW_DASHBOARD,
        P.MANAGE_EMPLOYEES,
        P.MANAGE_SUPPLIERS,
        P.MANAGE_RAW_MATERIALS,
        P.MANAGE_PRODUCTS,
        P.VIEW_INVENTORY,
        P.MANAGE_PURCHASES,
        P.MANAGE_PRODUCTION,
        P.VIEW_OPERATIONS,
        P.MANAGE_CUSTOMERS,
        P.MANAGE_SALES,
        P.MANAGE_PRICING,
        P.VIEW_SALES,
        P.MANAGE_FINANCIAL,
        P.VIEW_FINANCIAL,
        P.MANAGE_BANK_ACCOUNTS,
        P.VIEW_REPORTS,
    }),

    Role.MANAGER: frozenset({
        P.VIEW_DASHBOARD,
        P.VIEW_INVENTORY,
        P.MANAGE_PURCHASES,
        P.MANAGE_PRODUCTION,
        P.VIEW_OPERATIONS,
        P.MANAGE_CUSTOMERS,
        P.MANAGE_SALES,
        P.VIEW_SALES,
        P.VIEW_FINANCIAL,
        P.VIEW_REPORTS,
    }),

    Role.STAFF: frozenset({
        P.VIEW_DASHBOARD,
        P.VIEW_INVENTORY,
        P.MANAGE_SALES,
        P.VIEW_SALES,
        P.MANAGE_CUSTOMERS,
    }),
}

# Granted to an authenticated identity that has no application user yet,
# so the first administrator can reach user setup.
# TODO: product review of manage_users/system_settings for unverified accounts
BOOTSTRAP_PERMISSIONS: Final[frozenset[Permission]] = frozenset({
    P.VIEW_DASHBOARD,
    P.MANAGE_USERS,
    P.SYSTEM_SETTINGS,
})


# ============================================================================
# MENU ACCESS
# ============================================================================

DASHBOARD_MENU: Final[str] = "/"

# Paths missing from this map are visible to everyone.
MENU_PERMISSIONS: Final[dict[str, tuple[Permission, ...]]] = {
    "/": (P.VIEW_DASHBOARD,),
    "/employees": (P.MANAGE_EMPLOYEES,),
    "/users": (P.MANAGE_USERS,),
    "/suppliers": (P.MANAGE_SUPPLIERS, P.VIEW_INVENTORY),
    "/raw-materials": (P.MANAGE_RAW_MATERIALS, P.VIEW_INVENTORY),
    "/products": (P.MANAGE_PRODUCTS, P.VIEW_INVENTORY),
    "/purchases": (P.MANAGE_PURCHASES, P.VIEW_OPERATIONS),
    "/production": (P.MANAGE_PRODUCTION, P.VIEW_OPERATIONS),
    "/customers": (P.MANAGE_CUSTOMERS, P.VIEW_SALES),
    "/sales": (P.MANAGE_SALES, P.VIEW_SALES),
    "/pricing": (P.MANAGE_PRICING, P.VIEW_SALES),
    "/financial": (P.MANAGE_FINANCIAL, P.VIEW_FINANCIAL),
    "/access-control": (P.SYSTEM_SETTINGS, P.MANAGE_USERS),
}

BOOTSTRAP_MENUS: Final[frozenset[str]] = frozenset({"/", "/users", "/access-control"})


# ============================================================================
# DISPLAY TABLES
# ============================================================================

ROLE_LABELS: Final[dict[str, str]] = {
    Role.SUPER_ADMIN.value: "Super Admin",
    Role.ADMIN.value: "Admin",
    Role.MANAGER.value: "Manager",
    Role.STAFF.value: "Staff",
    GUEST_ROLE: "Guest",
}

PENDING_SETUP_LABEL: Final[str] = "Pending Setup"
UNKNOWN_ROLE_LABEL: Final[str] = "Unknown"

PERMISSION_LABELS: Final[dict[Permission, str]] = {
    P.VIEW_DASHBOARD: "Lihat Dashboard",
    P.MANAGE_USERS: "Kelola User",
    P.MANAGE_EMPLOYEES: "Kelola Karyawan",
    P.MANAGE_SUPPLIERS: "Kelola Supplier",
    P.MANAGE_RAW_MATERIALS: "Kelola Bahan Baku",
    P.MANAGE_PRODUCTS: "Kelola Produk",
    P.VIEW_INVENTORY: "Lihat Inventori",
    P.MANAGE_PURCHASES: "Kelola Pembelian",
    P.MANAGE_PRODUCTION: "Kelola Produksi",
    P.VIEW_OPERATIONS: "Lihat Operasional",
    P.MANAGE_CUSTOMERS: "Kelola Pelanggan",
    P.MANAGE_SALES: "Kelola Penjualan",
    P.MANAGE_PRICING: "Kelola Harga",
    P.VIEW_SALES: "Lihat Penjualan",
    P.MANAGE_FINANCIAL: "Kelola Keuangan",
    P.VIEW_FINANCIAL: "Lihat Keuangan",
    P.MANAGE_BANK_ACCOUNTS: "Kelola Rekening Bank",
    P.SYSTEM_SETTINGS: "Pengaturan Sistem",
    P.VIEW_REPORTS: "Lihat Laporan",
}

PERMISSION_CATEGORIES: Final[dict[str, tuple[Permission, ...]]] = {
    "Core": (P.VIEW_DASHBOARD, P.MANAGE_USERS, P.MANAGE_EMPLOYEES),
    "Inventori": (
        P.MANAGE_SUPPLIERS,
        P.MANAGE_RAW_MATERIALS,
        P.MANAGE_PRODUCTS,
        P.VIEW_INVENTORY,
    ),
    "Operasional": (P.MANAGE_PURCHASES, P.MANAGE_PRODUCTION, P.VIEW_OPERATIONS),
    "Penjualan": (P.MANAGE_CUSTOMERS, P.MANAGE_SALES, P.MANAGE_PRICING, P.VIEW_SALES),
    "Keuangan": (P.MANAGE_FINANCIAL, P.VIEW_FINANCIAL, P.MANAGE_BANK_ACCOUNTS),
    "Sistem": (P.SYSTEM_SETTINGS, P.VIEW_REPORTS),
}


@dataclass(frozen=True)
class NavigationItem:
    name: str
    path: str
    category: str


NAVIGATION_CATEGORIES: Final[dict[str, str]] = {
    "main": "Utama",
    "inventory": "Inventori",
    "operations": "Operasional",
    "sales": "Penjualan",
    "finance": "Keuangan",
}

NAVIGATION: Final[tuple[NavigationItem, ...]] = (
    NavigationItem("Dashboard", "/", "main"),
    NavigationItem("Karyawan", "/employees", "main"),
    NavigationItem("Users", "/users", "main"),
    NavigationItem("Kontrol Akses", "/access-control", "main"),
    NavigationItem("Pengaturan Sistem", "/system-settings", "main"),
    NavigationItem("Supplier", "/suppliers", "inventory"),
    NavigationItem("Bahan Baku", "/raw-materials", "inventory"),
    NavigationItem("Produk", "/products", "inventory"),
    NavigationItem("Pembelian", "/purchases", "operations"),
    NavigationItem("Produksi", "/production", "operations"),
    NavigationItem("Pelanggan", "/customers", "sales"),
    NavigationItem("Penjualan", "/sales", "sales"),
    NavigationItem("Harga", "/pricing", "sales"),
    NavigationItem("Keuangan", "/financial", "finance"),
)


# ============================================================================
# PARSING
# ============================================================================

def parse_role(value: str | Role) -> Role:
    """
    Convert a wire value into a Role.

    Raises:
        ValueError: If the value is not a known role
    """
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        raise ValueError(
            f"Invalid role '{value}'. "
            f"Must be one of: {', '.join(role.value for role in ROLE_HIERARCHY)}"
        ) from None


def parse_permission(value: str | Permission) -> Permission:
    """
    Convert a wire value into a Permission.

    Raises:
        ValueError: If the value is not a known permission
    """
    if isinstance(value, Permission):
        return value
    try:
        return Permission(value)
    except ValueError:
        raise ValueError(f"Invalid permission '{value}'") from None


# ============================================================================
# IMPORT-TIME VALIDATION
# ============================================================================

def _validate_catalog() -> None:
    """Validate the catalog tables against each other (fail-fast)."""
    errors = []

    for role in Role:
        if role not in ROLE_HIERARCHY:
            errors.append(f"Role '{role.value}' has no hierarchy rank")
        if role not in ROLE_PERMISSIONS:
            errors.append(f"Role '{role.value}' has no permission grants")
        if role.value not in ROLE_LABELS:
            errors.append(f"Role '{role.value}' has no label")

    ranks = sorted(ROLE_HIERARCHY.values())
    if len(set(ranks)) != len(ranks):
        errors.append("Role hierarchy ranks must be unique")

    for path, permissions in MENU_PERMISSIONS.items():
        if not permissions:
            errors.append(f"Menu '{path}' lists no permissions")
        for permission in permissions:
            if not isinstance(permission, Permission):
                errors.append(f"Menu '{path}' has invalid permission: {permission!r}")

    for path in BOOTSTRAP_MENUS:
        if path not in MENU_PERMISSIONS:
            errors.append(f"Bootstrap menu '{path}' is not a mapped menu")

    missing_labels = set(Permission) - set(PERMISSION_LABELS)
    if missing_labels:
        errors.append(f"Permissions without label: {sorted(p.value for p in missing_labels)}")

    categorized = [p for group in PERMISSION_CATEGORIES.values() for p in group]
    if len(categorized) != len(set(categorized)) or set(categorized) != set(Permission):
        errors.append("Permission categories must list every permission exactly once")

    for item in NAVIGATION:
        if item.category not in NAVIGATION_CATEGORIES:
            errors.append(f"Navigation '{item.path}' has unknown category '{item.category}'")

    if errors:
        raise RuntimeError(
            "Permission catalog validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )


_validate_catalog()
