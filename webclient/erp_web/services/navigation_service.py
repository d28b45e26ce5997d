# Overview: Role-scoped navigation tree as a pure lookup over declarative tables.

"""
Navigation Resolver

resolve_nav_items(principal_type, department) selects a base list from the
tables below, then orders it by priority. The result is deterministic and
never empty: unknown or missing departments resolve to FALLBACK_NAV.

Items are frozen; every call returns a new list and nothing mutates a built
tree.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

from ..permissions import Department, PrincipalType, coerce_department, coerce_principal_type


VIEW_PARAM = "tab"


@dataclass(frozen=True)
class NavItem:
    path: str
    label: str
    icon: str
    priority: int | None = None
    children: tuple["NavItem", ...] = ()

    def __post_init__(self):
        for child in self.children:
            if child.children:
                raise ValueError(f"{self.label}: navigation nests at most one level deep")

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    @property
    def base_path(self) -> str:
        return urlsplit(self.path).path

    @property
    def view(self) -> str | None:
        """Value of the view selector (?tab=...) carried by the path, if any."""
        values = parse_qs(urlsplit(self.path).query).get(VIEW_PARAM)
        return values[0] if values else None

    def to_dict(self) -> dict:
        data = {
            "path": self.path,
            "label": self.label,
            "icon": self.icon,
            "priority": self.priority,
        }
        if self.has_children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


# -- SUB-ITEMS --

STORE_SUB_ITEMS = (
    NavItem("/dashboard/store?tab=home", "Home", "home"),
    NavItem("/dashboard/store?tab=material-issue", "Material Issue", "package-minus"),
    NavItem("/dashboard/store?tab=dc", "Bills", "receipt"),
    NavItem("/dashboard/store?tab=masters", "Masters", "database"),
)

PPC_SUB_ITEMS = (
    NavItem("/dashboard/ppc?tab=home", "Home", "home"),
    NavItem("/dashboard/ppc?tab=po-list", "PO List", "shopping-cart"),
    NavItem("/dashboard/ppc?tab=create-po", "Create PO", "package-plus"),
    NavItem("/dashboard/ppc?tab=create-workorder", "Create Work Order", "receipt"),
    NavItem("/dashboard/ppc?tab=auto-planning", "Auto Planning", "database"),
)


# -- TOP-LEVEL LISTS --

COMPANY_NAV = (
    NavItem("/dashboard", "Overview", "layout-dashboard", 1),
    NavItem("/dashboard/store", "Store", "store", 2, STORE_SUB_ITEMS),
    NavItem("/dashboard/ppc", "PPC", "factory", 3, PPC_SUB_ITEMS),
    NavItem("/dashboard/hr", "HR", "shield", 4),
    NavItem("/dashboard/accounts", "Accounts", "wallet", 5),
    NavItem("/dashboard/reports", "Reports", "line-chart", 6),
    NavItem("/dashboard/admin", "User Mgmt", "users", 7),
)

DEPARTMENT_NAV = {
    Department.HR.value: (
        NavItem("/dashboard/hr", "HR Dashboard", "shield", 1),
    ),
    Department.STORE.value: (
        NavItem("/dashboard/store", "Store", "store", 1, STORE_SUB_ITEMS),
    ),
    Department.PPC.value: (
        NavItem("/dashboard/ppc", "PPC", "factory", 1, PPC_SUB_ITEMS),
    ),
    Department.ACCOUNTS.value: (
        NavItem("/dashboard/accounts", "Accounts", "wallet", 1),
    ),
    Department.REPORTS.value: (
        NavItem("/dashboard/reports", "Reports", "line-chart", 1),
    ),
}

FALLBACK_NAV = (
    NavItem("/dashboard", "Dashboard", "layout-dashboard", 1),
)


def _priority_key(item: NavItem) -> int:
    return item.priority if item.priority is not None else sys.maxsize


def resolve_nav_items(principal_type, department) -> list[NavItem]:
    """Ordered navigation for a principal. Never empty."""
    principal = coerce_principal_type(principal_type)
    dept = coerce_department(department)

    if principal is PrincipalType.COMPANY:
        base = COMPANY_NAV
    elif principal is PrincipalType.USER and dept is not None:
        base = DEPARTMENT_NAV[dept.value]
    else:
        base = FALLBACK_NAV

    # sorted() is stable, so equal priorities keep table order
    return sorted(base, key=_priority_key)


def find_module(path) -> NavItem | None:
    """Top-level module entry (from the full company list) owning `path`."""
    base = urlsplit(path).path if isinstance(path, str) else ""
    for item in COMPANY_NAV:
        if item.base_path == base:
            return item
    return None
