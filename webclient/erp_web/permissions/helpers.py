# Overview: Pure access-policy functions over the static route tables.
# Shared by the route guard and the in-view module check.

from .definitions import (
    DEPARTMENT_ACCESS,
    DEPARTMENT_LANDING,
    HOME_PATH,
    PROTECTED_PREFIXES,
)
from .principals import PrincipalType, coerce_department, coerce_principal_type


def _normalize_path(path) -> str:
    if not isinstance(path, str):
        return ""
    return path.split("?", 1)[0].split("#", 1)[0]


def path_matches_prefix(path, prefix: str) -> bool:
    """Segment-aware prefix match: '/dashboard/hr' matches '/dashboard/hr/x', not '/dashboard/hrx'."""
    path = _normalize_path(path)
    prefix = prefix.rstrip("/") or "/"
    if prefix == "/":
        return path.startswith("/")
    return path == prefix or path.startswith(prefix + "/")


def is_protected(path) -> bool:
    """True if the path needs an active session."""
    return any(path_matches_prefix(path, prefix) for prefix in PROTECTED_PREFIXES)


def department_restriction(path) -> frozenset | None:
    """Allowed department set registered for the path, or None if unrestricted."""
    for prefix, departments in DEPARTMENT_ACCESS.items():
        if path_matches_prefix(path, prefix):
            return departments
    return None


def is_allowed(principal_type, department, path) -> bool:
    """
    Decide whether a principal may open a path.

    - Company principals may open every path.
    - User principals may open unrestricted paths, and restricted ones only
      when their department is in the registered set. An absent or
      unrecognized department is denied on every restricted prefix.
    - No principal is denied on every protected path.
    """
    principal = coerce_principal_type(principal_type)

    if principal is None:
        return not is_protected(path)

    if principal is PrincipalType.COMPANY:
        return True

    allowed = department_restriction(path)
    if allowed is None:
        return True
    dept = coerce_department(department)
    return dept is not None and dept.value in allowed


def landing_path(principal_type, department) -> str:
    """Default authenticated page for a principal."""
    dept = coerce_department(department)
    if coerce_principal_type(principal_type) is PrincipalType.USER and dept is not None:
        return DEPARTMENT_LANDING.get(dept.value, HOME_PATH)
    return HOME_PATH
