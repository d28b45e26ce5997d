# Overview: Access policy package.
# Re-exports the route tables and the pure policy functions.

from .principals import (
    PrincipalType,
    Department,
    coerce_principal_type,
    coerce_department,
)
from .definitions import (
    LOGIN_PATH,
    HOME_PATH,
    PROTECTED_PREFIXES,
    DEPARTMENT_ACCESS,
    DEPARTMENT_LANDING,
)
from .helpers import (
    path_matches_prefix,
    is_protected,
    department_restriction,
    is_allowed,
    landing_path,
)

__all__ = [
    "PrincipalType",
    "Department",
    "coerce_principal_type",
    "coerce_department",
    "LOGIN_PATH",
    "HOME_PATH",
    "PROTECTED_PREFIXES",
    "DEPARTMENT_ACCESS",
    "DEPARTMENT_LANDING",
    "path_matches_prefix",
    "is_protected",
    "department_restriction",
    "is_allowed",
    "landing_path",
]
