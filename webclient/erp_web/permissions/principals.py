# Overview: Principal and department constants shared by the access policy and navigation.

from enum import Enum


class PrincipalType(str, Enum):
    """Kind of authenticated actor. Values match the persisted `userType` strings."""
    COMPANY = "company"
    USER = "user"


class Department(str, Enum):
    """Departments a User principal can belong to."""
    HR = "HR"
    STORE = "Store"
    PPC = "PPC"
    ACCOUNTS = "Accounts"
    REPORTS = "Reports"


def coerce_principal_type(value) -> PrincipalType | None:
    """Map a stored or submitted principal type onto PrincipalType; None if unknown."""
    if isinstance(value, PrincipalType):
        return value
    if not isinstance(value, str):
        return None
    try:
        return PrincipalType(value.strip().lower())
    except ValueError:
        return None


def coerce_department(value) -> Department | None:
    """Return the Department for a known department string, else None."""
    if isinstance(value, Department):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Department(value.strip())
    except ValueError:
        return None
