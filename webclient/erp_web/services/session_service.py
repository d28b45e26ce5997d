# Overview: Service-layer operations for the browser session; the only write path for session state.

"""
Session Store

WHY: The authenticated identity must survive page loads and must be visible
to the route guard, which runs before any view and cannot read client-only
storage. The session is therefore kept in two domains:

- edge-visible (cookies): token, userType, department, displayName
- client-only (server-side per-browser store): token, userType, identity

INVARIANTS:
- persist() and clear() are the only write paths. Fields are never patched
  one by one; a new login replaces the whole session.
- persist() wipes any previous session first, so nothing from an earlier
  login survives (no residue).
- clear() is idempotent.
- The identity payload from the login collaborator is coerced into the strict
  Session shape here; the raw payload never reaches navigation code.

KNOWN LIMITATION: tabs of one browser share a context. Overlapping persist()
and clear() calls from different tabs are last-writer-wins.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from flask import current_app

from ..permissions import PrincipalType, coerce_principal_type
from .shell_service import SHELL_KEYS
from .storage_service import client_storage, edge_storage


# Keys written to the edge-visible domain (cookies)
EDGE_KEYS = ("token", "userType", "department", "displayName")

# Keys written to the client-only domain
CLIENT_KEYS = ("token", "userType", "identity")


class SessionError(ValueError):
    """Raised when login output cannot form a valid session."""


@dataclass(frozen=True)
class Session:
    """The authenticated identity for the current browser context."""
    token: str
    principal_type: PrincipalType
    department: str | None = None
    display_name: str | None = None
    identity: dict = field(default_factory=dict, hash=False)

    @property
    def is_company(self) -> bool:
        return self.principal_type is PrincipalType.COMPANY

    def to_dict(self) -> dict:
        # token is never exposed here
        return {
            "user_type": self.principal_type.value,
            "department": self.department,
            "display_name": self.display_name,
        }


@dataclass(frozen=True)
class EdgeFields:
    """Edge-visible session strings as the route guard sees them."""
    token: str | None = None
    user_type: str | None = None
    department: str | None = None
    display_name: str | None = None


@dataclass(frozen=True)
class Identity:
    department: str | None
    display_name: str | None
    payload: dict


def _clean_string(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def coerce_identity(principal_type: PrincipalType, identity: Any) -> Identity:
    """
    Validate the loosely typed identity object returned at login.

    - None is accepted as an empty identity.
    - Anything that is not a mapping raises SessionError.
    - department is kept only for User principals.
    - display name comes from `name`, falling back to `companyName`.
    """
    if identity is None:
        payload: dict = {}
    elif isinstance(identity, Mapping):
        payload = dict(identity)
    else:
        raise SessionError("identity must be an object")

    department = None
    if principal_type is PrincipalType.USER:
        department = _clean_string(payload.get("department"))

    display_name = _clean_string(payload.get("name")) or _clean_string(payload.get("companyName"))

    return Identity(department=department, display_name=display_name, payload=payload)


def persist(token: str, principal_type, identity: Any = None) -> Session:
    """
    Establish a new session in both storage domains.

    Raises SessionError on an empty token, an unknown principal type or an
    identity that is not an object. Nothing is written in that case.
    """
    if not isinstance(token, str) or not token.strip():
        raise SessionError("token is required")

    principal = coerce_principal_type(principal_type)
    if principal is None:
        raise SessionError(f"unknown principal type: {principal_type!r}")

    ident = coerce_identity(principal, identity)
    try:
        serialized_identity = json.dumps(ident.payload, default=str)
    except (TypeError, ValueError) as exc:
        raise SessionError("identity is not serializable") from exc

    edge_values = {"token": token, "userType": principal.value}
    if ident.department:
        edge_values["department"] = ident.department
    if ident.display_name:
        edge_values["displayName"] = ident.display_name

    # Database write first; edge cookies are staged only after it commits.
    client_storage().write(
        {"token": token, "userType": principal.value, "identity": serialized_identity},
        remove=CLIENT_KEYS,
    )

    edge = edge_storage()
    for key in EDGE_KEYS:
        if key in edge_values:
            edge.set(key, edge_values[key])
        else:
            edge.remove(key)

    current_app.logger.info(
        "Session established | user_type=%s | department=%s",
        principal.value,
        ident.department,
    )

    return Session(
        token=token,
        principal_type=principal,
        department=ident.department,
        display_name=ident.display_name,
        identity=ident.payload,
    )


def clear() -> None:
    """
    Remove every session key from both domains. Safe to call repeatedly.

    Every logout path (explicit logout, 401 expiry, lost client storage)
    ends here, so the shell UI state of the browser context goes with it.
    """
    client_storage().remove(CLIENT_KEYS + SHELL_KEYS)
    edge = edge_storage()
    for key in EDGE_KEYS:
        edge.remove(key)


def read() -> Session | None:
    """
    Current session from the client-only domain, or None.

    Corrupted stored identity is treated as no session and logged; it never
    propagates to callers.
    """
    values = client_storage().get_many(CLIENT_KEYS)

    token = values.get("token")
    if not token:
        return None

    principal = coerce_principal_type(values.get("userType"))
    if principal is None:
        current_app.logger.warning(
            "Ignoring stored session with unknown user type %r", values.get("userType")
        )
        return None

    raw_identity = values.get("identity")
    if raw_identity is None:
        payload: Any = {}
    else:
        try:
            payload = json.loads(raw_identity)
        except ValueError:
            current_app.logger.warning("Ignoring stored session: identity is not valid JSON")
            return None

    if not isinstance(payload, dict):
        current_app.logger.warning("Ignoring stored session: identity is not an object")
        return None

    ident = coerce_identity(principal, payload)
    return Session(
        token=token,
        principal_type=principal,
        department=ident.department,
        display_name=ident.display_name,
        identity=ident.payload,
    )


def edge_fields() -> EdgeFields:
    """Snapshot of the edge-visible session fields (blank values become None)."""
    edge = edge_storage()
    return EdgeFields(
        token=_clean_string(edge.get("token")),
        user_type=_clean_string(edge.get("userType")),
        department=_clean_string(edge.get("department")),
        display_name=_clean_string(edge.get("displayName")),
    )
