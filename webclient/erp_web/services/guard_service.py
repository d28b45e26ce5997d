# Overview: Request-time route guard; decides allow / redirect before any view runs.

"""
Route Guard

Evaluated once per incoming request from the edge-visible session fields only
(cookies). Terminal outcomes:

1. ALLOW           - request proceeds unchanged
2. REDIRECT_LOGIN  - protected path, no token
3. REDIRECT_HOME   - token present but a User principal may not open the path,
                     or the login page is requested while a token exists

SECURITY:
- Fail closed on protected paths: a missing or malformed field counts as
  absent. A token whose userType is missing or unknown is evaluated as a
  User principal, so department-restricted prefixes stay closed while the
  home path (which carries no restriction) stays reachable.
- Fail open only on paths outside PROTECTED_PREFIXES.
- The guard never writes session state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from flask import current_app, redirect, request

from ..permissions import (
    HOME_PATH,
    LOGIN_PATH,
    PrincipalType,
    coerce_principal_type,
    is_allowed,
    is_protected,
    path_matches_prefix,
)
from . import session_service
from .session_service import EdgeFields


class GuardOutcome(str, Enum):
    ALLOW = "allow"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_HOME = "redirect_home"


@dataclass(frozen=True)
class GuardDecision:
    outcome: GuardOutcome
    location: str | None = None
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return self.outcome is GuardOutcome.ALLOW


_ALLOW = GuardDecision(GuardOutcome.ALLOW)


def evaluate(path, fields: EdgeFields | None) -> GuardDecision:
    """Apply the access policy to one request. Total: never raises."""
    fields = fields or EdgeFields()
    token = fields.token

    if token and path_matches_prefix(path, LOGIN_PATH):
        return GuardDecision(GuardOutcome.REDIRECT_HOME, HOME_PATH, "session already established")

    if not is_protected(path):
        return _ALLOW

    if not token:
        return GuardDecision(GuardOutcome.REDIRECT_LOGIN, LOGIN_PATH, "no session")

    principal = coerce_principal_type(fields.user_type) or PrincipalType.USER
    if principal is PrincipalType.USER and not is_allowed(principal, fields.department, path):
        return GuardDecision(
            GuardOutcome.REDIRECT_HOME,
            HOME_PATH,
            f"department {fields.department!r} may not open {path}",
        )

    return _ALLOW


def guard_request():
    """before_request hook."""
    decision = evaluate(request.path, session_service.edge_fields())
    if decision.allowed:
        return None

    current_app.logger.debug(
        "Route guard redirect | path=%s | outcome=%s | location=%s | reason=%s",
        request.path,
        decision.outcome.value,
        decision.location,
        decision.reason,
    )
    return redirect(decision.location)


def init_app(app) -> None:
    app.before_request(guard_request)
