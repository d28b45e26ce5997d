# Overview: Login and logout against the external ERP authentication endpoints.

"""
Login collaborator

The backend authenticates and issues the token; this client only forwards
credentials and stores what comes back. Password hashing and token
verification are the backend's job.
"""

from __future__ import annotations

from flask import current_app

from ..permissions import PrincipalType, coerce_principal_type
from . import session_service
from .api_client import ApiError, client_from_config
from .session_service import Session, SessionError


LOGIN_ENDPOINTS = {
    PrincipalType.COMPANY: "/api/company/login",
    PrincipalType.USER: "/api/user/login",
}

# Key holding the identity object in a successful login body
IDENTITY_FIELDS = {
    PrincipalType.COMPANY: "company",
    PrincipalType.USER: "user",
}

DEFAULT_LOGIN_ERROR = "Login failed. Please check your credentials."


class LoginError(ApiError):
    """Raised when login input is invalid or the backend refuses the credentials."""


def login(principal_type, user_id: str, password: str) -> Session:
    """
    Authenticate against the backend and persist the resulting session.

    Raises LoginError on bad input, rejected credentials, unreachable backend
    or a response that does not carry a usable token.
    """
    principal = coerce_principal_type(principal_type)
    if principal is None:
        raise LoginError("Unknown login type", 400)

    user_id = user_id.strip() if isinstance(user_id, str) else ""
    if not user_id or not isinstance(password, str) or not password:
        raise LoginError("User ID and password are required", 400)

    with client_from_config() as client:
        try:
            body = client.post(LOGIN_ENDPOINTS[principal], json={"userId": user_id, "password": password})
        except ApiError as exc:
            current_app.logger.warning(
                "LOGIN FAILED | user_type=%s | user_id=%s | status=%s",
                principal.value, user_id, exc.status_code,
            )
            raise LoginError(exc.message or DEFAULT_LOGIN_ERROR, exc.status_code or 502) from exc

    if not isinstance(body, dict) or not body.get("token"):
        current_app.logger.warning("LOGIN FAILED | user_type=%s | user_id=%s | no token in response",
                                   principal.value, user_id)
        raise LoginError(DEFAULT_LOGIN_ERROR, 502)

    try:
        session = session_service.persist(body["token"], principal, body.get(IDENTITY_FIELDS[principal]))
    except SessionError as exc:
        current_app.logger.warning("LOGIN FAILED | user_type=%s | user_id=%s | %s", principal.value, user_id, exc)
        raise LoginError(DEFAULT_LOGIN_ERROR, 502) from exc

    current_app.logger.info("LOGIN SUCCESS | user_type=%s | user_id=%s", principal.value, user_id)
    return session


def logout() -> None:
    """Drop the session and the shell UI state of this browser context."""
    session = session_service.read()
    session_service.clear()
    if session is not None:
        current_app.logger.info("LOGOUT | user_type=%s", session.principal_type.value)
