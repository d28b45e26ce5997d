# Overview: Login, logout and session-introspection routes.

# webclient/erp_web/routes/auth.py
"""
Authentication routes

- GET  /login    login form (company or user)
- POST /login    forward credentials to the ERP backend, persist the session,
                 send the principal to its landing page
- POST /logout   clear the session in both storage domains
- GET  /session  current session (no token) for client scripts

The route guard already bounces /login to the dashboard while a session
cookie exists.
"""

from flask import Blueprint, current_app, jsonify, redirect, render_template, request

from ..decorators import wants_json
from ..permissions import LOGIN_PATH, PrincipalType, coerce_principal_type, landing_path
from ..services import auth_service, session_service
from ..services.auth_service import LoginError


auth_bp = Blueprint("auth", __name__)


def _login_form_data():
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form


def _login_status(exc: LoginError) -> int:
    if exc.status_code == 400:
        return 400
    if exc.status_code and exc.status_code < 500:
        return 401
    return 502


@auth_bp.get("/login")
def login_page():
    login_type = coerce_principal_type(request.args.get("type")) or PrincipalType.COMPANY
    return render_template("login.html", login_type=login_type.value, user_id="", error=None)


@auth_bp.post("/login")
def login_route():
    """
    Authenticate through the ERP backend.

    Accepts form fields or JSON: type (company|user), userId, password.
    """
    data = _login_form_data()
    login_type = data.get("type") or data.get("userType") or PrincipalType.COMPANY.value
    user_id = data.get("userId") or ""
    password = data.get("password") or ""

    try:
        session = auth_service.login(login_type, user_id, password)
    except LoginError as exc:
        status = _login_status(exc)
        if wants_json():
            return jsonify({"error": exc.message}), status
        return render_template("login.html", login_type=login_type, user_id=user_id, error=exc.message), status
    except Exception:
        current_app.logger.exception("Failed to login user")
        if wants_json():
            return jsonify({"error": "Internal server error"}), 500
        return render_template(
            "login.html", login_type=login_type, user_id=user_id, error="Internal server error"
        ), 500

    target = landing_path(session.principal_type, session.department)
    if wants_json():
        message = "Company login successful!" if session.is_company else "User login successful!"
        return jsonify({"session": session.to_dict(), "redirect": target, "message": message}), 200
    return redirect(target)


@auth_bp.post("/logout")
def logout_route():
    """Clear the session. Safe to call without a session."""
    try:
        auth_service.logout()
    except Exception:
        current_app.logger.exception("Failed to logout user")
        if wants_json():
            return jsonify({"error": "Internal server error"}), 500
        raise

    if wants_json():
        return jsonify({"message": "Logout successful"}), 200
    return redirect(LOGIN_PATH)


@auth_bp.get("/session")
def session_route():
    session = session_service.read()
    if session is None:
        return jsonify({"authenticated": False}), 200
    return jsonify({
        "authenticated": True,
        "session": session.to_dict(),
        "landing": landing_path(session.principal_type, session.department),
    }), 200
