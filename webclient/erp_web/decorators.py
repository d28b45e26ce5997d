# Overview: View decorators re-checking the session and module access inside the application.

from functools import wraps
from flask import current_app, g, jsonify, redirect, request

from .permissions import HOME_PATH, LOGIN_PATH, is_allowed
from .services import session_service


def wants_json() -> bool:
    return request.is_json or request.accept_mimetypes.best == "application/json"


def require_session(f):
    """
    Require a session in the client-only domain.

    Sets g.erp_session to the current Session. The route guard has already
    checked the edge cookies; this covers a client domain that was cleared
    or corrupted while the cookies survived. Those stale cookies are
    dropped, otherwise the guard would bounce /login straight back here.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        session = session_service.read()
        if session is None:
            session_service.clear()
            if wants_json():
                return jsonify({"error": "Authentication required"}), 401
            return redirect(LOGIN_PATH)

        g.erp_session = session
        return f(*args, **kwargs)

    return decorated_function


def require_module_access(f):
    """
    Require that the current principal may open the requested module.

    Same Access Policy as the route guard, evaluated against the client-only
    session. A mismatch sends the principal back to the landing page.
    """
    @wraps(f)
    @require_session
    def decorated_function(*args, **kwargs):
        session = g.erp_session
        if not is_allowed(session.principal_type, session.department, request.path):
            current_app.logger.info(
                "Module access denied | path=%s | user_type=%s | department=%s",
                request.path,
                session.principal_type.value,
                session.department,
            )
            if wants_json():
                return jsonify({"error": "Module not available for your department"}), 403
            return redirect(HOME_PATH)

        return f(*args, **kwargs)

    return decorated_function
