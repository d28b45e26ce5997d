# Overview: Dashboard pages and the navigation shell endpoints.

# webclient/erp_web/routes/dashboard.py
"""
Dashboard routes

Every path here sits under the /dashboard protected prefix, so the route
guard has already run. Module pages re-check access against the client-only
session with @require_module_access.

Shell endpoints:
- GET  /dashboard/shell            shell view model for ?path=&tab=
- POST /dashboard/shell/expand     toggle one sidebar parent (field: parent)
- POST /dashboard/shell/sidebar    collapse / expand the desktop sidebar
"""

from flask import Blueprint, abort, current_app, g, jsonify, redirect, render_template, request

from ..decorators import require_module_access, require_session, wants_json
from ..permissions import HOME_PATH, landing_path
from ..services import guard_service, session_service, shell_service
from ..services.api_client import ApiError, SessionExpiredError, session_client
from ..services.navigation_service import VIEW_PARAM, find_module, resolve_nav_items


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")


MODULES = {
    "store": {
        "title": "Store Management",
        "description": "Manage inventory, GRN, DC, invoices and material issues",
    },
    "ppc": {
        "title": "PPC Management",
        "description": "Production planning, orders, route cards, jobs and auto-scheduling",
    },
    "hr": {
        "title": "HR Management",
        "description": "Manage employees, attendance and skills",
    },
    "accounts": {
        "title": "Accounts",
        "description": "Manage finances, transactions and accounting",
    },
    "reports": {
        "title": "Reports",
        "description": "Production, store and HR reports",
    },
    "admin": {
        "title": "User Management",
        "description": "Create and manage users for each department",
    },
}


def _safe_next(value) -> str:
    if isinstance(value, str) and value.startswith("/") and not value.startswith("//"):
        return value
    return HOME_PATH


def _request_data():
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form


def _shell_for(path, view):
    state = shell_service.load_state()
    before = state.to_dict()
    shell = shell_service.build_shell(
        g.erp_session, path, view, state, app_name=current_app.config["APP_NAME"]
    )
    if state.to_dict() != before:
        shell_service.save_state(state)
    return shell, state


def _render_page(template: str, **context):
    shell, _ = _shell_for(request.full_path, request.args.get(VIEW_PARAM))
    return render_template(template, shell=shell, erp_session=g.erp_session, **context)


@dashboard_bp.get("")
@require_session
def overview():
    """
    Company overview. Users with a known department are sent to their module.
    """
    session = g.erp_session

    if not session.is_company:
        target = landing_path(session.principal_type, session.department)
        if target != HOME_PATH and guard_service.evaluate(target, session_service.edge_fields()).allowed:
            return redirect(target)
        return _render_page("overview.html", profile=None, modules=[])

    profile = None
    try:
        with session_client() as client:
            profile = client.get("/api/company/me")
    except SessionExpiredError:
        raise
    except ApiError as exc:
        current_app.logger.warning("Failed to load company profile | status=%s | %s", exc.status_code, exc.message)

    modules = [
        item for item in resolve_nav_items(session.principal_type, session.department)
        if item.base_path != HOME_PATH
    ]
    return _render_page("overview.html", profile=profile, modules=modules)


@dashboard_bp.get("/<module>")
@require_module_access
def module_page(module: str):
    details = MODULES.get(module)
    item = find_module(f"{HOME_PATH}/{module}")
    if details is None or item is None:
        abort(404)

    current_tab = request.args.get(VIEW_PARAM)
    if item.has_children:
        current_tab = current_tab or shell_service.DEFAULT_VIEW

    users = None
    error = None
    if module == "admin":
        try:
            with session_client() as client:
                body = client.get("/api/user/all")
            users = body.get("users", []) if isinstance(body, dict) else []
        except SessionExpiredError:
            raise
        except ApiError as exc:
            current_app.logger.warning("Failed to load users | status=%s | %s", exc.status_code, exc.message)
            error = exc.message

    return _render_page(
        "module.html",
        module=module,
        details=details,
        tabs=item.children,
        current_tab=current_tab,
        users=users,
        error=error,
    )


@dashboard_bp.get("/shell")
@require_session
def shell_route():
    path = request.args.get("path") or HOME_PATH
    shell, state = _shell_for(path, request.args.get(VIEW_PARAM))
    return jsonify({"shell": shell, "state": state.to_dict()}), 200


@dashboard_bp.post("/shell/expand")
@require_session
def toggle_expand_route():
    data = _request_data()
    parent = data.get("parent")
    if not isinstance(parent, str) or not parent.startswith("/"):
        if wants_json():
            return jsonify({"error": "parent path required"}), 400
        abort(400)

    state = shell_service.load_state()
    expanded = state.toggle(parent)
    shell_service.save_state(state)

    if wants_json():
        return jsonify({"parent": parent, "expanded": expanded, "state": state.to_dict()}), 200
    return redirect(_safe_next(data.get("next")))


@dashboard_bp.post("/shell/sidebar")
@require_session
def toggle_sidebar_route():
    data = _request_data()

    state = shell_service.load_state()
    collapsed = state.toggle_sidebar()
    shell_service.save_state(state)

    if wants_json():
        return jsonify({"collapsed": collapsed, "state": state.to_dict()}), 200
    return redirect(_safe_next(data.get("next")))
