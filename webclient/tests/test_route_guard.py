"""
Route guard tests.

Verifies the guard decision table directly and through real requests
carrying only edge cookies.
"""

import pytest

from erp_web.services.guard_service import GuardOutcome, evaluate
from erp_web.services.session_service import EdgeFields


def _location(resp):
    return resp.headers["Location"]


class TestEvaluate:

    def test_no_token_protected_redirects_to_login(self):
        decision = evaluate("/dashboard", EdgeFields())
        assert decision.outcome is GuardOutcome.REDIRECT_LOGIN
        assert decision.location == "/login"

    def test_missing_fields_treated_as_no_session(self):
        assert evaluate("/dashboard/store", None).outcome is GuardOutcome.REDIRECT_LOGIN

    def test_token_on_login_redirects_home(self):
        decision = evaluate("/login", EdgeFields(token="t", user_type="company"))
        assert decision.outcome is GuardOutcome.REDIRECT_HOME
        assert decision.location == "/dashboard"

    def test_public_paths_pass_without_session(self):
        assert evaluate("/login", EdgeFields()).allowed
        assert evaluate("/health", EdgeFields()).allowed
        assert evaluate("/", EdgeFields()).allowed

    def test_hr_user_cannot_open_store(self):
        fields = EdgeFields(token="t", user_type="user", department="HR")
        decision = evaluate("/dashboard/store", fields)
        assert decision.outcome is GuardOutcome.REDIRECT_HOME
        assert decision.location == "/dashboard"

    def test_user_opens_own_module(self):
        fields = EdgeFields(token="t", user_type="user", department="Store")
        assert evaluate("/dashboard/store", fields).allowed
        assert evaluate("/dashboard/store/grn", fields).allowed

    @pytest.mark.parametrize(
        "path",
        ["/dashboard", "/dashboard/hr", "/dashboard/store", "/dashboard/ppc", "/dashboard/admin"],
    )
    def test_company_allowed_everywhere(self, path):
        assert evaluate(path, EdgeFields(token="t", user_type="company")).allowed

    @pytest.mark.parametrize("user_type", [None, "", "manager"])
    def test_malformed_user_type_treated_as_user(self, user_type):
        fields = EdgeFields(token="t", user_type=user_type, department="PPC")
        assert evaluate("/dashboard/ppc", fields).allowed
        assert evaluate("/dashboard/hr", fields).outcome is GuardOutcome.REDIRECT_HOME

    def test_user_without_department_only_reaches_unrestricted(self):
        fields = EdgeFields(token="t", user_type="user")
        assert evaluate("/dashboard", fields).allowed
        assert not evaluate("/dashboard/reports", fields).allowed


class TestGuardRequests:
    """The before_request hook on real requests."""

    def test_no_token_dashboard_redirects_to_login(self, client):
        resp = client.get("/dashboard")
        assert resp.status_code == 302
        assert _location(resp).endswith("/login")

    def test_token_login_redirects_to_dashboard(self, client):
        client.set_cookie("token", "abc")
        resp = client.get("/login")
        assert resp.status_code == 302
        assert _location(resp).endswith("/dashboard")

    def test_hr_cookie_store_path_redirects_home(self, client):
        client.set_cookie("token", "abc")
        client.set_cookie("userType", "user")
        client.set_cookie("department", "HR")
        resp = client.get("/dashboard/store")
        assert resp.status_code == 302
        assert _location(resp).endswith("/dashboard")

    def test_guard_applies_to_json_requests(self, client):
        resp = client.get("/dashboard/shell", headers={"Accept": "application/json"})
        assert resp.status_code == 302

    def test_login_page_open_without_session(self, client):
        resp = client.get("/login")
        assert resp.status_code == 200
        assert b"Company ID" in resp.data

    def test_health_is_public(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "healthy"
