"""
Dashboard and shell route tests.
"""

from conftest import cookie_value


JSON = {"Accept": "application/json"}


class TestOverview:

    def test_department_user_sent_to_module(self, client, login_user):
        login_user(department="Store")
        resp = client.get("/dashboard")
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/dashboard/store")

    def test_user_without_department_stays(self, client, login_user):
        login_user(department=None)
        resp = client.get("/dashboard")
        assert resp.status_code == 200
        assert b"No module is assigned" in resp.data

    def test_company_overview_lists_modules(self, client, backend, login_company):
        login_company()
        backend.route("GET", "/api/company/me", json={"companyName": "Bins", "gstNumber": "29ABCDE"})

        resp = client.get("/dashboard")
        assert resp.status_code == 200
        assert b"29ABCDE" in resp.data
        assert b"User Mgmt" in resp.data
        assert backend.last_request("/api/company/me").headers["Authorization"] == "Bearer company-token"

    def test_company_overview_survives_backend_error(self, client, backend, login_company):
        login_company()
        backend.route("GET", "/api/company/me", status=500, json={"error": "boom"})
        assert client.get("/dashboard").status_code == 200


class TestModulePages:

    def test_company_opens_any_module(self, client, login_company):
        login_company()
        for module, title in [("store", b"Store Management"), ("ppc", b"PPC Management"), ("hr", b"HR Management")]:
            resp = client.get(f"/dashboard/{module}")
            assert resp.status_code == 200, module
            assert title in resp.data

    def test_store_user_sees_tabs(self, client, login_user):
        login_user(department="Store")
        resp = client.get("/dashboard/store?tab=dc")
        assert resp.status_code == 200
        assert b"Material Issue" in resp.data
        assert b"Masters" in resp.data

    def test_store_user_bounced_from_hr(self, client, login_user):
        login_user(department="Store")
        resp = client.get("/dashboard/hr")
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/dashboard")

    def test_forged_department_cookie_caught_in_view(self, client, login_user):
        login_user(department="Store")
        client.set_cookie("department", "HR")

        resp = client.get("/dashboard/hr")
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/dashboard")

        resp = client.get("/dashboard/hr", headers=JSON)
        assert resp.status_code == 403

    def test_admin_page_lists_users(self, client, backend, login_company):
        login_company()
        backend.route("GET", "/api/user/all", json={"users": [{"userId": "u1", "name": "Ravi", "department": "HR"}]})
        resp = client.get("/dashboard/admin")
        assert resp.status_code == 200
        assert b"Ravi" in resp.data

    def test_admin_page_shows_backend_error(self, client, backend, login_company):
        login_company()
        backend.route("GET", "/api/user/all", status=403, json={"message": "Not allowed"})
        resp = client.get("/dashboard/admin")
        assert resp.status_code == 200
        assert b"Not allowed" in resp.data

    def test_unknown_module_404(self, client, login_company):
        login_company()
        assert client.get("/dashboard/payroll").status_code == 404


class TestSessionLoss:

    def test_expired_token_logs_out(self, client, backend, login_company):
        login_company()
        backend.route("GET", "/api/company/me", status=401, json={"message": "jwt expired"})

        resp = client.get("/dashboard")
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/login")
        assert cookie_value(client, "token") is None
        assert client.get("/session").get_json() == {"authenticated": False}

    def test_expired_token_json(self, client, backend, login_company):
        login_company()
        backend.route("GET", "/api/user/all", status=401, json={"message": "jwt expired"})

        resp = client.get("/dashboard/admin", headers=JSON)
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "Session expired. Please log in again."

    def test_lost_client_storage_drops_cookies(self, client, login_company):
        login_company()
        client.delete_cookie("erp_client")

        resp = client.get("/dashboard")
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/login")
        assert cookie_value(client, "token") is None

        # no redirect loop: /login now renders
        assert client.get("/login").status_code == 200


class TestShellEndpoints:

    def test_shell_view_model(self, client, login_company):
        login_company()
        body = client.get("/dashboard/shell?path=/dashboard/ppc&tab=po-list", headers=JSON).get_json()

        items = body["shell"]["sidebar"]["items"]
        assert [item["label"] for item in items][:3] == ["Overview", "Store", "PPC"]
        assert items[2]["expanded"] is True
        assert [c["label"] for c in items[2]["children"] if c["active"]] == ["PO List"]
        assert [item["label"] for item in body["shell"]["mobile"]["overflow"]] == ["Auto Planning"]
        assert body["state"]["expanded"] == ["/dashboard/ppc"]

    def test_toggle_expand(self, client, login_company):
        login_company()
        first = client.post("/dashboard/shell/expand", json={"parent": "/dashboard/store"}).get_json()
        second = client.post("/dashboard/shell/expand", json={"parent": "/dashboard/store"}).get_json()
        assert first["expanded"] is True
        assert second["expanded"] is False
        assert second["state"]["expanded"] == []

    def test_toggle_expand_requires_parent(self, client, login_company):
        login_company()
        assert client.post("/dashboard/shell/expand", json={}).status_code == 400

    def test_toggle_expand_form_redirects_back(self, client, login_company):
        login_company()
        resp = client.post(
            "/dashboard/shell/expand",
            data={"parent": "/dashboard/store", "next": "/dashboard/store?tab=dc"},
        )
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/dashboard/store?tab=dc")

    def test_external_next_ignored(self, client, login_company):
        login_company()
        resp = client.post("/dashboard/shell/sidebar", data={"next": "//evil.example"})
        assert resp.headers["Location"].endswith("/dashboard")

    def test_sidebar_state_reset_on_logout(self, client, login_company):
        login_company()
        assert client.post("/dashboard/shell/sidebar", json={}).get_json()["collapsed"] is True

        client.post("/logout", json={})
        login_company()
        body = client.get("/dashboard/shell", headers=JSON).get_json()
        assert body["state"]["sidebar_collapsed"] is False

    def test_shell_state_reset_on_expired_token(self, client, backend, login_company, login_user):
        login_company()
        client.post("/dashboard/shell/sidebar", json={})
        client.post("/dashboard/shell/expand", json={"parent": "/dashboard/ppc"})

        backend.route("GET", "/api/company/me", status=401, json={"message": "jwt expired"})
        assert client.get("/dashboard").status_code == 302

        login_user(department="HR")
        body = client.get("/dashboard/shell", headers=JSON).get_json()
        assert body["state"] == {"expanded": [], "sidebar_collapsed": False}

    def test_non_object_body_rejected(self, client, login_company):
        login_company()
        assert client.post("/dashboard/shell/expand", json=["/dashboard/store"]).status_code == 400

        resp = client.post("/dashboard/shell/sidebar", json=[1])
        assert resp.status_code == 200
        assert resp.get_json()["collapsed"] is True
