"""
Pytest fixtures for erp_web tests.

Provides a fresh in-memory app per test, a fake ERP backend behind an httpx
MockTransport, and login helpers that go through the real /login route.
"""

import httpx
import pytest

from erp_web import create_app
from erp_web.extensions import db


API_BASE_URL = "http://erp.test"


class FakeBackend:
    """
    Stand-in for the ERP REST API.

    Register canned responses with `route()`; every request is recorded in
    `requests`. Unknown routes answer 404.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def route(self, method, path, status=200, json=None):
        self.routes[(method.upper(), path)] = (status, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get(
            (request.method, request.url.path),
            (404, {"error": "Not found"}),
        )
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def last_request(self, path):
        for request in reversed(self.requests):
            if request.url.path == path:
                return request
        return None


@pytest.fixture(scope='function')
def backend():
    return FakeBackend()


@pytest.fixture(scope='function')
def app(backend):
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'EDGE_COOKIE_SECURE': False,
        'API_BASE_URL': API_BASE_URL,
        'API_TRANSPORT': httpx.MockTransport(backend.handler),
    })

    # No app context stays pushed while tests run, so each test client
    # request gets its own `g`
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def runner(app):
    return app.test_cli_runner()


def cookie_value(client, key):
    cookie = client.get_cookie(key)
    return cookie.value if cookie is not None else None


@pytest.fixture(scope='function')
def login_user(client, backend):
    """Log in a User principal of the given department through /login."""
    def _login(department="Store", name="Asha Rao", token="user-token"):
        user = {"userId": "asha", "name": name}
        if department is not None:
            user["department"] = department
        backend.route("POST", "/api/user/login", json={"token": token, "user": user})
        resp = client.post("/login", json={"type": "user", "userId": "asha", "password": "secret"})
        assert resp.status_code == 200, resp.get_json()
        return resp
    return _login


@pytest.fixture(scope='function')
def login_company(client, backend):
    """Log in a Company principal through /login."""
    def _login(company_name="Bins Industries", token="company-token"):
        backend.route(
            "POST",
            "/api/company/login",
            json={"token": token, "company": {"companyId": "bins", "companyName": company_name}},
        )
        resp = client.post("/login", json={"type": "company", "userId": "bins", "password": "secret"})
        assert resp.status_code == 200, resp.get_json()
        return resp
    return _login
