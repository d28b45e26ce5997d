# Overview: HTTP client for the external ERP REST API; attaches the session token and handles 401.

"""
Authorized-call collaborator

Every call to the ERP backend goes through ApiClient:

- `Authorization: Bearer <token>` is attached when a session exists
- JSON bodies unless files are sent (multipart)
- a 401 on an authorized call runs `on_unauthorized` (session clear) and
  raises SessionExpiredError; the call is never retried with the same token
- other non-2xx responses raise ApiError with the backend's message
- transport failures raise ApiError with a network message
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
from flask import current_app

from . import session_service


NETWORK_ERROR_MESSAGE = "Network error. Please check your connection and try again."


class ApiError(Exception):
    """Raised when the ERP backend rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class SessionExpiredError(ApiError):
    """Raised when an authorized call comes back 401; the session has been cleared."""


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message:
            return message
    return f"HTTP error! status: {response.status_code}"


class ApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        on_unauthorized: Callable[[], None] | None = None,
    ):
        self.token = token
        self.on_unauthorized = on_unauthorized
        self._client = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self) -> None:
        self._client.close()

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, endpoint: str, *, json: Any = None, files: Any = None,
                data: Any = None, params: dict | None = None) -> Any:
        try:
            response = self._client.request(
                method,
                endpoint,
                headers=self._headers(),
                json=json if files is None else None,
                data=data,
                files=files,
                params=params,
            )
        except httpx.HTTPError as exc:
            current_app.logger.warning("ERP API request failed | %s %s | %s", method, endpoint, exc)
            raise ApiError(NETWORK_ERROR_MESSAGE) from exc

        if response.status_code == 401 and self.token:
            current_app.logger.info("ERP API rejected session token | %s %s", method, endpoint)
            if self.on_unauthorized is not None:
                self.on_unauthorized()
            self.token = None
            raise SessionExpiredError("Session expired. Please log in again.", 401)

        if not response.is_success:
            raise ApiError(_error_message(response), response.status_code, _safe_json(response))

        return _safe_json(response)

    def get(self, endpoint: str, params: dict | None = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, json: Any = None, files: Any = None) -> Any:
        return self.request("POST", endpoint, json=json, files=files)

    def put(self, endpoint: str, json: Any = None, files: Any = None) -> Any:
        return self.request("PUT", endpoint, json=json, files=files)

    def delete(self, endpoint: str) -> Any:
        return self.request("DELETE", endpoint)


def _safe_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def client_from_config(token: str | None = None, on_unauthorized=None) -> ApiClient:
    config = current_app.config
    return ApiClient(
        config["API_BASE_URL"],
        token=token,
        timeout=config["API_TIMEOUT"],
        transport=config.get("API_TRANSPORT"),
        on_unauthorized=on_unauthorized,
    )


def session_client() -> ApiClient:
    """Client carrying the current session's token; a 401 clears the session."""
    session = session_service.read()
    return client_from_config(
        token=session.token if session else None,
        on_unauthorized=session_service.clear,
    )
