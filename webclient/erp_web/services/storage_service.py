# Overview: Service-layer access to the two session storage domains.

"""
Session Storage Domains

EDGE-VISIBLE DOMAIN: plain HTTP cookies. String-only values, each with a
bounded lifetime (EDGE_COOKIE_MAX_AGE), scoped to the whole site, Secure and
SameSite-restricted. The route guard reads them from the incoming request
before any view runs. Writes made while handling a request are staged and
flushed onto the response by an after_request hook, so a read after a write
in the same request sees the staged value.

CLIENT-ONLY DOMAIN: a server-side key/value store (client_storage_entries)
scoped to one browser context. The context is named by an opaque random id in
the CLIENT_CONTEXT_COOKIE cookie. Values never expire; they are removed only
explicitly. The route guard never reads this domain.

Both domains are synchronous local accesses; nothing here does network I/O.
"""

from __future__ import annotations

import re
import secrets
from typing import Iterable, Mapping

from flask import current_app, g, request

from ..extensions import db
from ..models import ClientStorageEntry


_CONTEXT_ID_RE = re.compile(r"^[0-9a-f]{32}$")


class EdgeStorage:
    """Cookie-backed string storage readable by the route guard."""

    def __init__(self, cookies: Mapping[str, str]):
        self._values = dict(cookies)
        # key -> staged value, None means "delete on flush"
        self._pending: dict[str, str | None] = {}

    def get(self, key: str) -> str | None:
        if key in self._pending:
            return self._pending[key]
        value = self._values.get(key)
        return value if value else None

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"edge storage only holds strings, got {type(value).__name__} for {key!r}")
        self._pending[key] = value

    def remove(self, key: str) -> None:
        self._pending[key] = None

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def apply(self, response, *, max_age, secure: bool, samesite: str | None, httponly: bool):
        """Write staged cookie changes onto a response."""
        for key, value in self._pending.items():
            if value is None:
                response.delete_cookie(
                    key, path="/", secure=secure, httponly=httponly, samesite=samesite
                )
            else:
                response.set_cookie(
                    key,
                    value,
                    max_age=max_age,
                    path="/",
                    secure=secure,
                    httponly=httponly,
                    samesite=samesite,
                )
        self._pending.clear()
        return response


class ClientStorage:
    """Per-browser-context key/value storage, readable only by application views."""

    def __init__(self, context_id: str):
        self.context_id = context_id

    def get(self, key: str) -> str | None:
        entry = db.session.query(ClientStorageEntry).filter_by(
            context_id=self.context_id, key=key
        ).first()
        return entry.value if entry else None

    def get_many(self, keys: Iterable[str]) -> dict[str, str]:
        keys = list(keys)
        entries = db.session.query(ClientStorageEntry).filter(
            ClientStorageEntry.context_id == self.context_id,
            ClientStorageEntry.key.in_(keys),
        ).all()
        return {entry.key: entry.value for entry in entries}

    def write(self, values: Mapping[str, str], *, remove: Iterable[str] = ()) -> None:
        """
        Remove `remove` keys, then upsert `values`, in one transaction.

        Either every change lands or none does.
        """
        for key, value in values.items():
            if not isinstance(value, str):
                raise TypeError(f"client storage values must be strings, got {type(value).__name__} for {key!r}")

        stale = [key for key in remove if key not in values]
        try:
            if stale:
                db.session.query(ClientStorageEntry).filter(
                    ClientStorageEntry.context_id == self.context_id,
                    ClientStorageEntry.key.in_(stale),
                ).delete(synchronize_session=False)

            existing = {
                entry.key: entry
                for entry in db.session.query(ClientStorageEntry).filter(
                    ClientStorageEntry.context_id == self.context_id,
                    ClientStorageEntry.key.in_(list(values)),
                ).all()
            }
            for key, value in values.items():
                entry = existing.get(key)
                if entry is None:
                    db.session.add(ClientStorageEntry(context_id=self.context_id, key=key, value=value))
                else:
                    entry.value = value
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def remove(self, keys: Iterable[str]) -> int:
        """Delete keys for this context. Missing keys are not an error."""
        keys = list(keys)
        try:
            deleted = db.session.query(ClientStorageEntry).filter(
                ClientStorageEntry.context_id == self.context_id,
                ClientStorageEntry.key.in_(keys),
            ).delete(synchronize_session=False)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return deleted


def _new_context_id() -> str:
    return secrets.token_hex(16)


def edge_storage() -> EdgeStorage:
    """Edge-visible storage bound to the current request."""
    if "erp_edge_storage" not in g:
        g.erp_edge_storage = EdgeStorage(request.cookies)
    return g.erp_edge_storage


def client_storage() -> ClientStorage:
    """Client-only storage for the browser context of the current request."""
    if "erp_client_storage" not in g:
        cookie_name = current_app.config["CLIENT_CONTEXT_COOKIE"]
        context_id = request.cookies.get(cookie_name, "")
        if not _CONTEXT_ID_RE.match(context_id):
            context_id = _new_context_id()
            g.erp_client_context_new = True
        g.erp_client_storage = ClientStorage(context_id)
    return g.erp_client_storage


def flush_storage(response):
    """after_request hook: emit staged edge cookies and a new context cookie."""
    config = current_app.config
    edge = g.get("erp_edge_storage")
    if edge is not None and edge.has_pending:
        edge.apply(
            response,
            max_age=config["EDGE_COOKIE_MAX_AGE"],
            secure=config["EDGE_COOKIE_SECURE"],
            samesite=config["EDGE_COOKIE_SAMESITE"],
            httponly=config["EDGE_COOKIE_HTTPONLY"],
        )

    if g.get("erp_client_context_new"):
        client = g.erp_client_storage
        response.set_cookie(
            config["CLIENT_CONTEXT_COOKIE"],
            client.context_id,
            max_age=config["CLIENT_CONTEXT_MAX_AGE"],
            path="/",
            secure=config["EDGE_COOKIE_SECURE"],
            httponly=True,
            samesite=config["EDGE_COOKIE_SAMESITE"],
        )
        g.erp_client_context_new = False
    return response


def purge_stale_entries(*, older_than) -> int:
    """Delete client storage rows not touched since `older_than` (maintenance)."""
    deleted = db.session.query(ClientStorageEntry).filter(
        ClientStorageEntry.updated_at < older_than
    ).delete(synchronize_session=False)
    db.session.commit()
    return deleted


def init_app(app) -> None:
    app.after_request(flush_storage)
