# Overview: Database model backing the client-only storage domain.

from __future__ import annotations

from .extensions import db
from .time_utils import to_utc_z, utcnow


class ClientStorageEntry(db.Model):
    """
    One key/value pair in a browser context's client-only storage.

    Rows are grouped by context_id (the opaque id carried in the browser's
    context cookie). Values are strings; structured payloads are stored as
    JSON text. Entries never expire and are only removed explicitly.

    The route guard never reads this table.
    """
    __tablename__ = "client_storage_entries"
    __table_args__ = (
        db.UniqueConstraint("context_id", "key", name="uq_client_storage_context_key"),
        db.Index("ix_client_storage_context_id", "context_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    context_id = db.Column(db.String(64), nullable=False)
    key = db.Column(db.String(64), nullable=False)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "context_id": self.context_id,
            "key": self.key,
            "value": self.value,
            "updated_at": to_utc_z(self.updated_at),
        }
