# webclient/erp_web/routes/system.py
"""
System health endpoint.

Reports whether the client-only storage domain is reachable. The ERP
backend is not checked here; it has its own health checks.
"""

import time
from flask import Blueprint, current_app

from ..extensions import db
from ..models import ClientStorageEntry
from ..time_utils import utcnow

system_bp = Blueprint("system", __name__)


def check_storage_health() -> dict:
    """
    Check the client storage table with a count query.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        entry_count = db.session.query(ClientStorageEntry).count()
        context_count = db.session.query(ClientStorageEntry.context_id).distinct().count()

        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "entries": entry_count,
                "contexts": context_count,
            }
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Client storage health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
    - 200: client storage reachable
    - 503: client storage unavailable
    """
    start_time = time.time()
    storage_health = check_storage_health()

    if storage_health["status"] == "unhealthy":
        overall_status = "unhealthy"
        http_status = 503
    else:
        overall_status = "healthy"
        http_status = 200

    total_elapsed_ms = (time.time() - start_time) * 1000

    response = {
        "status": overall_status,
        "app": current_app.config["APP_NAME"],
        "timestamp": utcnow().isoformat() + "Z",
        "total_latency_ms": round(total_elapsed_ms, 2),
        "checks": {
            "client_storage": storage_health,
        }
    }

    return response, http_status
