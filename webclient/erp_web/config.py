# webclient/erp_web/config.py
from __future__ import annotations
import os
from datetime import timedelta


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    APP_NAME = os.environ.get("APP_NAME", "BinsAnalytics")

    # Client-only storage lives in webclient/instance/erp_web.sqlite3 by default
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///erp_web.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # External ERP REST API
    API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8000")
    API_TIMEOUT = float(os.environ.get("API_TIMEOUT", "30"))
    # Tests inject an httpx transport here; None means real network
    API_TRANSPORT = None

    # Edge-visible session cookies
    EDGE_COOKIE_MAX_AGE = timedelta(hours=8)
    EDGE_COOKIE_SECURE = _env_flag("EDGE_COOKIE_SECURE", "true")
    EDGE_COOKIE_SAMESITE = os.environ.get("EDGE_COOKIE_SAMESITE", "Lax")
    EDGE_COOKIE_HTTPONLY = True

    # Browser context id for the client-only storage domain
    CLIENT_CONTEXT_COOKIE = "erp_client"
    CLIENT_CONTEXT_MAX_AGE = timedelta(days=400)
