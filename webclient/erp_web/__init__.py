# webclient/erp_web/__init__.py
from flask import Flask, jsonify, redirect

from .config import Config
from .extensions import db, migrate



def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Route guard runs before every request; staged cookies flush after it
    from .services import guard_service, storage_service
    storage_service.init_app(app)
    guard_service.init_app(app)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.dashboard import dashboard_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)

    @app.get("/")
    def index():
        return redirect("/dashboard")

    from .decorators import wants_json
    from .permissions import LOGIN_PATH
    from .services import session_service
    from .services.api_client import SessionExpiredError

    @app.errorhandler(SessionExpiredError)
    def handle_session_expired(exc):
        # ApiClient already cleared the session; clear again in case the
        # error came from a client without the hook
        session_service.clear()
        if wants_json():
            return jsonify({"error": exc.message}), 401
        return redirect(LOGIN_PATH)

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
