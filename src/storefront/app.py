import logging
import os
from typing import Optional

from flask import Flask, jsonify, send_from_directory
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from storefront.cli import register_commands
from storefront.core.config import Config
from storefront.core.cors import init_cors
from storefront.core.exceptions import BaseAPIException, DatabaseError, InternalServerError
from storefront.db import create_db_engine, test_simple_query
from storefront.repositories.admin_repository import AdminRepository
from storefront.routes import admin_bp, cart_bp
from storefront.services.auth_service import AuthService
from storefront.utils.date_utils import now_utc

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None) -> Flask:
    """
    Application factory.

    Tests pass their own Config (SQLite, cheap bcrypt); everything else reads
    the environment.
    """
    config = config or Config.from_env()
    config.validate()

    logging.basicConfig(
        level=config.app.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    app = Flask(__name__)
    app.config["DEBUG"] = config.app.debug
    app.secret_key = config.security.session_secret_key or config.security.jwt_secret_key
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_SECURE"] = config.is_production

    engine = create_db_engine(config.database)
    app.extensions["storefront_config"] = config
    app.extensions["db_engine"] = engine
    app.extensions["auth_service"] = AuthService(AdminRepository(engine), config.security)

    init_cors(app, config.allowed_origins)

    # ------------------------------------------------------------------ #
    # Blueprints                                                           #
    # ------------------------------------------------------------------ #
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(cart_bp, url_prefix="/cart")

    register_commands(app)

    # ------------------------------------------------------------------ #
    # Error handlers: every error body is JSON                             #
    # ------------------------------------------------------------------ #
    @app.errorhandler(BaseAPIException)
    def handle_api_error(error: BaseAPIException):
        if error.status_code >= 500:
            logger.error(f"{error.error_code}: {error.internal_message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        logger.exception(f"Database error: {error}")
        return jsonify(DatabaseError(str(error)).to_dict()), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.description, "code": error.name.upper().replace(" ", "_")}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f"Unhandled error: {error}")
        return jsonify(InternalServerError(str(error)).to_dict()), 500

    # ------------------------------------------------------------------ #
    # Root, health, uploads                                                #
    # ------------------------------------------------------------------ #
    @app.get("/")
    def index():
        return jsonify({"ok": True, "env": config.app.environment})

    @app.get("/health")
    def health():
        """Liveness + readiness probe. Returns 503 if DB is unreachable."""
        try:
            test_simple_query(engine)
        except SQLAlchemyError as exc:
            logger.error(f"Health check failed: {exc}")
            return jsonify({"status": "error", "database": "unreachable"}), 503
        return jsonify({
            "status": "ok",
            "database": "reachable",
            "timestamp": now_utc().isoformat(),
        }), 200

    uploads_dir = os.path.abspath(config.app.uploads_dir)

    @app.get("/uploads/<path:filename>")
    def uploads(filename: str):
        return send_from_directory(uploads_dir, filename)

    return app


if __name__ == "__main__":
    application = create_app()
    settings = application.extensions["storefront_config"].app
    application.run(debug=settings.debug, host=settings.host, port=settings.port)
