"""
API gateway: combines the auth, events, media and witness blueprints under
/api. This is the entrypoint for running the service.
"""

import logging
import os
from typing import Optional

from flask import Flask, jsonify, request, Response
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from backend.auth_service.routes import auth_bp
from backend.config import Config
from backend.context import EXTENSION_KEY, AppContext
from backend.errors import AppError, InternalError
from backend.events_service.routes import events_bp
from backend.media_service.routes import media_bp
from backend.witness_service.routes import witness_bp

# Basic console logging during API requests
logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")


def create_app(config: Optional[Config] = None, context: Optional[AppContext] = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        config (Config, optional): Defaults to the context's config, then the environment.
        context (AppContext, optional): Defaults to production wiring for `config`.

    Returns:
        Flask: The configured Flask application.
    """
    if config is None:
        config = context.config if context is not None else Config.from_env()
    if context is None:
        context = AppContext.from_config(config)

    logging.getLogger().setLevel(config.log_level)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.max_upload_bytes
    app.extensions[EXTENSION_KEY] = context

    CORS(app, resources={
        r"/api/*": {
            "origins": config.cors_origins,
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }
    })

    # --- REGISTER BLUEPRINTS ---
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(events_bp, url_prefix="/api")
    app.register_blueprint(media_bp, url_prefix="/api")
    app.register_blueprint(witness_bp, url_prefix="/api")

    # --- BASIC HEALTH CHECKPOINT ---
    @app.route("/api/health", methods=["GET"])
    def health():
        """
        Unauthenticated liveness probe.
        """
        return jsonify({"status": "ok"}), 200

    # --- REQUEST LOGGING ---
    @app.before_request
    def log_request() -> None:
        logging.info(f"[API] Incoming {request.method} {request.path}")

    @app.after_request
    def log_response(response: Response) -> Response:
        logging.info(f"[API] Response {response.status} for {request.method} {request.path}")
        return response

    # --- ERROR HANDLERS ---
    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        if isinstance(error, InternalError):
            logging.error(f"[API] {request.method} {request.path} failed: {error.message}")
        return jsonify({"error": error.to_public()}), error.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error: RequestEntityTooLarge):
        return jsonify({"error": "request body too large"}), 413

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.name.lower()}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logging.exception(f"[API] Unhandled error on {request.method} {request.path}")
        return jsonify({"error": "internal server error"}), 500

    return app


if __name__ == "__main__":
    config = Config.from_env()
    os.makedirs(config.media_dir, exist_ok=True)
    app = create_app(config)
    app.run(host="0.0.0.0", port=config.port)
