"""Flask application for the mock patient registry."""

import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Flask, jsonify, request

from .config import MockServerConfig, load_config
from .patients_endpoint import patients_bp
from .store import PatientStore

logger = logging.getLogger("patient_registration.mock_server")

MOCK_SERVER_VERSION = "1.0.0"


def setup_logging(config: MockServerConfig) -> logging.Logger:
    """Configure logging for mock server with rotation.

    Args:
        config: Mock server configuration

    Returns:
        Configured logger instance
    """
    logger.setLevel(config.log_level)
    logger.handlers.clear()

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_path = Path(config.log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def create_app(config: MockServerConfig | None = None) -> Flask:
    """Build a mock registry app with its own empty patient store.

    Args:
        config: Mock server configuration (defaults used if not provided)

    Returns:
        Configured Flask application
    """
    config = config or MockServerConfig()
    app = Flask(__name__)
    app.extensions["mock_registry_config"] = config
    app.extensions["mock_registry_store"] = PatientStore()
    started_at = datetime.now(timezone.utc)
    request_count = 0

    @app.before_request
    def log_request():
        nonlocal request_count
        request_count += 1
        logger.info(
            f"Request #{request_count}: {request.method} {request.path} "
            f"(Content-Length: {request.content_length or 0})"
        )

    @app.route("/health", methods=["GET"])
    def health_check():
        uptime_seconds = int((datetime.now(timezone.utc) - started_at).total_seconds())
        store = app.extensions["mock_registry_store"]
        return jsonify({
            "status": "healthy",
            "version": MOCK_SERVER_VERSION,
            "port": config.http_port,
            "uptime_seconds": uptime_seconds,
            "request_count": request_count,
            "patient_count": len(store.patients),
            "failure_rate": config.failure_rate,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }), 200

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"success": False, "message": "Not found"}), 404

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return jsonify({"success": False, "message": "Internal Server Error"}), 500

    app.register_blueprint(patients_bp)
    return app


def run_server(
    host: str | None = None,
    port: int | None = None,
    config: MockServerConfig | None = None,
    debug: bool = False,
) -> None:
    """Run the Flask mock server.

    Args:
        host: Host address (defaults to config.host)
        port: Port number (defaults to config.http_port)
        config: Mock server configuration (loads from file if not provided)
        debug: Enable debug mode
    """
    if config is None:
        config = load_config()

    updates = {}
    if host:
        updates["host"] = host
    if port:
        updates["http_port"] = port
    config = config.model_copy(update=updates)

    setup_logging(config)
    app = create_app(config)

    logger.info(f"Starting mock patient registry on http://{config.host}:{config.http_port}")
    logger.info(f"Health check available at: http://{config.host}:{config.http_port}/health")

    app.run(
        host=config.host,
        port=config.http_port,
        debug=debug,
        use_reloader=False,
    )
