"""
Admin Server — Flask app exposing the configuration API.

The editing UI talks to /api/config. The coordinator is injected via
create_app(); when none is given, it is built from environment settings.
"""

from __future__ import annotations

import logging
import time
import traceback
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request

from ..logging_config import setup_logging
from ..settings import Settings
from ..sync.coordinator import SyncCoordinator
from .routes_config import config_bp

logger = logging.getLogger(__name__)


def create_app(coordinator: Optional[SyncCoordinator] = None) -> Flask:
    """Create the Flask application."""

    if coordinator is None:
        coordinator = Settings.from_env(root=Path.cwd()).build_coordinator()

    app = Flask(__name__)
    app.config["SYNC_COORDINATOR"] = coordinator

    # Config documents are small; anything bigger is a mistake
    app.config["MAX_CONTENT_LENGTH"] = 2 * 1024 * 1024

    # Keep documents in the order the operator wrote them
    app.json.sort_keys = False

    # ── Register Blueprints ───────────────────────────────────────
    app.register_blueprint(config_bp, url_prefix="/api/config")   # /api/config, /api/config/source

    # ── Error Handlers ────────────────────────────────────────────

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(413)
    def request_entity_too_large(e):
        max_kb = app.config.get("MAX_CONTENT_LENGTH", 0) / 1024
        return jsonify({"error": f"Request too large (max {max_kb:.0f} KB)"}), 413

    @app.errorhandler(500)
    def internal_server_error(e):
        """Catch-all: return JSON for any unhandled 500 so clients never see raw HTML."""
        # Werkzeug wraps unhandled exceptions in InternalServerError
        cause = getattr(e, "original_exception", None) or e
        tb = traceback.format_exc()
        logger.error(
            f"Unhandled 500 on {request.method} {request.path}: {cause!r}\n{tb}"
        )
        return jsonify({
            "error": "Internal server error",
            "details": str(cause),
        }), 500

    # ── Request Logging ───────────────────────────────────────────

    @app.before_request
    def log_request_start():
        request._start_time = time.time()

    @app.after_request
    def log_request_end(response):
        """Log request with duration for API endpoints."""
        duration_ms = 0
        if hasattr(request, "_start_time"):
            duration_ms = int((time.time() - request._start_time) * 1000)

        if request.path.startswith("/api/"):
            logger.info(
                f"{request.method} {request.path} → {response.status_code} ({duration_ms}ms)"
            )
        return response

    logger.info(f"Admin server initialized (store={coordinator.store.name})")

    return app


def run_server(
    host: str = "127.0.0.1",
    port: int = 5050,
    debug: bool = False,
) -> None:
    """
    Run the admin server.

    Args:
        host: Bind address (default: localhost only)
        port: Port to run on
        debug: Enable Flask debug mode
    """
    setup_logging(level="DEBUG" if debug else None)
    # Our after_request logger already records every API call
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    app = create_app()

    print(f"\n  uptime-config admin API → http://{host}:{port}/api/config\n")

    # Reloader forks the process; not needed for an API-only server
    app.run(host=host, port=port, debug=debug, use_reloader=False)
