"""
Admin API — Configuration read/write endpoints.

Blueprint: config_bp
Prefix: /api/config
Routes:
    GET  /api/config          current document
    POST /api/config          replace document, optionally mirror
    GET  /api/config/source   rendered uptime.config.ts (text/plain)

Every outcome where the store write committed is a 200, including a
failed or skipped mirror. The mirror outcome is reported in the
X-Config-Mirror header.
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from ..errors import MalformedDocument, NotConfigured, StoreUnavailable
from ..mirror.settings import CREDENTIAL_FIELDS, MirrorCredentials
from ..sync.coordinator import SyncCoordinator
from .. import codec

logger = logging.getLogger(__name__)

config_bp = Blueprint("config", __name__)

MIRROR_HEADER = "X-Config-Mirror"


def _coordinator() -> SyncCoordinator:
    return current_app.config["SYNC_COORDINATOR"]


def _not_configured():
    return jsonify({"error": "Config not found"}), 404


@config_bp.route("", methods=["GET"])
def api_config_get():
    """Return the stored configuration document."""
    try:
        doc = _coordinator().read()
    except NotConfigured:
        return _not_configured()
    except (StoreUnavailable, MalformedDocument) as e:
        logger.error(f"Config load error: {e}")
        return jsonify({
            "error": "Failed to load config",
            "details": str(e),
        }), 500
    return jsonify(codec.to_api_dict(doc))


@config_bp.route("", methods=["POST"])
def api_config_post():
    """Replace the configuration document."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    document = {k: v for k, v in body.items() if k not in CREDENTIAL_FIELDS}

    try:
        credentials = MirrorCredentials.from_request(body)
        result = _coordinator().write(document, credentials)
    except MalformedDocument as e:
        logger.info(f"Rejected config update: {e}")
        payload = {"error": e.message}
        if e.details:
            payload["details"] = e.details
        return jsonify(payload), 400
    except StoreUnavailable as e:
        logger.error(f"Config update error: {e}")
        return jsonify({
            "error": "Failed to update config",
            "details": str(e),
        }), 500

    response = jsonify({"success": True})
    response.headers[MIRROR_HEADER] = result.mirror_outcome.value
    return response


@config_bp.route("/source", methods=["GET"])
def api_config_source():
    """Preview the module that would be committed to the mirror."""
    try:
        source = _coordinator().render_mirror_source()
    except NotConfigured:
        return _not_configured()
    except (StoreUnavailable, MalformedDocument) as e:
        logger.error(f"Config render error: {e}")
        return jsonify({
            "error": "Failed to load config",
            "details": str(e),
        }), 500
    return current_app.response_class(
        source, mimetype="text/plain", headers={"Cache-Control": "no-cache"}
    )
