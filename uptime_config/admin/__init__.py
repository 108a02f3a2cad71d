"""
Admin Server — HTTP interface for the configuration editor.

Usage:
    python -m uptime_config.admin
    python -m uptime_config.admin --port 8000

Endpoints:
    GET  /api/config
    POST /api/config
    GET  /api/config/source
"""

from .server import create_app, run_server

__all__ = ["create_app", "run_server"]
