from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..container import Container
from ..core.constants import HEALTH_ENDPOINT

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route(HEALTH_ENDPOINT, methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"}), 200

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    def api_employees():
        """Active employees for the terminal picker (cacheable)."""
        try:
            employees = container.directory_service.list_employees()
        except Exception:
            logger.exception("Failed to load employees")
            return jsonify({"error": "Failed to load employees"}), 500
        return jsonify({"employees": [e.to_dict() for e in employees]}), 200

    @app.route("/api/terminals", methods=["GET"], endpoint="api_terminals")
    def api_terminals():
        try:
            terminals = container.directory_service.list_terminals()
        except Exception:
            logger.exception("Failed to load terminals")
            return jsonify({"error": "Failed to load terminals"}), 500
        return jsonify({"terminals": [t.to_dict() for t in terminals]}), 200
