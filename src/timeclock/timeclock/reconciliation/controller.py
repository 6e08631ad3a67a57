from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.constants import SYNC_ENDPOINT

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route(SYNC_ENDPOINT, methods=["POST"], endpoint="sync_batch")
    def sync_batch():
        """Reconcile a batch of entries queued by a terminal while offline."""
        body = request.get_json(silent=True)
        entries = body.get("entries") if isinstance(body, dict) else None
        if not isinstance(entries, list):
            return jsonify({"error": "Invalid entries format"}), 400

        try:
            result = container.reconciliation_service.submit_batch(entries)
        except Exception as e:
            logger.exception("Offline sync failed")
            return jsonify({"error": str(e)}), 500

        return jsonify(result.to_dict()), 200
