from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.constants import CLOCK_ENTRIES_ENDPOINT
from ..core.exceptions import DuplicateEntryError, NotFoundError, StoreCommitError, ValidationError
from .model import PendingEvent

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route(CLOCK_ENTRIES_ENDPOINT, methods=["POST"], endpoint="clock_entries_create")
    def clock_entries_create():
        """Online clock-in/clock-out from a connected terminal."""
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"error": "Invalid entry format"}), 400

        try:
            event = PendingEvent.from_payload(payload)
            entry = container.clock_service.record(event)
            return jsonify({"entry": entry.to_dict()}), 201
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except NotFoundError as e:
            return jsonify({"error": str(e), "which": e.which}), 404
        except DuplicateEntryError:
            return jsonify({"error": "Duplicate entry detected"}), 409
        except StoreCommitError as e:
            logger.warning("Online clock write failed: %s", e)
            return jsonify({"error": str(e)}), 500
        except Exception:
            logger.exception("Online clock write failed")
            return jsonify({"error": "Failed to record time entry"}), 500
