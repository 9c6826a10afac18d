from __future__ import annotations

import logging

from flask import current_app, jsonify

logger = logging.getLogger(__name__)


def json_ok(status: int = 200, **body):
    return jsonify({"success": True, **body}), status


def json_error(message: str, status: int, **extra):
    return jsonify({"success": False, "message": message, **extra}), status


def system_error(action: str, exc: Exception):
    logger.exception("Unexpected error while %s", action)
    if bool(current_app.config.get("DEBUG", False)):
        return json_error(f"System error while {action}: {exc}", 500)
    return json_error(f"System error while {action}", 500)
