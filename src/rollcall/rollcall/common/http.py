"""Helpers shared by the JSON controllers: body parsing, error replies, session gates."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, DuplicateError, ValidationError

logger = logging.getLogger(__name__)

ADMIN_SESSION_KEY = "attendance_admin"
COORDINATOR_SESSION_KEY = "coordinator_id"


def read_json() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def json_error(exc: DomainError):
    body: dict[str, Any] = {"error": str(exc)}
    if isinstance(exc, DuplicateError) and exc.existing is not None:
        body["existing"] = exc.existing
    return jsonify(body), exc.status_code


def server_error(exc: Exception, action: str, message: Optional[str] = None):
    """Log an unexpected failure and answer 500.

    `message` replaces the exception text for endpoints that must not leak it.
    """
    logger.error("Error %s: %s", action, exc, exc_info=True)
    return jsonify({"error": message or str(exc)}), 500


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get(ADMIN_SESSION_KEY):
            return jsonify({"error": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_coordinator_id(requested: Any = None) -> int:
    """Coordinator id of the logged-in coordinator.

    A `requested` id (from a query string, form or body) must name the same
    coordinator.
    """
    coordinator_id = session.get(COORDINATOR_SESSION_KEY)
    if not coordinator_id:
        raise AuthenticationError("Coordinator login required")

    if requested not in (None, ""):
        try:
            requested_id = int(requested)
        except (TypeError, ValueError):
            raise ValidationError("Invalid coordinator ID") from None
        if requested_id != int(coordinator_id):
            raise AuthorizationError("You can only access your own volunteers and sessions")

    return int(coordinator_id)
