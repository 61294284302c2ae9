from __future__ import annotations

from functools import wraps

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.actor import Actor
from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    DuplicatePeriod,
    LocationNotAllowed,
    NotFound,
    StateConflict,
    ValidationError,
)
from .logger import get_logger

logger = get_logger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (LocationNotAllowed, 403),
    (NotFound, 404),
    (StateConflict, 409),
    (DuplicatePeriod, 409),
)


def error_status(exc: DomainError) -> int:
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(exc, kind):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        return jsonify({"success": False, "error": exc.__class__.__name__, "message": str(exc)}), error_status(exc)

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "error": "InternalError", "message": "Internal server error"}), 500


def actor_required(view):
    """Read the already-verified actor supplied by the auth gateway."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        actor_id = request.headers.get("X-Actor-Id", "")
        role = request.headers.get("X-Actor-Role", "")
        if not actor_id.isdigit():
            return jsonify({"success": False, "error": "Unauthorized", "message": "Missing actor"}), 401
        try:
            g.actor = Actor(actor_id=int(actor_id), role=Role(role), name=request.headers.get("X-Actor-Name", ""))
        except ValueError:
            return jsonify({"success": False, "error": "Unauthorized", "message": "Unknown role"}), 401
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    return request.get_json(silent=True) or {}
