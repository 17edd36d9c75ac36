from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Mapping

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ScheduleParseError,
    ValidationError,
)
from ..users.model import CurrentUser

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ScheduleParseError, 502),
)


def current_user() -> CurrentUser:
    """Identity stored in the Flask session by the login view."""

    if "user_id" not in session:
        raise AuthenticationError("Please log in to continue.")
    return CurrentUser(
        user_id=session["user_id"],
        role=Role(session["role"]),
        display_name=session.get("name", ""),
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Please log in to continue."}), 401
        return view(*args, **kwargs)

    return wrapper


def role_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "Please log in to continue."}), 401
            if session.get("role") not in allowed:
                return jsonify({"error": "You do not have permission to perform this action"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> Mapping[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return request.form
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object")
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                return jsonify({"error": str(e)}), status
        logger.exception("Unhandled domain error")
        return jsonify({"error": str(e)}), 500

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        logger.exception("Unexpected error on %s %s", request.method, request.path)
        if app.config.get("DEBUG"):
            return jsonify({"error": f"Internal error: {e}"}), 500
        return jsonify({"error": "Internal server error"}), 500
