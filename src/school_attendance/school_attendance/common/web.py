from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConfigurationError, 409),
    (ValidationError, 400),
)


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def error_response(exc: Exception):
    """Map an exception raised inside a view to a JSON error response.

    Call from an ``except`` block so unexpected errors are logged with their traceback.
    """
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return json_error(str(exc), status)
    logger.exception("Unhandled error while serving request")
    return json_error("Internal server error", 500)


def current_user_id() -> int:
    return int(session["user_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Please log in to continue", 401)
        if session.get("role") != Role.ADMIN.value:
            return json_error("Administrator access required", 403)
        return view(*args, **kwargs)

    return wrapper


def student_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Please log in to continue", 401)
        if session.get("role") != Role.STUDENT.value:
            return json_error("Only students can do this", 403)
        return view(*args, **kwargs)

    return wrapper
