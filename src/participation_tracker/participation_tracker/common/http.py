"""Helpers shared by the Flask controllers.

Login itself is handled outside this package; it is expected to leave
``user_id`` and ``role`` in the session.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError

logger = logging.getLogger(__name__)


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        return Role.USER


def current_user_id() -> Optional[int]:
    user_id = session.get("user_id")
    return int(user_id) if user_id is not None else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def role_required(minimum: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return json_error("Please log in to continue", 401)
            if not current_role().at_least(minimum):
                return json_error("You do not have permission for this action", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def domain_error_response(e: DomainError):
    if isinstance(e, NotFoundError):
        return json_error(str(e), 404)
    if isinstance(e, AuthorizationError):
        return json_error(str(e), 403)
    # ValidationError and any other rule violation
    return json_error(str(e), 400)


def unexpected_error_response(action: str):
    logger.exception("Unexpected error while %s (%s %s)", action, request.method, request.path)
    return json_error(f"System error while {action}", 500)


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
