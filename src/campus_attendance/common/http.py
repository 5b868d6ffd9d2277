from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, jsonify, request, session

from ..core.exceptions import DomainError

SESSION_USER_KEY = "uid"


def error_response(exc: DomainError):
    body = {"message": exc.message}
    if exc.redirect_to:
        body["redirectTo"] = exc.redirect_to
    return jsonify(body), exc.status_code


def json_body() -> dict:
    """Request JSON object, ``{}`` for empty or non-object bodies."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def session_user_id() -> Optional[int]:
    raw = session.get(SESSION_USER_KEY)
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


def json_errors(failure_message: str):
    """Render DomainError as JSON; log anything else and answer 500."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return error_response(e)
            except Exception:
                current_app.logger.exception("Unhandled error in %s", request.path)
                return jsonify({"message": failure_message}), 500

        return wrapper

    return decorator


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if session_user_id() is None:
            return jsonify({"message": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper
