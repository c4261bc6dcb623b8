"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import g, jsonify

from jwtsession.extensions import get_auth

F = TypeVar("F", bound=Callable)


def session_jwt_required(fn: F) -> F:
    """Reject the request with 401 unless it carries a valid token.

    The token is looked up in the Authorization header first, then in the
    token session cookie. The username is exposed as ``g.jwt_username``.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        result = get_auth().validate()
        if not result.authenticated:
            code = result.error.code if result.error else "unauthenticated"
            return jsonify({"ok": False, "error": code}), 401
        g.jwt_username = result.username
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
