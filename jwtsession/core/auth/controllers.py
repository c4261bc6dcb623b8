"""Demo HTTP controllers: login, logout, home page and a cookie example."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable

from flask import Blueprint, g, jsonify, redirect, request, url_for
from pydantic import ValidationError

from jwtsession.core.auth.schemas import LoginRequest
from jwtsession.core.session.errors import (
    CredentialMismatchError,
    SessionKeyNotFoundError,
    SessionValueTypeError,
)
from jwtsession.core.utils.decorators import session_jwt_required
from jwtsession.extensions import get_auth, get_facade

demo_bp = Blueprint("demo", __name__)


def format_as_date(value: date) -> str:
    return f"{value.year}-{value.month:02d}-{value.day:02d}"


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    err = errors[0]
    field = ".".join(str(part) for part in err.get("loc", ())) or "payload"
    return f"{field}: {err.get('msg')}"


def _read_or(getter: Callable[[str], Any], key: str, fallback: Any) -> Any:
    try:
        return getter(key)
    except (SessionKeyNotFoundError, SessionValueTypeError):
        return fallback


@demo_bp.get("/logout")
@demo_bp.get("/login")
def login_page():
    # Logout shares this view: showing the login page drops every session.
    facade = get_facade()
    flashes = facade.get_flashes()
    facade.delete_all()
    return jsonify({"title": "Jwt Login", "flashes": flashes})


@demo_bp.post("/validate-jwt-login")
def validate_jwt_login():
    facade = get_facade()
    payload = request.get_json(silent=True) or request.form.to_dict()
    try:
        form = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        facade.set_flash(f"Get login info error: {_first_error(exc)}")
        return redirect(url_for("demo.login_page"))

    result = get_auth().issue(form.username, form.password)
    if isinstance(result.error, CredentialMismatchError):
        facade.set_flash("Error : username or password")
        return redirect(url_for("demo.login_page"))
    if not result.authenticated:
        facade.set_flash(f"Error set token string: {result.error}")
        return redirect(url_for("demo.login_page"))

    facade.set_flash("success : successful login")
    facade.set_flash(f"username : {result.username}")
    return redirect(url_for("demo.home"))


@demo_bp.get("/index.html")
@demo_bp.get("/index")
@demo_bp.get("/")
def home():
    flashes = get_facade().get_flashes()
    result = get_auth().validate()
    return jsonify(
        {
            "title": "Main website",
            "now": format_as_date(datetime.now()),
            "flashes": flashes,
            "loginFlag": result.authenticated,
            "username": result.username,
        }
    )


@demo_bp.get("/some-cookie-example")
def some_cookie_example():
    facade = get_facade()
    facade.set("hello", "world")
    session_message = _read_or(facade.get_str, "hello", "")
    facade.set("hello", 2017)
    new_message = _read_or(facade.get_int, "hello", 0)
    facade.delete("hello")
    read_again = _read_or(facade.get_str, "hello", "")
    return jsonify(
        {
            "session message": session_message,
            "session new message": new_message,
            "session read again after delete": read_again,
            "status": 200,
        }
    )


@demo_bp.get("/me")
@session_jwt_required
def me():
    return jsonify({"ok": True, "username": g.jwt_username})


@demo_bp.get("/ping")
def ping():
    return jsonify({"ping": "pong"})
