"""Shared extensions for the jwtsession application."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from flask import Flask, current_app
from flask_bcrypt import Bcrypt
from flask_jwt_extended import JWTManager

if TYPE_CHECKING:
    from jwtsession.core.auth.auth_service import AuthFlow
    from jwtsession.core.session.facade import SessionFacade
    from jwtsession.core.session.settings import SessionSettings
    from jwtsession.core.session.store import CookieSessionStore

logger = logging.getLogger(__name__)

EXTENSION_KEY = "jwtsession"

jwt = JWTManager()
bcrypt = Bcrypt()


@dataclass(frozen=True)
class JWTSessionState:
    settings: "SessionSettings"
    store: "CookieSessionStore"
    facade: "SessionFacade"
    auth: "AuthFlow"


class JWTSession:
    """Builds the session store, facade and auth flow once per application.

    ``init_app`` may be called any number of times, from any thread; the
    first call wins and later calls return the existing state.
    """

    _lock = threading.Lock()

    def __init__(self, app: Optional[Flask] = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> JWTSessionState:
        with self._lock:
            state = app.extensions.get(EXTENSION_KEY)
            if state is not None:
                return state
            state = self._create_state(app)
            app.extensions[EXTENSION_KEY] = state
            app.after_request(_write_session_cookies)
            app.teardown_request(_clear_session_registry)
            logger.info(
                "Session store ready (token=%s, default=%s, flash=%s, encrypted=%s)",
                state.settings.token_name,
                state.settings.default_session_name,
                state.settings.flash_session_name,
                state.settings.encrypt_cookies,
            )
            return state

    def _create_state(self, app: Flask) -> JWTSessionState:
        from jwtsession.core.auth.auth_service import AuthFlow
        from jwtsession.core.auth.token_codec import TokenCodec
        from jwtsession.core.auth.users import UserDirectory
        from jwtsession.core.session.facade import SessionFacade
        from jwtsession.core.session.settings import SessionSettings
        from jwtsession.core.session.store import CookieSessionStore

        settings = SessionSettings.from_mapping(app.config)
        if not app.config.get("JWT_SECRET_KEY"):
            app.config["JWT_SECRET_KEY"] = settings.secret_key
        store = CookieSessionStore(
            settings.secret_key,
            default_options=settings.default_options,
            encrypt=settings.encrypt_cookies,
            max_age=settings.max_cookie_age,
        )
        facade = SessionFacade(store, settings)
        users = UserDirectory.from_plaintext(app.config.get("JWT_SESSION_USERS") or {})
        auth = AuthFlow(facade, TokenCodec(settings.token_lifetime), users, settings)
        return JWTSessionState(settings=settings, store=store, facade=facade, auth=auth)


sessions = JWTSession()


def _write_session_cookies(response):
    return get_state().store.write(response)


def _clear_session_registry(exc: Optional[BaseException] = None) -> None:
    get_state().store.clear_request(exc)


def get_state(app: Optional[Flask] = None) -> JWTSessionState:
    app = app or current_app
    try:
        return app.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError("jwtsession is not initialized; call init_extensions(app)") from None


def get_facade() -> "SessionFacade":
    return get_state().facade


def get_auth() -> "AuthFlow":
    return get_state().auth


def init_extensions(app: Flask) -> None:
    """Initialize all extensions with the Flask app."""
    jwt.init_app(app)
    bcrypt.init_app(app)
    sessions.init_app(app)
