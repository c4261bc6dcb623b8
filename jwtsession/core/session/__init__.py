"""Named cookie sessions: store, facade, typed keys and settings."""

from jwtsession.core.session.errors import (
    SessionConfigError,
    SessionKeyNotFoundError,
    SessionRetrievalError,
    SessionSaveError,
    SessionStoreError,
    SessionValueTypeError,
)
from jwtsession.core.session.facade import SessionFacade
from jwtsession.core.session.keys import SessionKey
from jwtsession.core.session.models import CookieSession, Flash, Message
from jwtsession.core.session.settings import CookieOptions, SessionSettings
from jwtsession.core.session.store import CookieSessionStore

__all__ = [
    "CookieOptions",
    "CookieSession",
    "CookieSessionStore",
    "Flash",
    "Message",
    "SessionConfigError",
    "SessionFacade",
    "SessionKey",
    "SessionKeyNotFoundError",
    "SessionRetrievalError",
    "SessionSaveError",
    "SessionSettings",
    "SessionStoreError",
    "SessionValueTypeError",
]
