"""Get/set/delete helpers over the cookie session store."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Union

from jwtsession.core.session.errors import SessionKeyNotFoundError, SessionRetrievalError
from jwtsession.core.session.keys import SessionKey, checked, key_name
from jwtsession.core.session.models import CookieSession, Flash, Message
from jwtsession.core.session.settings import DEFAULT_SHORT_NAME, CookieOptions, SessionSettings
from jwtsession.core.session.store import CookieSessionStore

logger = logging.getLogger(__name__)

Key = Union[str, SessionKey]


class SessionFacade:
    """Session helpers bound to one store and one set of settings.

    Every ``session_name`` argument accepts ``None``, ``""`` or ``"default"``
    to mean the default for that helper: the generic session for values, the
    flash session for flashes.
    """

    def __init__(self, store: CookieSessionStore, settings: SessionSettings):
        self.store = store
        self.settings = settings
        self.token_key: SessionKey[str] = SessionKey(settings.token_name, str)

    # --- name resolution ---

    def _session_name(self, name: Optional[str]) -> str:
        if not name or name == DEFAULT_SHORT_NAME:
            return self.settings.default_session_name
        return name

    def _flash_session_name(self, name: Optional[str]) -> str:
        if not name or name == DEFAULT_SHORT_NAME:
            return self.settings.flash_session_name
        return name

    # --- values ---

    def set_message(self, message: Message) -> CookieSession:
        """Write one key/value into a session and save it."""
        if isinstance(message.key, SessionKey):
            message.key.check(message.value)
        session = self.store.get(self._session_name(message.session_name))
        values = dict(session.values)
        values[key_name(message.key)] = message.value
        self.store.save(session, values, message.options or self.settings.default_options)
        return session

    def set(
        self,
        key: Key,
        value: Any,
        session_name: Optional[str] = None,
        options: Optional[CookieOptions] = None,
    ) -> CookieSession:
        return self.set_message(Message(key=key, value=value, session_name=session_name or "", options=options))

    def get(self, key: Key, session_name: Optional[str] = None) -> Any:
        name = self._session_name(session_name)
        session = self.store.get(name)
        try:
            value = session.values[key_name(key)]
        except KeyError:
            raise SessionKeyNotFoundError(key_name(key), name) from None
        if isinstance(key, SessionKey):
            return key.check(value)
        return value

    def get_str(self, key: str, session_name: Optional[str] = None) -> str:
        return checked(self.get(key, session_name), str, key)

    def get_int(self, key: str, session_name: Optional[str] = None) -> int:
        return checked(self.get(key, session_name), int, key)

    def delete(self, key: Key, session_name: Optional[str] = None) -> None:
        """Remove ``key`` from this request's copy of the session.

        The cookie is not rewritten; save (or set another value) to persist
        the removal.
        """
        session = self.store.get(self._session_name(session_name))
        session.values.pop(key_name(key), None)

    # --- flashes ---

    def set_session_flash(self, flash: Flash) -> None:
        """Append a flash; an unreadable flash cookie is replaced, not fatal."""
        name = self._flash_session_name(flash.session_name)
        try:
            session = self.store.get(name)
        except SessionRetrievalError:
            session = self.store.new(name)
        self.store.save(session, session.with_flash(flash.value, name))

    def set_flash(self, value: Any, session_name: Optional[str] = None) -> None:
        self.set_session_flash(Flash(value=value, session_name=session_name or ""))

    def get_flashes(self, session_name: Optional[str] = None) -> List[Any]:
        """Return and consume the flashes, then delete the flash session."""
        name = self._flash_session_name(session_name)
        try:
            flashes = self.store.get(name).flashes(name)
        except SessionRetrievalError:
            flashes = []
        self.delete_session(name)
        return flashes

    # --- whole sessions ---

    def delete_session(self, session_name: Optional[str] = None) -> None:
        """Expire the session cookie so the browser drops it."""
        self._expire(self._session_name(session_name), self.settings.default_options)

    def _expire(self, name: str, options: CookieOptions) -> None:
        session = self.store.new(name)
        self.store.save(session, options=options.expire())

    def delete_normal_sessions(self) -> None:
        self.delete_session(self.settings.default_session_name)
        self.delete_session(self.settings.flash_session_name)

    def delete_all(self) -> None:
        """Delete the token, default and flash sessions; used on logout."""
        self.delete_token_session()
        self.delete_normal_sessions()

    # --- token session ---

    def get_token_string(self) -> str:
        return self.get(self.token_key, self.settings.token_name)

    def set_token_string(self, token: str, max_age: Optional[int] = None) -> CookieSession:
        if max_age is None:
            max_age = self.settings.derived_token_cookie_max_age
        return self.set(self.token_key, token, self.settings.token_name, self._token_options(max_age))

    def delete_token_session(self) -> None:
        self._expire(self.settings.token_name, self._token_options())

    def _token_options(self, max_age: int = 0) -> CookieOptions:
        # The token cookie always lives at "/", whatever the default path.
        defaults = self.settings.default_options
        return CookieOptions(
            path="/",
            max_age=max_age,
            http_only=True,
            domain=defaults.domain,
            secure=defaults.secure,
            same_site=defaults.same_site,
        )


__all__ = ["SessionFacade"]
