"""Cookie-backed session store.

Each named session lives in its own cookie. Values are serialized with Flask's
tagged JSON serializer, signed with ``itsdangerous`` (timestamped, so stale
cookies can be refused) and, unless disabled, encrypted with Fernet.

Sessions fetched during a request are kept in a per-request registry on
``flask.g`` so repeated lookups see the same object. Saving only queues the
encoded cookie; ``write`` copies the queue onto the response and
``clear_request`` must run when the request ends.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from typing import Any, Dict, Optional, Tuple

from cryptography.fernet import Fernet, InvalidToken
from flask import g, request
from flask.json.tag import TaggedJSONSerializer
from itsdangerous import BadSignature, URLSafeTimedSerializer

from jwtsession.core.session.errors import SessionRetrievalError, SessionSaveError
from jwtsession.core.session.models import CookieSession
from jwtsession.core.session.settings import CookieOptions

logger = logging.getLogger(__name__)

# Browsers silently drop larger cookies.
MAX_COOKIE_SIZE = 4093

_REGISTRY_ATTR = "_jwtsession_registry"


def _derive_fernet_key(secret: str) -> bytes:
    digest = hashlib.sha256(b"jwtsession-encryption:" + secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


class _RequestRegistry:
    def __init__(self) -> None:
        self.sessions: Dict[str, CookieSession] = {}
        self.errors: Dict[str, SessionRetrievalError] = {}
        self.pending: Dict[str, Tuple[str, CookieOptions]] = {}


class CookieSessionStore:
    salt = "jwtsession-cookie"
    serializer = TaggedJSONSerializer()

    def __init__(
        self,
        secret_key: str,
        *,
        default_options: Optional[CookieOptions] = None,
        encrypt: bool = True,
        max_age: int = 86400 * 30,
    ):
        self.default_options = default_options or CookieOptions()
        self.max_age = max_age
        self._signer = URLSafeTimedSerializer(
            secret_key,
            salt=self.salt,
            serializer=self.serializer,
            signer_kwargs={"key_derivation": "hmac", "digest_method": hashlib.sha256},
        )
        self._fernet = Fernet(_derive_fernet_key(secret_key)) if encrypt else None

    # --- codec ---

    def encode(self, values: dict) -> str:
        try:
            signed = self._signer.dumps(values)
        except (TypeError, ValueError) as exc:
            raise SessionSaveError(f"session values are not serializable: {exc}") from exc
        if self._fernet is not None:
            signed = self._fernet.encrypt(signed.encode("utf-8")).decode("ascii")
        if len(signed) > MAX_COOKIE_SIZE:
            raise SessionSaveError(f"encoded session is {len(signed)} bytes, limit is {MAX_COOKIE_SIZE}")
        return signed

    def decode(self, raw: str) -> dict:
        payload = raw
        if self._fernet is not None:
            try:
                payload = self._fernet.decrypt(raw.encode("utf-8")).decode("utf-8")
            except (InvalidToken, UnicodeError) as exc:
                raise SessionRetrievalError("session cookie could not be decrypted") from exc
        try:
            values = self._signer.loads(payload, max_age=self.max_age)
        except BadSignature as exc:
            raise SessionRetrievalError(f"session cookie rejected: {exc}") from exc
        if not isinstance(values, dict):
            raise SessionRetrievalError("session cookie does not hold a mapping")
        return values

    # --- request-scoped access ---

    def get(self, name: str) -> CookieSession:
        """Return the named session for the current request, loading it on first use.

        A missing cookie yields a new, empty session. A cookie that fails
        verification raises ``SessionRetrievalError`` for the rest of the
        request, unless ``new`` replaces it.
        """
        registry = self._registry()
        if name in registry.errors:
            raise registry.errors[name]
        session = registry.sessions.get(name)
        if session is None:
            try:
                session = self._load(name)
            except SessionRetrievalError as exc:
                logger.warning("Discarding unreadable session cookie %s: %s", name, exc)
                registry.errors[name] = exc
                raise
            registry.sessions[name] = session
        return session

    def new(self, name: str) -> CookieSession:
        """Register an empty session under ``name``, ignoring any cookie sent."""
        registry = self._registry()
        registry.errors.pop(name, None)
        session = CookieSession(name, options=self.default_options)
        registry.sessions[name] = session
        return session

    def save(
        self,
        session: CookieSession,
        values: Optional[Dict[str, Any]] = None,
        options: Optional[CookieOptions] = None,
    ) -> None:
        """Queue ``session`` for writing, optionally with new values and options.

        The replacements are applied to ``session`` only after they encode,
        so a ``SessionSaveError`` leaves the session as it was.
        """
        registry = self._registry()
        values = session.values if values is None else values
        options = options or session.options
        value = "" if options.expired else self.encode(values)
        session.values = values
        session.options = options
        registry.pending[session.name] = (value, session.options)
        registry.sessions[session.name] = session
        registry.errors.pop(session.name, None)
        logger.debug("Queued cookie for session %s (max_age=%s)", session.name, session.options.max_age)

    def write(self, response):
        """Copy every queued session cookie onto ``response``."""
        registry = g.get(_REGISTRY_ATTR)
        if registry is None:
            return response
        for name, (value, options) in registry.pending.items():
            if options.expired:
                response.delete_cookie(
                    name,
                    path=options.path,
                    domain=options.domain,
                    secure=options.secure,
                    httponly=options.http_only,
                    samesite=options.same_site,
                )
                continue
            response.set_cookie(
                name,
                value,
                max_age=options.max_age or None,
                path=options.path,
                domain=options.domain,
                secure=options.secure,
                httponly=options.http_only,
                samesite=options.same_site,
            )
        registry.pending.clear()
        return response

    def clear_request(self, exc: Optional[BaseException] = None) -> None:
        """Drop the per-request registry; runs on every request exit path."""
        g.pop(_REGISTRY_ATTR, None)

    def _registry(self) -> _RequestRegistry:
        registry = g.get(_REGISTRY_ATTR)
        if registry is None:
            registry = _RequestRegistry()
            setattr(g, _REGISTRY_ATTR, registry)
        return registry

    def _load(self, name: str) -> CookieSession:
        raw = request.cookies.get(name)
        if not raw:
            return CookieSession(name, options=self.default_options)
        values = self.decode(raw)
        logger.debug("Loaded session %s with %d keys", name, len(values))
        return CookieSession(name, values=values, options=self.default_options, is_new=False)


__all__ = ["CookieSessionStore", "MAX_COOKIE_SIZE"]
