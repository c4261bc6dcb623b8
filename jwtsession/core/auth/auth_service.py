"""Authentication service layer: issue tokens after login, validate requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional, Sequence

from flask import Request, request

from jwtsession.core.auth.token_codec import TokenCodec
from jwtsession.core.auth.users import UserDirectory
from jwtsession.core.session.errors import (
    CredentialMismatchError,
    JWTSessionError,
    SessionKeyNotFoundError,
    SessionStoreError,
    TokenMissingError,
)
from jwtsession.core.session.facade import SessionFacade
from jwtsession.core.session.settings import SessionSettings

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"
_BEARER_PREFIX = "bearer "


@dataclass(frozen=True)
class AuthResult:
    """Outcome of issue/validate. Anything but a username with no error is unauthenticated."""

    username: str = ""
    error: Optional[JWTSessionError] = None
    token: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return self.error is None and bool(self.username)

    @classmethod
    def failure(cls, error: JWTSessionError) -> "AuthResult":
        return cls(username="", error=error)


def token_from_header(req: Request) -> str:
    """Raw ``Authorization`` header value, without an optional ``Bearer`` prefix."""
    raw = (req.headers.get(AUTHORIZATION_HEADER) or "").strip()
    if raw[: len(_BEARER_PREFIX)].lower() == _BEARER_PREFIX:
        raw = raw[len(_BEARER_PREFIX):].strip()
    return raw


class TokenLookup:
    """Ordered token sources: the Authorization header, then the token session cookie.

    The first source yielding a non-empty string wins; later sources are not
    consulted. Session read errors propagate.
    """

    def __init__(self, facade: SessionFacade):
        self.facade = facade
        self.sources: Sequence[Callable[[Request], str]] = (token_from_header, self.token_from_session)

    def token_from_session(self, req: Request) -> str:
        try:
            return self.facade.get_token_string()
        except SessionKeyNotFoundError:
            return ""

    def __call__(self, req: Request) -> str:
        for source in self.sources:
            token = source(req)
            if token:
                return token
        raise TokenMissingError("token missing")


class AuthFlow:
    def __init__(
        self,
        facade: SessionFacade,
        codec: TokenCodec,
        users: UserDirectory,
        settings: SessionSettings,
    ):
        self.facade = facade
        self.codec = codec
        self.users = users
        self.settings = settings
        self.lookup = TokenLookup(facade)

    def issue(
        self,
        username: str,
        password: str,
        token_lifetime: Optional[timedelta] = None,
        cookie_max_age: Optional[int] = None,
    ) -> AuthResult:
        """Check credentials, then sign a token and store it in the token session.

        The cookie max-age follows the token lifetime unless given explicitly
        (or configured through ``JWT_SESSION_TOKEN_COOKIE_MAX_AGE``).
        """
        if not self.users.validate_user(username, password):
            logger.warning("Login rejected for user %r", username)
            return AuthResult.failure(CredentialMismatchError("username or password"))

        lifetime = token_lifetime or self.settings.token_lifetime
        lifetime_seconds = int(lifetime.total_seconds())
        if cookie_max_age is None:
            if token_lifetime is None:
                cookie_max_age = self.settings.derived_token_cookie_max_age
            else:
                cookie_max_age = lifetime_seconds
        if cookie_max_age != lifetime_seconds:
            logger.info(
                "Token cookie max-age %ss differs from token lifetime %ss for %r",
                cookie_max_age,
                lifetime_seconds,
                username,
            )

        token = self.codec.encode(username, lifetime)
        try:
            self.facade.set_token_string(token, cookie_max_age)
        except SessionStoreError as exc:
            logger.error("Could not store token for %r: %s", username, exc)
            return AuthResult.failure(exc)
        logger.info("Issued token for %r (lifetime %ss)", username, lifetime_seconds)
        return AuthResult(username=username, token=token)

    def validate(self, req: Optional[Request] = None) -> AuthResult:
        """Authenticate the current request from its header token or token cookie."""
        try:
            token = self.lookup(req if req is not None else request)
            username = self.codec.username(token)
        except JWTSessionError as exc:
            logger.debug("Token validation failed: %s", exc)
            return AuthResult.failure(exc)
        return AuthResult(username=username, token=token)


__all__ = ["AuthFlow", "AuthResult", "TokenLookup", "token_from_header", "AUTHORIZATION_HEADER"]
