"""Immutable settings shared by the store, the facade and the auth flow."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Mapping, Optional

from jwtsession.core.session.errors import SessionConfigError

# Callers pass this (or an empty name) to mean "the default for this helper".
DEFAULT_SHORT_NAME = "default"

# Options used when a session is expired; the browser drops the cookie.
EXPIRED_MAX_AGE = -1


@dataclass(frozen=True)
class CookieOptions:
    """Cookie attributes applied when a session is saved.

    ``max_age`` semantics: positive keeps the cookie that many seconds, zero
    makes it a browser-session cookie, negative deletes it.
    """

    path: str = "/"
    max_age: int = 3600
    http_only: bool = True
    domain: Optional[str] = None
    secure: bool = False
    same_site: Optional[str] = "Lax"

    @property
    def expired(self) -> bool:
        return self.max_age < 0

    def expire(self) -> "CookieOptions":
        return CookieOptions(
            path=self.path,
            max_age=EXPIRED_MAX_AGE,
            http_only=self.http_only,
            domain=self.domain,
            secure=self.secure,
            same_site=self.same_site,
        )


@dataclass(frozen=True)
class SessionSettings:
    secret_key: str
    token_name: str = "jwtTokenSession"
    default_session_name: str = "myDefaultSessionName"
    flash_session_name: str = "myDefaultFlashSessionName"
    default_options: CookieOptions = field(default_factory=CookieOptions)
    encrypt_cookies: bool = True
    max_cookie_age: int = 86400 * 30
    token_lifetime: timedelta = timedelta(hours=1)
    token_cookie_max_age: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.secret_key:
            raise SessionConfigError("secret_key must not be empty")
        names = (self.token_name, self.default_session_name, self.flash_session_name)
        for name in names:
            if not name or any(ch.isspace() for ch in name):
                raise SessionConfigError(f"invalid session name {name!r}")
            if name == DEFAULT_SHORT_NAME:
                raise SessionConfigError(f"session name {name!r} is reserved")
        if len(set(names)) != len(names):
            raise SessionConfigError("token, default and flash session names must differ")
        if self.token_lifetime <= timedelta(0):
            raise SessionConfigError("token_lifetime must be positive")

    @property
    def derived_token_cookie_max_age(self) -> int:
        """Cookie lifetime for the token session; follows the token unless overridden."""
        if self.token_cookie_max_age is not None:
            return self.token_cookie_max_age
        return int(self.token_lifetime.total_seconds())

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "SessionSettings":
        """Build settings from a Flask config (or any mapping with the same keys)."""
        options = CookieOptions(
            path=config.get("JWT_SESSION_COOKIE_PATH", "/"),
            max_age=int(config.get("JWT_SESSION_COOKIE_MAX_AGE", 3600)),
            http_only=bool(config.get("JWT_SESSION_COOKIE_HTTPONLY", True)),
            domain=config.get("JWT_SESSION_COOKIE_DOMAIN"),
            secure=bool(config.get("JWT_SESSION_COOKIE_SECURE", False)),
            same_site=config.get("JWT_SESSION_COOKIE_SAMESITE", "Lax"),
        )
        lifetime = config.get("JWT_ACCESS_TOKEN_EXPIRES") or timedelta(hours=1)
        if not isinstance(lifetime, timedelta):
            lifetime = timedelta(seconds=int(lifetime))
        token_cookie_max_age = config.get("JWT_SESSION_TOKEN_COOKIE_MAX_AGE")
        return cls(
            secret_key=config.get("JWT_SESSION_SECRET_KEY") or config.get("SECRET_KEY") or "",
            token_name=config.get("JWT_SESSION_TOKEN_NAME", "jwtTokenSession"),
            default_session_name=config.get("JWT_SESSION_DEFAULT_NAME", "myDefaultSessionName"),
            flash_session_name=config.get("JWT_SESSION_FLASH_NAME", "myDefaultFlashSessionName"),
            default_options=options,
            encrypt_cookies=bool(config.get("JWT_SESSION_ENCRYPT", True)),
            max_cookie_age=int(config.get("JWT_SESSION_MAX_COOKIE_AGE", 86400 * 30)),
            token_lifetime=lifetime,
            token_cookie_max_age=None if token_cookie_max_age is None else int(token_cookie_max_age),
        )


__all__ = ["CookieOptions", "SessionSettings", "DEFAULT_SHORT_NAME", "EXPIRED_MAX_AGE"]
