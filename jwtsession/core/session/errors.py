"""Error catalog for cookie sessions and JWT authentication."""

from __future__ import annotations


class JWTSessionError(Exception):
    """Base class; ``code`` is the stable identifier surfaced in JSON payloads."""

    code = "jwt_session_error"


class SessionConfigError(JWTSessionError, ValueError):
    code = "invalid_session_config"


class SessionStoreError(JWTSessionError):
    code = "session_store_error"


class SessionRetrievalError(SessionStoreError):
    """The session cookie exists but could not be verified or decoded."""

    code = "session_retrieval_failed"


class SessionSaveError(SessionStoreError):
    """The session could not be serialized into a cookie."""

    code = "session_save_failed"


class SessionKeyNotFoundError(JWTSessionError, LookupError):
    code = "session_key_not_found"

    def __init__(self, key: str, session_name: str):
        super().__init__(f"key {key!r} not found in session {session_name!r}")
        self.key = key
        self.session_name = session_name


class SessionValueTypeError(JWTSessionError, TypeError):
    code = "session_value_type_mismatch"


class AuthError(JWTSessionError):
    code = "unauthenticated"


class CredentialMismatchError(AuthError):
    code = "invalid_credentials"


class TokenMissingError(AuthError):
    code = "token_missing"


class TokenDecodeError(AuthError):
    code = "token_invalid"


class TokenExpiredError(AuthError):
    code = "token_expired"


class TokenMissingSubjectError(AuthError):
    code = "token_missing_subject"


__all__ = [
    "JWTSessionError",
    "SessionConfigError",
    "SessionStoreError",
    "SessionRetrievalError",
    "SessionSaveError",
    "SessionKeyNotFoundError",
    "SessionValueTypeError",
    "AuthError",
    "CredentialMismatchError",
    "TokenMissingError",
    "TokenDecodeError",
    "TokenExpiredError",
    "TokenMissingSubjectError",
]
