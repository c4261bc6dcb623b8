"""JWT encode/decode on top of flask-jwt-extended.

Tokens carry ``iat``, ``exp`` and ``sub`` (the username) and are signed with
the app's ``JWT_SECRET_KEY`` using ``JWT_ALGORITHM`` (HS256 by default).
Must be called inside an application context.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, Optional

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTDecodeError
from jwt.exceptions import ExpiredSignatureError, InvalidSubjectError, InvalidTokenError

from jwtsession.core.session.errors import (
    TokenDecodeError,
    TokenExpiredError,
    TokenMissingSubjectError,
)

SUBJECT_CLAIM = "sub"
# flask-jwt-extended's error when the identity claim is absent.
MISSING_SUBJECT_MESSAGE = f"Missing claim: {SUBJECT_CLAIM}"


class TokenCodec:
    def __init__(self, default_lifetime: timedelta = timedelta(hours=1)):
        self.default_lifetime = default_lifetime

    def encode(self, username: str, lifetime: Optional[timedelta] = None) -> str:
        return create_access_token(identity=username, expires_delta=lifetime or self.default_lifetime)

    def decode(self, token: str) -> Dict[str, Any]:
        """Verify signature, structure and expiry; return the claims."""
        try:
            return decode_token(token)
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("token expired") from exc
        except InvalidSubjectError as exc:
            raise TokenMissingSubjectError("failed to fetch username from token") from exc
        except JWTDecodeError as exc:
            if str(exc) == MISSING_SUBJECT_MESSAGE:
                raise TokenMissingSubjectError("failed to fetch username from token") from exc
            raise TokenDecodeError(f"token not valid: {exc}") from exc
        except InvalidTokenError as exc:
            raise TokenDecodeError(f"token not valid: {exc}") from exc

    def username(self, token: str) -> str:
        claims = self.decode(token)
        subject = claims.get(SUBJECT_CLAIM)
        if not isinstance(subject, str) or not subject:
            raise TokenMissingSubjectError("failed to fetch username from token")
        return subject


__all__ = ["TokenCodec", "SUBJECT_CLAIM"]
