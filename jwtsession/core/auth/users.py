"""Static user allow-list for the demo login."""

from __future__ import annotations

from typing import Dict, Mapping

from jwtsession.core.auth.password import hash_password, verify_password


class UserDirectory:
    """Username to bcrypt hash. Illustrative only; not a user store."""

    def __init__(self, password_hashes: Mapping[str, str]):
        self._hashes: Dict[str, str] = dict(password_hashes)

    @classmethod
    def from_plaintext(cls, credentials: Mapping[str, str]) -> "UserDirectory":
        return cls({username: hash_password(password) for username, password in credentials.items()})

    def validate_user(self, username: str, password: str) -> bool:
        hashed = self._hashes.get(username)
        if hashed is None or not password:
            return False
        return verify_password(password, hashed)

    def __contains__(self, username: str) -> bool:
        return username in self._hashes


__all__ = ["UserDirectory"]
