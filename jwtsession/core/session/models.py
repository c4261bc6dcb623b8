"""Session envelopes: the cookie-backed session plus write intents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from jwtsession.core.session.keys import SessionKey
from jwtsession.core.session.settings import CookieOptions

FLASH_KEY = "_flash"


class CookieSession:
    """Values of one named session, as loaded from (or destined for) its cookie."""

    def __init__(
        self,
        name: str,
        values: Optional[Dict[str, Any]] = None,
        options: Optional[CookieOptions] = None,
        is_new: bool = True,
    ):
        self.name = name
        self.values: Dict[str, Any] = dict(values or {})
        self.options = options or CookieOptions()
        self.is_new = is_new

    def with_flash(self, value: Any, key: str = FLASH_KEY) -> Dict[str, Any]:
        """Copy of ``values`` with ``value`` appended to the flashes under ``key``."""
        values = dict(self.values)
        pending = values.get(key)
        values[key] = (list(pending) if isinstance(pending, list) else []) + [value]
        return values

    def flashes(self, key: str = FLASH_KEY) -> List[Any]:
        """Pop and return the flashes stored under ``key``."""
        pending = self.values.pop(key, None)
        if not isinstance(pending, list):
            return []
        return pending

    def __repr__(self) -> str:
        return f"<CookieSession {self.name!r} keys={sorted(self.values)} new={self.is_new}>"


@dataclass
class Message:
    """A key/value write intent. Usually only ``key`` and ``value`` are given."""

    key: Union[str, SessionKey]
    value: Any
    session_name: str = ""
    options: Optional[CookieOptions] = None


@dataclass
class Flash:
    value: Any
    session_name: str = ""


__all__ = ["CookieSession", "Message", "Flash", "FLASH_KEY"]
