"""Typed session keys, validated when values cross the facade boundary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Tuple, Type, TypeVar, Union

from jwtsession.core.session.errors import SessionValueTypeError

T = TypeVar("T")


@dataclass(frozen=True)
class SessionKey(Generic[T]):
    name: str
    value_type: Union[Type[T], Tuple[type, ...]]

    def check(self, value: Any) -> T:
        if not _is_instance(value, self.value_type):
            raise SessionValueTypeError(
                f"value for {self.name!r} must be {_type_label(self.value_type)}, "
                f"got {type(value).__name__}"
            )
        return value


def _is_instance(value: Any, value_type) -> bool:
    # bool is an int subclass; an int key never accepts True/False.
    if isinstance(value, bool):
        types = value_type if isinstance(value_type, tuple) else (value_type,)
        return bool in types
    return isinstance(value, value_type)


def _type_label(value_type) -> str:
    if isinstance(value_type, tuple):
        return " or ".join(t.__name__ for t in value_type)
    return value_type.__name__


def key_name(key: Union[str, SessionKey]) -> str:
    return key.name if isinstance(key, SessionKey) else key


def checked(value: Any, value_type: type, label: str) -> Any:
    """Checked conversion used by the typed getters on untyped keys."""
    return SessionKey(label, value_type).check(value)


__all__ = ["SessionKey", "key_name", "checked"]
