"""Origins of dispatched calls and the check that a call was signed."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class BadOrigin(Exception):
    """The call came from an origin that may not make it."""

    def __init__(self, message: str = "Bad origin") -> None:
        super().__init__(message)


class _Kind(Enum):
    SIGNED = "signed"
    ROOT = "root"
    NONE = "none"


@dataclass(frozen=True)
class Origin:
    """Where a dispatched call comes from: a signed account, root, or nobody."""

    kind: _Kind
    who: Optional[Any] = None

    @classmethod
    def signed(cls, who: Any) -> "Origin":
        return cls(_Kind.SIGNED, who)

    @classmethod
    def root(cls) -> "Origin":
        return cls(_Kind.ROOT)

    @classmethod
    def none(cls) -> "Origin":
        return cls(_Kind.NONE)

    @property
    def is_signed(self) -> bool:
        return self.kind is _Kind.SIGNED

    @property
    def is_root(self) -> bool:
        return self.kind is _Kind.ROOT


def ensure_signed(origin: Origin) -> Any:
    """Return the account that signed the call, or raise BadOrigin."""
    if not origin.is_signed:
        raise BadOrigin()
    return origin.who