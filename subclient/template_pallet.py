"""A pallet that stores a single number and reports who stored it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .origin import Origin, ensure_signed

U32_MAX = (1 << 32) - 1


class TemplateError(Exception):
    """Base class of the errors this pallet raises."""


class NoneValue(TemplateError):
    """No value has been stored yet."""


class StorageOverflow(TemplateError):
    """Incrementing the stored value would overflow."""


@dataclass(frozen=True)
class SomethingStored:
    """A value was stored by an account."""

    something: int
    who: Any


def _check_u32(value: int) -> int:
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"Value out of u32 range: {value}")
    return value


@dataclass
class TemplatePallet:
    """State of the pallet: the stored value and the events emitted so far."""

    _something: Optional[int] = None
    events: list = field(default_factory=list)

    def do_something(self, origin: Origin, something: int) -> None:
        """Store ``something`` and emit SomethingStored; the call must be signed."""
        who = ensure_signed(origin)
        self._something = _check_u32(something)
        self.events.append(SomethingStored(something, who))

    def cause_error(self, origin: Origin) -> None:
        """Increment the stored value, raising if it is unset or would overflow."""
        ensure_signed(origin)
        old = self._something
        if old is None:
            raise NoneValue()
        if old >= U32_MAX:
            raise StorageOverflow()
        self._something = old + 1

    def something(self) -> Optional[int]:
        return self._something