"""Exception hierarchy used throughout the client."""

from __future__ import annotations

import json
from typing import Any


class SubstrateError(Exception):
    """Base class of every error raised by this package."""


class FromHexError(SubstrateError, ValueError):
    """A hex string could not be turned into bytes."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class InvalidHexCharacter(FromHexError):
    """A character that is not a hex digit was found."""

    def __init__(self, c: str, index: int) -> None:
        self.c = c
        self.index = index
        super().__init__(f"Invalid character {c!r} at position {index}")


class InvalidStringLength(FromHexError):
    """The decoded data does not have the expected length."""

    def __init__(self) -> None:
        super().__init__("Invalid string length")


class OddLength(FromHexError):
    """The hex string has an odd number of digits."""

    def __init__(self) -> None:
        super().__init__("Odd number of digits")


class CodecError(SubstrateError, ValueError):
    """SCALE encoding or decoding failed."""


class NoMetadataError(SubstrateError):
    """The node returned no metadata."""

    def __init__(self) -> None:
        super().__init__("Unable to get chain Metadata")


class NoGenesisHashError(SubstrateError):
    """The node returned no genesis hash."""

    def __init__(self) -> None:
        super().__init__("Unable to get chain Genesis hash")


class NoRuntimeVersionError(SubstrateError):
    """The node returned no runtime version."""

    def __init__(self) -> None:
        super().__init__("Unable to get chain Runtime version")


class ResponseJsonError(SubstrateError):
    """The node answered a JSON-RPC call with an error object."""

    def __init__(self, error: Any) -> None:
        self.error = error
        super().__init__(f"Error response: {json.dumps(error)}")


class MetadataError(SubstrateError):
    """A lookup in the chain metadata failed."""


class PalletNotFound(MetadataError, LookupError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Pallet {name} not found")


class PalletIndexNotFound(MetadataError, LookupError):
    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Pallet index {index} not found")


class CallNotFound(MetadataError, LookupError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Call {name} not found")


class EventNotFound(MetadataError, LookupError):
    def __init__(self, pallet_index: int, event_index: int) -> None:
        self.pallet_index = pallet_index
        self.event_index = event_index
        super().__init__(f"Pallet {pallet_index}, Event {event_index} not found")


class ErrorNotFound(MetadataError, LookupError):
    def __init__(self, pallet_index: int, error_index: int) -> None:
        self.pallet_index = pallet_index
        self.error_index = error_index
        super().__init__(f"Pallet {pallet_index}, Error {error_index} not found")


class StorageNotFound(MetadataError, LookupError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Storage {name} not found")


class StorageTypeError(MetadataError):
    """The storage entry is not of the requested kind."""

    def __init__(self) -> None:
        super().__init__("Storage type error")


class MapValueTypeError(MetadataError):
    def __init__(self) -> None:
        super().__init__("Map value type error")


class ConstantNotFound(MetadataError, LookupError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Constant {name} not found")


class TypeNotFound(MetadataError, LookupError):
    def __init__(self, type_id: int) -> None:
        self.type_id = type_id
        super().__init__(f"Type {type_id} missing from type registry")


class InvalidMetadataError(SubstrateError):
    """The runtime metadata could not be interpreted."""


class InvalidPrefix(InvalidMetadataError):
    def __init__(self) -> None:
        super().__init__("Invalid prefix")


class InvalidVersion(InvalidMetadataError):
    def __init__(self) -> None:
        super().__init__("Invalid version")


class MissingType(InvalidMetadataError):
    def __init__(self, type_id: int) -> None:
        self.type_id = type_id
        super().__init__(f"Type {type_id} missing from type registry")


class TypeDefNotVariant(InvalidMetadataError):
    def __init__(self, type_id: int) -> None:
        self.type_id = type_id
        super().__init__(f"Type {type_id} was not a variant/enum type")