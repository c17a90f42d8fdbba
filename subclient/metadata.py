"""Chain metadata indexed for lookups of pallets, calls, events, errors and storage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from . import storage as _storage
from .errors import (
    CallNotFound,
    ConstantNotFound,
    ErrorNotFound,
    EventNotFound,
    InvalidPrefix,
    InvalidVersion,
    MissingType,
    PalletNotFound,
    StorageNotFound,
    TypeDefNotVariant,
)
from .portable import (
    META_RESERVED,
    V14,
    PalletConstant,
    PortableRegistry,
    PortableType,
    RuntimeMetadataPrefixed,
    RuntimeMetadataV14,
    StorageEntry,
    Variant,
    decode_runtime_metadata,
)


def _encode_args(args: Any) -> bytes:
    if isinstance(args, (bytes, bytearray, memoryview)):
        return bytes(args)
    if hasattr(args, "encode") and not isinstance(args, str):
        return args.encode()
    raise TypeError(f"Cannot encode call arguments of type {type(args).__name__}")


@dataclass
class PalletMetadata:
    """A pallet's index, its call indices, storage entries and constants by name."""

    index: int
    name: str
    calls: dict[str, int] = field(default_factory=dict)
    storage: dict[str, StorageEntry] = field(default_factory=dict)
    constants: dict[str, PalletConstant] = field(default_factory=dict)

    def encode_call(self, call_name: str, args: Any) -> bytes:
        """The call index of ``call_name`` followed by the encoded arguments."""
        try:
            fn_index = self.calls[call_name]
        except KeyError:
            raise CallNotFound(call_name) from None
        return bytes([self.index, fn_index]) + _encode_args(args)

    def storage_entry(self, key: str) -> StorageEntry:
        try:
            return self.storage[key]
        except KeyError:
            raise StorageNotFound(key) from None

    def constant(self, key: str) -> PalletConstant:
        """A constant's metadata by name."""
        try:
            return self.constants[key]
        except KeyError:
            raise ConstantNotFound(key) from None


@dataclass(frozen=True)
class EventMetadata:
    """An event variant together with the pallet that emits it."""

    pallet: str
    event: str
    variant: Variant


@dataclass(frozen=True)
class ErrorMetadata:
    """An error variant together with the pallet it belongs to."""

    pallet: str
    error: str
    variant: Variant

    def description(self) -> tuple[str, ...]:
        """The documentation lines of the error."""
        return self.variant.docs


def _variants_of(registry: PortableRegistry, type_id: int) -> tuple[Variant, ...]:
    ty = registry.resolve(type_id)
    if ty is None:
        raise MissingType(type_id)
    variants = ty.variants()
    if variants is None:
        raise TypeDefNotVariant(type_id)
    return variants


@dataclass
class Metadata:
    """Runtime metadata with indices built for fast lookups."""

    metadata: RuntimeMetadataV14
    pallets: dict[str, PalletMetadata] = field(default_factory=dict)
    events: dict[tuple[int, int], EventMetadata] = field(default_factory=dict)
    errors: dict[tuple[int, int], ErrorMetadata] = field(default_factory=dict)

    @classmethod
    def from_runtime_metadata(cls, prefixed: RuntimeMetadataPrefixed) -> "Metadata":
        """Index version 14 metadata; other prefixes or versions are rejected."""
        if prefixed.magic != META_RESERVED:
            raise InvalidPrefix()
        if prefixed.version != V14 or prefixed.metadata is None:
            raise InvalidVersion()
        runtime = prefixed.metadata
        registry = runtime.types

        pallets: dict[str, PalletMetadata] = {}
        for pallet in runtime.pallets:
            calls: dict[str, int] = {}
            if pallet.calls is not None:
                calls = {v.name: v.index for v in _variants_of(registry, pallet.calls)}
            storage = {entry.name: entry for entry in pallet.storage or ()}
            constants = {constant.name: constant for constant in pallet.constants}
            pallets[pallet.name] = PalletMetadata(
                pallet.index, pallet.name, calls, storage, constants
            )

        pallet_events = [
            (pallet, _variants_of(registry, pallet.event))
            for pallet in runtime.pallets
            if pallet.event is not None
        ]
        events = {
            (pallet.index, variant.index): EventMetadata(pallet.name, variant.name, variant)
            for pallet, variants in pallet_events
            for variant in variants
        }

        pallet_errors = [
            (pallet, _variants_of(registry, pallet.error))
            for pallet in runtime.pallets
            if pallet.error is not None
        ]
        errors = {
            (pallet.index, variant.index): ErrorMetadata(pallet.name, variant.name, variant)
            for pallet, variants in pallet_errors
            for variant in variants
        }

        return cls(runtime, pallets, events, errors)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Metadata":
        """Decode and index the bytes returned by ``state_getMetadata``."""
        return cls.from_runtime_metadata(decode_runtime_metadata(data))

    def pallet(self, name: str) -> PalletMetadata:
        try:
            return self.pallets[name]
        except KeyError:
            raise PalletNotFound(name) from None

    def get_event(self, pallet_index: int, event_index: int) -> EventMetadata:
        try:
            return self.events[(pallet_index, event_index)]
        except KeyError:
            raise EventNotFound(pallet_index, event_index) from None

    def get_events(self, pallet_index: int) -> list[EventMetadata]:
        """All events of the pallet with the given index."""
        return [event for (index, _), event in self.events.items() if index == pallet_index]

    def get_error(self, pallet_index: int, error_index: int) -> ErrorMetadata:
        try:
            return self.errors[(pallet_index, error_index)]
        except KeyError:
            raise ErrorNotFound(pallet_index, error_index) from None

    def get_errors(self, pallet_index: int) -> list[ErrorMetadata]:
        """All errors of the pallet with the given index."""
        return [error for (index, _), error in self.errors.items() if index == pallet_index]

    def get_resolve_type(self, type_id: int) -> Optional[PortableType]:
        return self.metadata.types.resolve(type_id)

    def storage_value_type(
        self, pallet_name: str, storage_name: str
    ) -> Optional[PortableType]:
        """The type of a plain storage value; None for maps or unknown types."""
        entry = self.pallet(pallet_name).storage_entry(storage_name)
        if entry.ty.is_map:
            return None
        return self.get_resolve_type(entry.ty.value)

    def pallet_call_index(self, pallet_name: str, call_name: str) -> bytes:
        """The two-byte index of a call: pallet index, then call index."""
        pallet = self.pallet(pallet_name)
        try:
            call_index = pallet.calls[call_name]
        except KeyError:
            raise CallNotFound(call_name) from None
        return bytes([pallet.index, call_index])

    def storage_map_type(
        self, pallet_name: str, storage_name: str
    ) -> Optional[tuple[PortableType, PortableType]]:
        """Key and value types of a storage map; None for plain values."""
        entry = self.pallet(pallet_name).storage_entry(storage_name)
        if not entry.ty.is_map:
            return None
        ty_key = self.get_resolve_type(entry.ty.key)
        ty_value = self.get_resolve_type(entry.ty.value)
        if ty_key is None or ty_value is None:
            return None
        return ty_key, ty_value

    def storage_value_key(self, storage_prefix: str, storage_key_name: str) -> bytes:
        entry = self.pallet(storage_prefix).storage_entry(storage_key_name)
        return _storage.storage_value(entry, storage_prefix).key()

    def storage_map_key(
        self, storage_prefix: str, storage_key_name: str, map_key: Any
    ) -> bytes:
        entry = self.pallet(storage_prefix).storage_entry(storage_key_name)
        return _storage.storage_map(entry, storage_prefix).key(map_key)

    def storage_map_key_prefix(self, storage_prefix: str, storage_key_name: str) -> bytes:
        entry = self.pallet(storage_prefix).storage_entry(storage_key_name)
        return _storage.storage_map_prefix(entry, storage_prefix)

    def storage_double_map_key(
        self, storage_prefix: str, storage_key_name: str, first: Any, second: Any
    ) -> bytes:
        entry = self.pallet(storage_prefix).storage_entry(storage_key_name)
        return _storage.storage_double_map(entry, storage_prefix).key(first, second)