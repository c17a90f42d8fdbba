"""Storage keys built from pallet and storage entry names."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .errors import StorageTypeError
from .hashing import blake2_128, blake2_256, twox_64, twox_128, twox_256
from .portable import StorageEntry, StorageHasher

log = logging.getLogger(__name__)

_HASHERS: dict[StorageHasher, Callable[[bytes], bytes]] = {
    StorageHasher.IDENTITY: lambda data: data,
    StorageHasher.BLAKE2_128: blake2_128,
    StorageHasher.BLAKE2_128_CONCAT: lambda data: blake2_128(data) + data,
    StorageHasher.BLAKE2_256: blake2_256,
    StorageHasher.TWOX_128: twox_128,
    StorageHasher.TWOX_256: twox_256,
    StorageHasher.TWOX_64_CONCAT: lambda data: twox_64(data) + data,
}


def _encode_key(key: Any) -> bytes:
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    if hasattr(key, "encode") and not isinstance(key, str):
        return key.encode()
    raise TypeError(f"Cannot encode storage key of type {type(key).__name__}")


def _prefix(module_prefix: bytes, storage_prefix: bytes) -> bytes:
    return twox_128(module_prefix) + twox_128(storage_prefix)


def key_hash(encoded_key: Any, hasher: StorageHasher) -> bytes:
    """Hash an encoded key as the given storage hasher does."""
    return _HASHERS[StorageHasher(hasher)](_encode_key(encoded_key))


@dataclass(frozen=True)
class StorageValueKey:
    """Key of a plain storage value."""

    module_prefix: bytes
    storage_prefix: bytes

    def key(self) -> bytes:
        return _prefix(self.module_prefix, self.storage_prefix)


@dataclass(frozen=True)
class StorageMapKey:
    """Keys of a storage map with a single hashed key."""

    module_prefix: bytes
    storage_prefix: bytes
    hasher: StorageHasher

    def key(self, encoded_key: Any) -> bytes:
        return _prefix(self.module_prefix, self.storage_prefix) + key_hash(
            encoded_key, self.hasher
        )


@dataclass(frozen=True)
class StorageDoubleMapKey:
    """Keys of a storage map indexed by two hashed keys."""

    module_prefix: bytes
    storage_prefix: bytes
    hasher: StorageHasher
    key2_hasher: StorageHasher

    def key(self, first: Any, second: Any) -> bytes:
        return (
            _prefix(self.module_prefix, self.storage_prefix)
            + key_hash(first, self.hasher)
            + key_hash(second, self.key2_hasher)
        )


def storage_value(entry: StorageEntry, pallet_prefix: str) -> StorageValueKey:
    """Key builder for a plain entry; a map entry raises StorageTypeError."""
    if entry.ty.is_map:
        raise StorageTypeError()
    return StorageValueKey(pallet_prefix.encode("utf-8"), entry.name.encode("utf-8"))


def storage_map(entry: StorageEntry, pallet_prefix: str) -> StorageMapKey:
    """Key builder for a map entry using its first hasher."""
    if not entry.ty.is_map or not entry.ty.hashers:
        raise StorageTypeError()
    hasher = entry.ty.hashers[0]
    log.debug("map for '%s' '%s' has hasher %s", pallet_prefix, entry.name, hasher.name)
    return StorageMapKey(
        pallet_prefix.encode("utf-8"), entry.name.encode("utf-8"), hasher
    )


def storage_double_map(entry: StorageEntry, pallet_prefix: str) -> StorageDoubleMapKey:
    """Key builder for a map entry using its first two hashers."""
    if not entry.ty.is_map or len(entry.ty.hashers) < 2:
        raise StorageTypeError()
    hasher1, hasher2 = entry.ty.hashers[:2]
    log.debug(
        "map for '%s' '%s' has hasher1 %s hasher2 %s",
        pallet_prefix,
        entry.name,
        hasher1.name,
        hasher2.name,
    )
    return StorageDoubleMapKey(
        pallet_prefix.encode("utf-8"), entry.name.encode("utf-8"), hasher1, hasher2
    )


def storage_map_prefix(entry: StorageEntry, pallet_prefix: str) -> bytes:
    """The key prefix shared by every item of a map entry."""
    if not entry.ty.is_map:
        raise StorageTypeError()
    return _prefix(pallet_prefix.encode("utf-8"), entry.name.encode("utf-8"))