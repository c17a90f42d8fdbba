"""Version 14 runtime metadata and the portable type registry it carries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from .errors import CodecError
from .scale import (
    ScaleReader,
    decode_bytes,
    decode_compact,
    decode_option,
    decode_str,
    decode_uint,
    decode_vec,
    encode_bytes,
    encode_compact,
    encode_option,
    encode_str,
    encode_uint,
    encode_vec,
)

META_RESERVED = int.from_bytes(b"meta", "little")
V14 = 14
_MAX_KNOWN_VERSION = 14
_U32_MAX = (1 << 32) - 1

PRIMITIVES = (
    "bool", "char", "str",
    "u8", "u16", "u32", "u64", "u128", "u256",
    "i8", "i16", "i32", "i64", "i128", "i256",
)
TYPE_KINDS = (
    "composite", "variant", "sequence", "array",
    "tuple", "primitive", "compact", "bit_sequence",
)
STORAGE_MODIFIERS = ("Optional", "Default")

SignedExtension = tuple[str, int, int]


def _decode_id(reader: ScaleReader) -> int:
    value = decode_compact(reader)
    if value > _U32_MAX:
        raise CodecError(f"Type id out of range: {value}")
    return value


def _decode_docs(reader: ScaleReader) -> tuple[str, ...]:
    return tuple(decode_vec(reader, decode_str))


def _encode_docs(docs: tuple[str, ...]) -> bytes:
    return encode_vec(docs, encode_str)


def _decode_optional_str(reader: ScaleReader) -> Optional[str]:
    return decode_option(reader, decode_str)


class StorageHasher(IntEnum):
    """Hashers applied to storage map keys, numbered as on the wire."""

    BLAKE2_128 = 0
    BLAKE2_256 = 1
    BLAKE2_128_CONCAT = 2
    TWOX_128 = 3
    TWOX_256 = 4
    TWOX_64_CONCAT = 5
    IDENTITY = 6

    def encode(self) -> bytes:
        return bytes([self])

    @classmethod
    def decode(cls, reader: ScaleReader) -> "StorageHasher":
        tag = reader.read_byte()
        try:
            return cls(tag)
        except ValueError as exc:
            raise CodecError(f"Invalid StorageHasher variant: {tag}") from exc


@dataclass(frozen=True)
class Field:
    """A field of a composite type or of an enum variant."""

    ty: int
    name: Optional[str] = None
    type_name: Optional[str] = None
    docs: tuple[str, ...] = ()

    def encode(self) -> bytes:
        return (
            encode_option(self.name, encode_str)
            + encode_compact(self.ty)
            + encode_option(self.type_name, encode_str)
            + _encode_docs(self.docs)
        )

    @classmethod
    def decode(cls, reader: ScaleReader) -> "Field":
        name = _decode_optional_str(reader)
        ty = _decode_id(reader)
        type_name = _decode_optional_str(reader)
        return cls(ty, name, type_name, _decode_docs(reader))


@dataclass(frozen=True)
class Variant:
    """One variant of an enum type."""

    name: str
    index: int
    fields: tuple[Field, ...] = ()
    docs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not 0 <= self.index <= 0xFF:
            raise ValueError(f"Variant index out of range: {self.index}")

    def encode(self) -> bytes:
        return (
            encode_str(self.name)
            + encode_vec(self.fields, Field.encode)
            + bytes([self.index])
            + _encode_docs(self.docs)
        )

    @classmethod
    def decode(cls, reader: ScaleReader) -> "Variant":
        name = decode_str(reader)
        fields = tuple(decode_vec(reader, Field.decode))
        index = reader.read_byte()
        return cls(name, index, fields, _decode_docs(reader))


def _encode_param(param: tuple[str, Optional[int]]) -> bytes:
    name, ty = param
    return encode_str(name) + encode_option(ty, encode_compact)


def _decode_param(reader: ScaleReader) -> tuple[str, Optional[int]]:
    return decode_str(reader), decode_option(reader, _decode_id)


@dataclass(frozen=True)
class PortableType:
    """A type of the registry; ``kind`` names which of the definition fields apply."""

    id: int
    kind: str
    path: tuple[str, ...] = ()
    params: tuple[tuple[str, Optional[int]], ...] = ()
    fields: tuple[Field, ...] = ()
    variant_list: tuple[Variant, ...] = ()
    type_param: Optional[int] = None
    length: Optional[int] = None
    tuple_types: tuple[int, ...] = ()
    primitive: Optional[str] = None
    bit_store_type: Optional[int] = None
    bit_order_type: Optional[int] = None
    docs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.kind not in TYPE_KINDS:
            raise ValueError(f"Unknown type kind: {self.kind!r}")
        if self.kind == "primitive" and self.primitive not in PRIMITIVES:
            raise ValueError(f"Unknown primitive: {self.primitive!r}")
        if self.kind in ("sequence", "compact", "array") and self.type_param is None:
            raise ValueError(f"A {self.kind} type needs a type parameter")
        if self.kind == "array" and self.length is None:
            raise ValueError("An array type needs a length")
        if self.kind == "bit_sequence" and (
            self.bit_store_type is None or self.bit_order_type is None
        ):
            raise ValueError("A bit sequence needs store and order types")

    def variants(self) -> Optional[tuple[Variant, ...]]:
        """The variants of an enum type, or None for any other kind."""
        return self.variant_list if self.kind == "variant" else None

    def _encode_definition(self) -> bytes:
        tag = bytes([TYPE_KINDS.index(self.kind)])
        if self.kind == "composite":
            return tag + encode_vec(self.fields, Field.encode)
        if self.kind == "variant":
            return tag + encode_vec(self.variant_list, Variant.encode)
        if self.kind in ("sequence", "compact"):
            return tag + encode_compact(self.type_param)
        if self.kind == "array":
            return tag + encode_uint(self.length, 4) + encode_compact(self.type_param)
        if self.kind == "tuple":
            return tag + encode_vec(self.tuple_types, encode_compact)
        if self.kind == "primitive":
            return tag + bytes([PRIMITIVES.index(self.primitive)])
        return tag + encode_compact(self.bit_store_type) + encode_compact(self.bit_order_type)

    def encode(self) -> bytes:
        return (
            encode_compact(self.id)
            + encode_vec(self.path, encode_str)
            + encode_vec(self.params, _encode_param)
            + self._encode_definition()
            + _encode_docs(self.docs)
        )

    @classmethod
    def decode(cls, reader: ScaleReader) -> "PortableType":
        type_id = _decode_id(reader)
        path = tuple(decode_vec(reader, decode_str))
        params = tuple(decode_vec(reader, _decode_param))
        tag = reader.read_byte()
        if tag >= len(TYPE_KINDS):
            raise CodecError(f"Invalid TypeDef variant: {tag}")
        kind = TYPE_KINDS[tag]
        definition: dict = {}
        if kind == "composite":
            definition["fields"] = tuple(decode_vec(reader, Field.decode))
        elif kind == "variant":
            definition["variant_list"] = tuple(decode_vec(reader, Variant.decode))
        elif kind in ("sequence", "compact"):
            definition["type_param"] = _decode_id(reader)
        elif kind == "array":
            definition["length"] = decode_uint(reader, 4)
            definition["type_param"] = _decode_id(reader)
        elif kind == "tuple":
            definition["tuple_types"] = tuple(decode_vec(reader, _decode_id))
        elif kind == "primitive":
            primitive = reader.read_byte()
            if primitive >= len(PRIMITIVES):
                raise CodecError(f"Invalid TypeDefPrimitive variant: {primitive}")
            definition["primitive"] = PRIMITIVES[primitive]
        else:
            definition["bit_store_type"] = _decode_id(reader)
            definition["bit_order_type"] = _decode_id(reader)
        docs = _decode_docs(reader)
        return cls(type_id, kind, path, params, docs=docs, **definition)


@dataclass(frozen=True)
class PortableRegistry:
    """All types referenced by the metadata, looked up by their position."""

    types: tuple[PortableType, ...] = ()

    def resolve(self, type_id: int) -> Optional[PortableType]:
        if 0 <= type_id < len(self.types):
            return self.types[type_id]
        return None

    def encode(self) -> bytes:
        return encode_vec(self.types, PortableType.encode)

    @classmethod
    def decode(cls, reader: ScaleReader) -> "PortableRegistry":
        return cls(tuple(decode_vec(reader, PortableType.decode)))


@dataclass(frozen=True)
class StorageEntryType:
    """A plain value type, or a map with its hashers and key type."""

    value: int
    key: Optional[int] = None
    hashers: tuple[StorageHasher, ...] = ()

    @classmethod
    def plain(cls, value: int) -> "StorageEntryType":
        return cls(value)

    @classmethod
    def map(
        cls, hashers: tuple[StorageHasher, ...], key: int, value: int
    ) -> "StorageEntryType":
        return cls(value, key, tuple(StorageHasher(h) for h in hashers))

    @property
    def is_map(self) -> bool:
        return self.key is not None

    def encode(self) -> bytes:
        if not self.is_map:
            return b"\x00" + encode_compact(self.value)
        return (
            b"\x01"
            + encode_vec(self.hashers, StorageHasher.encode)
            + encode_compact(self.key)
            + encode_compact(self.value)
        )

    @classmethod
    def decode(cls, reader: ScaleReader) -> "StorageEntryType":
        tag = reader.read_byte()
        if tag == 0:
            return cls.plain(_decode_id(reader))
        if tag == 1:
            hashers = tuple(decode_vec(reader, StorageHasher.decode))
            key = _decode_id(reader)
            return cls.map(hashers, key, _decode_id(reader))
        raise CodecError(f"Invalid StorageEntryType variant: {tag}")


@dataclass(frozen=True)
class StorageEntry:
    """One storage item of a pallet."""

    name: str
    ty: StorageEntryType
    modifier: str = "Optional"
    default: bytes = b""
    docs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.modifier not in STORAGE_MODIFIERS:
            raise ValueError(f"Unknown storage modifier: {self.modifier!r}")
        object.__setattr__(self, "default", bytes(self.default))

    def encode(self) -> bytes:
        return (
            encode_str(self.name)
            + bytes([STORAGE_MODIFIERS.index(self.modifier)])
            + self.ty.encode()
            + encode_bytes(self.default)
            + _encode_docs(self.docs)
        )

    @classmethod
    def decode(cls, reader: ScaleReader) -> "StorageEntry":
        name = decode_str(reader)
        tag = reader.read_byte()
        if tag >= len(STORAGE_MODIFIERS):
            raise CodecError(f"Invalid StorageEntryModifier variant: {tag}")
        ty = StorageEntryType.decode(reader)
        default = decode_bytes(reader)
        return cls(name, ty, STORAGE_MODIFIERS[tag], default, _decode_docs(reader))


@dataclass(frozen=True)
class PalletConstant:
    """A constant of a pallet with its SCALE-encoded value."""

    name: str
    ty: int
    value: bytes
    docs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", bytes(self.value))

    def encode(self) -> bytes:
        return (
            encode_str(self.name)
            + encode_compact(self.ty)
            + encode_bytes(self.value)
            + _encode_docs(self.docs)
        )

    @classmethod
    def decode(cls, reader: ScaleReader) -> "PalletConstant":
        name = decode_str(reader)
        ty = _decode_id(reader)
        value = decode_bytes(reader)
        return cls(name, ty, value, _decode_docs(reader))


def _decode_storage(reader: ScaleReader) -> tuple[str, tuple[StorageEntry, ...]]:
    prefix = decode_str(reader)
    return prefix, tuple(decode_vec(reader, StorageEntry.decode))


@dataclass(frozen=True)
class PalletInfo:
    """A pallet as described by the metadata.

    ``calls``, ``event`` and ``error`` are the ids of the enum types that
    describe them; ``storage`` is None when the pallet has no storage.
    """

    name: str
    index: int
    storage_prefix: Optional[str] = None
    storage: Optional[tuple[StorageEntry, ...]] = None
    calls: Optional[int] = None
    event: Optional[int] = None
    constants: tuple[PalletConstant, ...] = ()
    error: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0 <= self.index <= 0xFF:
            raise ValueError(f"Pallet index out of range: {self.index}")
        if self.storage is not None and self.storage_prefix is None:
            object.__setattr__(self, "storage_prefix", self.name)

    def encode(self) -> bytes:
        storage = None
        if self.storage is not None:
            storage = encode_str(self.storage_prefix) + encode_vec(
                self.storage, StorageEntry.encode
            )
        return (
            encode_str(self.name)
            + encode_option(storage, lambda raw: raw)
            + encode_option(self.calls, encode_compact)
            + encode_option(self.event, encode_compact)
            + encode_vec(self.constants, PalletConstant.encode)
            + encode_option(self.error, encode_compact)
            + bytes([self.index])
        )

    @classmethod
    def decode(cls, reader: ScaleReader) -> "PalletInfo":
        name = decode_str(reader)
        storage = decode_option(reader, _decode_storage)
        calls = decode_option(reader, _decode_id)
        event = decode_option(reader, _decode_id)
        constants = tuple(decode_vec(reader, PalletConstant.decode))
        error = decode_option(reader, _decode_id)
        index = reader.read_byte()
        prefix, entries = storage if storage is not None else (None, None)
        return cls(name, index, prefix, entries, calls, event, constants, error)


def _encode_signed_extension(extension: SignedExtension) -> bytes:
    identifier, ty, additional_signed = extension
    return encode_str(identifier) + encode_compact(ty) + encode_compact(additional_signed)


def _decode_signed_extension(reader: ScaleReader) -> SignedExtension:
    return decode_str(reader), _decode_id(reader), _decode_id(reader)


@dataclass(frozen=True)
class RuntimeMetadataV14:
    """Types, pallets and extrinsic format of a runtime."""

    types: PortableRegistry
    pallets: tuple[PalletInfo, ...] = ()
    extrinsic_type: int = 0
    extrinsic_version: int = 4
    signed_extensions: tuple[SignedExtension, ...] = ()
    ty: int = 0

    def encode(self) -> bytes:
        return (
            self.types.encode()
            + encode_vec(self.pallets, PalletInfo.encode)
            + encode_compact(self.extrinsic_type)
            + bytes([self.extrinsic_version])
            + encode_vec(self.signed_extensions, _encode_signed_extension)
            + encode_compact(self.ty)
        )

    @classmethod
    def decode(cls, reader: ScaleReader) -> "RuntimeMetadataV14":
        types = PortableRegistry.decode(reader)
        pallets = tuple(decode_vec(reader, PalletInfo.decode))
        extrinsic_type = _decode_id(reader)
        extrinsic_version = reader.read_byte()
        extensions = tuple(decode_vec(reader, _decode_signed_extension))
        ty = _decode_id(reader)
        return cls(types, pallets, extrinsic_type, extrinsic_version, extensions, ty)


@dataclass(frozen=True)
class RuntimeMetadataPrefixed:
    """Metadata as returned by a node: magic number, version and body.

    Only version 14 bodies are decoded; older ones are kept in ``raw``.
    """

    magic: int = META_RESERVED
    version: int = V14
    metadata: Optional[RuntimeMetadataV14] = None
    raw: bytes = field(default=b"", repr=False)

    def encode(self) -> bytes:
        head = encode_uint(self.magic, 4) + bytes([self.version])
        if self.version == V14:
            if self.metadata is None:
                raise CodecError("Version 14 metadata has no body")
            return head + self.metadata.encode()
        return head + bytes(self.raw)

    @classmethod
    def decode(cls, reader: ScaleReader) -> "RuntimeMetadataPrefixed":
        magic = decode_uint(reader, 4)
        version = reader.read_byte()
        if version > _MAX_KNOWN_VERSION:
            raise CodecError(f"Invalid RuntimeMetadata variant: {version}")
        if version == V14:
            return cls(magic, version, RuntimeMetadataV14.decode(reader))
        return cls(magic, version, None, reader.read_rest())


def decode_runtime_metadata(data: bytes) -> RuntimeMetadataPrefixed:
    """Decode the bytes returned by ``state_getMetadata``."""
    return RuntimeMetadataPrefixed.decode(ScaleReader(data))