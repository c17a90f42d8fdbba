"""Version 4 unchecked extrinsics with their addresses and signatures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar, Optional, Tuple

from .errors import CodecError
from .extrinsic_params import GenericExtra
from .scale import ScaleReader, decode_bytes, decode_compact, encode_bytes, encode_compact

_V4 = 4
_SIGNED_BIT = 0b1000_0000
_VERSION_MASK = 0b0111_1111
_ACCOUNT_ID_LENGTH = 32


def _encode_call(call: Any) -> bytes:
    if isinstance(call, (bytes, bytearray, memoryview)):
        return bytes(call)
    if hasattr(call, "encode"):
        return call.encode()
    raise TypeError(f"Cannot encode call of type {type(call).__name__}")


class SignatureScheme(IntEnum):
    """Signature algorithms, numbered as on the wire."""

    ED25519 = 0
    SR25519 = 1
    ECDSA = 2

    @property
    def signature_length(self) -> int:
        return 65 if self is SignatureScheme.ECDSA else 64


@dataclass(frozen=True)
class MultiSignature:
    """A signature tagged with the scheme that produced it."""

    scheme: SignatureScheme
    signature: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "scheme", SignatureScheme(self.scheme))
        object.__setattr__(self, "signature", bytes(self.signature))
        if len(self.signature) != self.scheme.signature_length:
            raise ValueError(
                f"{self.scheme.name} signature must be "
                f"{self.scheme.signature_length} bytes, got {len(self.signature)}"
            )

    def encode(self) -> bytes:
        return bytes([self.scheme]) + self.signature

    @classmethod
    def decode(cls, reader: ScaleReader) -> "MultiSignature":
        tag = reader.read_byte()
        try:
            scheme = SignatureScheme(tag)
        except ValueError as exc:
            raise CodecError(f"Invalid MultiSignature variant: {tag}") from exc
        return cls(scheme, reader.read(scheme.signature_length))


@dataclass(frozen=True)
class MultiAddress:
    """An address of one of several kinds; the account index kind carries no data."""

    ID: ClassVar[int] = 0
    INDEX: ClassVar[int] = 1
    RAW: ClassVar[int] = 2
    ADDRESS32: ClassVar[int] = 3
    ADDRESS20: ClassVar[int] = 4
    _FIXED_LENGTHS: ClassVar[dict] = {ID: 32, INDEX: 0, ADDRESS32: 32, ADDRESS20: 20}

    variant: int
    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))
        if self.variant == self.RAW:
            return
        expected = self._FIXED_LENGTHS.get(self.variant)
        if expected is None:
            raise ValueError(f"Unknown address variant: {self.variant}")
        if len(self.data) != expected:
            raise ValueError(f"Address variant {self.variant} needs {expected} bytes")

    @classmethod
    def from_account_id(cls, account_id: bytes) -> "MultiAddress":
        return cls(cls.ID, account_id)

    def encode(self) -> bytes:
        body = encode_bytes(self.data) if self.variant == self.RAW else self.data
        return bytes([self.variant]) + body

    @classmethod
    def decode(cls, reader: ScaleReader) -> "MultiAddress":
        variant = reader.read_byte()
        if variant == cls.RAW:
            return cls(variant, decode_bytes(reader))
        length = cls._FIXED_LENGTHS.get(variant)
        if length is None:
            raise CodecError(f"Invalid MultiAddress variant: {variant}")
        return cls(variant, reader.read(length))


Signature = Tuple[MultiAddress, MultiSignature, GenericExtra]


@dataclass(frozen=True)
class UncheckedExtrinsicV4:
    """A transaction in the version 4 format, signed or not.

    ``function`` is either the encoded call as bytes or an object with an
    ``encode()`` method; decoding always yields the encoded call bytes.
    """

    function: Any
    signature: Optional[Signature] = None

    @classmethod
    def new_signed(
        cls,
        function: Any,
        address: MultiAddress,
        signature: MultiSignature,
        extra: GenericExtra,
    ) -> "UncheckedExtrinsicV4":
        return cls(function, (address, signature, extra))

    @classmethod
    def new_unsigned(cls, function: Any) -> "UncheckedExtrinsicV4":
        return cls(function)

    def encode(self) -> bytes:
        if self.signature is None:
            body = bytes([_V4 & _VERSION_MASK])
        else:
            address, signature, extra = self.signature
            body = (
                bytes([_V4 | _SIGNED_BIT])
                + address.encode()
                + signature.encode()
                + extra.encode()
            )
        body += _encode_call(self.function)
        return encode_compact(len(body)) + body

    @classmethod
    def decode(cls, data: bytes) -> "UncheckedExtrinsicV4":
        reader = ScaleReader(data)
        length = decode_compact(reader)
        body = ScaleReader(reader.read(length))
        version = body.read_byte()
        is_signed = bool(version & _SIGNED_BIT)
        if version & _VERSION_MASK != _V4:
            raise CodecError("Invalid transaction version")
        signature: Optional[Signature] = None
        if is_signed:
            signature = (
                MultiAddress.decode(body),
                MultiSignature.decode(body),
                GenericExtra.decode(body),
            )
        return cls(body.read_rest(), signature)

    def hex_encode(self) -> str:
        return "0x" + self.encode().hex()

    def __repr__(self) -> str:
        shown = None if self.signature is None else (self.signature[0], self.signature[2])
        return f"UncheckedExtrinsic({shown!r}, {self.function!r})"