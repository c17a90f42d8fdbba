"""Signed-extra parameters and the payload that gets signed."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional, Union

from .errors import CodecError
from .hashing import blake2_256
from .scale import (
    ScaleReader,
    decode_compact,
    encode_bytes,
    encode_compact,
    encode_option,
    encode_uint,
)

_U32_MAX = (1 << 32) - 1
_U128_MAX = (1 << 128) - 1
_MIN_PERIOD = 4
_MAX_PERIOD = 1 << 16
_HASH_LENGTH = 32
_MAX_UNHASHED_PAYLOAD = 256


def _encode_call(call: Any) -> bytes:
    if isinstance(call, (bytes, bytearray, memoryview)):
        return bytes(call)
    if hasattr(call, "encode"):
        return call.encode()
    raise TypeError(f"Cannot encode call of type {type(call).__name__}")


def _next_power_of_two(value: int) -> int:
    return 1 if value <= 1 else 1 << (value - 1).bit_length()


@dataclass(frozen=True)
class Era:
    """Validity period of a transaction; a period of zero means immortal."""

    period: int = 0
    phase: int = 0

    @classmethod
    def immortal(cls) -> "Era":
        return cls()

    @classmethod
    def mortal(cls, period: int, current: int) -> "Era":
        """Era of roughly ``period`` blocks, starting around block ``current``."""
        period = min(max(_next_power_of_two(period), _MIN_PERIOD), _MAX_PERIOD)
        phase = current % period
        quantize_factor = max(period >> 12, 1)
        return cls(period, phase // quantize_factor * quantize_factor)

    def is_immortal(self) -> bool:
        return self.period == 0

    def encode(self) -> bytes:
        if self.is_immortal():
            return b"\x00"
        quantize_factor = max(self.period >> 12, 1)
        trailing_zeros = (self.period & -self.period).bit_length() - 1
        encoded = min(15, max(1, trailing_zeros - 1)) | (
            (self.phase // quantize_factor) << 4
        )
        return encode_uint(encoded, 2)

    @classmethod
    def decode(cls, reader: ScaleReader) -> "Era":
        first = reader.read_byte()
        if first == 0:
            return cls.immortal()
        encoded = first | (reader.read_byte() << 8)
        period = 2 << (encoded % (1 << 4))
        quantize_factor = max(period >> 12, 1)
        phase = (encoded >> 4) * quantize_factor
        if period >= _MIN_PERIOD and phase < period:
            return cls(period, phase)
        raise CodecError("Invalid period and phase")


@dataclass(frozen=True)
class PlainTip:
    """A tip paid in the native token."""

    tip: int = 0

    def __int__(self) -> int:
        return self.tip

    def encode(self) -> bytes:
        return encode_compact(self.tip)


@dataclass(frozen=True)
class AssetTip:
    """A tip that may be paid in a specific asset."""

    tip: int = 0
    asset: Optional[int] = None

    def __int__(self) -> int:
        return self.tip

    def of_asset(self, asset: int) -> "AssetTip":
        return replace(self, asset=asset)

    def encode(self) -> bytes:
        return encode_compact(self.tip) + encode_option(
            self.asset, lambda asset: encode_uint(asset, 4)
        )


Tip = Union[PlainTip, AssetTip]


@dataclass(frozen=True)
class GenericExtra:
    """The signed extra sent with a transaction: era, nonce and tip."""

    era: Era
    nonce: int
    tip: int

    def __post_init__(self) -> None:
        if not 0 <= self.nonce <= _U32_MAX:
            raise ValueError(f"Nonce out of range: {self.nonce}")
        if not 0 <= self.tip <= _U128_MAX:
            raise ValueError(f"Tip out of range: {self.tip}")

    @classmethod
    def immortal_with_nonce_and_tip(cls, nonce: int, tip: int) -> "GenericExtra":
        return cls(Era.immortal(), nonce, tip)

    @classmethod
    def from_params(cls, params: "BaseExtrinsicParams") -> "GenericExtra":
        return cls(params.era, params.nonce, int(params.tip))

    def encode(self) -> bytes:
        return self.era.encode() + encode_compact(self.nonce) + encode_compact(self.tip)

    @classmethod
    def decode(cls, reader: ScaleReader) -> "GenericExtra":
        era = Era.decode(reader)
        nonce = decode_compact(reader)
        if nonce > _U32_MAX:
            raise CodecError("Compact nonce out of range")
        tip = decode_compact(reader)
        if tip > _U128_MAX:
            raise CodecError("Compact tip out of range")
        return cls(era, nonce, tip)

    @classmethod
    def from_bytes(cls, data: bytes) -> "GenericExtra":
        return cls.decode(ScaleReader(data))


@dataclass(frozen=True)
class BaseExtrinsicParamsBuilder:
    """Immutable builder for the configurable parts of the signed extra."""

    mortality: Era = field(default_factory=Era.immortal)
    mortality_checkpoint: Optional[bytes] = None
    tip_payment: Tip = field(default_factory=PlainTip)

    def era(self, era: Era, checkpoint: bytes) -> "BaseExtrinsicParamsBuilder":
        """Set the era and the block hash the era starts from."""
        return replace(self, mortality=era, mortality_checkpoint=bytes(checkpoint))

    def tip(self, tip: Union[int, Tip]) -> "BaseExtrinsicParamsBuilder":
        """Set the tip; a plain amount becomes a tip of the builder's kind."""
        if isinstance(tip, int):
            tip = type(self.tip_payment)(tip)
        return replace(self, tip_payment=tip)


@dataclass(frozen=True)
class BaseExtrinsicParams:
    """Era, nonce and tip of one transaction."""

    era: Era
    nonce: int
    tip: Tip

    @classmethod
    def create(
        cls, nonce: int, other_params: BaseExtrinsicParamsBuilder
    ) -> "BaseExtrinsicParams":
        return cls(other_params.mortality, nonce, other_params.tip_payment)

    def encode_extra(self) -> bytes:
        return (
            self.era.encode()
            + encode_compact(self.nonce)
            + encode_bytes(self.tip.encode())
        )


@dataclass(frozen=True)
class AdditionalSigned:
    """Data that is signed along with a transaction but not sent."""

    spec_version: int
    transaction_version: int
    genesis_hash: bytes
    head_hash: bytes

    def __post_init__(self) -> None:
        for name in ("genesis_hash", "head_hash"):
            if len(getattr(self, name)) != _HASH_LENGTH:
                raise ValueError(f"{name} must be {_HASH_LENGTH} bytes")

    def encode(self) -> bytes:
        return (
            encode_uint(self.spec_version, 4)
            + encode_uint(self.transaction_version, 4)
            + bytes(self.genesis_hash)
            + bytes(self.head_hash)
        )


@dataclass(frozen=True)
class SignedPayload:
    """Call, extra and additional data that make up what gets signed."""

    call: Any
    extra: GenericExtra
    additional_signed: AdditionalSigned

    @classmethod
    def from_raw(
        cls, call: Any, extra: GenericExtra, additional_signed: AdditionalSigned
    ) -> "SignedPayload":
        return cls(call, extra, additional_signed)

    def encode(self) -> bytes:
        return _encode_call(self.call) + self.extra.encode() + self.additional_signed.encode()

    def payload_for_signing(self) -> bytes:
        """The encoded payload, hashed with BLAKE2-256 when longer than 256 bytes."""
        payload = self.encode()
        if len(payload) > _MAX_UNHASHED_PAYLOAD:
            return blake2_256(payload)
        return payload