"""Account information as stored under ``System.Account``."""

from __future__ import annotations

from dataclasses import dataclass, field

from .scale import ScaleReader, decode_uint, encode_uint

_BALANCE_SIZE = 16
_INDEX_SIZE = 4
_REF_COUNT_SIZE = 4


@dataclass(frozen=True)
class AccountData:
    """Balances held by an account."""

    free: int = 0
    reserved: int = 0
    misc_frozen: int = 0
    fee_frozen: int = 0

    def encode(self) -> bytes:
        return b"".join(
            encode_uint(amount, _BALANCE_SIZE)
            for amount in (self.free, self.reserved, self.misc_frozen, self.fee_frozen)
        )

    @classmethod
    def decode(cls, reader: ScaleReader) -> "AccountData":
        free, reserved, misc_frozen, fee_frozen = (
            decode_uint(reader, _BALANCE_SIZE) for _ in range(4)
        )
        return cls(free, reserved, misc_frozen, fee_frozen)


@dataclass(frozen=True)
class AccountInfo:
    """Nonce, reference counts and balances of an account."""

    nonce: int = 0
    consumers: int = 0
    providers: int = 0
    sufficients: int = 0
    data: AccountData = field(default_factory=AccountData)

    def encode(self) -> bytes:
        return (
            encode_uint(self.nonce, _INDEX_SIZE)
            + encode_uint(self.consumers, _REF_COUNT_SIZE)
            + encode_uint(self.providers, _REF_COUNT_SIZE)
            + encode_uint(self.sufficients, _REF_COUNT_SIZE)
            + self.data.encode()
        )

    @classmethod
    def decode(cls, reader: ScaleReader) -> "AccountInfo":
        nonce = decode_uint(reader, _INDEX_SIZE)
        consumers = decode_uint(reader, _REF_COUNT_SIZE)
        providers = decode_uint(reader, _REF_COUNT_SIZE)
        sufficients = decode_uint(reader, _REF_COUNT_SIZE)
        data = AccountData.decode(reader)
        return cls(nonce, consumers, providers, sufficients, data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "AccountInfo":
        """Decode from the start of ``data``; trailing bytes are ignored."""
        return cls.decode(ScaleReader(data))