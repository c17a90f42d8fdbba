"""Primitives of the SCALE codec used by Substrate nodes."""

from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

from .errors import CodecError

T = TypeVar("T")

_COMPACT_MAX_BYTES = 67
_SINGLE_BYTE_LIMIT = 1 << 6
_TWO_BYTE_LIMIT = 1 << 14
_FOUR_BYTE_LIMIT = 1 << 30


class ScaleReader:
    """A cursor over a byte string that decoders consume from."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read(self, n: int) -> bytes:
        """Consume exactly ``n`` bytes."""
        if n < 0:
            raise CodecError(f"Cannot read a negative number of bytes: {n}")
        end = self._pos + n
        if end > len(self._data):
            raise CodecError("Not enough data to fill buffer")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def read_byte(self) -> int:
        return self.read(1)[0]

    def read_rest(self) -> bytes:
        """Consume everything that is left."""
        return self.read(self.remaining)

    def is_empty(self) -> bool:
        return self._pos >= len(self._data)


def encode_uint(value: int, size: int) -> bytes:
    """Encode an unsigned integer as ``size`` little-endian bytes."""
    if not 0 <= value < 1 << (8 * size):
        raise CodecError(f"{value} does not fit in {size} bytes")
    return value.to_bytes(size, "little")


def decode_uint(reader: ScaleReader, size: int) -> int:
    return int.from_bytes(reader.read(size), "little")


def encode_compact(value: int) -> bytes:
    """Encode an unsigned integer in SCALE compact form."""
    if value < 0:
        raise CodecError(f"Compact value must not be negative: {value}")
    if value < _SINGLE_BYTE_LIMIT:
        return bytes([value << 2])
    if value < _TWO_BYTE_LIMIT:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value < _FOUR_BYTE_LIMIT:
        return ((value << 2) | 0b10).to_bytes(4, "little")
    length = max(4, (value.bit_length() + 7) // 8)
    if length > _COMPACT_MAX_BYTES:
        raise CodecError(f"Compact value too large: {value}")
    return bytes([((length - 4) << 2) | 0b11]) + value.to_bytes(length, "little")


def decode_compact(reader: ScaleReader) -> int:
    """Decode a compact integer, rejecting non-canonical encodings."""
    first = reader.read_byte()
    mode = first & 0b11
    if mode == 0b00:
        return first >> 2
    if mode == 0b01:
        value = int.from_bytes(bytes([first]) + reader.read(1), "little") >> 2
        if value < _SINGLE_BYTE_LIMIT:
            raise CodecError("Out of range decoding Compact")
        return value
    if mode == 0b10:
        value = int.from_bytes(bytes([first]) + reader.read(3), "little") >> 2
        if value < _TWO_BYTE_LIMIT:
            raise CodecError("Out of range decoding Compact")
        return value
    raw = reader.read((first >> 2) + 4)
    value = int.from_bytes(raw, "little")
    if raw[-1] == 0 or value < _FOUR_BYTE_LIMIT:
        raise CodecError("Out of range decoding Compact")
    return value


def encode_bytes(data: bytes) -> bytes:
    """Encode a byte string with its compact length prefix."""
    return encode_compact(len(data)) + bytes(data)


def decode_bytes(reader: ScaleReader) -> bytes:
    return reader.read(decode_compact(reader))


def encode_str(text: str) -> bytes:
    return encode_bytes(text.encode("utf-8"))


def decode_str(reader: ScaleReader) -> str:
    raw = decode_bytes(reader)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CodecError(f"Invalid utf-8 string: {exc}") from exc


def encode_bool(value: bool) -> bytes:
    return b"\x01" if value else b"\x00"


def decode_bool(reader: ScaleReader) -> bool:
    byte = reader.read_byte()
    if byte == 0:
        return False
    if byte == 1:
        return True
    raise CodecError(f"Invalid boolean representation: {byte}")


def encode_option(value: Optional[T], encoder: Callable[[T], bytes]) -> bytes:
    if value is None:
        return b"\x00"
    return b"\x01" + encoder(value)


def decode_option(
    reader: ScaleReader, decoder: Callable[[ScaleReader], T]
) -> Optional[T]:
    tag = reader.read_byte()
    if tag == 0:
        return None
    if tag == 1:
        return decoder(reader)
    raise CodecError(f"Invalid Option discriminant: {tag}")


def encode_vec(items: Iterable[T], encoder: Callable[[T], bytes]) -> bytes:
    encoded = [encoder(item) for item in items]
    return encode_compact(len(encoded)) + b"".join(encoded)


def decode_vec(reader: ScaleReader, decoder: Callable[[ScaleReader], T]) -> list[T]:
    count = decode_compact(reader)
    return [decoder(reader) for _ in range(count)]