"""Conversion of node-supplied hex strings into bytes and hashes."""

from __future__ import annotations

from .errors import InvalidHexCharacter, InvalidStringLength, OddLength

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
HASH_LENGTH = 32


def _strip_prefix(text: str) -> str:
    text = text.strip('"')
    while text.startswith("0x"):
        text = text[2:]
    return text


def bytes_from_hex(text: str) -> bytes:
    """Decode a hex string, tolerating surrounding quotes and a ``0x`` prefix."""
    raw = _strip_prefix(text).encode("utf-8")
    if len(raw) % 2:
        raise OddLength()
    for index, byte in enumerate(raw):
        if byte not in _HEX_DIGITS:
            raise InvalidHexCharacter(chr(byte), index)
    return bytes.fromhex(raw.decode("ascii"))


def hash_from_hex(text: str) -> bytes:
    """Decode a hex string holding exactly a 32-byte hash."""
    data = bytes_from_hex(text)
    if len(data) != HASH_LENGTH:
        raise InvalidStringLength()
    return data