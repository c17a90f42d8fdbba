"""Hash functions used to build storage keys and signing payloads."""

from __future__ import annotations

import hashlib
import struct

_MASK = (1 << 64) - 1

_PRIME_1 = 0x9E3779B185EBCA87
_PRIME_2 = 0xC2B2AE3D27D4EB4F
_PRIME_3 = 0x165667B19E3779F9
_PRIME_4 = 0x85EBCA77C2B2AE63
_PRIME_5 = 0x27D4EB2F165667C5

_STRIPE = 32


def _rotl(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (64 - bits))) & _MASK


def _round(acc: int, lane: int) -> int:
    acc = (acc + lane * _PRIME_2) & _MASK
    return (_rotl(acc, 31) * _PRIME_1) & _MASK


def _merge(acc: int, value: int) -> int:
    acc ^= _round(0, value)
    return (acc * _PRIME_1 + _PRIME_4) & _MASK


def _xxh64(data: bytes, seed: int) -> int:
    length = len(data)
    stripes_end = length - length % _STRIPE

    if length >= _STRIPE:
        accs = [
            (seed + _PRIME_1 + _PRIME_2) & _MASK,
            (seed + _PRIME_2) & _MASK,
            seed & _MASK,
            (seed - _PRIME_1) & _MASK,
        ]
        for lanes in struct.iter_unpack("<4Q", data[:stripes_end]):
            accs = [_round(acc, lane) for acc, lane in zip(accs, lanes)]
        h = (
            _rotl(accs[0], 1) + _rotl(accs[1], 7) + _rotl(accs[2], 12) + _rotl(accs[3], 18)
        ) & _MASK
        for acc in accs:
            h = _merge(h, acc)
    else:
        stripes_end = 0
        h = (seed + _PRIME_5) & _MASK

    h = (h + length) & _MASK

    tail = data[stripes_end:]
    words_end = len(tail) - len(tail) % 8
    for (lane,) in struct.iter_unpack("<Q", tail[:words_end]):
        h ^= _round(0, lane)
        h = (_rotl(h, 27) * _PRIME_1 + _PRIME_4) & _MASK
    tail = tail[words_end:]

    if len(tail) >= 4:
        (word,) = struct.unpack_from("<I", tail)
        h ^= (word * _PRIME_1) & _MASK
        h = (_rotl(h, 23) * _PRIME_2 + _PRIME_3) & _MASK
        tail = tail[4:]

    for byte in tail:
        h ^= (byte * _PRIME_5) & _MASK
        h = (_rotl(h, 11) * _PRIME_1) & _MASK

    h ^= h >> 33
    h = (h * _PRIME_2) & _MASK
    h ^= h >> 29
    h = (h * _PRIME_3) & _MASK
    h ^= h >> 32
    return h


def _twox(data: bytes, seeds: int) -> bytes:
    raw = bytes(data)
    return b"".join(_xxh64(raw, seed).to_bytes(8, "little") for seed in range(seeds))


def twox_64(data: bytes) -> bytes:
    """XXH64 with seed 0, as 8 little-endian bytes."""
    return _twox(data, 1)


def twox_128(data: bytes) -> bytes:
    """Two XXH64 hashes with seeds 0 and 1, concatenated."""
    return _twox(data, 2)


def twox_256(data: bytes) -> bytes:
    """Four XXH64 hashes with seeds 0 to 3, concatenated."""
    return _twox(data, 4)


def blake2_128(data: bytes) -> bytes:
    """BLAKE2b with a 16-byte digest."""
    return hashlib.blake2b(bytes(data), digest_size=16).digest()


def blake2_256(data: bytes) -> bytes:
    """BLAKE2b with a 32-byte digest."""
    return hashlib.blake2b(bytes(data), digest_size=32).digest()