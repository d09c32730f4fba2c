"""MurmurHash64A and MurmurHash64B, the 64-bit MurmurHash2 variants."""

from __future__ import annotations

import struct

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _as_bytes(key: bytes | str) -> bytes:
    return key.encode("utf-8") if isinstance(key, str) else bytes(key)


def murmur64a(key: bytes | str, seed: int = 0) -> int:
    """Hash ``key`` with MurmurHash64A (the 64-bit optimised variant)."""
    data = _as_bytes(key)
    m = 0xC6A4A7935BD1E995
    r = 47

    h = (seed ^ len(data)) & _MASK32
    whole = len(data) - len(data) % 8

    for (k,) in struct.iter_unpack("<Q", data[:whole]):
        k = (k * m) & _MASK64
        k ^= k >> r
        k = (k * m) & _MASK64
        h ^= k
        h = (h * m) & _MASK64

    tail = data[whole:]
    if tail:
        h ^= int.from_bytes(tail, "little")
        h = (h * m) & _MASK64

    h ^= h >> r
    h = (h * m) & _MASK64
    h ^= h >> r
    return h


def _mix32(k: int, m: int, r: int) -> int:
    k = (k * m) & _MASK32
    k ^= k >> r
    return (k * m) & _MASK32


def murmur64b(key: bytes | str, seed: int = 0) -> int:
    """Hash ``key`` with MurmurHash64B (the 32-bit optimised variant)."""
    data = _as_bytes(key)
    m = 0x5BD1E995
    r = 24

    h1 = (seed ^ len(data)) & _MASK32
    h2 = 0

    pairs = len(data) - len(data) % 8
    for k1, k2 in struct.iter_unpack("<II", data[:pairs]):
        h1 = ((h1 * m) & _MASK32) ^ _mix32(k1, m, r)
        h2 = ((h2 * m) & _MASK32) ^ _mix32(k2, m, r)

    rest = data[pairs:]
    if len(rest) >= 4:
        (k1,) = struct.unpack("<I", rest[:4])
        h1 = ((h1 * m) & _MASK32) ^ _mix32(k1, m, r)
        rest = rest[4:]

    if rest:
        h2 ^= int.from_bytes(rest, "little")
        h2 = (h2 * m) & _MASK32

    h1 ^= h2 >> 18
    h1 = (h1 * m) & _MASK32
    h2 ^= h1 >> 22
    h2 = (h2 * m) & _MASK32
    h1 ^= h2 >> 17
    h1 = (h1 * m) & _MASK32

    return (h1 << 32) | h2