"""Salsa20, XSalsa20, Poly1305 and the secretbox built from them."""

from __future__ import annotations

import hmac
import struct

SIGMA = b"expand 32-byte k"

_MASK32 = 0xFFFFFFFF
_P1305 = (1 << 130) - 5
_CLAMP = 0x0FFFFFFC0FFFFFFC0FFFFFFC0FFFFFFF
_MASK128 = (1 << 128) - 1

# A double round: four column quarter-rounds followed by four row quarter-rounds.
_QUARTERS = (
    (0, 4, 8, 12),
    (5, 9, 13, 1),
    (10, 14, 2, 6),
    (15, 3, 7, 11),
    (0, 1, 2, 3),
    (5, 6, 7, 4),
    (10, 11, 8, 9),
    (15, 12, 13, 14),
)


class AuthenticationError(ValueError):
    """Raised when a ciphertext's authenticator does not match."""


def _check(value: bytes, length: int, name: str) -> bytes:
    data = bytes(value)
    if len(data) != length:
        raise ValueError(f"{name} must be {length} bytes, not {len(data)}")
    return data


def _verify(x: bytes, y: bytes, n: int) -> bool:
    return hmac.compare_digest(_check(x, n, "first operand"), _check(y, n, "second operand"))


def verify16(x: bytes, y: bytes) -> bool:
    """Compare two 16-byte strings in constant time."""
    return _verify(x, y, 16)


def verify32(x: bytes, y: bytes) -> bool:
    """Compare two 32-byte strings in constant time."""
    return _verify(x, y, 32)


def _rotl(x: int, c: int) -> int:
    x &= _MASK32
    return ((x << c) | (x >> (32 - c))) & _MASK32


def _initial_state(inp: bytes, key: bytes, const: bytes) -> list[int]:
    n = struct.unpack("<4I", _check(inp, 16, "input"))
    k = struct.unpack("<8I", _check(key, 32, "key"))
    c = struct.unpack("<4I", _check(const, 16, "constant"))
    return [
        c[0], k[0], k[1], k[2],
        k[3], c[1], n[0], n[1],
        n[2], n[3], c[2], k[4],
        k[5], k[6], k[7], c[3],
    ]


def _rounds(state: list[int]) -> list[int]:
    x = list(state)
    for _ in range(10):
        for a, b, c, d in _QUARTERS:
            x[b] ^= _rotl(x[a] + x[d], 7)
            x[c] ^= _rotl(x[b] + x[a], 9)
            x[d] ^= _rotl(x[c] + x[b], 13)
            x[a] ^= _rotl(x[d] + x[c], 18)
    return x


def core_salsa20(inp: bytes, key: bytes, const: bytes = SIGMA) -> bytes:
    """Return the 64-byte Salsa20 block for a 16-byte input and 32-byte key."""
    start = _initial_state(inp, key, const)
    mixed = _rounds(start)
    return struct.pack("<16I", *((a + b) & _MASK32 for a, b in zip(mixed, start)))


def core_hsalsa20(inp: bytes, key: bytes, const: bytes = SIGMA) -> bytes:
    """Return the 32-byte HSalsa20 output used to derive XSalsa20 subkeys."""
    x = _rounds(_initial_state(inp, key, const))
    return struct.pack("<8I", x[0], x[5], x[10], x[15], x[6], x[7], x[8], x[9])


def _xor(data: bytes, pad: bytes) -> bytes:
    n = len(data)
    value = int.from_bytes(data, "little") ^ int.from_bytes(pad[:n], "little")
    return value.to_bytes(n, "little")


def stream_salsa20_xor(message: bytes, nonce: bytes, key: bytes) -> bytes:
    """XOR ``message`` with the Salsa20 keystream for an 8-byte nonce."""
    data = bytes(message)
    nonce = _check(nonce, 8, "nonce")
    key = _check(key, 32, "key")
    out = bytearray()
    for counter, start in enumerate(range(0, len(data), 64)):
        block = core_salsa20(nonce + (counter & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "little"), key)
        out += _xor(data[start:start + 64], block)
    return bytes(out)


def stream_salsa20(length: int, nonce: bytes, key: bytes) -> bytes:
    """Return ``length`` bytes of Salsa20 keystream."""
    if length < 0:
        raise ValueError("length must not be negative")
    return stream_salsa20_xor(bytes(length), nonce, key)


def _subkey(nonce: bytes, key: bytes) -> tuple[bytes, bytes]:
    nonce = _check(nonce, 24, "nonce")
    return nonce[16:], core_hsalsa20(nonce[:16], key)


def stream(length: int, nonce: bytes, key: bytes) -> bytes:
    """Return ``length`` bytes of XSalsa20 keystream for a 24-byte nonce."""
    tail, subkey = _subkey(nonce, key)
    return stream_salsa20(length, tail, subkey)


def stream_xor(message: bytes, nonce: bytes, key: bytes) -> bytes:
    """XOR ``message`` with the XSalsa20 keystream for a 24-byte nonce."""
    tail, subkey = _subkey(nonce, key)
    return stream_salsa20_xor(message, tail, subkey)


def onetimeauth(message: bytes, key: bytes) -> bytes:
    """Return the 16-byte Poly1305 authenticator of ``message`` under a one-time key."""
    data = bytes(message)
    key = _check(key, 32, "key")
    r = int.from_bytes(key[:16], "little") & _CLAMP
    s = int.from_bytes(key[16:], "little")
    acc = 0
    for start in range(0, len(data), 16):
        n = int.from_bytes(data[start:start + 16] + b"\x01", "little")
        acc = (acc + n) * r % _P1305
    return ((acc + s) & _MASK128).to_bytes(16, "little")


def onetimeauth_verify(tag: bytes, message: bytes, key: bytes) -> bool:
    """Check a Poly1305 authenticator."""
    return verify16(tag, onetimeauth(message, key))


def secretbox(message: bytes, nonce: bytes, key: bytes) -> bytes:
    """Encrypt and authenticate ``message``, whose first 32 bytes are padding.

    The result has the same length: 16 zero bytes, the 16-byte authenticator,
    then the ciphertext.
    """
    data = bytes(message)
    if len(data) < 32:
        raise ValueError("message must be at least 32 bytes (including padding)")
    cipher = bytearray(stream_xor(data, nonce, key))
    cipher[16:32] = onetimeauth(bytes(cipher[32:]), bytes(cipher[:32]))
    cipher[:16] = bytes(16)
    return bytes(cipher)


def secretbox_open(cipher: bytes, nonce: bytes, key: bytes) -> bytes:
    """Verify and decrypt a secretbox; the first 32 bytes of the result are zero."""
    data = bytes(cipher)
    if len(data) < 32:
        raise ValueError("ciphertext must be at least 32 bytes")
    auth_key = stream(32, nonce, key)
    if not onetimeauth_verify(data[16:32], data[32:], auth_key):
        raise AuthenticationError("ciphertext failed verification")
    plain = bytearray(stream_xor(data, nonce, key))
    plain[:32] = bytes(32)
    return bytes(plain)