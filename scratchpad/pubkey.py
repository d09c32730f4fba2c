"""Curve25519 key agreement, the public-key box and Ed25519 signatures."""

from __future__ import annotations

import hashlib
import os

from scratchpad.salsa import (
    SIGMA,
    AuthenticationError,
    core_hsalsa20,
    secretbox,
    secretbox_open,
    verify32,
)

_P = 2**255 - 19
_L = 2**252 + 27742317777372353535851937790883648493
_A24 = 121665
_D = -121665 * pow(121666, _P - 2, _P) % _P
_D2 = 2 * _D % _P
_SQRT_M1 = pow(2, (_P - 1) // 4, _P)

_Point = tuple[int, int, int, int]


def _check(value: bytes, length: int, name: str) -> bytes:
    data = bytes(value)
    if len(data) != length:
        raise ValueError(f"{name} must be {length} bytes, not {len(data)}")
    return data


def _inv(x: int) -> int:
    return pow(x, _P - 2, _P)


def _clamp(scalar: bytes) -> int:
    n = int.from_bytes(scalar[:32], "little")
    return (n & ((1 << 255) - 8)) | (1 << 254)


def sha512(message: bytes) -> bytes:
    """Return the 64-byte SHA-512 digest of ``message``."""
    return hashlib.sha512(bytes(message)).digest()


def scalarmult(n: bytes, p: bytes) -> bytes:
    """Multiply the Curve25519 point with u-coordinate ``p`` by the clamped scalar ``n``."""
    k = _clamp(_check(n, 32, "scalar"))
    u = int.from_bytes(_check(p, 32, "point"), "little") & ((1 << 255) - 1)

    x1 = u % _P
    x2, z2, x3, z3 = 1, 0, x1, 1
    swap = 0
    for t in range(254, -1, -1):
        bit = (k >> t) & 1
        if swap ^ bit:
            x2, x3 = x3, x2
            z2, z3 = z3, z2
        swap = bit
        a = x2 + z2
        aa = a * a % _P
        b = x2 - z2
        bb = b * b % _P
        e = (aa - bb) % _P
        c = x3 + z3
        d = x3 - z3
        da = d * a % _P
        cb = c * b % _P
        x3 = (da + cb) ** 2 % _P
        z3 = x1 * (da - cb) ** 2 % _P
        x2 = aa * bb % _P
        z2 = e * (aa + _A24 * e) % _P
    if swap:
        x2, z2 = x3, z3
    return (x2 * _inv(z2) % _P).to_bytes(32, "little")


_BASE_U = (9).to_bytes(32, "little")


def scalarmult_base(n: bytes) -> bytes:
    """Return the public u-coordinate for the scalar ``n``."""
    return scalarmult(n, _BASE_U)


def box_keypair() -> tuple[bytes, bytes]:
    """Return a fresh ``(public, secret)`` Curve25519 key pair."""
    scalar = os.urandom(32)
    return scalarmult_base(scalar), scalar


def box_beforenm(public: bytes, secret: bytes) -> bytes:
    """Derive the 32-byte shared key for a box between two parties."""
    shared = scalarmult(secret, public)
    return core_hsalsa20(bytes(16), shared, SIGMA)


def box_afternm(message: bytes, nonce: bytes, key: bytes) -> bytes:
    """Seal a padded message with a precomputed shared key."""
    return secretbox(message, nonce, key)


def box_open_afternm(cipher: bytes, nonce: bytes, key: bytes) -> bytes:
    """Open a box with a precomputed shared key."""
    return secretbox_open(cipher, nonce, key)


def box(message: bytes, nonce: bytes, public: bytes, secret: bytes) -> bytes:
    """Encrypt and authenticate a message whose first 32 bytes are zero padding."""
    return box_afternm(message, nonce, box_beforenm(public, secret))


def box_open(cipher: bytes, nonce: bytes, public: bytes, secret: bytes) -> bytes:
    """Verify and decrypt a box; raise AuthenticationError if it was tampered with."""
    return box_open_afternm(cipher, nonce, box_beforenm(public, secret))


def _recover_x(y: int) -> int | None:
    y2 = y * y % _P
    num = (y2 - 1) % _P
    den = (_D * y2 + 1) % _P
    x = num * pow(den, 3, _P) * pow(num * pow(den, 7, _P), (_P - 5) // 8, _P) % _P
    if x * x * den % _P != num:
        x = x * _SQRT_M1 % _P
    if x * x * den % _P != num:
        return None
    return x


def _base_point() -> _Point:
    y = 4 * _inv(5) % _P
    x = _recover_x(y)
    if x & 1:
        x = _P - x
    return (x, y, 1, x * y % _P)


_IDENTITY: _Point = (0, 1, 1, 0)
_BASE = _base_point()


def _add(p: _Point, q: _Point) -> _Point:
    a = (p[1] - p[0]) * (q[1] - q[0]) % _P
    b = (p[0] + p[1]) * (q[0] + q[1]) % _P
    c = p[3] * q[3] % _P * _D2 % _P
    d = 2 * p[2] * q[2] % _P
    e, f, g, h = b - a, d - c, d + c, b + a
    return (e * f % _P, h * g % _P, g * f % _P, e * h % _P)


def _mul(s: int, q: _Point) -> _Point:
    result = _IDENTITY
    for i in range(s.bit_length() - 1, -1, -1):
        result = _add(result, result)
        if (s >> i) & 1:
            result = _add(result, q)
    return result


def _encode(p: _Point) -> bytes:
    zi = _inv(p[2])
    x = p[0] * zi % _P
    y = p[1] * zi % _P
    return (y | ((x & 1) << 255)).to_bytes(32, "little")


def _decode_negated(encoded: bytes) -> _Point | None:
    y = (int.from_bytes(encoded, "little") & ((1 << 255) - 1)) % _P
    x = _recover_x(y)
    if x is None:
        return None
    if (x & 1) == encoded[31] >> 7:
        x = (-x) % _P
    return (x, y, 1, x * y % _P)


def _hash_scalar(data: bytes) -> int:
    return int.from_bytes(sha512(data), "little") % _L


def sign_keypair() -> tuple[bytes, bytes]:
    """Return a fresh Ed25519 ``(public, secret)`` pair; the secret is seed plus public."""
    seed = os.urandom(32)
    a = _clamp(sha512(seed))
    public = _encode(_mul(a, _BASE))
    return public, seed + public


def sign(message: bytes, secret: bytes) -> bytes:
    """Return the 64-byte Ed25519 signature followed by ``message``."""
    expanded = _check(secret, 64, "signing key")
    message = bytes(message)
    d = sha512(expanded[:32])
    a = _clamp(d)
    r = _hash_scalar(d[32:] + message)
    big_r = _encode(_mul(r, _BASE))
    h = _hash_scalar(big_r + expanded[32:] + message)
    s = (r + h * a) % _L
    return big_r + s.to_bytes(32, "little") + message


def sign_open(signed: bytes, public: bytes) -> bytes:
    """Check a signed message and return the message; raise AuthenticationError if bad."""
    data = bytes(signed)
    public = _check(public, 32, "public key")
    if len(data) < 64:
        raise AuthenticationError("signed message is shorter than a signature")
    negated = _decode_negated(public)
    if negated is None:
        raise AuthenticationError("public key is not a valid curve point")

    h = _hash_scalar(data[:32] + public + data[64:])
    s = int.from_bytes(data[32:64], "little")
    check = _encode(_add(_mul(h, negated), _mul(s, _BASE)))
    if not verify32(data[:32], check):
        raise AuthenticationError("signature failed verification")
    return data[64:]