"""Demonstrations of why a box message needs 32 leading zero bytes."""

from __future__ import annotations

import sys

from scratchpad.pubkey import box, box_open, scalarmult_base
from scratchpad.salsa import AuthenticationError

MESSAGE = (
    b"There are strange things done in the midnight sun\n"
    b"By the men who toil for gold;\n"
    b"The Arctic trails have their secret tales\n"
    b"That would make your blood run cold;\n"
    b"The Northern Lights have seen queer sights,\n"
    b"But the queerest they ever did see\n"
    b"Was that night on the marge of Lake Lebarge\n"
    b"I cremated Sam McGee.\n"
)
MESSAGE_LEN = 304
PADDING = 32

# Fixed, made-up demo keys so every run is reproducible.
CLIENT_SECRET = bytes(range(32))
SERVER_SECRET = bytes(range(32, 64))
CLIENT_PUBLIC = scalarmult_base(CLIENT_SECRET)
SERVER_PUBLIC = scalarmult_base(SERVER_SECRET)
NONCE = bytes(24)

_RULE = "-" * 48


def hexdump(prefix: str, data: bytes) -> str:
    """Return ``data`` as rows of sixteen hex bytes between two rules."""
    body = "".join(
        "".join(f" {b:02x}" for b in data[i:i + 16]) + "\n"
        for i in range(0, len(data), 16)
    )
    return f"{prefix}\n{_RULE}\n{body}{_RULE}\n"


def _show(prefix: str, data: bytes) -> None:
    sys.stdout.write(hexdump(prefix, data))


def _seal(plain: bytes) -> bytes:
    return box(plain, NONCE, SERVER_PUBLIC, CLIENT_SECRET)


def _open(cipher: bytes) -> bytes:
    return box_open(cipher, NONCE, CLIENT_PUBLIC, SERVER_SECRET)


def encrypt_main(argv: list[str] | None = None) -> int:
    """Encrypt the message without padding and show the ciphertext."""
    _show("plaintext, before encryption", MESSAGE)
    cipher = _seal(MESSAGE)
    _show("ciphertext", cipher[:MESSAGE_LEN])
    return 0


def decrypt_main(argv: list[str] | None = None) -> int:
    """Encrypt without padding, then fail to decrypt."""
    _show("plaintext, before encryption", MESSAGE)
    cipher = _seal(MESSAGE)
    _show("ciphertext", cipher[:MESSAGE_LEN])
    try:
        plain = _open(cipher)
    except AuthenticationError as exc:
        _show("plaintext, after decryption", bytes(MESSAGE_LEN))
        print(f"decryption failed: {exc}", file=sys.stderr)
        return 1
    _show("plaintext, after decryption", plain)
    return 0


def decrypt2_main(argv: list[str] | None = None) -> int:
    """Pad correctly, but compare the decrypted text without removing the padding."""
    padded = bytes(PADDING) + MESSAGE
    _show("plaintext, before encryption", padded)
    cipher = _seal(padded)
    _show("ciphertext", cipher[:MESSAGE_LEN])
    try:
        plain = _open(cipher)
    except AuthenticationError as exc:
        print(f"decryption failed: {exc}", file=sys.stderr)
        return 1
    _show("plaintext, after decryption", plain)
    if plain[:MESSAGE_LEN] != MESSAGE:
        print("decrypted text does not match the message", file=sys.stderr)
        return 1
    print(plain[:MESSAGE_LEN + 1].decode("utf-8", "replace"))
    return 0


def decrypt3_main(argv: list[str] | None = None) -> int:
    """Pad, encrypt, decrypt and strip the padding: the round trip works."""
    padded = bytes(PADDING) + MESSAGE
    _show("plaintext, before encryption", padded)
    cipher = _seal(padded)
    _show("ciphertext", cipher)
    try:
        plain = _open(cipher)[PADDING:]
    except AuthenticationError as exc:
        print(f"decryption failed: {exc}", file=sys.stderr)
        return 1
    _show("plaintext, after decryption", plain)
    if plain != MESSAGE:
        print("decrypted text does not match the message", file=sys.stderr)
        return 1
    print("\n" + plain.decode("utf-8"))
    return 0