"""The djb2 string hash, with a small demonstration of modulo bucketing."""

from __future__ import annotations

import sys

_MASK64 = 0xFFFFFFFFFFFFFFFF


def djb_hash(text: bytes | str) -> int:
    """Return the 64-bit djb2 hash of ``text``."""
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    h = 5381
    for c in data:
        h = ((h << 5) + h + c) & _MASK64
    return h


def main(argv: list[str] | None = None) -> int:
    """Print the low byte of each argument's hash and its buckets mod 3 and 4."""
    args = sys.argv[1:] if argv is None else list(argv)
    low = {arg: djb_hash(arg) & 0xFF for arg in args}

    for arg in args:
        print(f'    "{arg}" = {low[arg]}')
    print("\n")
    for modulus in (3, 4):
        for arg in args:
            print(f"    L({arg}) = {low[arg]} mod {modulus} = {low[arg] % modulus}")
        print("\n")
    return 0