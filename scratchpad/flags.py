"""Decoding bit flags from a stream of pseudo-random values."""

from __future__ import annotations

import enum
import sys
from collections import deque

RAND_MAX = 2147483647


class Flag(enum.IntFlag):
    A = 1
    B = 2
    C = 4


def describe(value: int) -> list[Flag]:
    """Return the flags set in ``value``, in A, B, C order."""
    return [flag for flag in (Flag.A, Flag.B, Flag.C) if value & flag]


class _CRand:
    """The additive feedback generator behind the C library's srand/rand."""

    def __init__(self, seed: int) -> None:
        seed &= 0xFFFFFFFF
        if seed == 0:
            seed = 1
        if seed >= 2**31:
            seed -= 2**32
        r = [seed]
        for _ in range(30):
            r.append((16807 * r[-1]) % 2147483647)
        r.extend(r[:3])
        self._state = deque((v & 0xFFFFFFFF for v in r), maxlen=34)
        for _ in range(310):
            self._step()

    def _step(self) -> int:
        value = (self._state[-31] + self._state[-3]) & 0xFFFFFFFF
        self._state.append(value)
        return value

    def rand(self) -> int:
        return self._step() >> 1


def main(argv: list[str] | None = None) -> int:
    """Print forty arbitrary values in 0..8 with the flags each has set."""
    rng = _CRand(99)
    for _ in range(40):
        v = int(rng.rand() * 1.0 / RAND_MAX * 8)
        names = "".join(f"{flag.name} " for flag in describe(v))
        sys.stderr.write(f"{v: 2d}: {names}\n")
    return 0