"""Finding the base strip of a ziggurat for sampling the normal distribution."""

from __future__ import annotations

import math
import re
import sys

V_FACTOR = 1.0e-5

_INT_PREFIX = re.compile(r"\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _f(x: float) -> float:
    return math.exp(-x * x / 2)


def _f_inverse(y: float) -> float:
    if math.isnan(y) or y < 0 or y > 1:
        return math.nan
    if y == 0:
        return math.inf
    return math.sqrt(-2.0 * math.log(y))


def tail_integral(r: float, ep: float) -> float:
    """Return r*f(r) plus a step integral of f from ``r`` until f falls to ``ep``."""
    if not ep > 0:
        raise ValueError("epsilon must be positive")
    acc = r * _f(r)
    x = r
    while True:
        y = _f(x)
        acc += y * V_FACTOR
        x += V_FACTOR
        if not y > ep:
            return acc


def ziggurat_z(x: float, n: int, ep: float) -> tuple[float, float]:
    """Stack ``n`` boxes up from ``x``; return the mismatch z and the box area v."""
    v = tail_integral(x, ep)
    for _ in range(n - 2, 0, -1):
        if x == 0:
            break
        t = _f_inverse(v / x + _f(x))
        if math.isnan(t):
            break
        x = t
    return v - x + x * _f(x), v


def solve(a: float, b: float, ep: float, n: int) -> tuple[float, float]:
    """Bisect [a, b] for the r where z(r) is zero; return r and its area v."""
    while True:
        r = (a + b) / 2.0
        z, v = ziggurat_z(r, n, ep)
        if b - r < ep or abs(z) < ep:
            return r, v
        z_a, _ = ziggurat_z(a, n, ep)
        if z_a * z < 0:
            b = r
        else:
            a = r


def _strtol(text: str) -> tuple[int, str]:
    m = _INT_PREFIX.match(text)
    if not m:
        return 0, text
    return int(m.group()), text[m.end():]


def _strtod(text: str) -> tuple[float, str]:
    m = _FLOAT_PREFIX.match(text)
    if not m:
        return 0.0, text
    return float(m.group()), text[m.end():]


def find_r_main(argv: list[str] | None = None) -> int:
    """Solve for the ziggurat base r with N boxes (default 256)."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) > 1:
        sys.stderr.write("USAGE: find-r [N]\n(where N defaults to 256)\n")
        return 1

    n = 256
    if args:
        n, rest = _strtol(args[0])
        if rest:
            sys.stderr.write(
                f"'{args[0]}' doesn't look like an integer... (starting at '{rest}')\n"
            )
            return 1
        if n <= 0:
            sys.stderr.write(
                f"{n} is not a valid number of boxes (must be positive, non-zero)\n"
            )
            return 1

    r, v = solve(0.5, 10, 1e-15, n)
    print(f"z(r) ≅ 0 for n = {n}, r = {r:20.18e}, v = {v:20.18e}")
    return 0


def solver_main(argv: list[str] | None = None) -> int:
    """Print the tail integral of e^(-x^2/2) from R, stopping at epsilon EP."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        sys.stderr.write("USAGE: solver R EP\n")
        return 1

    r, rest = _strtod(args[0])
    if rest:
        sys.stderr.write(
            f"'{args[0]}' doesn't look like a floating-point number... (starting at '{rest}')\n"
        )
        return 1
    if not r > 0:
        sys.stderr.write(f"{r:20.18e} is not a valid r (must be positive, non-zero)\n")
        return 1

    ep, rest = _strtod(args[1])
    if rest:
        sys.stderr.write(
            f"'{args[1]}' doesn't look like a floating-point number... (starting at '{rest}')\n"
        )
        return 1
    if not ep > 0:
        sys.stderr.write(f"{ep:20.18e} is not a valid ep (must be positive, non-zero)\n")
        return 1

    print(
        f"integral of y = e^(-x2/2) from [{r:f}, inf), given epsilon {ep:e}, "
        f"is {tail_integral(r, ep):20.18e}"
    )
    return 0