"""Start a command in the background with its standard streams on the null device."""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Sequence


def detach(command: Sequence[str]) -> subprocess.Popen:
    """Start ``command`` without waiting for it; its stdio goes to the null device."""
    args = list(command)
    if not args:
        raise ValueError("no command to run")
    return subprocess.Popen(
        args,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )


def main(argv: list[str] | None = None) -> int:
    """Run the given command detached and return at once."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("USAGE: detach command --to --run -forked", file=sys.stderr)
        return 1
    try:
        detach(args)
    except OSError as exc:
        print(f"exec() failed: {exc}", file=sys.stderr)
        return 1
    return 0