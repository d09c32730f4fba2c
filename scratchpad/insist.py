"""Assertions that always run, name the failed expression and exit with a set code."""

from __future__ import annotations

import ast
import inspect
import sys
import traceback
from types import FrameType
from typing import Any, TextIO

DEFAULT_EXIT_CODE = 7


def _expression_text(frame: FrameType, test: Any) -> str:
    """Recover the source of the first argument of the call on the caller's line."""
    try:
        info = inspect.getframeinfo(frame, context=1)
        if not info.code_context:
            return repr(test)
        tree = ast.parse(info.code_context[0].strip())
    except (OSError, SyntaxError, ValueError, IndexError):
        return repr(test)
    for node in ast.walk(tree):
        if isinstance(node, ast.Call) and node.args:
            return ast.unparse(node.args[0])
    return repr(test)


class Insist:
    """A configured assertion: where it reports, how it exits, how much it says.

    ``print_always`` only takes effect together with ``debugging``.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        exit_code: int = DEFAULT_EXIT_CODE,
        debugging: bool = False,
        print_always: bool = False,
    ) -> None:
        self.stream = stream
        self.exit_code = exit_code
        self.debugging = debugging
        self.print_always = print_always

    def __call__(self, test: Any, msg: str) -> None:
        """Exit with ``exit_code`` after reporting, unless ``test`` is true."""
        frame = inspect.currentframe()
        try:
            self._check(test, msg, frame.f_back)
        finally:
            del frame

    def _check(self, test: Any, msg: str, frame: FrameType) -> None:
        out = self.stream if self.stream is not None else sys.stderr
        passed = bool(test)

        if not self.debugging:
            if not passed:
                expr = _expression_text(frame, test)
                out.write(f"ASSERTION FAILED: {msg} (`{expr}` was false)\n")
                out.flush()
                raise SystemExit(self.exit_code)
            return

        if passed and not self.print_always:
            return

        expr = _expression_text(frame, test)
        where = f"in {frame.f_code.co_name}(), at {frame.f_code.co_filename}:{frame.f_lineno}"
        if passed:
            out.write(f"assertion succeeded: {msg} (`{expr}` was true, {where})\n")
            return

        out.write(f"ASSERTION FAILED: {msg} (`{expr}` was false, {where})\n")
        stack = traceback.format_stack(frame)
        if not self.print_always:
            out.write(f"{len(stack)} frames\n")
        out.writelines(stack)
        out.write("done\n")
        out.flush()
        raise SystemExit(self.exit_code)


def insist(test: Any, msg: str) -> None:
    """Check ``test`` with the default settings: report to stderr, exit with 7."""
    frame = inspect.currentframe()
    try:
        Insist()._check(test, msg, frame.f_back)
    finally:
        del frame


def main(argv: list[str] | None = None) -> int:
    """Demonstrate a failing, fully verbose assertion reported on stdout."""
    check = Insist(stream=sys.stdout, exit_code=23, debugging=True, print_always=True)
    x = 421
    try:
        check(x == 42, "x should be the answer to life, the universe, and everything")
    except SystemExit as exc:
        return exc.code
    return 0