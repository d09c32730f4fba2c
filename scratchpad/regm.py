"""A small register machine that runs regm bytecode.

Each instruction is an opcode byte, a byte holding the types of its two
operands (high and low nybble), then zero, one or two big-endian 32-bit
operands.
"""

from __future__ import annotations

import operator
import re
import sys
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import TextIO

from scratchpad.opcodes import Opcode

NREGS = 16
STACK_SIZE = 254
HEAP_ADDRMASK = 0x80000000
BADVALUE = 0x40000000

TYPE_LITERAL = 0x1
TYPE_REGISTER = 0x2
TYPE_ADDRESS = 0x3

_MASK32 = 0xFFFFFFFF
_RULE = "    ---------------------------------------------------------------------"
_CONVERSIONS = "sdiouxX"
_SPEC = re.compile(r"(?P<flags>[-+ #0]*)(?P<width>\d*)(?:\.(?P<prec>\d*))?")
_LENGTH = re.compile(r"[hlLqjzt]")

_ARITHMETIC: dict[Opcode, Callable[[int, int], int]] = {
    Opcode.ADD: operator.add,
    Opcode.SUB: operator.sub,
    Opcode.MULT: operator.mul,
    Opcode.DIV: operator.floordiv,
    Opcode.MOD: operator.mod,
}

_BRANCHES: dict[Opcode, Callable[[int, int], bool]] = {
    Opcode.JE: operator.eq,
    Opcode.JNE: operator.ne,
    Opcode.JGT: operator.gt,
    Opcode.JGTE: operator.ge,
    Opcode.JLT: operator.lt,
    Opcode.JLTE: operator.le,
}


class BytecodeError(Exception):
    """Raised when the machine meets bytecode it cannot run."""


class Stack:
    """A bounded stack of 32-bit values."""

    def __init__(self) -> None:
        self._values: list[int] = []

    def push(self, value: int) -> None:
        """Push ``value``; raise OverflowError when the stack is full."""
        if len(self._values) == STACK_SIZE:
            raise OverflowError("stack overflow!")
        self._values.append(value & _MASK32)

    def pop(self) -> int:
        """Pop the top value; raise IndexError when the stack is empty."""
        if not self._values:
            raise IndexError("stack underflow!")
        return self._values.pop()

    def empty(self) -> bool:
        return not self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        """Iterate from the bottom of the stack to the top."""
        return iter(self._values)


def _signed(value: int) -> int:
    return value - (1 << 32) if value & 0x80000000 else value


class VM:
    """Registers, stacks and heap of one running program."""

    def __init__(self, code: bytes) -> None:
        code = bytes(code)
        if len(code) < 2:
            raise ValueError("bytecode must be at least two bytes long")
        self.code = code
        self.registers = [0] * NREGS
        self.acc = 0
        self.pc = 0
        self.dstack = Stack()
        self.istack = Stack()
        self.heap: dict[int, bytearray] = {}
        self.heaptop = 0

    # -- memory -------------------------------------------------------------

    def _alloc(self, data: bytes) -> int:
        addr = (self.heaptop | HEAP_ADDRMASK) & _MASK32
        self.heaptop += 1
        self.heap[addr] = bytearray(data)
        return addr

    def _string_at(self, addr: int) -> str | None:
        if addr & HEAP_ADDRMASK:
            data = self.heap.get(addr)
            if data is None:
                return None
            raw = bytes(data)
        elif addr < len(self.code):
            raw = self.code[addr:]
        else:
            return None
        return raw.split(b"\0", 1)[0].decode("utf-8", "replace")

    def _string_of(self, kind: int, arg: int) -> str | None:
        if kind == TYPE_ADDRESS:
            return self._string_at(arg)
        if kind == TYPE_REGISTER and arg < NREGS:
            return self._string_at(self.registers[arg])
        return None

    def _value_of(self, kind: int, arg: int) -> int:
        if kind == TYPE_LITERAL:
            return arg
        if kind == TYPE_ADDRESS:
            if arg & HEAP_ADDRMASK or arg < len(self.code):
                return arg
            return BADVALUE
        if kind == TYPE_REGISTER:
            return self.registers[arg] if arg < NREGS else BADVALUE
        return BADVALUE

    def load_args(self, args: Sequence[str]) -> None:
        """Copy ``args`` onto the heap and push their addresses, then their count."""
        args = list(args)
        for arg in reversed(args):
            self.dstack.push(self._alloc(arg.encode("utf-8") + b"\0"))
        self.dstack.push(len(args))

    # -- formatting ---------------------------------------------------------

    def format(self, fmt: str) -> str:
        """Expand ``%[r]<conv>`` register references and ``%%`` in ``fmt``."""
        out: list[str] = []
        n = len(fmt)
        i = seg = 0

        def advance(pos: int) -> int:
            pos += 1
            if pos >= n:
                raise BytecodeError("unexpected end of format string")
            return pos

        while i < n:
            if fmt[i] != "%":
                out.append(fmt[i])
                i += 1
                continue
            i = advance(i)
            if fmt[i] == "%":
                out.append("%")
                i += 1
                seg = i
                continue
            if fmt[i] != "[":
                raise BytecodeError(
                    f"invalid format specifier, '[' != '{fmt[i]}', offset:{i - seg + 1}"
                )
            i = advance(i)
            reg = fmt[i]
            if not "a" <= reg < chr(ord("a") + NREGS):
                raise BytecodeError(f"invalid register %{reg}, offset:{i - seg + 1}")
            i = advance(i)
            if fmt[i] != "]":
                raise BytecodeError(
                    f"invalid format specifier, ']' != '{fmt[i]}', offset:{i - seg + 1}"
                )
            start = i + 1
            while fmt[i] not in _CONVERSIONS:
                i = advance(i)
            out.append(self._convert(fmt[start:i], fmt[i], ord(reg) - ord("a")))
            i += 1
            seg = i
        return "".join(out)

    def _convert(self, spec: str, conv: str, reg: int) -> str:
        spec = _LENGTH.sub("", spec)
        m = _SPEC.fullmatch(spec)
        if not m:
            raise BytecodeError(f"unsupported conversion '%{spec}{conv}'")
        value = self.registers[reg]
        if conv == "s":
            text = self._string_at(value)
            return ("%" + spec + "s") % ("(null)" if text is None else text)
        if conv in "di":
            value = _signed(value)
        flags, width, prec = m.group("flags"), m.group("width"), m.group("prec")
        if conv == "o" and "#" in flags:
            needed = len(format(value, "o")) + 1 if value else 1
            prec = str(max(int(prec or 0), needed))
            flags = flags.replace("#", "")
        rebuilt = flags + width + ("" if prec is None else "." + prec)
        return ("%" + rebuilt + conv) % value

    # -- inspection ---------------------------------------------------------

    def dump(self) -> str:
        """Return a picture of the registers, stacks and heap."""
        lines = ["", _RULE]
        for row in range(0, NREGS, 4):
            cells = "   ".join(
                f"%{chr(ord('a') + i)} [ {self.registers[i]:08x} ]" for i in range(row, row + 4)
            )
            lines.append("    " + cells)
        lines += ["", f"    acc: {self.acc:08x}", f"     pc: {self.pc:08x}", ""]

        for label, stack in (("data", self.dstack), ("inst", self.istack)):
            values = list(stack)
            if not values:
                lines.append(f"    {label}: <empty>")
                continue
            lines.append(f"    {label}: | {values[0]:08x} | 0")
            lines.extend(f"          | {v:08x} | {i}" for i, v in enumerate(values[1:], 1))

        if self.heaptop:
            lines.append("    heap:")
            for addr, data in self.heap.items():
                hexbytes = "".join(f"{b:02x} " for b in data[:64])
                lines.append(f"          [{hexbytes}] {addr - HEAP_ADDRMASK}")

        lines += [_RULE, "", ""]
        return "\n".join(lines)

    # -- execution ----------------------------------------------------------

    def _dword(self) -> int:
        if self.pc + 4 > len(self.code):
            raise BytecodeError(f"operand at {self.pc:08x} runs past the end of the code")
        value = int.from_bytes(self.code[self.pc:self.pc + 4], "big")
        self.pc += 4
        return value

    def _fetch(self) -> tuple[int, int, int, int, int]:
        if self.pc + 2 > len(self.code):
            raise BytecodeError(f"program counter {self.pc:08x} is past the end of the code")
        op = self.code[self.pc]
        types = self.code[self.pc + 1]
        self.pc += 2
        f1, f2 = (types >> 4) & 0x0F, types & 0x0F
        if f2 and not f1:
            raise BytecodeError(f"corrupt operands mask detected; f1={f1:02x}, f2={f2:02x}")
        oper1 = self._dword() if f1 else 0
        oper2 = self._dword() if f2 else 0
        return op, f1, f2, oper1, oper2

    @staticmethod
    def _arity(name: str, f1: int, f2: int, count: int) -> None:
        if count == 0 and (f1 or f2):
            raise BytecodeError(f"{name} takes no operands")
        if count == 1 and (not f1 or f2):
            raise BytecodeError(f"{name} requires exactly one operand")
        if count == 2 and (not f1 or not f2):
            raise BytecodeError(f"{name} requires two operands")

    @staticmethod
    def _register(name: str, kind: int, index: int, position: int) -> int:
        if kind != TYPE_REGISTER:
            raise BytecodeError(f"{name} requires a register index for operand {position}")
        if index >= NREGS:
            raise BytecodeError(f"register {index:08x} is out of bounds")
        return index

    def _save_state(self) -> None:
        for value in self.registers:
            self.dstack.push(value)

    def _restore_state(self) -> None:
        for i in reversed(range(NREGS)):
            self.registers[i] = self.dstack.pop()

    def run(self, stdout: TextIO | None = None, stderr: TextIO | None = None) -> None:
        """Execute from address 0 until ``halt`` or a ``ret`` with no caller.

        Raises BytecodeError for malformed code, OverflowError and IndexError
        when a stack overflows or underflows.
        """
        out = stdout if stdout is not None else sys.stdout
        err = stderr if stderr is not None else sys.stderr
        self.pc = 0

        while True:
            raw, f1, f2, oper1, oper2 = self._fetch()
            try:
                op = Opcode(raw)
            except ValueError:
                raise BytecodeError(f"unknown operand {raw:02x}") from None
            name = op.mnemonic

            if op is Opcode.NOOP:
                continue

            if op is Opcode.PUSH:
                self._arity(name, f1, f2, 1)
                self.dstack.push(self.registers[self._register(name, f1, oper1, 1)])

            elif op is Opcode.POP:
                self._arity(name, f1, f2, 1)
                self.registers[self._register(name, f1, oper1, 1)] = self.dstack.pop()

            elif op is Opcode.SET:
                self._arity(name, f1, f2, 2)
                self.registers[self._register(name, f1, oper1, 1)] = self._value_of(f2, oper2)

            elif op is Opcode.SWAP:
                self._arity(name, f1, f2, 2)
                a = self._register(name, f1, oper1, 1)
                b = self._register(name, f2, oper2, 2)
                if a == b:
                    raise BytecodeError("swap requires distinct registers for operands")
                self.registers[a], self.registers[b] = self.registers[b], self.registers[a]

            elif op in _ARITHMETIC:
                self._arity(name, f1, f2, 2)
                target = self._register(name, f1, oper1, 1)
                operand = self._value_of(f2, oper2)
                if op in (Opcode.DIV, Opcode.MOD) and operand == 0:
                    raise BytecodeError(f"{name} by zero")
                result = _ARITHMETIC[op](self.registers[target], operand)
                self.registers[target] = result & _MASK32

            elif op is Opcode.CALL:
                self._arity(name, f1, f2, 1)
                if f1 != TYPE_ADDRESS:
                    raise BytecodeError("call requires an address for operand 1")
                self._save_state()
                self.istack.push(self.pc)
                self.pc = oper1

            elif op is Opcode.RET:
                if f1:
                    self._arity(name, f1, f2, 1)
                    self.acc = self._value_of(f1, oper1)
                else:
                    self._arity(name, f1, f2, 0)
                if self.istack.empty():
                    return
                self.pc = self.istack.pop()
                self._restore_state()

            elif op is Opcode.CMP:
                self._arity(name, f1, f2, 2)
                self.acc = (self._value_of(f1, oper1) - self._value_of(f2, oper2)) & _MASK32

            elif op is Opcode.STRCMP:
                self._arity(name, f1, f2, 2)
                s1 = self._string_of(f1, oper1)
                s2 = self._string_of(f2, oper2)
                if s1 is None or s2 is None:
                    raise BytecodeError("strcmp requires two strings")
                self.acc = ((s1 > s2) - (s1 < s2)) & _MASK32

            elif op is Opcode.JMP:
                self._arity(name, f1, f2, 1)
                self.pc = oper1

            elif op in (Opcode.JZ, Opcode.JNZ):
                self._arity(name, f1, f2, 1)
                if (self.acc == 0) == (op is Opcode.JZ):
                    self.pc = self._value_of(f1, oper1)

            elif op in _BRANCHES:
                self._arity(name, f1, f2, 2)
                if _BRANCHES[op](self.acc, self._value_of(f1, oper1)):
                    self.pc = self._value_of(f2, oper2)

            elif op is Opcode.STRING:
                self._arity(name, f1, f2, 2)
                target = self._register(name, f2, oper2, 2)
                fmt = self._string_of(f1, oper1)
                if fmt is None:
                    raise BytecodeError("string requires a format string for operand 1")
                self.registers[target] = self._alloc(self.format(fmt).encode("utf-8") + b"\0")

            elif op is Opcode.PRINT:
                self._arity(name, f1, f2, 1)
                fmt = self._string_of(f1, oper1)
                if fmt is None:
                    raise BytecodeError("print requires a format string for operand 1")
                out.write(self.format(fmt))

            elif op is Opcode.HALT:
                self._arity(name, f1, f2, 0)
                return

            elif op is Opcode.DUMP:
                self._arity(name, f1, f2, 0)
                err.write(self.dump())


def main(argv: list[str] | None = None) -> int:
    """Run a bytecode file; the file name and any further arguments go on the data stack."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("USAGE: regm asm.b", file=sys.stderr)
        return 1

    try:
        code = Path(args[0]).read_bytes()
    except OSError as exc:
        print(f"{args[0]}: {exc.strerror}", file=sys.stderr)
        return 1

    try:
        vm = VM(code)
    except ValueError as exc:
        print(f"{args[0]}: {exc}", file=sys.stderr)
        return 1

    vm.load_args(args)
    try:
        vm.run(sys.stdout, sys.stderr)
    except BytecodeError as exc:
        print(f"regm bytecode error: {exc}", file=sys.stderr)
        return 1
    except (OverflowError, IndexError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0