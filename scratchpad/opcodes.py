"""Opcodes, assembler tokens and operand syntax of the register machine."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Opcode(enum.IntEnum):
    """Bytecode operations understood by the virtual machine."""

    NOOP = 0x00
    PUSH = 0x01
    POP = 0x02
    SET = 0x03
    SWAP = 0x04
    ADD = 0x05
    SUB = 0x06
    MULT = 0x07
    DIV = 0x08
    MOD = 0x09
    CALL = 0x0A
    RET = 0x0B
    CMP = 0x0C
    STRCMP = 0x0D
    JMP = 0x0E
    JZ = 0x0F
    JNZ = 0x10
    JE = 0x11
    JNE = 0x12
    JGT = 0x13
    JGTE = 0x14
    JLT = 0x15
    JLTE = 0x16
    STRING = 0x17
    PRINT = 0x18
    DUMP = 0x19
    HALT = 0x1A

    @property
    def mnemonic(self) -> str:
        return self.name.lower()


class AsmToken(enum.IntEnum):
    """Assembler tokens, one per mnemonic (``retv`` has its own)."""

    NOOP = 0x40
    PUSH = 0x41
    POP = 0x42
    SET = 0x43
    SWAP = 0x44
    ADD = 0x45
    SUB = 0x46
    MULT = 0x47
    DIV = 0x48
    MOD = 0x49
    CALL = 0x4A
    RET = 0x4B
    RETV = 0x4C
    CMP = 0x4D
    STRCMP = 0x4E
    JMP = 0x4F
    JZ = 0x50
    JNZ = 0x51
    JE = 0x52
    JNE = 0x53
    JGT = 0x54
    JGTE = 0x55
    JLT = 0x56
    JLTE = 0x57
    STRING = 0x58
    PRINT = 0x59
    DUMP = 0x5A
    HALT = 0x5B

    @property
    def mnemonic(self) -> str:
        return self.name.lower()


class ArgKind(enum.IntFlag):
    """Kinds of operand an instruction accepts."""

    NONE = 0x00
    REGISTER = 0x01
    NUMBER = 0x02
    STRING = 0x04
    LABEL = 0x08
    FUNCTION = 0x10


@dataclass(frozen=True)
class SyntaxRule:
    """How one assembler mnemonic is written and what it assembles to."""

    token: AsmToken
    usage: str
    opcode: Opcode
    args: tuple[ArgKind, ArgKind]


_R = ArgKind.REGISTER
_N = ArgKind.NUMBER
_S = ArgKind.STRING
_L = ArgKind.LABEL
_F = ArgKind.FUNCTION
_0 = ArgKind.NONE

ASM_SYNTAX: tuple[SyntaxRule, ...] = (
    SyntaxRule(AsmToken.NOOP, "noop", Opcode.NOOP, (_0, _0)),
    SyntaxRule(AsmToken.PUSH, "push %a", Opcode.PUSH, (_R, _0)),
    SyntaxRule(AsmToken.POP, "pop %a", Opcode.POP, (_R, _0)),
    SyntaxRule(AsmToken.SET, "set %a (%b|<string>|<number>)", Opcode.SET, (_R, _R | _S | _N)),
    SyntaxRule(AsmToken.SWAP, "swap %a %b", Opcode.SWAP, (_R, _R)),
    SyntaxRule(AsmToken.ADD, "add %a (%b|<number>)", Opcode.ADD, (_R, _R | _N)),
    SyntaxRule(AsmToken.SUB, "sub %a (%b|<number>)", Opcode.SUB, (_R, _R | _N)),
    SyntaxRule(AsmToken.MULT, "mult %a (%b|<number>)", Opcode.MULT, (_R, _R | _N)),
    SyntaxRule(AsmToken.DIV, "div %a (%b|<number>)", Opcode.DIV, (_R, _R | _N)),
    SyntaxRule(AsmToken.MOD, "mod %a (%b|<number>)", Opcode.MOD, (_R, _R | _N)),
    SyntaxRule(AsmToken.CALL, "call <function>", Opcode.CALL, (_F, _0)),
    SyntaxRule(AsmToken.RET, "ret", Opcode.RET, (_0, _0)),
    SyntaxRule(AsmToken.RETV, "retv (%a|<string>|<number>)", Opcode.RET, (_R | _S | _N, _0)),
    SyntaxRule(AsmToken.CMP, "cmp (%a|<number>) (%b|<number>)", Opcode.CMP, (_R | _N, _R | _N)),
    SyntaxRule(
        AsmToken.STRCMP, "strcmp (%a|<string>) (%b|<string>)", Opcode.STRCMP, (_R | _S, _R | _S)
    ),
    SyntaxRule(AsmToken.JMP, "jmp <label>", Opcode.JMP, (_L, _0)),
    SyntaxRule(AsmToken.JZ, "jz <label>", Opcode.JZ, (_L, _0)),
    SyntaxRule(AsmToken.JNZ, "jnz <label>", Opcode.JNZ, (_L, _0)),
    SyntaxRule(AsmToken.JE, "je (%a|<number>) <label>", Opcode.JE, (_R | _N, _L)),
    SyntaxRule(AsmToken.JNE, "jne (%a|<number>) <label>", Opcode.JNE, (_R | _N, _L)),
    SyntaxRule(AsmToken.JGT, "jgt (%a|<number>) <label>", Opcode.JGT, (_R | _N, _L)),
    SyntaxRule(AsmToken.JGTE, "jgte (%a|<number>) <label>", Opcode.JGTE, (_R | _N, _L)),
    SyntaxRule(AsmToken.JLT, "jlt (%a|<number>) <label>", Opcode.JLT, (_R | _N, _L)),
    SyntaxRule(AsmToken.JLTE, "jlte (%a|<number>) <label>", Opcode.JLTE, (_R | _N, _L)),
    SyntaxRule(AsmToken.STRING, "string (<string>|%a) %b", Opcode.STRING, (_S | _R, _R)),
    SyntaxRule(AsmToken.PRINT, "print <string>", Opcode.PRINT, (_S, _0)),
    SyntaxRule(AsmToken.DUMP, "dump", Opcode.DUMP, (_0, _0)),
    SyntaxRule(AsmToken.HALT, "halt", Opcode.HALT, (_0, _0)),
)

_BY_MNEMONIC = {rule.token.mnemonic: rule for rule in ASM_SYNTAX}


def syntax_for(mnemonic: str) -> SyntaxRule:
    """Return the syntax rule for an assembler mnemonic; raise KeyError if unknown."""
    try:
        return _BY_MNEMONIC[mnemonic.lower()]
    except KeyError:
        raise KeyError(f"unknown mnemonic {mnemonic!r}") from None