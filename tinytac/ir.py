"""tinytac IR — flat three-address instructions and symbol table entries."""

from __future__ import annotations

from dataclasses import dataclass, field

from .ast import Program
from .tokens import Token

OP_CONST = "const"
OP_ID = "id"
OP_ADD = "add"
OP_SUB = "sub"
OP_MUL = "mul"
OP_DIV = "div"
OP_PRINT = "print"

OPCODES: set[str] = {OP_CONST, OP_ID, OP_ADD, OP_SUB, OP_MUL, OP_DIV, OP_PRINT}

ARITH_OPS: dict[str, str] = {
    "+": OP_ADD,
    "-": OP_SUB,
    "*": OP_MUL,
    "/": OP_DIV,
}

INT = "int"

KIND_VAR = "var"
KIND_TEMP = "temp"


@dataclass
class Instr:
    """One IR instruction. value is set only for const."""

    op: str
    dest: str | None = None
    args: list[str] | None = None
    value: int | None = None
    type: str | None = None


@dataclass
class SymbolInfo:
    """Symbol table entry. used is informational and never read by a phase."""

    name: str
    type: str = INT
    kind: str = KIND_VAR
    used: bool = False


@dataclass
class Compilation:
    """Artifacts of one front-end run: tokens through IR."""

    tokens: list[Token] = field(default_factory=list)
    program: Program = field(default_factory=Program)
    instructions: list[Instr] = field(default_factory=list)
    symbols: list[SymbolInfo] = field(default_factory=list)
