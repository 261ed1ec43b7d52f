"""IR generation — lowers a Program into flat instructions.

Every expression lowers to the name holding its value. Literals and binary
operations get a fresh temporary; identifiers lower to themselves without any
declaration check. Only calls to `print` produce an instruction, other calls
lower to nothing.

A declaration whose initializer was just written into a temporary takes over
that instruction's destination instead of emitting an `id` copy. This only
fires when the temporary came from the immediately preceding instruction.
"""

from __future__ import annotations

from .ast import BinaryExpr, CallExpr, Expr, Identifier, Literal, Program, Stmt, VarDecl
from .ir import (
    ARITH_OPS,
    INT,
    KIND_TEMP,
    KIND_VAR,
    OP_CONST,
    OP_ID,
    OP_PRINT,
    Instr,
    SymbolInfo,
)


class IRGenerator:
    """Lowering state for one program: instruction buffer, symbols, temp counter."""

    def __init__(self) -> None:
        self.instructions: list[Instr] = []
        self.symbols: list[SymbolInfo] = []
        self.temp_counter: int = 0
        self._temps: set[str] = set()

    def generate(self, program: Program) -> tuple[list[Instr], list[SymbolInfo]]:
        for stmt in program.body:
            self._lower_stmt(stmt)
        return self.instructions, self.symbols

    # ── Helpers ──────────────────────────────────────────────

    def _new_temp(self) -> str:
        name = "temp" + str(self.temp_counter)
        self.temp_counter += 1
        self._temps.add(name)
        self.symbols.append(SymbolInfo(name, INT, KIND_TEMP))
        return name

    def _emit(self, instr: Instr) -> None:
        self.instructions.append(instr)

    def _drop_temp_symbol(self, name: str) -> None:
        for i, sym in enumerate(self.symbols):
            if sym.name == name and sym.kind == KIND_TEMP:
                del self.symbols[i]
                return

    # ── Statements ───────────────────────────────────────────

    def _lower_stmt(self, stmt: Stmt) -> None:
        if isinstance(stmt, VarDecl):
            self._lower_var_decl(stmt)
            return
        self._lower_expr(stmt)

    def _lower_var_decl(self, decl: VarDecl) -> None:
        result = self._lower_expr(decl.value)
        if result is None:
            return
        last = self.instructions[-1] if self.instructions else None
        if last is not None and last.dest == result and result in self._temps:
            last.dest = decl.name
            self._temps.discard(result)
            self._drop_temp_symbol(result)
        else:
            self._emit(Instr(OP_ID, dest=decl.name, args=[result], type=INT))
        self.symbols.append(SymbolInfo(decl.name, INT, KIND_VAR))

    # ── Expressions ──────────────────────────────────────────

    def _lower_expr(self, expr: Expr) -> str | None:
        if isinstance(expr, Literal):
            dest = self._new_temp()
            self._emit(Instr(OP_CONST, dest=dest, value=expr.value, type=INT))
            return dest
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, BinaryExpr):
            return self._lower_binary(expr)
        if isinstance(expr, CallExpr):
            return self._lower_call(expr)
        raise TypeError("unexpected node: " + type(expr).__name__)

    def _lower_operand(self, expr: Expr) -> str:
        if isinstance(expr, CallExpr):
            # A call has no value; the operand reads as a name that is never bound.
            self._lower_call(expr)
            return expr.callee + "()"
        name = self._lower_expr(expr)
        assert name is not None
        return name

    def _lower_binary(self, expr: BinaryExpr) -> str:
        # Sums and products parse left-nested, so walk the left spine
        # with an explicit stack and emit from the innermost operation out.
        chain: list[BinaryExpr] = [expr]
        while isinstance(chain[-1].left, BinaryExpr):
            chain.append(chain[-1].left)
        left = self._lower_operand(chain[-1].left)
        for node in reversed(chain):
            right = self._lower_operand(node.right)
            dest = self._new_temp()
            self._emit(Instr(ARITH_OPS[node.op], dest=dest, args=[left, right], type=INT))
            left = dest
        return left

    def _lower_call(self, expr: CallExpr) -> None:
        if expr.callee != "print":
            return None
        args = [self._lower_operand(arg) for arg in expr.args]
        self._emit(Instr(OP_PRINT, args=args))
        return None


def generate(program: Program) -> tuple[list[Instr], list[SymbolInfo]]:
    """Lower a Program into (instructions, symbol table)."""
    return IRGenerator().generate(program)
