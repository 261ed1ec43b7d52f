"""tinytac emitters — textual IR listings and source text from the AST."""

from __future__ import annotations

from .ast import BinaryExpr, CallExpr, Expr, Identifier, Literal, Program, VarDecl
from .ir import OP_CONST, Instr


def to_text(instructions: list[Instr]) -> str:
    """Render instructions one per line, Bril text style."""
    lines = [instr_to_text(instr) for instr in instructions]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def instr_to_text(instr: Instr) -> str:
    """`dest: type = op args;`, or `op args;` when there is no destination."""
    rhs = instr.op
    if instr.op == OP_CONST and instr.value is not None:
        rhs += " " + str(instr.value)
    if instr.args:
        rhs += " " + " ".join(instr.args)
    if instr.dest is None:
        return rhs + ";"
    lhs = instr.dest
    if instr.type is not None:
        lhs += ": " + instr.type
    return lhs + " = " + rhs + ";"


def to_source(program: Program) -> str:
    """Render a Program back into source text, one statement per line."""
    return _Emitter().emit_program(program)


class _Emitter:
    # Expression precedence (higher binds tighter)
    _PREC_SUM: int = 1
    _PREC_PRODUCT: int = 2
    _PREC_PRIMARY: int = 3

    _BIN_PREC: dict[str, int] = {
        "+": _PREC_SUM,
        "-": _PREC_SUM,
        "*": _PREC_PRODUCT,
        "/": _PREC_PRODUCT,
    }

    def __init__(self) -> None:
        self._lines: list[str] = []

    def emit_program(self, program: Program) -> str:
        self._lines = []
        for stmt in program.body:
            if isinstance(stmt, VarDecl):
                self._lines.append(
                    stmt.keyword + " " + stmt.name + " = " + self._expr(stmt.value) + ";"
                )
            else:
                self._lines.append(self._expr(stmt) + ";")
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"

    def _prec(self, expr: Expr) -> int:
        if isinstance(expr, BinaryExpr):
            return self._BIN_PREC[expr.op]
        return self._PREC_PRIMARY

    def _expr(self, expr: Expr) -> str:
        if isinstance(expr, Literal):
            return str(expr.value)
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, CallExpr):
            return expr.callee + "(" + ", ".join(self._expr(a) for a in expr.args) + ")"
        if isinstance(expr, BinaryExpr):
            # Follow the left spine while it needs no parens so long sums
            # and products render without recursing per operator.
            chain: list[BinaryExpr] = [expr]
            while isinstance(chain[-1].left, BinaryExpr) and (
                self._prec(chain[-1].left) >= self._BIN_PREC[chain[-1].op]
            ):
                chain.append(chain[-1].left)
            inner = chain[-1]
            text = self._wrap(inner.left, self._prec(inner.left) < self._BIN_PREC[inner.op])
            for node in reversed(chain):
                # Left-associative: the right operand needs parens at equal precedence.
                right = self._wrap(node.right, self._prec(node.right) <= self._BIN_PREC[node.op])
                text = text + " " + node.op + " " + right
            return text
        raise TypeError("unexpected node: " + type(expr).__name__)

    def _wrap(self, expr: Expr, parens: bool) -> str:
        text = self._expr(expr)
        if parens:
            return "(" + text + ")"
        return text
