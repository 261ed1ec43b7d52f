"""tinytac AST — parse-time node definitions."""

from __future__ import annotations

from dataclasses import dataclass, field


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class Node:
    """Base for all nodes. line is the line of the first token."""

    line: int


@dataclass
class Expr(Node):
    """Base for all expressions."""


@dataclass
class Literal(Expr):
    """Integer literal."""

    value: int


@dataclass
class Identifier(Expr):
    """Reference to a name."""

    name: str


@dataclass
class BinaryExpr(Expr):
    """left op right, op in + - * /."""

    op: str
    left: Expr
    right: Expr


@dataclass
class CallExpr(Expr):
    """callee(args)."""

    callee: str
    args: list[Expr] = field(default_factory=list)


# ============================================================
# STATEMENTS
# ============================================================


@dataclass
class VarDecl(Node):
    """let name = value, or const name = value."""

    keyword: str
    name: str
    value: Expr


Stmt = VarDecl | Expr


@dataclass
class Program:
    """Top-level program — ordered statement list."""

    body: list[Stmt] = field(default_factory=list)
