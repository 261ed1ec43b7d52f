"""tinytac compiler pipeline — public API."""

from __future__ import annotations

from .interp import RuntimeFault as RuntimeFault, execute
from .ir import Compilation, Instr as Instr, SymbolInfo as SymbolInfo
from .irgen import generate
from .optimize import optimize
from .parse import ParseError as ParseError, parse
from .tokens import LexError as LexError, Token as Token, tokenize


def compile_source(source: str) -> Compilation:
    """Tokenize, parse, and lower source text. Raises LexError or ParseError."""
    tokens = tokenize(source)
    program = parse(tokens)
    instructions, symbols = generate(program)
    return Compilation(tokens, program, instructions, symbols)


def run_source(source: str, *, optimized: bool = True) -> list[str]:
    """Compile and execute source text. Returns the printed lines."""
    instructions = compile_source(source).instructions
    if optimized:
        instructions, _ = optimize(instructions)
    return execute(instructions)
