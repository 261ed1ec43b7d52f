"""Dead-code elimination for tinytac IR.

An instruction is live if it is a `print` or if some instruction reads its
destination. Dropping a dead instruction can leave its own operands unread,
so the pass repeats until a full sweep removes nothing.
"""

from __future__ import annotations

from .ir import OP_PRINT, Instr


def _read_names(instructions: list[Instr]) -> set[str]:
    """Every name appearing as an argument anywhere in the sequence."""
    reads: set[str] = set()
    for instr in instructions:
        if instr.args:
            reads.update(instr.args)
    return reads


def _is_live(instr: Instr, reads: set[str]) -> bool:
    if instr.op == OP_PRINT:
        return True
    if instr.dest is None:
        return True
    return instr.dest in reads


def _sweep(instructions: list[Instr]) -> list[Instr]:
    reads = _read_names(instructions)
    return [instr for instr in instructions if _is_live(instr, reads)]


def optimize(instructions: list[Instr]) -> tuple[list[Instr], int]:
    """Remove dead instructions. Returns (surviving instructions, removed count)."""
    current = list(instructions)
    removed = 0
    while True:
        kept = _sweep(current)
        dropped = len(current) - len(kept)
        if dropped == 0:
            return current, removed
        removed += dropped
        current = kept
