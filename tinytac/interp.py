"""tinytac interpreter — executes IR instructions in order.

All names live in one flat environment. Reading a name that was never bound
is not an error: arithmetic treats it as 0, `id` leaves its destination
unbound, and `print` renders it as UNBOUND. The only fault is division by
zero.
"""

from __future__ import annotations

from .ir import OP_ADD, OP_CONST, OP_DIV, OP_ID, OP_MUL, OP_PRINT, OP_SUB, Instr


UNBOUND = "undefined"
NO_OUTPUT = "Program executed successfully (no output)."


class RuntimeFault(Exception):
    """Fatal error during execution."""

    def __init__(self, msg: str, instr: Instr | None = None):
        self.msg: str = msg
        self.instr: Instr | None = instr
        if instr is not None and instr.dest is not None:
            super().__init__(msg + " in '" + instr.dest + "'")
        else:
            super().__init__(msg)


def _floor_div(a: int, b: int, instr: Instr) -> int:
    if b == 0:
        raise RuntimeFault("division by zero", instr)
    return a // b


class Interpreter:
    """Execution state: the name environment and printed lines."""

    def __init__(self) -> None:
        self.env: dict[str, int] = {}
        self.output: list[str] = []

    def run(self, instructions: list[Instr]) -> list[str]:
        for instr in instructions:
            self.step(instr)
        if not self.output:
            self.output.append(NO_OUTPUT)
        return self.output

    def step(self, instr: Instr) -> None:
        op = instr.op
        if op == OP_CONST:
            if instr.dest is not None and instr.value is not None:
                self.env[instr.dest] = instr.value
        elif op == OP_ID:
            if instr.dest is not None and instr.args:
                src = instr.args[0]
                if src in self.env:
                    self.env[instr.dest] = self.env[src]
        elif op in (OP_ADD, OP_SUB, OP_MUL, OP_DIV):
            if instr.dest is not None and instr.args and len(instr.args) == 2:
                a = self.env.get(instr.args[0], 0)
                b = self.env.get(instr.args[1], 0)
                self.env[instr.dest] = self._arith(op, a, b, instr)
        elif op == OP_PRINT:
            if instr.args is not None:
                self.output.append(" ".join(self._show(arg) for arg in instr.args))

    def _arith(self, op: str, a: int, b: int, instr: Instr) -> int:
        if op == OP_ADD:
            return a + b
        if op == OP_SUB:
            return a - b
        if op == OP_MUL:
            return a * b
        return _floor_div(a, b, instr)

    def _show(self, name: str) -> str:
        if name in self.env:
            return str(self.env[name])
        return UNBOUND


def execute(instructions: list[Instr]) -> list[str]:
    """Run instructions against a fresh environment. Returns printed lines."""
    return Interpreter().run(instructions)
