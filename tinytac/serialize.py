"""Serialization of tinytac artifacts to JSON-compatible dicts, and back for IR."""

from __future__ import annotations

from .ast import BinaryExpr, CallExpr, Identifier, Literal, Program, VarDecl
from .ir import OP_CONST, OPCODES, Instr, SymbolInfo
from .tokens import Token


class LoadError(Exception):
    """Serialized IR that does not describe a valid instruction list."""

    def __init__(self, msg: str, index: int | None = None):
        self.msg: str = msg
        self.index: int | None = index
        if index is None:
            super().__init__(msg)
        else:
            super().__init__(msg + " at instruction " + str(index))


def serialize(obj: object) -> object:
    """Recursively serialize an object to a JSON-compatible structure."""
    if obj is None:
        return None
    if isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, (list, tuple)):
        return [serialize(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): serialize(v) for k, v in obj.items()}
    if isinstance(obj, Token):
        return {"type": obj.kind, "value": obj.lexeme, "line": obj.line}
    if isinstance(obj, Instr):
        return _serialize_instr(obj)
    if isinstance(obj, SymbolInfo):
        return {"name": obj.name, "type": obj.type, "kind": obj.kind, "used": obj.used}
    return _serialize_node(obj)


def _serialize_instr(instr: Instr) -> dict[str, object]:
    """Bril-style object: absent fields are omitted."""
    d: dict[str, object] = {"op": instr.op}
    if instr.dest is not None:
        d["dest"] = instr.dest
    if instr.args is not None:
        d["args"] = list(instr.args)
    if instr.value is not None:
        d["value"] = instr.value
    if instr.type is not None:
        d["type"] = instr.type
    return d


def _serialize_node(obj: object) -> dict[str, object]:
    """Serialize AST nodes via isinstance dispatch."""
    if isinstance(obj, Program):
        return {"type": "Program", "body": serialize(obj.body)}
    if isinstance(obj, VarDecl):
        return {
            "type": "VarDecl",
            "keyword": obj.keyword,
            "name": obj.name,
            "value": serialize(obj.value),
            "line": obj.line,
        }
    if isinstance(obj, BinaryExpr):
        return {
            "type": "BinaryExpr",
            "operator": obj.op,
            "left": serialize(obj.left),
            "right": serialize(obj.right),
            "line": obj.line,
        }
    if isinstance(obj, CallExpr):
        return {
            "type": "CallExpr",
            "callee": obj.callee,
            "args": serialize(obj.args),
            "line": obj.line,
        }
    if isinstance(obj, Literal):
        return {"type": "Literal", "value": obj.value, "line": obj.line}
    if isinstance(obj, Identifier):
        return {"type": "Identifier", "name": obj.name, "line": obj.line}
    raise TypeError("cannot serialize " + type(obj).__name__)


# --- Loading ---


def _expect_type(value: object, typ: type, what: str, index: int) -> None:
    if not isinstance(value, typ) or isinstance(value, bool):
        raise LoadError(what + " must be " + typ.__name__, index)


def load_instr(data: object, index: int = 0) -> Instr:
    """Rebuild one instruction from its serialized form."""
    if not isinstance(data, dict):
        raise LoadError("instruction must be an object", index)
    op = data.get("op")
    if op not in OPCODES:
        raise LoadError("unknown opcode " + repr(op), index)
    instr = Instr(str(op))
    if "dest" in data:
        _expect_type(data["dest"], str, "dest", index)
        instr.dest = data["dest"]
    if "args" in data:
        args = data["args"]
        if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
            raise LoadError("args must be a list of names", index)
        instr.args = list(args)
    if "value" in data:
        _expect_type(data["value"], int, "value", index)
        instr.value = data["value"]
    if "type" in data:
        _expect_type(data["type"], str, "type", index)
        instr.type = data["type"]
    if instr.op == OP_CONST and instr.value is None:
        raise LoadError("const needs a value", index)
    return instr


def load_instructions(data: object) -> list[Instr]:
    """Rebuild an instruction list from a list, or a dict with "instructions"."""
    if isinstance(data, dict):
        if "instructions" not in data:
            raise LoadError("missing 'instructions'")
        data = data["instructions"]
    if not isinstance(data, list):
        raise LoadError("instructions must be a list")
    return [load_instr(item, i) for i, item in enumerate(data)]
