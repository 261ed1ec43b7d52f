"""tinytac CLI — compile, optimize, and run programs."""

from __future__ import annotations

import json
import sys

from .emit import to_source, to_text
from .interp import RuntimeFault, execute
from .ir import Instr
from .irgen import generate
from .optimize import optimize
from .parse import ParseError, parse
from .serialize import LoadError, load_instructions, serialize
from .tokens import LexError, tokenize

PHASES: list[str] = ["tokens", "parse", "source", "ir", "optimize"]

USAGE: str = """\
tinytac [OPTIONS] [INPUT] [-o OUTPUT]

Compile and run a tinytac program. Reads stdin when INPUT is omitted.

Options:
  --stop-at PHASE     Print a phase's result as JSON and stop:
                      tokens, parse, ir, optimize; source prints
                      the parsed program back as formatted source
  --emit-ir           Print the final IR as text instead of running it
  --no-optimize       Skip dead-code elimination
  --load-ir           INPUT is JSON IR (as printed by --stop-at ir)
  -o, --output FILE   Write output to FILE instead of stdout
  --help              Show this help message
"""


class _Options:
    def __init__(self) -> None:
        self.input_file: str | None = None
        self.output_file: str | None = None
        self.stop_at: str | None = None
        self.emit_ir: bool = False
        self.optimize: bool = True
        self.load_ir: bool = False


def _usage_error(msg: str) -> int:
    print("tinytac: " + msg, file=sys.stderr)
    return 2


def _parse_args(args: list[str]) -> tuple[_Options | None, int]:
    """Returns (options, 0), or (None, exit_code) when the run should end."""
    opts = _Options()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return None, 0
        if arg == "--stop-at":
            if i + 1 >= len(args):
                return None, _usage_error("--stop-at requires a phase")
            phase = args[i + 1]
            if phase not in PHASES:
                return None, _usage_error("unknown phase '" + phase + "'")
            opts.stop_at = phase
            i += 2
        elif arg == "-o" or arg == "--output":
            if i + 1 >= len(args):
                return None, _usage_error(arg + " requires a file")
            opts.output_file = args[i + 1]
            i += 2
        elif arg == "--emit-ir":
            opts.emit_ir = True
            i += 1
        elif arg == "--no-optimize":
            opts.optimize = False
            i += 1
        elif arg == "--load-ir":
            opts.load_ir = True
            i += 1
        elif arg.startswith("-"):
            return None, _usage_error("unknown flag '" + arg + "'")
        elif opts.input_file is None:
            opts.input_file = arg
            i += 1
        else:
            return None, _usage_error("unexpected argument '" + arg + "'")
    if opts.load_ir and opts.stop_at in ("tokens", "parse", "source"):
        return None, _usage_error("--load-ir cannot stop at '" + opts.stop_at + "'")
    return opts, 0


def read_source(input_file: str | None) -> tuple[str, int]:
    """Read source from file or stdin. Returns (source, exit_code) where exit_code 0 means OK."""
    if input_file is not None:
        try:
            with open(input_file, "rb") as f:
                raw = f.read()
        except FileNotFoundError:
            print("tinytac: " + input_file + ": No such file or directory", file=sys.stderr)
            return "", 1
        except OSError as e:
            print("tinytac: " + input_file + ": " + str(e), file=sys.stderr)
            return "", 1
    else:
        raw = sys.stdin.buffer.read()
    try:
        return raw.decode("utf-8"), 0
    except ValueError:
        print("tinytac: invalid utf-8 in input", file=sys.stderr)
        return "", 1


def write_output(output: str, output_file: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if output_file is not None:
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(output)
        except OSError:
            print("tinytac: cannot write '" + output_file + "'", file=sys.stderr)
            return 1
        return 0
    sys.stdout.write(output)
    return 0


def to_json(obj: object) -> str:
    """Serialize an artifact to pretty-printed JSON with a trailing newline."""
    return json.dumps(serialize(obj), indent=2) + "\n"


def _front_end(source: str, opts: _Options) -> tuple[int, str, list[Instr] | None]:
    """Lex, parse, and lower. Returns (exit_code, early_output, instructions)."""
    try:
        tokens = tokenize(source)
    except LexError as e:
        print("tinytac: lex error: " + str(e), file=sys.stderr)
        return 1, "", None
    if opts.stop_at == "tokens":
        return 0, to_json(tokens), None
    try:
        program = parse(tokens)
    except ParseError as e:
        print("tinytac: parse error: " + str(e), file=sys.stderr)
        return 1, "", None
    if opts.stop_at == "parse":
        return 0, to_json(program), None
    if opts.stop_at == "source":
        return 0, to_source(program), None
    instructions, symbols = generate(program)
    if opts.stop_at == "ir":
        return 0, to_json({"instructions": instructions, "symbols": symbols}), None
    return 0, "", instructions


def _load_ir(source: str, opts: _Options) -> tuple[int, str, list[Instr] | None]:
    try:
        instructions = load_instructions(json.loads(source))
    except ValueError as e:
        print("tinytac: error: invalid JSON: " + str(e), file=sys.stderr)
        return 1, "", None
    except LoadError as e:
        print("tinytac: error: " + str(e), file=sys.stderr)
        return 1, "", None
    if opts.stop_at == "ir":
        return 0, to_json({"instructions": instructions}), None
    return 0, "", instructions


def run_pipeline(source: str, opts: _Options) -> tuple[int, str]:
    """Run the pipeline as far as the options ask. Returns (exit_code, output)."""
    try:
        if opts.load_ir:
            code, output, instructions = _load_ir(source, opts)
        else:
            code, output, instructions = _front_end(source, opts)
    except RecursionError:
        print("tinytac: error: expression nested too deeply", file=sys.stderr)
        return 1, ""
    if instructions is None:
        return code, output
    if opts.optimize or opts.stop_at == "optimize":
        instructions, removed = optimize(instructions)
        if opts.stop_at == "optimize":
            return 0, to_json({"instructions": instructions, "removed": removed})
    if opts.emit_ir:
        return 0, to_text(instructions)
    try:
        lines = execute(instructions)
    except RuntimeFault as e:
        print("tinytac: runtime error: " + str(e), file=sys.stderr)
        return 1, ""
    return 0, "".join(line + "\n" for line in lines)


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    opts, code = _parse_args(args)
    if opts is None:
        return code
    source, code = read_source(opts.input_file)
    if code != 0:
        return code
    code, output = run_pipeline(source, opts)
    if code != 0:
        return code
    return write_output(output, opts.output_file)


if __name__ == "__main__":
    sys.exit(main())
