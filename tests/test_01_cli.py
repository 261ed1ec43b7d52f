"""CLI tests for the tinytac entry point.

Test cases live in cli/*.tests files. Format:

    === test name
    args: --stop-at ir
    source code here
    (stdin for the compiler)
    ---
    exit: 0
    stdout: 30
    stderr-contains: parse error
    ---

Special directives in the input section:
    args:           CLI arguments (first line, required)

Assertion directives in the expected section:
    exit:             exact exit code
    stdout:           one exact stdout line; repeat for more lines
    stdout-contains:  stdout must contain substring
    stdout-empty:     stdout must be empty
    stderr:           exact stderr content (trailing newline added)
    stderr-contains:  stderr must contain substring
    stderr-empty:     stderr must be empty
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest

CLI_DIR = Path(__file__).parent / "cli"
ROOT_DIR = Path(__file__).parent.parent


def parse_cli_test_file(path: Path) -> list[tuple[str, dict]]:
    """Parse a .tests file into (name, spec) tuples.

    Each spec dict has keys: args, stdin, assertions.
    """
    lines = path.read_text().split("\n")
    result: list[tuple[str, dict]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            spec = _parse_spec(input_lines, expected_lines)
            result.append((test_name, spec))
        else:
            i += 1
    return result


def _parse_spec(input_lines: list[str], expected_lines: list[str]) -> dict:
    """Parse input + expected lines into a test spec dict."""
    spec: dict = {"args": [], "stdin": "", "assertions": []}
    body_start = 0
    if input_lines and input_lines[0].startswith("args:"):
        args_str = input_lines[0][5:].strip()
        spec["args"] = args_str.split() if args_str else []
        body_start = 1
    spec["stdin"] = "\n".join(input_lines[body_start:])

    stdout_lines: list[str] = []
    for line in expected_lines:
        line = line.strip()
        if not line:
            continue
        if line.startswith("exit:"):
            spec["assertions"].append(("exit", int(line[5:].strip())))
        elif line.startswith("stdout:"):
            stdout_lines.append(line[7:].strip())
        elif line.startswith("stdout-contains:"):
            spec["assertions"].append(("stdout-contains", line[16:].strip()))
        elif line.startswith("stdout-empty:"):
            spec["assertions"].append(("stdout-empty", None))
        elif line.startswith("stderr:"):
            spec["assertions"].append(("stderr", line[7:].strip()))
        elif line.startswith("stderr-contains:"):
            spec["assertions"].append(("stderr-contains", line[16:].strip()))
        elif line.startswith("stderr-empty:"):
            spec["assertions"].append(("stderr-empty", None))
    if stdout_lines:
        spec["assertions"].append(("stdout", stdout_lines))
    return spec


def discover_cli_tests() -> list[tuple[str, dict]]:
    """Find all CLI tests across .tests files."""
    results = []
    for test_file in sorted(CLI_DIR.glob("*.tests")):
        for name, spec in parse_cli_test_file(test_file):
            results.append((f"{test_file.stem}/{name}", spec))
    return results


def run_cli(args: list[str], stdin: str = "", cwd: Path = ROOT_DIR) -> subprocess.CompletedProcess[bytes]:
    """Run the tinytac CLI as a subprocess."""
    return subprocess.run(
        [sys.executable, "-m", "tinytac", *args],
        input=stdin.encode(),
        capture_output=True,
        cwd=cwd,
    )


def check_assertions(
    result: subprocess.CompletedProcess[bytes], assertions: list[tuple]
) -> None:
    """Check all assertions against a CLI result."""
    for kind, value in assertions:
        if kind == "exit":
            assert result.returncode == value, (
                f"expected exit {value}, got {result.returncode}"
                f"\nstderr: {result.stderr.decode(errors='replace')}"
            )
        elif kind == "stdout":
            actual = result.stdout.decode(errors="replace").split("\n")
            if actual and actual[-1] == "":
                actual.pop()
            assert actual == value, f"expected stdout {value!r}, got {actual!r}"
        elif kind == "stdout-contains":
            actual = result.stdout.decode(errors="replace")
            assert value in actual, (
                f"expected stdout to contain {value!r}, got {actual!r}"
            )
        elif kind == "stdout-empty":
            assert result.stdout == b"", (
                f"expected empty stdout, got {result.stdout[:200]!r}"
            )
        elif kind == "stderr":
            actual = result.stderr.decode(errors="replace").rstrip("\n")
            assert actual == value, f"expected stderr {value!r}, got {actual!r}"
        elif kind == "stderr-contains":
            actual = result.stderr.decode(errors="replace")
            assert value in actual, (
                f"expected stderr to contain {value!r}, got {actual!r}"
            )
        elif kind == "stderr-empty":
            assert result.stderr == b"", f"expected empty stderr, got {result.stderr!r}"


def pytest_generate_tests(metafunc):
    """Parametrize test_cli over all .tests files."""
    if "cli_spec" in metafunc.fixturenames:
        tests = discover_cli_tests()
        params = [pytest.param(spec, id=test_id) for test_id, spec in tests]
        metafunc.parametrize("cli_spec", params)


def test_cli(cli_spec: dict) -> None:
    """Run a single CLI test case from .tests file."""
    result = run_cli(cli_spec["args"], cli_spec["stdin"])
    check_assertions(result, cli_spec["assertions"])


# ---------------------------------------------------------------------------
# File arguments
# ---------------------------------------------------------------------------


def test_input_and_output_files(tmp_path: Path):
    src = tmp_path / "prog.tac"
    out = tmp_path / "out.txt"
    src.write_text("let a = 6; print(a * 7);\n")
    result = run_cli([str(src), "-o", str(out)])
    assert result.returncode == 0, result.stderr
    assert result.stdout == b""
    assert out.read_text(encoding="utf-8") == "42\n"


def test_missing_input_file(tmp_path: Path):
    missing = tmp_path / "nope.tac"
    result = run_cli([str(missing)])
    assert result.returncode == 1
    assert b"No such file or directory" in result.stderr


def test_ir_round_trip_through_files(tmp_path: Path):
    src = tmp_path / "prog.tac"
    ir_file = tmp_path / "prog.json"
    src.write_text("let x = 10; let y = 20; let z = 30; let res = x + y; print(res);")
    result = run_cli([str(src), "--stop-at", "ir", "-o", str(ir_file)])
    assert result.returncode == 0, result.stderr
    data = json.loads(ir_file.read_text())
    assert [i["op"] for i in data["instructions"]] == ["const", "const", "const", "add", "print"]
    assert [s["name"] for s in data["symbols"]] == ["x", "y", "z", "res"]
    result = run_cli(["--load-ir", str(ir_file)])
    assert result.returncode == 0, result.stderr
    assert result.stdout == b"30\n"
    result = run_cli(["--load-ir", "--stop-at", "optimize", str(ir_file)])
    assert json.loads(result.stdout)["removed"] == 1


def test_invalid_utf8_input(tmp_path: Path):
    src = tmp_path / "bad.tac"
    src.write_bytes(b"print(1)\xff")
    result = run_cli([str(src)])
    assert result.returncode == 1
    assert b"invalid utf-8" in result.stderr


# ---------------------------------------------------------------------------
# Deep and long expressions
# ---------------------------------------------------------------------------


def test_long_sum_prints_total():
    result = run_cli([], "print(" + " + ".join(["1"] * 1000) + ");\n")
    assert result.returncode == 0, result.stderr
    assert result.stdout == b"1000\n"


def test_deep_parentheses_report_error():
    result = run_cli([], "print(" + "(" * 2000 + "1" + ")" * 2000 + ");\n")
    assert result.returncode == 1
    assert result.stdout == b""
    assert result.stderr == b"tinytac: error: expression nested too deeply\n"
