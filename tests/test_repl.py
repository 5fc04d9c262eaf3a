import io

import pytest

from minilang.repl import main, repl


def run_repl(lines: list[str], calculator: bool = False) -> list[str]:
    output = io.StringIO()
    repl(lines, output, calculator=calculator)
    return output.getvalue().splitlines()[1:]


def test_language_repl_runs_blocks_with_shared_state() -> None:
    assert run_repl(["a = 1;", "println(a + 1);", "", "println(a);"]) == ["2", "1"]


def test_language_repl_reports_errors_and_continues() -> None:
    lines = run_repl(["1 +", "", "b;", "", "println(3);"])
    assert lines[0] == "Invalid input: [Parser error] Invalid input"
    assert "[Runtime error] Reference to undefined variable 'b'" in lines
    assert lines[-1] == "3"


def test_language_repl_skips_empty_blocks() -> None:
    assert run_repl(["", "", "println(1);", ""]) == ["1"]


def test_calculator_repl() -> None:
    lines = run_repl(["1 + 2", "1 * (2 + 3) / 4", "(", "7", "", "8"], calculator=True)
    assert lines[0] == "1 + 2 = 3.0"
    assert lines[1] == "1 * (2 + 3) / 4 = 1.25"
    assert lines[2] == "Invalid input: [Parser error] Invalid input"
    # stops at the blank line
    assert lines[-1] == "7 = 7.0"


def test_main(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    inputs = iter(["2 * 3"])

    def fake_input(prompt: str) -> str:
        try:
            return next(inputs)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)
    main(["--calculator"])
    assert "2 * 3 = 6.0" in capsys.readouterr().out.splitlines()
