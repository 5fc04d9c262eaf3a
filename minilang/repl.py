"""Line-oriented read-eval-print loop.

In language mode, lines are collected until a blank line and then parsed and
evaluated as one program, sharing one interpreter across the whole session.
In calculator mode every line is a separate arithmetic expression.
"""

import argparse
import logging
import sys
from typing import Iterable, Iterator, Optional, TextIO

from minilang.errors import LangRuntimeError
from minilang.parser import ParserError, parse
from minilang.runtime import Interpreter, calculate, evaluate
from minilang.value import Null

logger = logging.getLogger(__name__)


def repl(lines: Iterable[str], output: TextIO, calculator: bool = False) -> None:
    if calculator:
        calculator_repl(lines, output)
    else:
        language_repl(lines, output)


def calculator_repl(lines: Iterable[str], output: TextIO) -> None:
    output.write("Enter a mathematical expression or press Enter to quit:\n")
    for line in lines:
        code = line.rstrip("\n")
        if not code.strip():
            break
        try:
            result = calculate(code)
        except ParserError as e:
            output.write(f"Invalid input: {e}\n")
            continue
        except LangRuntimeError as e:
            output.write(f"{e}\n")
            continue
        output.write(f"{code} = {result}\n")


def language_repl(lines: Iterable[str], output: TextIO) -> None:
    interpreter = Interpreter(output=output)
    output.write("an empty line runs the input, ^D quits:\n")
    line_iter = iter(lines)
    eof = False
    while not eof:
        buffer = ""
        for line in line_iter:
            if not line.strip():
                break
            buffer += line.rstrip("\n") + "\n"
        else:
            eof = True
        if not buffer:
            continue

        try:
            ast = parse(buffer)
        except ParserError as e:
            output.write(f"Invalid input: {e}\n")
            continue

        try:
            result = evaluate(ast, interpreter)
        except LangRuntimeError as e:
            logger.debug("Evaluation aborted", exc_info=True)
            output.write(f"{e}\n")
            continue

        if result != Null:
            output.write(f"{result}\n")


def _stdin_lines(prompt: str = ">>> ") -> Iterator[str]:
    while True:
        try:
            yield input(prompt)
        except EOFError:
            print()
            return


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="minilang", description="Interactive interpreter")
    parser.add_argument("--calculator", action="store_true", help="arithmetic expressions only, one per line")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default: %(default)s)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    repl(_stdin_lines(), sys.stdout, calculator=args.calculator)
