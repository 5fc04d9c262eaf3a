import math

import pytest

from minilang.ast_nodes import BinaryOperation, BinaryOperator, Expression, FloatLiteral, IntLiteral, Variable
from minilang.errors import LangRuntimeError, RecursionDepthError
from minilang.parser import ParserError, parse_arithmetic
from minilang.runtime import CalculatorInterpreter, calculate
from minilang.value import Float

PLUS = BinaryOperator.PLUS
MINUS = BinaryOperator.MINUS
TIMES = BinaryOperator.TIMES
DIVIDE = BinaryOperator.DIVIDE


@pytest.mark.parametrize(
    "code, expected_ast",
    [
        pytest.param("1", IntLiteral(1)),
        pytest.param("3.5", FloatLiteral(3.5)),
        pytest.param("-1", IntLiteral(-1)),
        pytest.param("-2.5", FloatLiteral(-2.5)),
        pytest.param(
            "1 + 2 - 3 + 4",
            BinaryOperation(
                BinaryOperation(BinaryOperation(IntLiteral(1), PLUS, IntLiteral(2)), MINUS, IntLiteral(3)),
                PLUS,
                IntLiteral(4),
            ),
        ),
        pytest.param(
            "1 * 2 / 3 * 4",
            BinaryOperation(
                BinaryOperation(BinaryOperation(IntLiteral(1), TIMES, IntLiteral(2)), DIVIDE, IntLiteral(3)),
                TIMES,
                IntLiteral(4),
            ),
        ),
        pytest.param(
            "1 * (2 + 3) / 4",
            BinaryOperation(
                BinaryOperation(IntLiteral(1), TIMES, BinaryOperation(IntLiteral(2), PLUS, IntLiteral(3))),
                DIVIDE,
                IntLiteral(4),
            ),
        ),
        pytest.param(
            "5 * (((1 + 3) * -2) + -1)",
            BinaryOperation(
                IntLiteral(5),
                TIMES,
                BinaryOperation(
                    BinaryOperation(BinaryOperation(IntLiteral(1), PLUS, IntLiteral(3)), TIMES, IntLiteral(-2)),
                    PLUS,
                    IntLiteral(-1),
                ),
            ),
        ),
        pytest.param(
            "-(1+2)",
            BinaryOperation(IntLiteral(0), MINUS, BinaryOperation(IntLiteral(1), PLUS, IntLiteral(2))),
        ),
        pytest.param("1+2*3", BinaryOperation(IntLiteral(1), PLUS, BinaryOperation(IntLiteral(2), TIMES, IntLiteral(3)))),
        # whitespace is removed before parsing
        pytest.param("1 2", IntLiteral(12)),
        pytest.param(" 4 .\t5 ", FloatLiteral(4.5)),
    ],
)
def test_parse_arithmetic(code: str, expected_ast: Expression) -> None:
    assert parse_arithmetic(code) == expected_ast


@pytest.mark.parametrize(
    "code",
    [
        pytest.param(""),
        pytest.param("("),
        pytest.param("(1"),
        pytest.param("1 +"),
        pytest.param("1 + 2)"),
        pytest.param("3."),
        pytest.param(".5"),
        pytest.param("x + 1"),
        pytest.param("--1"),
        pytest.param("2147483648"),
        pytest.param("00000000002147483648"),
        pytest.param("1" * 5000),
        pytest.param("٣٥"),
        pytest.param("1 + ٣"),
        pytest.param("(" * 200 + "1" + ")" * 200),
    ],
)
def test_parse_arithmetic_fails(code: str) -> None:
    with pytest.raises(ParserError) as exc_info:
        parse_arithmetic(code)
    assert exc_info.value.code == code


def test_parse_arithmetic_leading_zeros() -> None:
    assert parse_arithmetic("0002147483647") == IntLiteral(2147483647)


@pytest.mark.parametrize(
    "code, error_char_idx, caret_line",
    [
        pytest.param("1 + (", 5, "     ^"),
        pytest.param("1 + x", 4, "    ^"),
        pytest.param(" 1  *  2 )", 9, "         ^"),
    ],
)
def test_parser_error_points_into_original_input(code: str, error_char_idx: int, caret_line: str) -> None:
    with pytest.raises(ParserError) as exc_info:
        parse_arithmetic(code)
    error = exc_info.value
    assert error.error_char_idx == error_char_idx
    assert str(error).splitlines() == ["[Parser error] Invalid input", code.replace("\n", " "), caret_line]


@pytest.mark.parametrize(
    "code, expected_result",
    [
        pytest.param("1", "1.0"),
        pytest.param("1 + 2 - 3 + 4", "4.0"),
        pytest.param("1 * 2 / 3 * 4", "2.6666667"),
        pytest.param("1 * (2 + 3) / 4", "1.25"),
        pytest.param("5 * (((1 + 3) * -2) + -1)", "-45.0"),
        pytest.param("1-2-3", "-4.0"),
        pytest.param("(1+2)*3", "9.0"),
        pytest.param("10 / 5 / 2 / 2", "0.5"),
        pytest.param("-(1+2)", "-3.0"),
        pytest.param("1 / 0", "Infinity"),
        pytest.param("-1 / 0", "-Infinity"),
    ],
)
def test_calculate(code: str, expected_result: str) -> None:
    result = calculate(code)
    assert isinstance(result, Float)
    assert str(result) == expected_result


def test_calculate_zero_by_zero_is_nan() -> None:
    assert math.isnan(calculate("0 / 0").v)


def test_calculator_interpreter_rejects_non_arithmetic_nodes() -> None:
    with pytest.raises(LangRuntimeError):
        CalculatorInterpreter().visit(Variable("x"))


def test_calculate_long_chain_raises_runtime_error() -> None:
    with pytest.raises(RecursionDepthError):
        calculate("+".join(["1"] * 5000))
