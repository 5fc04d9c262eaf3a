import logging
import re
from dataclasses import dataclass

from minilang.ast_nodes import (
    Assignment,
    BinaryOperation,
    BinaryOperator,
    Call,
    Expression,
    FloatLiteral,
    FunctionDef,
    IntLiteral,
    Node,
    Return,
    Statements,
    Variable,
)
from minilang.combinators import GrammarParser, NoMatch, memo, memo_left
from minilang.utils import INT_MAX, to_f32

logger = logging.getLogger(__name__)


@dataclass
class ParserError(Exception):
    errmsg: str
    code: str
    error_char_idx: int

    def __str__(self) -> str:
        print_start_idx = max(0, self.error_char_idx - 10)
        print_ellipsis_pre = print_start_idx > 0
        print_end_idx = min(len(self.code), self.error_char_idx + 10)
        print_ellipsis_post = print_end_idx < len(self.code)
        snippet = self.code[print_start_idx:print_end_idx].replace("\n", " ")
        return "\n".join(
            [
                f"[Parser error] {self.errmsg}",
                ("..." if print_ellipsis_pre else "") + snippet + ("..." if print_ellipsis_post else ""),
                " " * (self.error_char_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
            ]
        )


OPERATORS = {
    "+": BinaryOperator.PLUS,
    "-": BinaryOperator.MINUS,
    "*": BinaryOperator.TIMES,
    "/": BinaryOperator.DIVIDE,
}


def negate(operand: Expression) -> Expression:
    if isinstance(operand, IntLiteral):
        return IntLiteral(-operand.value)
    elif isinstance(operand, FloatLiteral):
        return FloatLiteral(-operand.value)
    else:
        return BinaryOperation(IntLiteral(0), BinaryOperator.MINUS, operand)


class NumberGrammar(GrammarParser):
    @memo
    def int_literal(self) -> IntLiteral:
        digits = self.regex(r"[0-9]+")
        # length first: int() rejects digit strings above its conversion limit
        if len(digits.lstrip("0")) > len(str(INT_MAX)) or int(digits) > INT_MAX:
            raise self._fail()
        return IntLiteral(int(digits))

    @memo
    def float_literal(self) -> FloatLiteral:
        return FloatLiteral(to_f32(float(self.regex(r"[0-9]+\.[0-9]+"))))

    @memo
    def number(self) -> Expression:
        # float first, so that "3.5" is not read as 3 followed by ".5"
        return self.first(self.float_literal, self.int_literal)


class CalculatorParser(NumberGrammar):
    """Arithmetic only; whitespace is stripped from the input up front"""

    def __init__(self, code: str) -> None:
        super().__init__(re.sub(r"\s+", "", code))
        self.source = code

    def source_position(self, pos: int) -> int:
        kept = [m.start() for m in re.finditer(r"\S", self.source)]
        if pos < len(kept):
            return kept[pos]
        # past the last kept character
        return kept[-1] + 1 if kept else 0

    def parenthesized(self) -> Expression:
        self.char("(")
        expr = self.expression()
        self.char(")")
        return expr

    @memo
    def atom(self) -> Expression:
        return self.first(self.parenthesized, self.number)

    def negation(self) -> Expression:
        self.char("-")
        return negate(self.atom())

    @memo
    def factor(self) -> Expression:
        return self.first(self.negation, self.atom)

    def binary_operation(self, left_rule, operators: str, right_rule) -> BinaryOperation:
        left = left_rule()
        op = OPERATORS[self.regex(f"[{re.escape(operators)}]")]
        right = right_rule()
        return BinaryOperation(left, op, right)

    @memo_left
    def term(self) -> Expression:
        return self.first(lambda: self.binary_operation(self.term, "*/", self.factor), self.factor)

    @memo_left
    def expression(self) -> Expression:
        return self.first(lambda: self.binary_operation(self.expression, "+-", self.term), self.term)

    def root(self) -> Expression:
        expr = self.expression()
        self.eoi()
        return expr


class LanguageParser(NumberGrammar):
    """Variables, assignments, calls and functions. Whitespace is only allowed where the rules ask for it"""

    @memo
    def variable(self) -> Variable:
        return Variable(self.regex(r"[a-zA-Z_][a-zA-Z0-9_]*"))

    def parenthesized(self) -> Expression:
        self.char("(")
        self.whitespace(optional=True)
        expr = self.expression()
        self.whitespace(optional=True)
        self.char(")")
        return expr

    @memo
    def atom(self) -> Expression:
        return self.first(self.parenthesized, self.variable, self.number)

    def call(self) -> Call:
        callee = self.primary()
        self.char("(")
        self.whitespace(optional=True)
        args = self.optional(self.arguments) or []
        self.whitespace(optional=True)
        self.char(")")
        return Call(callee, tuple(args))

    @memo_left
    def primary(self) -> Expression:
        return self.first(self.call, self.atom)

    def negation(self) -> Expression:
        self.char("-")
        self.space(optional=True)
        return negate(self.primary())

    @memo
    def factor(self) -> Expression:
        return self.first(self.negation, self.primary)

    def binary_operation(self, left_rule, operators: str, right_rule) -> BinaryOperation:
        left = left_rule()
        self.whitespace(optional=True)
        op = OPERATORS[self.regex(f"[{re.escape(operators)}]")]
        self.whitespace(optional=True)
        right = right_rule()
        return BinaryOperation(left, op, right)

    @memo_left
    def term(self) -> Expression:
        return self.first(lambda: self.binary_operation(self.term, "*/", self.factor), self.factor)

    @memo_left
    def expression(self) -> Expression:
        return self.first(lambda: self.binary_operation(self.expression, "+-", self.term), self.term)

    def _comma_separated(self, item_rule) -> list:
        items = [item_rule()]

        def extra():
            self.whitespace(optional=True)
            self.char(",")
            self.whitespace(optional=True)
            return item_rule()

        items.extend(self.zero_or_more(extra))
        return items

    @memo
    def arguments(self) -> list[Expression]:
        return self._comma_separated(self.expression)

    @memo
    def parameters(self) -> list[Variable]:
        return self._comma_separated(self.variable)

    @memo
    def assignment(self) -> Assignment:
        variable = self.variable()
        self.space(optional=True)
        self.char("=")
        self.space(optional=True)
        return Assignment(variable, self.expression())

    @memo
    def function_def(self) -> FunctionDef:
        self.string("function")
        self.space()
        name = self.variable()
        self.space(optional=True)
        self.char("(")
        self.whitespace(optional=True)
        params = self.optional(self.parameters) or []
        self.whitespace(optional=True)
        self.char(")")
        self.whitespace(optional=True)
        self.char("{")
        self.whitespace(optional=True)
        body = self.function_statements()
        self.whitespace(optional=True)
        self.char("}")
        return FunctionDef(name.name, tuple(p.name for p in params), body)

    @memo
    def statement(self) -> Node:
        return self.first(self.assignment, self.function_def, self.expression)

    def return_statement(self) -> Return:
        self.string("return")
        self.whitespace()
        return Return(self.expression())

    @memo
    def function_statement(self) -> Node:
        return self.first(self.return_statement, self.statement)

    def _terminated(self, statement_rule) -> Statements:
        def terminated_statement() -> Node:
            self.whitespace(optional=True)
            stmt = statement_rule()
            self.whitespace(optional=True)
            self.char(";")
            self.whitespace(optional=True)
            return stmt

        return Statements(tuple(self.zero_or_more(terminated_statement)))

    @memo
    def statements(self) -> Statements:
        return self._terminated(self.statement)

    @memo
    def function_statements(self) -> Statements:
        return self._terminated(self.function_statement)

    def root(self) -> Statements:
        stmts = self.statements()
        self.eoi()
        return stmts


def _run(parser: GrammarParser):
    try:
        return parser.try_parse()
    except NoMatch:
        logger.debug("No match for %r, furthest position reached: %d", parser.code, parser.furthest)
        error_char_idx = parser.source_position(parser.furthest)
        raise ParserError("Invalid input", code=parser.source, error_char_idx=error_char_idx) from None
    except RecursionError:
        logger.debug("Recursion limit hit while parsing %r at position %d", parser.code, parser.pos)
        error_char_idx = parser.source_position(parser.pos)
        raise ParserError("Input is nested too deeply", code=parser.source, error_char_idx=error_char_idx) from None


def parse(code: str) -> Statements:
    return _run(LanguageParser(code))


def parse_arithmetic(code: str) -> Expression:
    return _run(CalculatorParser(code))
