import enum
from dataclasses import dataclass
from typing import Union

from minilang.utils import PrintableEnum


class BinaryOperator(PrintableEnum):
    PLUS = enum.auto()
    MINUS = enum.auto()
    TIMES = enum.auto()
    DIVIDE = enum.auto()


@dataclass(frozen=True)
class IntLiteral:
    value: int


@dataclass(frozen=True)
class FloatLiteral:
    value: float


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class BinaryOperation:
    left: "Expression"
    operator: BinaryOperator
    right: "Expression"


@dataclass(frozen=True)
class Call:
    callee: "Expression"
    args: tuple["Expression", ...] = ()


@dataclass(frozen=True)
class Assignment:
    variable: Variable
    value: "Expression"


@dataclass(frozen=True)
class Return:
    value: "Expression"


@dataclass(frozen=True)
class Statements:
    statements: tuple["Node", ...] = ()


@dataclass(frozen=True)
class FunctionDef:
    name: str
    params: tuple[str, ...]
    body: Statements


Expression = Union[IntLiteral, FloatLiteral, Variable, BinaryOperation, Call]
Node = Union[Expression, Assignment, Return, Statements, FunctionDef]
