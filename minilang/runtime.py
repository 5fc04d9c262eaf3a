import contextlib
import logging
import math
import sys
from typing import Iterator, Optional, TextIO, Type

from minilang.ast_nodes import (
    Assignment,
    BinaryOperation,
    BinaryOperator,
    Call,
    FloatLiteral,
    FunctionDef,
    IntLiteral,
    Node,
    Return,
    Statements,
    Variable,
)
from minilang.builtins import BUILTIN_FUNCS
from minilang.errors import (
    IntegerDivisionByZeroError,
    LangRuntimeError,
    OperandTypeError,
    RecursionDepthError,
    UndefinedVariableError,
)
from minilang.parser import parse_arithmetic
from minilang.utils import to_f32, to_i32
from minilang.value import BinaryOperationImpl, Float, Int, Null, Number, UserFunc, Value

logger = logging.getLogger(__name__)


class Scope:
    """Name to value bindings. A child scope starts as a copy of its parent, not a view of it"""

    def __init__(self, parent: Optional["Scope"] = None) -> None:
        self.values: dict[str, Value] = dict(parent.values) if parent is not None else {}

    def __getitem__(self, name: str) -> Value:
        try:
            return self.values[name]
        except KeyError:
            raise UndefinedVariableError(name) from None

    def __setitem__(self, name: str, value: Value) -> None:
        self.values[name] = value

    def __contains__(self, name: str) -> bool:
        return name in self.values


class Interpreter:
    def __init__(self, output: Optional[TextIO] = None) -> None:
        self.output = output if output is not None else sys.stdout
        root = Scope()
        root.values.update(BUILTIN_FUNCS)
        self.scope_stack = [root]

    @property
    def current_scope(self) -> Scope:
        return self.scope_stack[-1]

    @contextlib.contextmanager
    def scoped(self) -> Iterator[Scope]:
        scope = Scope(self.current_scope)
        self.scope_stack.append(scope)
        logger.debug("Pushed scope, depth %d", len(self.scope_stack))
        try:
            yield scope
        finally:
            self.scope_stack.pop()
            logger.debug("Popped scope, depth %d", len(self.scope_stack))

    def visit(self, node: Node) -> Value:
        if isinstance(node, IntLiteral):
            return Int(node.value)
        elif isinstance(node, FloatLiteral):
            return Float(node.value)
        elif isinstance(node, Variable):
            return self.current_scope[node.name]
        elif isinstance(node, BinaryOperation):
            left = self.visit(node.left)
            right = self.visit(node.right)
            return eval_binary_operator(node.operator, left, right)
        elif isinstance(node, Assignment):
            self.current_scope[node.variable.name] = self.visit(node.value)
            return Null
        elif isinstance(node, FunctionDef):
            self.current_scope[node.name] = UserFunc(params=node.params, body=node.body)
            return Null
        elif isinstance(node, Call):
            callee = self.visit(node.callee)
            args = [self.visit(arg) for arg in node.args]
            logger.debug("Calling %s with %d argument(s)", callee, len(args))
            return callee.invoke(self, args)
        elif isinstance(node, Statements):
            for stmt in node.statements:
                res = self.visit(stmt)
                if isinstance(stmt, Return):
                    return res
            return Null
        elif isinstance(node, Return):
            return self.visit(node.value)
        else:
            raise LangRuntimeError(f"Unexpected AST node: {node}")


def evaluate(ast: Node, interpreter: Optional[Interpreter] = None) -> Value:
    if interpreter is None:
        interpreter = Interpreter()
    try:
        return interpreter.visit(ast)
    except RecursionError:
        logger.debug("Recursion limit hit, scope depth %d", len(interpreter.scope_stack))
        raise RecursionDepthError() from None


class CalculatorInterpreter:
    """Arithmetic-only evaluation where every number is a Float"""

    def visit(self, node: Node) -> Float:
        if isinstance(node, IntLiteral):
            return Float(to_f32(float(node.value)))
        elif isinstance(node, FloatLiteral):
            return Float(node.value)
        elif isinstance(node, BinaryOperation):
            left = self.visit(node.left)
            right = self.visit(node.right)
            return eval_binary_operator(node.operator, left, right)  # type: ignore
        else:
            raise LangRuntimeError(f"Not an arithmetic expression: {node}")


def calculate(code: str) -> Float:
    ast = parse_arithmetic(code)
    try:
        return CalculatorInterpreter().visit(ast)
    except RecursionError:
        raise RecursionDepthError() from None


BinaryOperationImplTable = list[tuple[tuple[Type[Value], Type[Value]], BinaryOperationImpl]]


def eval_binary_operator(operator: BinaryOperator, a: Value, b: Value) -> Value:
    table, op_name = OPERATOR_IMPLS[operator]
    return eval_binary_operation(table=table, a=a, b=b, op_name=op_name)


def eval_binary_operation(table: BinaryOperationImplTable, a: Value, b: Value, op_name: str) -> Value:
    for (type_a, type_b), impl in table:
        if isinstance(a, type_a) and isinstance(b, type_b):
            return impl(a, b)
    else:
        # the left operand is checked first
        invalid = b if any(isinstance(a, type_a) for (type_a, _), _ in table) else a
        raise OperandTypeError(op_name, invalid.type_name())


def _float_binop(fn):
    return lambda a, b: Float(to_f32(fn(to_f32(float(a.v)), to_f32(float(b.v)))))


def _int_div(a: int, b: int) -> int:
    if b == 0:
        raise IntegerDivisionByZeroError()
    # truncates toward zero
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _float_div(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


add_impls: BinaryOperationImplTable = [
    ((Int, Int), lambda a, b: Int(to_i32(a.v + b.v))),  # type: ignore
    ((Number, Number), _float_binop(lambda x, y: x + y)),
]
sub_impls: BinaryOperationImplTable = [
    ((Int, Int), lambda a, b: Int(to_i32(a.v - b.v))),  # type: ignore
    ((Number, Number), _float_binop(lambda x, y: x - y)),
]
mul_impls: BinaryOperationImplTable = [
    ((Int, Int), lambda a, b: Int(to_i32(a.v * b.v))),  # type: ignore
    ((Number, Number), _float_binop(lambda x, y: x * y)),
]
div_impls: BinaryOperationImplTable = [
    ((Int, Int), lambda a, b: Int(to_i32(_int_div(a.v, b.v)))),  # type: ignore
    ((Number, Number), _float_binop(_float_div)),
]

OPERATOR_IMPLS: dict[BinaryOperator, tuple[BinaryOperationImplTable, str]] = {
    BinaryOperator.PLUS: (add_impls, "Addition"),
    BinaryOperator.MINUS: (sub_impls, "Subtraction"),
    BinaryOperator.TIMES: (mul_impls, "Multiplication"),
    BinaryOperator.DIVIDE: (div_impls, "Division"),
}
