import abc
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from minilang.ast_nodes import Statements
from minilang.errors import ArityMismatchError, NotCallableError
from minilang.utils import format_f32

if TYPE_CHECKING:
    from minilang.runtime import Interpreter


class Value(abc.ABC):
    @classmethod
    @abc.abstractmethod
    def type_name(cls) -> str:
        ...

    def invoke(self, interpreter: "Interpreter", args: list["Value"]) -> "Value":
        raise NotCallableError(self.type_name())


BinaryOperationImpl = Callable[[Value, Value], Value]
BuiltinFuncImpl = Callable[["Interpreter", list[Value]], Value]


@dataclass(frozen=True)
class NullValue(Value):
    @classmethod
    def type_name(cls) -> str:
        return "Null"

    def __str__(self) -> str:
        return "null"


Null = NullValue()


class Number(Value):
    v: "int | float"


@dataclass(frozen=True)
class Int(Number):
    """Signed 32-bit integer"""

    v: int

    @classmethod
    def type_name(cls) -> str:
        return "Int"

    def __str__(self) -> str:
        return str(self.v)


@dataclass(frozen=True)
class Float(Number):
    """Single precision float; `v` always holds a value representable as one"""

    v: float

    @classmethod
    def type_name(cls) -> str:
        return "Float"

    def __str__(self) -> str:
        return format_f32(self.v)


@dataclass(frozen=True)
class UserFunc(Value):
    params: tuple[str, ...]
    body: Statements

    @classmethod
    def type_name(cls) -> str:
        return "User function"

    def invoke(self, interpreter: "Interpreter", args: list[Value]) -> Value:
        if len(args) != len(self.params):
            raise ArityMismatchError(expected=len(self.params), got=len(args))
        with interpreter.scoped():
            for param, arg in zip(self.params, args):
                interpreter.current_scope[param] = arg
            return interpreter.visit(self.body)

    def __str__(self) -> str:
        return f"<function({', '.join(self.params)})>"


@dataclass(frozen=True)
class BuiltinFunc(Value):
    name: str
    fn: BuiltinFuncImpl

    @classmethod
    def type_name(cls) -> str:
        return "Built-in function"

    def invoke(self, interpreter: "Interpreter", args: list[Value]) -> Value:
        return self.fn(interpreter, args)

    def __str__(self) -> str:
        return f"<built-in function {self.name}>"
