from dataclasses import dataclass


@dataclass
class LangRuntimeError(Exception):
    errmsg: str

    def __str__(self) -> str:
        return f"[Runtime error] {self.errmsg}"


class UndefinedVariableError(LangRuntimeError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Reference to undefined variable {name!r}")
        self.name = name


class OperandTypeError(LangRuntimeError):
    def __init__(self, operation: str, operand_kind: str) -> None:
        super().__init__(f"{operation} is not defined for {operand_kind}")
        self.operation = operation
        self.operand_kind = operand_kind


class NotCallableError(LangRuntimeError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind} is not callable")
        self.kind = kind


class ArityMismatchError(LangRuntimeError):
    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"Wrong number of arguments: expected {expected}, got {got}")
        self.expected = expected
        self.got = got


class IntegerDivisionByZeroError(LangRuntimeError):
    def __init__(self) -> None:
        super().__init__("Integer division by zero")


class RecursionDepthError(LangRuntimeError):
    def __init__(self) -> None:
        super().__init__("Maximum recursion depth exceeded")
