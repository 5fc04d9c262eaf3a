from typing import TYPE_CHECKING, Callable, Optional

from minilang.value import BuiltinFunc, BuiltinFuncImpl, Null, Value

if TYPE_CHECKING:
    from minilang.runtime import Interpreter

BUILTIN_FUNCS: dict[str, BuiltinFunc] = dict()


def register_builtin_func(name: str):
    def decorator(fn: Callable[["Interpreter", list[Value]], Optional[Value]]) -> BuiltinFuncImpl:
        def decorated(interpreter: "Interpreter", args: list[Value]) -> Value:
            maybe_res = fn(interpreter, args)
            return Null if maybe_res is None else maybe_res

        BUILTIN_FUNCS[name] = BuiltinFunc(name=name, fn=decorated)
        return decorated

    return decorator


@register_builtin_func("println")
def println_(interpreter: "Interpreter", args: list[Value]) -> None:
    interpreter.output.write(", ".join(str(arg) for arg in args) + "\n")
    interpreter.output.flush()
