"""
Callable wrappers and the built-in function table.
"""

from typing import Any, Callable, Dict, List, Optional

from .errors import ArgumentError, ExprTypeError
from .value import Kind, NUMERIC_KINDS, compare, kind_of, length, to_value


class Function:
    """
    A callable bound into an evaluation.

    The wrapped callable receives the evaluated arguments as a single list
    and returns a value convertible with to_value. Optional bounds on the
    argument count are checked before the callable runs.
    """

    def __init__(self, compiled: Callable[[List[Any]], Any],
                 min_args: Optional[int] = None, max_args: Optional[int] = None):
        self.compiled = compiled
        self.min_args = min_args
        self.max_args = max_args

    def check_arity(self, name: str, got: int):
        if self.min_args is not None and got < self.min_args:
            raise ArgumentError(name, self.describe_arity(), got)
        if self.max_args is not None and got > self.max_args:
            raise ArgumentError(name, self.describe_arity(), got)

    def describe_arity(self) -> str:
        if self.min_args is None and self.max_args is None:
            return "any number of"
        if self.min_args == self.max_args:
            return f"exactly {self.min_args}"
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.min_args is None:
            return f"at most {self.max_args}"
        return f"{self.min_args} to {self.max_args}"

    def __call__(self, name: str, args: List[Any]) -> Any:
        self.check_arity(name, len(args))
        return to_value(self.compiled(args))

    def __repr__(self):
        return f"Function(min_args={self.min_args}, max_args={self.max_args})"


def _numeric_args(name: str, args: List[Any]) -> List[Any]:
    kinds = [kind_of(arg) for arg in args]
    for kind in kinds:
        if kind not in NUMERIC_KINDS:
            raise ExprTypeError(f"{name}() requires numeric arguments, got {kind.value}")
    # Mixed integer and float arguments promote to float
    if Kind.FLOAT in kinds:
        return [float(arg) for arg in args]
    return args


def _min(args: List[Any]) -> Any:
    values = _numeric_args("min", args)
    result = values[0]
    for value in values[1:]:
        if compare(value, result) < 0:
            result = value
    return result


def _max(args: List[Any]) -> Any:
    values = _numeric_args("max", args)
    result = values[0]
    for value in values[1:]:
        if compare(value, result) > 0:
            result = value
    return result


def _len(args: List[Any]) -> int:
    return length("len", args[0])


def _is_empty(args: List[Any]) -> bool:
    return length("is_empty", args[0]) == 0


def _array(args: List[Any]) -> List[Any]:
    return list(args)


BUILTINS: Dict[str, Function] = {
    "min": Function(_min, min_args=1),
    "max": Function(_max, min_args=1),
    "len": Function(_len, min_args=1, max_args=1),
    "is_empty": Function(_is_empty, min_args=1, max_args=1),
    "array": Function(_array),
}
