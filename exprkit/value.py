"""
Dynamic value model for exprkit.

Expression values are plain Python objects: None, bool, int, float, str,
list and dict. Kind classifies them; every operator below dispatches on
the kinds of its operands and raises ExprTypeError for any pairing it
does not define.
"""

import dataclasses
import math
from enum import Enum
from collections.abc import Mapping
from typing import Any, Dict, List, Tuple

from .errors import ConversionError, DivisionByZero, ExprTypeError


class Kind(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


NUMERIC_KINDS = (Kind.INTEGER, Kind.FLOAT)


def kind_of(value: Any) -> Kind:
    """Classify a value. bool is checked before int since it subclasses it."""
    if value is None:
        return Kind.NULL
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, int):
        return Kind.INTEGER
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, list):
        return Kind.ARRAY
    if isinstance(value, dict):
        return Kind.OBJECT
    raise ExprTypeError(f"Not an expression value: {type(value).__name__}")


def to_value(native: Any) -> Any:
    """
    Convert a host value into an expression value.

    Tuples become arrays, mappings and dataclass instances become objects,
    and containers are converted recursively.

    Raises:
        ConversionError: If the value (or anything nested in it) has no
            expression counterpart, or if a container contains itself.
    """
    return _convert(native, ())


def _convert(native: Any, parents: Tuple[int, ...]) -> Any:
    if native is None or isinstance(native, (bool, int, float, str)):
        return native

    # ids of the containers enclosing this one; meeting one again is a cycle
    if id(native) in parents:
        raise ConversionError(f"Cannot convert self-referencing {type(native).__name__}")
    parents = parents + (id(native),)

    if isinstance(native, (list, tuple)):
        return [_convert(item, parents) for item in native]
    if isinstance(native, Mapping):
        return _mapping_to_value(native, parents)
    if dataclasses.is_dataclass(native) and not isinstance(native, type):
        return {f.name: _convert(getattr(native, f.name), parents) for f in dataclasses.fields(native)}
    raise ConversionError(f"Cannot convert {type(native).__name__} to an expression value")


def _mapping_to_value(mapping: Mapping, parents: Tuple[int, ...]) -> Dict[str, Any]:
    result = {}
    for key, item in mapping.items():
        if not isinstance(key, str):
            raise ConversionError(f"Object keys must be strings, got {type(key).__name__}")
        result[key] = _convert(item, parents)
    return result


def values_equal(left: Any, right: Any) -> bool:
    """Structural equality, defined for every pair of kinds."""
    left_kind = kind_of(left)
    right_kind = kind_of(right)

    if left_kind in NUMERIC_KINDS and right_kind in NUMERIC_KINDS:
        return float(left) == float(right) if left_kind != right_kind else left == right
    if left_kind != right_kind:
        return False
    if left_kind == Kind.ARRAY:
        return len(left) == len(right) and all(values_equal(a, b) for a, b in zip(left, right))
    if left_kind == Kind.OBJECT:
        return left.keys() == right.keys() and all(values_equal(left[k], right[k]) for k in left)
    # NULL, BOOLEAN, STRING
    return left == right


def compare(left: Any, right: Any) -> int:
    """
    Order two values, returning -1, 0 or 1.

    Defined for numeric pairs (after promotion) and for string pairs.
    """
    left_kind = kind_of(left)
    right_kind = kind_of(right)

    if left_kind in NUMERIC_KINDS and right_kind in NUMERIC_KINDS:
        if left_kind != right_kind:
            left, right = float(left), float(right)
    elif not (left_kind == Kind.STRING and right_kind == Kind.STRING):
        raise ExprTypeError(f"Cannot compare {left_kind.value} with {right_kind.value}")

    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def _numeric_operands(operator: str, left: Any, right: Any) -> bool:
    """Check both operands are numeric; returns True when both are integers."""
    left_kind = kind_of(left)
    right_kind = kind_of(right)
    if left_kind not in NUMERIC_KINDS or right_kind not in NUMERIC_KINDS:
        raise ExprTypeError(
            f"Unsupported operand kinds for '{operator}': {left_kind.value} and {right_kind.value}"
        )
    return left_kind == Kind.INTEGER and right_kind == Kind.INTEGER


def add(left: Any, right: Any) -> Any:
    if _numeric_operands("+", left, right):
        return left + right
    return float(left) + float(right)


def subtract(left: Any, right: Any) -> Any:
    if _numeric_operands("-", left, right):
        return left - right
    return float(left) - float(right)


def multiply(left: Any, right: Any) -> Any:
    if _numeric_operands("*", left, right):
        return left * right
    return float(left) * float(right)


def divide(left: Any, right: Any) -> float:
    """Division always produces a float, even for evenly divisible integers."""
    _numeric_operands("/", left, right)
    if right == 0:
        raise DivisionByZero("/")
    return float(left) / float(right)


def remainder(left: Any, right: Any) -> Any:
    """Remainder truncated toward zero, so the result takes the dividend's sign."""
    both_int = _numeric_operands("%", left, right)
    if right == 0:
        raise DivisionByZero("%")
    if both_int:
        result = abs(left) % abs(right)
        return -result if left < 0 else result
    return math.fmod(float(left), float(right))


def negate(operand: Any) -> Any:
    kind = kind_of(operand)
    if kind not in NUMERIC_KINDS:
        raise ExprTypeError(f"Cannot negate {kind.value}")
    return -operand


def require_boolean(operator: str, value: Any) -> bool:
    kind = kind_of(value)
    if kind != Kind.BOOLEAN:
        raise ExprTypeError(f"Operator '{operator}' requires boolean operands, got {kind.value}")
    return value


def length(name: str, value: Any) -> int:
    kind = kind_of(value)
    if kind not in (Kind.ARRAY, Kind.STRING):
        raise ExprTypeError(f"{name}() requires an array or string, got {kind.value}")
    return len(value)


def integer_range(start: Any, stop: Any) -> List[int]:
    """Half-open ascending range; empty when stop <= start."""
    for bound in (start, stop):
        kind = kind_of(bound)
        if kind != Kind.INTEGER:
            raise ExprTypeError(f"Range bounds must be integers, got {kind.value}")
    return list(range(start, stop))
