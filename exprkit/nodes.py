"""
AST node types for exprkit and their evaluation rules.

The parser builds a strict tree of these nodes once; evaluation walks it
recursively against a read-only Context.
"""

import logging
from enum import Enum
from typing import Any, List

from . import value as values
from .context import Context
from .errors import ExprTypeError, IndexOutOfBounds, UndefinedField, UndefinedFunction
from .functions import BUILTINS
from .value import Kind, kind_of

logger = logging.getLogger(__name__)


class UnaryOp(Enum):
    NOT = "!"
    NEGATE = "-"


class BinaryOp(Enum):
    OR = "||"
    AND = "&&"
    EQ = "=="
    NE = "!="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"


ARITHMETIC = {
    BinaryOp.ADD: values.add,
    BinaryOp.SUB: values.subtract,
    BinaryOp.MUL: values.multiply,
    BinaryOp.DIV: values.divide,
    BinaryOp.MOD: values.remainder,
}

ORDERING = {
    BinaryOp.LT: lambda order: order < 0,
    BinaryOp.GT: lambda order: order > 0,
    BinaryOp.LE: lambda order: order <= 0,
    BinaryOp.GE: lambda order: order >= 0,
}


class ASTNode:
    """Base AST node."""

    def eval(self, context: Context) -> Any:
        raise NotImplementedError

    def children(self) -> List["ASTNode"]:
        return []

    def walk(self):
        """Yield this node and every descendant, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"


class LiteralNode(ASTNode):
    def __init__(self, value: Any):
        self.value = value

    def eval(self, context: Context) -> Any:
        return self.value


class IdentifierNode(ASTNode):
    def __init__(self, name: str):
        self.name = name

    def eval(self, context: Context) -> Any:
        return context.lookup_variable(self.name)


class MemberNode(ASTNode):
    """Dot access on an object value: base.field"""

    def __init__(self, base: ASTNode, field: str):
        self.base = base
        self.field = field

    def eval(self, context: Context) -> Any:
        base = self.base.eval(context)
        kind = kind_of(base)
        if kind != Kind.OBJECT:
            raise ExprTypeError(f"Cannot access field '{self.field}' on {kind.value}")
        if self.field not in base:
            raise UndefinedField(self.field)
        return base[self.field]

    def children(self) -> List[ASTNode]:
        return [self.base]


class IndexNode(ASTNode):
    """
    Bracket access: base[index]

    Arrays and strings take a non-negative integer index; objects take a
    string key.
    """

    def __init__(self, base: ASTNode, index: ASTNode):
        self.base = base
        self.index = index

    def eval(self, context: Context) -> Any:
        base = self.base.eval(context)
        index = self.index.eval(context)
        base_kind = kind_of(base)
        index_kind = kind_of(index)

        if base_kind == Kind.OBJECT:
            if index_kind != Kind.STRING:
                raise ExprTypeError(f"Object keys must be strings, got {index_kind.value}")
            if index not in base:
                raise UndefinedField(index)
            return base[index]

        if base_kind not in (Kind.ARRAY, Kind.STRING):
            raise ExprTypeError(f"Cannot index into {base_kind.value}")
        if index_kind != Kind.INTEGER:
            raise ExprTypeError(f"Index must be an integer, got {index_kind.value}")
        # No wraparound for negative indices
        if index < 0 or index >= len(base):
            raise IndexOutOfBounds(index, len(base))
        return base[index]

    def children(self) -> List[ASTNode]:
        return [self.base, self.index]


class CallNode(ASTNode):
    def __init__(self, name: str, args: List[ASTNode]):
        self.name = name
        self.args = args

    def eval(self, context: Context) -> Any:
        args = [arg.eval(context) for arg in self.args]

        # Built-ins cannot be shadowed by context functions
        function = BUILTINS.get(self.name)
        if function is None:
            function = context.lookup_function(self.name)
            if function is None:
                raise UndefinedFunction(self.name)
            logger.debug("Calling function %s with %d argument(s)", self.name, len(args))
        return function(self.name, args)

    def children(self) -> List[ASTNode]:
        return list(self.args)


class UnaryNode(ASTNode):
    def __init__(self, op: UnaryOp, operand: ASTNode):
        self.op = op
        self.operand = operand

    def eval(self, context: Context) -> Any:
        operand = self.operand.eval(context)
        if self.op == UnaryOp.NOT:
            return not values.require_boolean("!", operand)
        return values.negate(operand)

    def children(self) -> List[ASTNode]:
        return [self.operand]


class BinaryNode(ASTNode):
    def __init__(self, op: BinaryOp, left: ASTNode, right: ASTNode):
        self.op = op
        self.left = left
        self.right = right

    def eval(self, context: Context) -> Any:
        # Operator chains lean left; walk the spine instead of recursing down it
        chain = [self]
        while isinstance(chain[-1].left, BinaryNode):
            chain.append(chain[-1].left)

        result = chain[-1].left.eval(context)
        for node in reversed(chain):
            result = node.apply(result, context)
        return result

    def apply(self, left: Any, context: Context) -> Any:
        """Combine an evaluated left operand with this node's right side."""
        if self.op in (BinaryOp.AND, BinaryOp.OR):
            return self._apply_logical(left, context)

        right = self.right.eval(context)

        if self.op == BinaryOp.EQ:
            return values.values_equal(left, right)
        if self.op == BinaryOp.NE:
            return not values.values_equal(left, right)
        if self.op in ORDERING:
            return ORDERING[self.op](values.compare(left, right))
        return ARITHMETIC[self.op](left, right)

    def _apply_logical(self, left: Any, context: Context) -> bool:
        """Short-circuit: the right side runs only when it decides the result."""
        symbol = self.op.value
        left = values.require_boolean(symbol, left)
        if self.op == BinaryOp.AND and not left:
            return False
        if self.op == BinaryOp.OR and left:
            return True
        return values.require_boolean(symbol, self.right.eval(context))

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


class RangeNode(ASTNode):
    """start..stop, an array of integers from start (inclusive) to stop (exclusive)."""

    def __init__(self, start: ASTNode, stop: ASTNode):
        self.start = start
        self.stop = stop

    def eval(self, context: Context) -> List[int]:
        return values.integer_range(self.start.eval(context), self.stop.eval(context))

    def children(self) -> List[ASTNode]:
        return [self.start, self.stop]


def evaluate(node: ASTNode, context: Context) -> Any:
    """Evaluate a parsed tree; the first error aborts the whole evaluation."""
    return node.eval(context)
