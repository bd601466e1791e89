"""
Expression builder and one-shot evaluation helpers.
"""

import logging
from typing import Any, Dict, List, Optional

from .context import Context, FunctionLike
from .nodes import ASTNode, evaluate
from .parser import DEFAULT_MAX_DEPTH, parse
from .value import to_value

logger = logging.getLogger(__name__)


class Expr:
    """
    Expression builder.

    Bindings registered with value() and function() are collected into a
    Context; exec() runs tokenizer, parser and evaluator over the source.
    Builder methods return the expression itself so calls can be chained:

        Expr("foo == bar").value("foo", True).value("bar", True).exec()
    """

    def __init__(self, expression: str, max_depth: int = DEFAULT_MAX_DEPTH):
        self.expression = expression
        self.max_depth = max_depth
        self.compiled: Optional[ASTNode] = None
        self.context = Context()

    def value(self, name: str, value: Any) -> "Expr":
        """Bind a variable; the value is converted with to_value."""
        self.context.set_value(name, value)
        return self

    def function(self, name: str, function: FunctionLike) -> "Expr":
        """Bind a function taking the evaluated argument list."""
        self.context.set_function(name, function)
        return self

    def const_function(self, name: str, function: FunctionLike) -> "Expr":
        """
        Bind a function that survives copy().

        The const function table is shared by this expression, its copies
        and any ExecOptions built from them. A regular function with the
        same name takes priority.
        """
        self.context.set_const_function(name, function)
        return self

    def compile(self) -> "Expr":
        """Parse once so later exec() calls skip tokenizing and parsing."""
        self.compiled = parse(self.expression, self.max_depth)
        logger.debug("Compiled expression %r", self.expression)
        return self

    def get_compiled(self) -> Optional[ASTNode]:
        return self.compiled

    def tree(self) -> ASTNode:
        """Return the cached AST, or a freshly parsed one without caching it."""
        if self.compiled is not None:
            return self.compiled
        return parse(self.expression, self.max_depth)

    def exec(self) -> Any:
        """Evaluate the expression against the registered bindings."""
        logger.debug("Executing expression %r", self.expression)
        return evaluate(self.tree(), self.context)

    def copy(self) -> "Expr":
        """
        Copy source, compiled tree and variables.

        Functions are not copied. Const functions stay shared with the original.
        """
        duplicate = Expr(self.expression, self.max_depth)
        duplicate.compiled = self.compiled
        duplicate.context = self.context.copy(include_functions=False)
        return duplicate

    def __eq__(self, other):
        if not isinstance(other, Expr):
            return NotImplemented
        return self.expression == other.expression

    def __hash__(self):
        return hash(self.expression)

    def __repr__(self):
        return f"Expr({self.expression!r})"


class ExecOptions:
    """
    Runs an expression against caller-owned contexts and functions
    instead of the bindings registered on the Expr itself. The Expr's
    const functions remain visible.
    """

    def __init__(self, expr: Expr):
        self.expr = expr
        self._contexts: Optional[List[Dict[str, Any]]] = None
        self._functions: Optional[Dict[str, FunctionLike]] = None

    def contexts(self, contexts: List[Dict[str, Any]]) -> "ExecOptions":
        self._contexts = contexts
        return self

    def functions(self, functions: Dict[str, FunctionLike]) -> "ExecOptions":
        self._functions = functions
        return self

    def exec(self) -> Any:
        scopes = [{name: to_value(v) for name, v in scope.items()} for scope in self._contexts or []]
        context = Context(scopes, self._functions, self.expr.context.const_functions)
        return evaluate(self.expr.tree(), context)


def eval_expr(source: str) -> Any:
    """Evaluate an expression with no variables or user functions."""
    return Expr(source).exec()
