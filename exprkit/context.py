"""
Variable and function bindings consulted during evaluation.
"""

from typing import Any, Callable, Dict, List, Optional, Union

from .errors import UndefinedVariable
from .functions import Function
from .value import to_value

FunctionLike = Union[Function, Callable[[List[Any]], Any]]


def as_function(function: FunctionLike) -> Function:
    """Wrap a plain callable in an unbounded Function."""
    if isinstance(function, Function):
        return function
    if not callable(function):
        raise TypeError(f"Expected a callable, got {type(function).__name__}")
    return Function(function)


class Context:
    """
    Named variables and functions for one evaluation.

    Variables live in one or more scopes; lookups search from the last
    scope to the first so later scopes override earlier ones. Registering
    a name that is already bound replaces the previous binding.

    Const functions sit in a table that copies share rather than duplicate.
    They are consulted only when no regular function has the name.
    """

    def __init__(self, scopes: Optional[List[Dict[str, Any]]] = None,
                 functions: Optional[Dict[str, FunctionLike]] = None,
                 const_functions: Optional[Dict[str, Function]] = None):
        self.scopes = scopes if scopes else [{}]
        self.functions: Dict[str, Function] = {}
        for name, function in (functions or {}).items():
            self.set_function(name, function)
        self.const_functions: Dict[str, Function] = const_functions if const_functions is not None else {}

    def set_value(self, name: str, value: Any):
        self.scopes[-1][name] = to_value(value)

    def set_function(self, name: str, function: FunctionLike):
        self.functions[name] = as_function(function)

    def set_const_function(self, name: str, function: FunctionLike):
        self.const_functions[name] = as_function(function)

    def lookup_variable(self, name: str) -> Any:
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        raise UndefinedVariable(name)

    def lookup_function(self, name: str) -> Optional[Function]:
        function = self.functions.get(name)
        if function is None:
            function = self.const_functions.get(name)
        return function

    def copy(self, include_functions: bool = True) -> "Context":
        """Copy the scopes; the const function table is shared, not copied."""
        scopes = [dict(scope) for scope in self.scopes]
        return Context(scopes, self.functions if include_functions else None, self.const_functions)
