"""
exprkit: a small embeddable expression language.

Expressions such as "object.foos[1-1] == 'Hello'" are tokenized, parsed
and evaluated against caller-supplied variables and functions.
"""

__version__ = "0.1.0"

from .context import Context
from .errors import (
    ArgumentError,
    ConversionError,
    DivisionByZero,
    DocumentError,
    EvalError,
    ExprError,
    ExprTypeError,
    IndexOutOfBounds,
    NestingTooDeep,
    ParseError,
    TrailingTokens,
    UndefinedField,
    UndefinedFunction,
    UndefinedVariable,
    UnexpectedCharacter,
    UnexpectedToken,
    UnmatchedBracket,
    UnmatchedParen,
    UnterminatedString,
)
from .expr import ExecOptions, Expr, eval_expr
from .functions import Function
from .lexer import tokenize
from .loader import dump_exprs_to_yaml, load_exprs_from_file, load_exprs_from_yaml
from .nodes import evaluate
from .parser import parse
from .validator import lint_exprs, validate_document
from .value import Kind, kind_of, to_value, values_equal

__all__ = [
    "Context",
    "ExecOptions",
    "Expr",
    "Function",
    "Kind",
    "eval_expr",
    "evaluate",
    "kind_of",
    "parse",
    "tokenize",
    "to_value",
    "values_equal",
    "load_exprs_from_yaml",
    "load_exprs_from_file",
    "dump_exprs_to_yaml",
    "validate_document",
    "lint_exprs",
    "ExprError",
    "ParseError",
    "UnexpectedCharacter",
    "UnterminatedString",
    "UnexpectedToken",
    "UnmatchedParen",
    "UnmatchedBracket",
    "TrailingTokens",
    "NestingTooDeep",
    "EvalError",
    "UndefinedVariable",
    "UndefinedFunction",
    "UndefinedField",
    "ExprTypeError",
    "IndexOutOfBounds",
    "ArgumentError",
    "DivisionByZero",
    "ConversionError",
    "DocumentError",
]
