"""
Error hierarchy for exprkit.

Every failure surfaces as a subclass of ExprError. Lexing and parsing
failures derive from ParseError and are raised before any evaluation
begins; evaluation failures derive from EvalError.
"""

from typing import Optional


class ExprError(Exception):
    """Base class for all exprkit errors."""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self):
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position})"


class ParseError(ExprError):
    """Raised when tokenizing or parsing fails."""
    pass


class UnexpectedCharacter(ParseError):
    def __init__(self, char: str, position: int):
        super().__init__(f"Unexpected character: {char!r}", position)
        self.char = char


class UnterminatedString(ParseError):
    def __init__(self, position: int):
        super().__init__("Unterminated string literal", position)


class UnexpectedToken(ParseError):
    def __init__(self, found: str, expected: str, position: Optional[int] = None):
        super().__init__(f"Expected {expected}, got {found}", position)
        self.found = found
        self.expected = expected


class UnmatchedParen(ParseError):
    def __init__(self, position: Optional[int] = None):
        super().__init__("Missing closing ')'", position)


class UnmatchedBracket(ParseError):
    def __init__(self, position: Optional[int] = None):
        super().__init__("Missing closing ']'", position)


class TrailingTokens(ParseError):
    def __init__(self, found: str, position: Optional[int] = None):
        super().__init__(f"Unexpected token after expression: {found}", position)
        self.found = found


class NestingTooDeep(ParseError):
    def __init__(self, max_depth: int, position: Optional[int] = None):
        super().__init__(f"Expression nesting exceeds maximum depth of {max_depth}", position)
        self.max_depth = max_depth


class EvalError(ExprError):
    """Raised when evaluation of a parsed expression fails."""
    pass


class UndefinedVariable(EvalError):
    def __init__(self, name: str):
        super().__init__(f"Undefined variable: {name}")
        self.name = name


class UndefinedFunction(EvalError):
    def __init__(self, name: str):
        super().__init__(f"Undefined function: {name}")
        self.name = name


class UndefinedField(EvalError):
    def __init__(self, name: str):
        super().__init__(f"Undefined field: {name}")
        self.name = name


class ExprTypeError(EvalError):
    """An operator or built-in was applied to incompatible value kinds."""
    pass


class IndexOutOfBounds(EvalError):
    def __init__(self, index: int, length: int):
        super().__init__(f"Index {index} out of bounds for length {length}")
        self.index = index
        self.length = length


class ArgumentError(EvalError):
    def __init__(self, name: str, expected: str, got: int):
        super().__init__(f"Function {name}() expects {expected} arguments, got {got}")
        self.name = name
        self.expected = expected
        self.got = got


class DivisionByZero(EvalError):
    def __init__(self, operator: str):
        super().__init__(f"Division by zero in '{operator}'")
        self.operator = operator


class ConversionError(ExprError):
    """Raised when a host value cannot be converted into an expression value."""
    pass


class DocumentError(ExprError):
    """Raised when an expression document cannot be loaded."""
    pass
