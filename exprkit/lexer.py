"""
Tokenizer for exprkit expressions.
"""

import re
from enum import Enum
from typing import Any, List

from .errors import UnexpectedCharacter, UnterminatedString


class TokenType(Enum):
    # Literals
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"
    IDENTIFIER = "identifier"

    # Operators
    NOT = "!"
    NE = "!="
    EQ = "=="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    AND = "&&"
    OR = "||"
    RANGE = ".."

    # Delimiters
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    COMMA = ","
    DOT = "."

    # Special
    EOF = "end of input"


class Token:
    __slots__ = ("type", "value", "position")

    def __init__(self, type_: TokenType, value: Any = None, position: int = 0):
        self.type = type_
        self.value = value
        self.position = position

    def describe(self) -> str:
        """Human readable form used in error messages."""
        if self.type in (TokenType.INTEGER, TokenType.FLOAT, TokenType.IDENTIFIER):
            return f"{self.type.value} {self.value}"
        if self.type == TokenType.STRING:
            return f"string {self.value!r}"
        if self.type == TokenType.BOOLEAN:
            return "true" if self.value else "false"
        if self.type in (TokenType.NULL, TokenType.EOF):
            return self.type.value
        return f"'{self.type.value}'"

    def __repr__(self):
        return f"Token({self.type.value}, {self.value!r}, pos={self.position})"


# Longest operators first so that "==" wins over "=" and ".." over ".".
OPERATORS = [
    ("==", TokenType.EQ),
    ("!=", TokenType.NE),
    (">=", TokenType.GE),
    ("<=", TokenType.LE),
    ("&&", TokenType.AND),
    ("||", TokenType.OR),
    ("..", TokenType.RANGE),
    ("!", TokenType.NOT),
    (">", TokenType.GT),
    ("<", TokenType.LT),
    ("+", TokenType.PLUS),
    ("-", TokenType.MINUS),
    ("*", TokenType.STAR),
    ("/", TokenType.SLASH),
    ("%", TokenType.PERCENT),
    ("(", TokenType.LPAREN),
    (")", TokenType.RPAREN),
    ("[", TokenType.LBRACKET),
    ("]", TokenType.RBRACKET),
    (",", TokenType.COMMA),
    (".", TokenType.DOT),
]

KEYWORDS = {
    "true": (TokenType.BOOLEAN, True),
    "false": (TokenType.BOOLEAN, False),
    "null": (TokenType.NULL, None),
}

# The fraction needs a digit after the dot so "0..5" lexes as a range.
_NUMBER_RE = re.compile(r"[0-9]+(?P<fraction>\.[0-9]+)?(?P<exponent>[eE][+-]?[0-9]+)?")
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class Tokenizer:
    """Tokenizes expression source text."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def tokenize(self) -> List[Token]:
        """Tokenize the input text. The list always ends with an EOF token."""
        tokens = []

        while self.pos < len(self.text):
            self.skip_whitespace()
            if self.pos >= len(self.text):
                break
            tokens.append(self.next_token())

        tokens.append(Token(TokenType.EOF, position=self.pos))
        return tokens

    def skip_whitespace(self):
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def next_token(self) -> Token:
        char = self.text[self.pos]

        if char in ('"', "'"):
            return self.parse_string(char)
        if "0" <= char <= "9":
            return self.parse_number()
        if char.isalpha() or char == "_":
            return self.parse_identifier()

        for symbol, token_type in OPERATORS:
            if self.text.startswith(symbol, self.pos):
                token = Token(token_type, symbol, self.pos)
                self.pos += len(symbol)
                return token

        raise UnexpectedCharacter(char, self.pos)

    def parse_string(self, quote: str) -> Token:
        """Read up to the matching quote; no escape sequences are processed."""
        start_pos = self.pos
        end = self.text.find(quote, self.pos + 1)
        if end == -1:
            raise UnterminatedString(start_pos)
        self.pos = end + 1
        return Token(TokenType.STRING, self.text[start_pos + 1:end], start_pos)

    def parse_number(self) -> Token:
        start_pos = self.pos
        match = _NUMBER_RE.match(self.text, self.pos)
        literal = match.group(0)
        self.pos = match.end()

        if match.group("fraction") or match.group("exponent"):
            return Token(TokenType.FLOAT, float(literal), start_pos)
        return Token(TokenType.INTEGER, int(literal), start_pos)

    def parse_identifier(self) -> Token:
        """Parse identifiers and the true/false/null keywords."""
        start_pos = self.pos
        match = _IDENT_RE.match(self.text, self.pos)
        if match is None:
            # isalpha() accepts non-ASCII letters the identifier rule does not
            raise UnexpectedCharacter(self.text[self.pos], self.pos)
        value = match.group(0)
        self.pos = match.end()

        if value in KEYWORDS:
            token_type, literal = KEYWORDS[value]
            return Token(token_type, literal, start_pos)
        return Token(TokenType.IDENTIFIER, value, start_pos)


def tokenize(source: str) -> List[Token]:
    """Convert source text into a flat token list ending with EOF."""
    return Tokenizer(source).tokenize()
