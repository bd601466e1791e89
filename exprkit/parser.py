"""
Pratt parser for exprkit expressions.

Precedence, lowest to highest:

    ||
    &&
    == !=              (non-associative)
    < > <= >=          (non-associative)
    ..                 (non-associative)
    + -
    * / %
    unary ! -
    postfix .field [index] (args)
"""

from typing import Dict, List

from .errors import (
    NestingTooDeep,
    TrailingTokens,
    UnexpectedToken,
    UnmatchedBracket,
    UnmatchedParen,
)
from .lexer import Token, TokenType, tokenize
from .nodes import (
    ASTNode,
    BinaryNode,
    BinaryOp,
    CallNode,
    IdentifierNode,
    IndexNode,
    LiteralNode,
    MemberNode,
    RangeNode,
    UnaryNode,
    UnaryOp,
)

DEFAULT_MAX_DEPTH = 128

RANGE_PRECEDENCE = 5
UNARY_PRECEDENCE = 8

PRECEDENCES = {
    TokenType.OR: 1,
    TokenType.AND: 2,
    TokenType.EQ: 3,
    TokenType.NE: 3,
    TokenType.LT: 4,
    TokenType.GT: 4,
    TokenType.LE: 4,
    TokenType.GE: 4,
    TokenType.RANGE: RANGE_PRECEDENCE,
    TokenType.PLUS: 6,
    TokenType.MINUS: 6,
    TokenType.STAR: 7,
    TokenType.SLASH: 7,
    TokenType.PERCENT: 7,
}

# Levels that take exactly one operator: "a < b < c" is rejected.
NON_ASSOCIATIVE = {3, 4, RANGE_PRECEDENCE}

BINARY_OPS = {
    TokenType.OR: BinaryOp.OR,
    TokenType.AND: BinaryOp.AND,
    TokenType.EQ: BinaryOp.EQ,
    TokenType.NE: BinaryOp.NE,
    TokenType.LT: BinaryOp.LT,
    TokenType.GT: BinaryOp.GT,
    TokenType.LE: BinaryOp.LE,
    TokenType.GE: BinaryOp.GE,
    TokenType.PLUS: BinaryOp.ADD,
    TokenType.MINUS: BinaryOp.SUB,
    TokenType.STAR: BinaryOp.MUL,
    TokenType.SLASH: BinaryOp.DIV,
    TokenType.PERCENT: BinaryOp.MOD,
}

LITERALS = (
    TokenType.INTEGER,
    TokenType.FLOAT,
    TokenType.STRING,
    TokenType.BOOLEAN,
    TokenType.NULL,
)


class Parser:
    """Pratt parser producing an AST from a token list."""

    def __init__(self, tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Token(TokenType.EOF)
        self.max_depth = max_depth
        self.nesting = 0
        self._depths: Dict[int, int] = {}

    def advance(self) -> Token:
        """Consume the current token and return it."""
        token = self.current
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
            self.current = self.tokens[self.pos]
        return token

    def expect(self, token_type: TokenType, expected: str) -> Token:
        if self.current.type == token_type:
            return self.advance()
        raise UnexpectedToken(self.current.describe(), expected, self.current.position)

    def parse(self) -> ASTNode:
        """Parse a complete expression; anything left over is an error."""
        node = self.parse_expression()
        if self.current.type != TokenType.EOF:
            raise TrailingTokens(self.current.describe(), self.current.position)
        return node

    def parse_expression(self, precedence: int = 0) -> ASTNode:
        """Parse operators binding tighter than the given precedence."""
        left = self.parse_unary()

        while precedence < self.get_precedence(self.current.type):
            token = self.advance()
            level = PRECEDENCES[token.type]
            right = self.parse_expression(level)

            if token.type == TokenType.RANGE:
                left = self.build(RangeNode(left, right), token)
            else:
                left = self.build(BinaryNode(BINARY_OPS[token.type], left, right), token)

            if level in NON_ASSOCIATIVE and self.get_precedence(self.current.type) == level:
                raise UnexpectedToken(
                    self.current.describe(),
                    f"end of expression after '{token.type.value}' operand",
                    self.current.position,
                )

        return left

    def parse_unary(self) -> ASTNode:
        token = self.current
        self.enter(token)
        try:
            if token.type in (TokenType.NOT, TokenType.MINUS):
                self.advance()
                operand = self.parse_unary()
                op = UnaryOp.NOT if token.type == TokenType.NOT else UnaryOp.NEGATE
                return self.build(UnaryNode(op, operand), token)
            grouped = token.type == TokenType.LPAREN
            return self.parse_postfix(self.parse_primary(), grouped)
        finally:
            self.nesting -= 1

    def parse_postfix(self, node: ASTNode, grouped: bool = False) -> ASTNode:
        """
        Apply .field, [index] and (args) left to right.

        grouped marks a parenthesised primary, which cannot be called directly.
        """
        while True:
            token = self.current
            if token.type == TokenType.DOT:
                self.advance()
                field = self.expect(TokenType.IDENTIFIER, "field name after '.'")
                node = self.build(MemberNode(node, field.value), token)
            elif token.type == TokenType.LBRACKET:
                self.advance()
                index = self.parse_expression()
                self.close(TokenType.RBRACKET, token)
                node = self.build(IndexNode(node, index), token)
            elif token.type == TokenType.LPAREN:
                node = self.parse_call(node, grouped)
            else:
                return node
            grouped = False

    def parse_call(self, callee: ASTNode, grouped: bool = False) -> ASTNode:
        """
        Parse an argument list applied to callee.

        name(args) calls name; base.name(args) calls name with base
        prepended to the arguments. Any other callee, including a
        parenthesised name, is a syntax error.
        """
        open_token = self.current
        if not grouped and isinstance(callee, IdentifierNode):
            name, args = callee.name, []
        elif not grouped and isinstance(callee, MemberNode):
            name, args = callee.field, [callee.base]
        else:
            raise UnexpectedToken(open_token.describe(), "operator or end of input", open_token.position)

        self.advance()
        if self.current.type != TokenType.RPAREN:
            args.append(self.parse_expression())
            while self.current.type == TokenType.COMMA:
                self.advance()
                args.append(self.parse_expression())
        self.close(TokenType.RPAREN, open_token, "',' or ')'")
        return self.build(CallNode(name, args), open_token)

    def parse_primary(self) -> ASTNode:
        token = self.current

        if token.type in LITERALS:
            self.advance()
            return self.build(LiteralNode(token.value), token)
        if token.type == TokenType.IDENTIFIER:
            self.advance()
            return self.build(IdentifierNode(token.value), token)
        if token.type == TokenType.LPAREN:
            self.advance()
            node = self.parse_expression()
            self.close(TokenType.RPAREN, token)
            return node
        raise UnexpectedToken(token.describe(), "expression", token.position)

    def close(self, token_type: TokenType, opener: Token, expected: str = None):
        """Consume a closing delimiter; running out of input means it was never closed."""
        if self.current.type == token_type:
            self.advance()
            return
        if self.current.type == TokenType.EOF:
            if token_type == TokenType.RPAREN:
                raise UnmatchedParen(opener.position)
            raise UnmatchedBracket(opener.position)
        raise UnexpectedToken(
            self.current.describe(), expected or f"'{token_type.value}'", self.current.position
        )

    def enter(self, token: Token):
        self.nesting += 1
        if self.nesting > self.max_depth:
            raise NestingTooDeep(self.max_depth, token.position)

    def build(self, node: ASTNode, token: Token) -> ASTNode:
        """
        Record the depth of a new node, rejecting trees deeper than max_depth.

        A binary node whose left operand is itself binary continues an
        operator chain, which evaluates iteratively, so the chain adds no
        depth of its own.
        """
        if isinstance(node, BinaryNode) and isinstance(node.left, BinaryNode):
            depth = max(self._depths[id(node.left)], 1 + self._depths[id(node.right)])
        else:
            depth = 1 + max((self._depths[id(child)] for child in node.children()), default=0)
        if depth > self.max_depth:
            raise NestingTooDeep(self.max_depth, token.position)
        self._depths[id(node)] = depth
        return node

    @staticmethod
    def get_precedence(token_type: TokenType) -> int:
        return PRECEDENCES.get(token_type, 0)


def parse(source: str, max_depth: int = DEFAULT_MAX_DEPTH) -> ASTNode:
    """Tokenize and parse an expression into an AST."""
    return Parser(tokenize(source), max_depth).parse()
