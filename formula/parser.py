"""
Formula v0.1 - Recursive Descent Parser
Pulls tokens from the lexer with one token of lookahead and builds the AST.

Precedence, lowest first:
    addition        + -        left-associative
    multiplication  * /        left-associative
    exponentiation  ^          right-associative
    call            f(a, b)    f a  (implicit, right-associative)
    basic           ( expr )   number   identifier   "nested"
"""

from typing import List, Optional
from .errors import ParseError
from .lexer import Lexer, Token, TokenType
from .ast_nodes import (
    ASTNode, NumberNode, IdentifierNode, BinaryOpNode, CallNode, NestedNode
)


class Parser:
    def __init__(self, lexer: Optional[Lexer] = None):
        self._lexer = lexer or Lexer()
        self._lookahead: Optional[Token] = None
        self._end = 0

    # ------------------------------------------------------------------ helpers

    def _position(self) -> int:
        if self._lookahead is None:
            return self._end
        return self._lookahead.position

    def _match(self, *types: TokenType) -> bool:
        return self._lookahead is not None and self._lookahead.type in types

    def _expect(self, *types: TokenType) -> Token:
        tok = self._lookahead
        if tok is None:
            raise ParseError("Unexpected end of input", self._end)
        if tok.type not in types:
            expected = ", ".join(t.name for t in types)
            raise ParseError(
                f"Expected one of: {expected} but got: {tok.type.name} ({tok.value!r})",
                tok.position
            )
        self._lookahead = self._lexer.next()
        return tok

    # ------------------------------------------------------------------ public

    def parse(self, source: str) -> ASTNode:
        """
        Parse a single expression. Tokens left over after a complete
        expression are ignored.
        """
        self._end = len(source)
        self._lexer.read(source)
        self._lookahead = self._lexer.next()
        if self._lookahead is None:
            raise ParseError("Input is empty or invalid", 0)
        return self._parse_expression()

    # ------------------------------------------------------------------ expressions

    def _parse_expression(self) -> ASTNode:
        return self._parse_additive()

    def _parse_additive(self) -> ASTNode:
        left = self._parse_multiplicative()

        while self._match(TokenType.PLUS, TokenType.MINUS):
            op_tok = self._expect(TokenType.PLUS, TokenType.MINUS)
            right = self._parse_multiplicative()
            left = BinaryOpNode(left=left, op=op_tok.type, right=right)

        return left

    def _parse_multiplicative(self) -> ASTNode:
        left = self._parse_exponent()

        while self._match(TokenType.MULTIPLY, TokenType.DIVIDE):
            op_tok = self._expect(TokenType.MULTIPLY, TokenType.DIVIDE)
            right = self._parse_exponent()
            left = BinaryOpNode(left=left, op=op_tok.type, right=right)

        return left

    def _parse_exponent(self) -> ASTNode:
        left = self._parse_call()

        if self._match(TokenType.EXPONENT):
            op_tok = self._expect(TokenType.EXPONENT)
            right = self._parse_exponent()  # right-associative
            left = BinaryOpNode(left=left, op=op_tok.type, right=right)

        return left

    def _parse_call(self) -> ASTNode:
        start = self._position()
        callee = self._parse_basic()

        # Implicit call: another term follows with no operator between
        if self._match(TokenType.NUMBER, TokenType.IDENTIFIER):
            name = self._callee_name(callee, start)
            argument = self._parse_call()
            return CallNode(function=name, arguments=(argument,))

        if self._match(TokenType.LPAREN):
            name = self._callee_name(callee, start)
            self._expect(TokenType.LPAREN)
            arguments: List[ASTNode] = [self._parse_expression()]
            while self._match(TokenType.COMMA):
                self._expect(TokenType.COMMA)
                arguments.append(self._parse_expression())
            self._expect(TokenType.RPAREN)
            return CallNode(function=name, arguments=tuple(arguments))

        return callee

    def _parse_basic(self) -> ASTNode:
        tok = self._lookahead

        if tok is None:
            raise ParseError("Unexpected end of input", self._end)

        # Parenthesised expression
        if tok.type == TokenType.LPAREN:
            self._expect(TokenType.LPAREN)
            expr = self._parse_expression()
            self._expect(TokenType.RPAREN)
            return expr

        if tok.type == TokenType.NUMBER:
            self._expect(TokenType.NUMBER)
            return NumberNode(value=float(tok.value))

        if tok.type == TokenType.IDENTIFIER:
            self._expect(TokenType.IDENTIFIER)
            return IdentifierNode(name=tok.value)

        # Nested source is kept verbatim; the evaluator parses it
        if tok.type == TokenType.STRING:
            self._expect(TokenType.STRING)
            return NestedNode(source=tok.value)

        raise ParseError(
            f"Unknown expression starting with {tok.type.name} ({tok.value!r})",
            tok.position
        )

    # ------------------------------------------------------------------ helpers

    def _callee_name(self, callee: ASTNode, position: int) -> str:
        if isinstance(callee, IdentifierNode):
            return callee.name
        if isinstance(callee, NumberNode):
            return str(callee.value)
        raise ParseError(
            f"Cannot use {type(callee).__name__} as a function name",
            position
        )
