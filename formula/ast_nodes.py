"""
Formula v0.1 - AST Node Definitions
Immutable expression tree produced by the parser.
"""

from dataclasses import dataclass, field
from typing import Tuple

from .lexer import TokenType


@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class NumberNode(ASTNode):
    """A numeric literal."""
    value: float = 0.0


@dataclass(frozen=True)
class IdentifierNode(ASTNode):
    """A variable reference."""
    name: str = ""


@dataclass(frozen=True)
class BinaryOpNode(ASTNode):
    """left op right, where op is one of + - * / ^"""
    left: ASTNode = None
    op: TokenType = None
    right: ASTNode = None


@dataclass(frozen=True)
class CallNode(ASTNode):
    """f(a, b, ...) or the implicit form f a"""
    function: str = ""
    arguments: Tuple[ASTNode, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NestedNode(ASTNode):
    """A "quoted" sub-expression, parsed and evaluated when reached."""
    source: str = ""
