"""
Formula v0.1 - an embeddable arithmetic expression language.

    >>> from formula import compile_source
    >>> compile_source("2 ^ 3 ^ 2")
    512.0
"""

from .errors import (
    FormulaError, LexerError, ParseError, EvaluationError, UnknownIdentifierError
)
from .lexer import Lexer, Token, TokenType, tokenize
from .parser import Parser
from .scope import Scope, Value, NumberValue, FunctionValue, default_scope
from .evaluator import Evaluator
from .compiler import compile_source, compile_file, parse_source, dump_ast

__version__ = "0.1.0"
