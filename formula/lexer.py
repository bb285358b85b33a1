"""
Formula v0.1 - Lexer
Pulls tokens one at a time out of a formula string.
"""

import re
from dataclasses import dataclass
from typing import List, Optional
from enum import Enum, auto

from .errors import LexerError


class TokenType(Enum):
    # Literals
    NUMBER     = auto()
    IDENTIFIER = auto()
    STRING     = auto()   # "nested expression"
    # Operators
    PLUS       = auto()   # +
    MINUS      = auto()   # -
    MULTIPLY   = auto()   # *
    DIVIDE     = auto()   # /
    EXPONENT   = auto()   # ^
    # Punctuation
    LPAREN     = auto()   # (
    RPAREN     = auto()   # )
    COMMA      = auto()   # ,


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    position: int = 0

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, position={self.position})"


_SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.MULTIPLY,
    '/': TokenType.DIVIDE,
    '^': TokenType.EXPONENT,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    ',': TokenType.COMMA,
}

_SPACES_RE     = re.compile(r' +')
_NUMBER_RE     = re.compile(r'\d[\d.]*')
_STRING_RE     = re.compile(r'"([^"]*)"')


class Lexer:
    """
    Reusable pull-based lexer. Call read() with new input, then next()
    until it returns None.
    """

    def __init__(self):
        self._source = ""
        self._pos = 0

    def read(self, source: str) -> None:
        self._source = source
        self._pos = 0

    def next(self) -> Optional[Token]:
        """
        Return the next token, or None at end of input.
        Only the space character is skipped; tabs and newlines are errors.
        """
        m = _SPACES_RE.match(self._source, self._pos)
        if m:
            self._pos = m.end()

        if self._pos >= len(self._source):
            return None

        start = self._pos
        char = self._source[start]

        if char in _SINGLE_CHAR_TOKENS:
            self._pos += 1
            return Token(_SINGLE_CHAR_TOKENS[char], char, start)

        if char.isdecimal():
            m = _NUMBER_RE.match(self._source, start)
            raw = m.group(0)
            if raw.count('.') > 1:
                second = raw.index('.', raw.index('.') + 1)
                raise LexerError("Invalid number format: multiple decimal points", start + second)
            self._pos = m.end()
            return Token(TokenType.NUMBER, raw, start)

        if char == '"':
            m = _STRING_RE.match(self._source, start)
            if not m:
                raise LexerError("Unterminated string", start)
            self._pos = m.end()
            return Token(TokenType.STRING, m.group(1), start)

        if char.isalpha():
            end = start
            while end < len(self._source) and self._source[end].isalpha():
                end += 1
            self._pos = end
            return Token(TokenType.IDENTIFIER, self._source[start:end], start)

        raise LexerError(f"Unknown character: {char!r}", start)


def tokenize(source: str) -> List[Token]:
    """
    Convert a formula string into a list of Tokens.
    Raises LexerError on the first malformed token.
    """
    lexer = Lexer()
    lexer.read(source)
    tokens: List[Token] = []
    while True:
        tok = lexer.next()
        if tok is None:
            return tokens
        tokens.append(tok)
