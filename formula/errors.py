"""
Formula v0.1 - Error Types
Every failure raised by the lexer, parser or evaluator derives from FormulaError.
"""


class FormulaError(Exception):
    """Base class for all language errors."""
    pass


class LexerError(FormulaError):
    def __init__(self, message: str, position: int):
        super().__init__(f"[LexerError] Position {position}: {message}")
        self.position = position


class ParseError(FormulaError):
    def __init__(self, message: str, position: int):
        super().__init__(f"[ParseError] Position {position}: {message}")
        self.position = position


class EvaluationError(FormulaError):
    pass


class UnknownIdentifierError(EvaluationError):
    def __init__(self, name: str):
        super().__init__(f'Unknown identifier "{name}"')
        self.name = name
