"""
Formula v0.1 - Tree-Walking Evaluator
Reduces an AST to a float, resolving names through a Scope chain.
Arithmetic follows IEEE-754: division by zero and domain errors produce
infinities and NaN instead of exceptions.
"""

import math
from .errors import EvaluationError
from .lexer import TokenType
from .scope import Scope, NumberValue, FunctionValue
from .ast_nodes import (
    ASTNode, NumberNode, IdentifierNode, BinaryOpNode, CallNode, NestedNode
)


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def _divide(left: float, right: float) -> float:
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # math.pow refuses 0 ** negative and negative ** fraction
        if base == 0:
            if math.copysign(1.0, base) < 0 and _is_odd_integer(exponent):
                return -math.inf
            return math.inf
        return math.nan


_BINARY_OPS = {
    TokenType.PLUS:     lambda a, b: a + b,
    TokenType.MINUS:    lambda a, b: a - b,
    TokenType.MULTIPLY: lambda a, b: a * b,
    TokenType.DIVIDE:   _divide,
    TokenType.EXPONENT: _power,
}


class Evaluator:
    def __init__(self, scope: Scope, debug: bool = False):
        self._scope = scope
        self._debug = debug

    def evaluate(self, node: ASTNode) -> float:
        method = f"_visit_{type(node).__name__}"
        visitor = getattr(self, method, None)
        if visitor is None:
            raise EvaluationError(f"Unrecognized expression node: {type(node).__name__}")
        return visitor(node)

    # ------------------------------------------------------------------ visitors

    def _visit_NumberNode(self, node: NumberNode) -> float:
        return node.value

    def _visit_IdentifierNode(self, node: IdentifierNode) -> float:
        value = self._scope.lookup(node.name)
        if isinstance(value, FunctionValue):
            raise EvaluationError("Can't use function as Identifier")
        return value.value

    def _visit_BinaryOpNode(self, node: BinaryOpNode) -> float:
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        op = _BINARY_OPS.get(node.op)
        if op is None:
            raise EvaluationError(f"Unrecognized binary operator: {node.op}")
        return op(left, right)

    def _visit_CallNode(self, node: CallNode) -> float:
        function = self._scope.lookup(node.function)
        if isinstance(function, NumberValue):
            raise EvaluationError("Can't use Number as Function")
        arguments = [self.evaluate(arg) for arg in node.arguments]
        return float(function.implementation(arguments))

    def _visit_NestedNode(self, node: NestedNode) -> float:
        from .compiler import compile_source
        return compile_source(node.source, self._scope, debug=self._debug)
