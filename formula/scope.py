"""
Formula v0.1 - Scopes and Values
Chained name bindings plus the built-in constants and math functions.
"""

import functools
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .errors import EvaluationError, UnknownIdentifierError


@dataclass(frozen=True)
class Value:
    """Base class for everything a name can be bound to."""
    pass


@dataclass(frozen=True)
class NumberValue(Value):
    value: float = 0.0


@dataclass(frozen=True)
class FunctionValue(Value):
    arity: int = 0
    implementation: Callable[[List[float]], float] = None


class Scope:
    """
    A mapping of names to Values with an optional parent.
    The parent is referenced, not owned: several scopes may share it.
    """

    def __init__(self, parent: Optional["Scope"] = None):
        self._bindings: Dict[str, Value] = {}
        self._parent = parent

    @property
    def parent(self) -> Optional["Scope"]:
        return self._parent

    def set_parent(self, parent: Optional["Scope"]) -> "Scope":
        self._parent = parent
        return self

    def lookup(self, name: str) -> Value:
        scope = self
        while scope is not None:
            if name in scope._bindings:
                return scope._bindings[name]
            scope = scope._parent
        raise UnknownIdentifierError(name)

    def define(self, name: str, value: Value) -> None:
        """Bind name in this scope only; ancestors are never touched."""
        self._bindings[name] = value

    def __contains__(self, name: str) -> bool:
        try:
            self.lookup(name)
        except UnknownIdentifierError:
            return False
        return True

    def __repr__(self):
        return f"Scope({sorted(self._bindings)!r}, parent={self._parent!r})"


# ── IEEE-754 helpers ──────────────────────────────────────────────────────────
# The math module raises where C math returns NaN or an infinity.

def _ieee(func):
    @functools.wraps(func)
    def wrapper(*args):
        try:
            return float(func(*args))
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf
    return wrapper


def _integral(func):
    @functools.wraps(func)
    def wrapper(x):
        if not math.isfinite(x):
            return x
        # keeps -0.0 for inputs in (-1, 0]
        return math.copysign(float(func(x)), x)
    return wrapper


def _ln(x: float) -> float:
    if math.isnan(x) or x < 0:
        return math.nan
    if x == 0:
        return -math.inf
    if math.isinf(x):
        return math.inf
    return math.log(x)


def _log(a: float, b: float) -> float:
    # no logarithm exists to a base of 1 or below 0
    if math.isnan(b) or b <= 0 or b == 1:
        return math.nan
    return _ln(a) / _ln(b)


def _max(a: float, b: float) -> float:
    if math.isnan(a) or math.isnan(b):
        return math.nan
    return max(a, b)


def _min(a: float, b: float) -> float:
    if math.isnan(a) or math.isnan(b):
        return math.nan
    return min(a, b)


_UNARY_FUNCTIONS = {
    "sin":   _ieee(math.sin),
    "cos":   _ieee(math.cos),
    "tan":   _ieee(math.tan),
    "sqrt":  _ieee(math.sqrt),
    "abs":   abs,
    "exp":   _ieee(math.exp),
    "round": _integral(round),
    "floor": _integral(math.floor),
    "ceil":  _integral(math.ceil),
}

_BINARY_FUNCTIONS = {
    "log": _log,
    "max": _max,
    "min": _min,
}


def _unary(name: str, func: Callable[[float], float]) -> FunctionValue:
    def implementation(arguments: List[float]) -> float:
        if len(arguments) != 1:
            raise EvaluationError(f"{name} expects one number")
        return func(arguments[0])
    return FunctionValue(1, implementation)


def _binary(name: str, func: Callable[[float, float], float]) -> FunctionValue:
    def implementation(arguments: List[float]) -> float:
        if len(arguments) != 2:
            raise EvaluationError(f"{name} expects two numbers")
        return func(arguments[0], arguments[1])
    return FunctionValue(2, implementation)


def default_scope() -> Scope:
    """Build a new scope holding the built-in constants and functions."""
    scope = Scope()

    scope.define("pi", NumberValue(math.pi))
    scope.define("e", NumberValue(math.e))

    for name, func in _UNARY_FUNCTIONS.items():
        scope.define(name, _unary(name, func))

    for name, func in _BINARY_FUNCTIONS.items():
        scope.define(name, _binary(name, func))

    return scope
