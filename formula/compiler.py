"""
Formula v0.1 - Compiler Orchestrator
Parses and evaluates formula text under the default scope chain.
"""

import json
import sys
from enum import Enum
from typing import Optional
from .parser import Parser
from .evaluator import Evaluator
from .scope import Scope, default_scope
from .ast_nodes import ASTNode


def parse_source(source: str) -> ASTNode:
    """Parse formula text into an AST without evaluating it."""
    return Parser().parse(source)


def compile_source(
    source: str,
    scope: Optional[Scope] = None,
    debug: bool = False,
) -> float:
    """
    Parse and evaluate formula text.

    Parameters
    ----------
    source : formula text, e.g. "sin(pi / 2) + x"
    scope  : optional caller scope; visible beneath the built-in bindings
    debug  : print each phase summary to stderr

    Returns
    -------
    The value of the expression as a float

    Raises
    ------
    LexerError, ParseError or EvaluationError, unmodified
    """

    def log(msg):
        if debug:
            print(f"[formula] {msg}", file=sys.stderr)

    # ── Phase 1: Parsing ──────────────────────────────────────────────────────
    log(f"Phase 1: Parsing {source!r}")
    ast = parse_source(source)
    log(f"  root {type(ast).__name__}")

    # ── Phase 2: Evaluation ───────────────────────────────────────────────────
    # fresh scope -> built-ins -> caller scope
    log("Phase 2: Evaluation")
    local = Scope(parent=default_scope().set_parent(scope))
    result = Evaluator(local, debug=debug).evaluate(ast)

    log(f"  result {result!r}")
    return result


def compile_file(
    input_path: str,
    scope: Optional[Scope] = None,
    debug: bool = False,
) -> float:
    """Read a formula file and evaluate its content."""
    with open(input_path, "r", encoding="utf-8") as f:
        source = f.read()

    # The lexer only skips spaces, so trailing newlines must go
    return compile_source(source.strip(), scope=scope, debug=debug)


# ── AST serialization (for --emit-ast) ────────────────────────────────────────

def dump_ast(node: ASTNode) -> str:
    return json.dumps(_node_to_dict(node), indent=2)


def _node_to_dict(node):
    if isinstance(node, tuple):
        return [_node_to_dict(n) for n in node]
    if isinstance(node, Enum):
        return node.name
    if not isinstance(node, ASTNode):
        return node  # float or str
    d = {"_type": type(node).__name__}
    for field_name in node.__dataclass_fields__:
        val = getattr(node, field_name)
        d[field_name] = _node_to_dict(val)
    return d
