"""
Formula v0.1 - Test Suite
Tests for Lexer, Parser, Scope, Evaluator, Compiler and CLI.
"""

import sys
import os
import io
import json
import math
import tempfile
import unittest
import dataclasses
from contextlib import redirect_stdout, redirect_stderr

# Allow running from project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from formula.errors import (
    FormulaError, LexerError, ParseError, EvaluationError, UnknownIdentifierError
)
from formula.lexer import Lexer, tokenize, TokenType
from formula.parser import Parser
from formula.scope import Scope, NumberValue, FunctionValue, default_scope
from formula.evaluator import Evaluator
from formula.compiler import compile_source, compile_file, parse_source, dump_ast
from formula.ast_nodes import (
    ASTNode, NumberNode, IdentifierNode, BinaryOpNode, CallNode, NestedNode
)


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════

def token_types(source: str):
    return [t.type for t in tokenize(source)]


def scope_with(**numbers) -> Scope:
    scope = Scope()
    for name, value in numbers.items():
        scope.define(name, NumberValue(value))
    return scope


# ═══════════════════════════════════════════════════════════════════════════════
# Lexer Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestLexer(unittest.TestCase):

    def test_number_integer(self):
        toks = tokenize("42")
        self.assertEqual(toks[0].type, TokenType.NUMBER)
        self.assertEqual(toks[0].value, "42")

    def test_number_float(self):
        toks = tokenize("3.14")
        self.assertEqual(toks[0].type, TokenType.NUMBER)
        self.assertEqual(toks[0].value, "3.14")

    def test_identifier(self):
        toks = tokenize("myVar")
        self.assertEqual(toks[0].type, TokenType.IDENTIFIER)
        self.assertEqual(toks[0].value, "myVar")

    def test_identifier_stops_at_digit(self):
        toks = tokenize("ab12")
        self.assertEqual([t.type for t in toks], [TokenType.IDENTIFIER, TokenType.NUMBER])
        self.assertEqual(toks[0].value, "ab")
        self.assertEqual(toks[1].value, "12")

    def test_single_character_tokens(self):
        self.assertEqual(token_types("+ - * / ^ ( ) ,"), [
            TokenType.PLUS, TokenType.MINUS, TokenType.MULTIPLY, TokenType.DIVIDE,
            TokenType.EXPONENT, TokenType.LPAREN, TokenType.RPAREN, TokenType.COMMA,
        ])

    def test_string_content_without_quotes(self):
        toks = tokenize('"2 + 3"')
        self.assertEqual(len(toks), 1)
        self.assertEqual(toks[0].type, TokenType.STRING)
        self.assertEqual(toks[0].value, "2 + 3")

    def test_positions(self):
        toks = tokenize("1 +  x")
        self.assertEqual([t.position for t in toks], [0, 2, 5])

    def test_no_spaces_needed(self):
        self.assertEqual(token_types("2*(x+1)"), [
            TokenType.NUMBER, TokenType.MULTIPLY, TokenType.LPAREN,
            TokenType.IDENTIFIER, TokenType.PLUS, TokenType.NUMBER, TokenType.RPAREN,
        ])

    def test_next_returns_none_at_end(self):
        lexer = Lexer()
        lexer.read("7  ")
        self.assertEqual(lexer.next().value, "7")
        self.assertIsNone(lexer.next())
        self.assertIsNone(lexer.next())

    def test_empty_input(self):
        lexer = Lexer()
        lexer.read("")
        self.assertIsNone(lexer.next())

    def test_read_resets_cursor(self):
        lexer = Lexer()
        lexer.read("1 + 2")
        lexer.next()
        lexer.read("x")
        tok = lexer.next()
        self.assertEqual(tok.type, TokenType.IDENTIFIER)
        self.assertEqual(tok.value, "x")

    def test_multiple_decimal_points(self):
        with self.assertRaises(LexerError):
            tokenize("3.14.15")

    def test_multiple_decimal_points_on_pull(self):
        lexer = Lexer()
        lexer.read("3.14.15")
        with self.assertRaises(LexerError) as cm:
            lexer.next()
        self.assertIn("multiple decimal points", str(cm.exception))

    def test_unterminated_string(self):
        lexer = Lexer()
        lexer.read('"hello')
        with self.assertRaises(LexerError) as cm:
            lexer.next()
        self.assertIn("Unterminated string", str(cm.exception))

    def test_invalid_character(self):
        with self.assertRaises(LexerError) as cm:
            tokenize("2 + @")
        self.assertEqual(cm.exception.position, 4)

    def test_tab_is_not_whitespace(self):
        with self.assertRaises(LexerError):
            tokenize("1\t+ 2")

    def test_underscore_not_allowed(self):
        with self.assertRaises(LexerError):
            tokenize("a_b")

    def test_identifier_letters_only(self):
        with self.assertRaises(LexerError) as cm:
            tokenize("x\u00b2")
        self.assertEqual(cm.exception.position, 1)

    def test_unicode_letters(self):
        toks = tokenize("\u00e9t\u00e9 \u03c0")
        self.assertEqual([t.value for t in toks], ["\u00e9t\u00e9", "\u03c0"])


# ═══════════════════════════════════════════════════════════════════════════════
# Parser Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestParser(unittest.TestCase):

    def test_number(self):
        self.assertEqual(parse_source("42"), NumberNode(value=42.0))

    def test_identifier(self):
        self.assertEqual(parse_source("x"), IdentifierNode(name="x"))

    def test_precedence(self):
        ast = parse_source("2 + 3 * 4")
        self.assertIsInstance(ast, BinaryOpNode)
        self.assertEqual(ast.op, TokenType.PLUS)
        self.assertEqual(ast.left, NumberNode(value=2.0))
        self.assertIsInstance(ast.right, BinaryOpNode)
        self.assertEqual(ast.right.op, TokenType.MULTIPLY)

    def test_subtraction_left_associative(self):
        ast = parse_source("10 - 2 - 3")
        self.assertIsInstance(ast.left, BinaryOpNode)
        self.assertEqual(ast.right, NumberNode(value=3.0))

    def test_exponent_right_associative(self):
        ast = parse_source("2 ^ 3 ^ 2")
        self.assertEqual(ast.left, NumberNode(value=2.0))
        self.assertIsInstance(ast.right, BinaryOpNode)
        self.assertEqual(ast.right.op, TokenType.EXPONENT)

    def test_parentheses(self):
        ast = parse_source("(2 + 3) * 4")
        self.assertEqual(ast.op, TokenType.MULTIPLY)
        self.assertEqual(ast.left.op, TokenType.PLUS)

    def test_explicit_call(self):
        ast = parse_source("max(1, 2 + 3)")
        self.assertIsInstance(ast, CallNode)
        self.assertEqual(ast.function, "max")
        self.assertEqual(len(ast.arguments), 2)
        self.assertIsInstance(ast.arguments[1], BinaryOpNode)

    def test_implicit_call_right_associative(self):
        expected = CallNode(
            function="sin",
            arguments=(CallNode(function="cos", arguments=(NumberNode(value=0.0),)),),
        )
        self.assertEqual(parse_source("sin cos 0"), expected)

    def test_implicit_call_binds_tighter_than_operators(self):
        ast = parse_source("sqrt 16 + 1")
        self.assertEqual(ast.op, TokenType.PLUS)
        self.assertEqual(ast.left, CallNode(function="sqrt", arguments=(NumberNode(value=16.0),)))

    def test_nested_string(self):
        self.assertEqual(parse_source('"1 + 2"'), NestedNode(source="1 + 2"))

    def test_nested_string_not_parsed_early(self):
        self.assertEqual(parse_source('"1 +"'), NestedNode(source="1 +"))

    def test_number_callee_becomes_name(self):
        ast = parse_source("42(1)")
        self.assertIsInstance(ast, CallNode)
        self.assertEqual(ast.function, "42.0")

    def test_binary_callee_rejected(self):
        with self.assertRaises(ParseError) as cm:
            parse_source("(1 + 2)(3)")
        self.assertIn("BinaryOpNode", str(cm.exception))

    def test_nested_callee_rejected(self):
        with self.assertRaises(ParseError):
            parse_source('"1" 2')

    def test_trailing_tokens_ignored(self):
        self.assertEqual(parse_source("1 )"), NumberNode(value=1.0))

    def test_empty_input(self):
        with self.assertRaises(ParseError) as cm:
            parse_source("")
        self.assertIn("empty", str(cm.exception))

    def test_blank_input(self):
        with self.assertRaises(ParseError):
            parse_source("   ")

    def test_unexpected_end(self):
        with self.assertRaises(ParseError) as cm:
            parse_source("2 +")
        self.assertIn("Unexpected end of input", str(cm.exception))

    def test_missing_closing_parenthesis(self):
        with self.assertRaises(ParseError):
            parse_source("2 + (3 * 4")

    def test_missing_closing_parenthesis_in_call(self):
        with self.assertRaises(ParseError):
            parse_source("max(1, 2")

    def test_token_mismatch(self):
        with self.assertRaises(ParseError) as cm:
            parse_source("(1 ,")
        self.assertIn("Expected one of: RPAREN", str(cm.exception))

    def test_unknown_expression(self):
        with self.assertRaises(ParseError) as cm:
            parse_source(")")
        self.assertIn("Unknown expression", str(cm.exception))

    def test_empty_argument_list(self):
        with self.assertRaises(ParseError):
            parse_source("max()")

    def test_parser_reusable(self):
        parser = Parser()
        parser.parse("1 + 2")
        self.assertEqual(parser.parse("x"), IdentifierNode(name="x"))

    def test_lexer_error_propagates(self):
        with self.assertRaises(LexerError):
            parse_source("1 + $")

    def test_nodes_are_immutable(self):
        node = parse_source("1")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            node.value = 2.0


# ═══════════════════════════════════════════════════════════════════════════════
# Scope Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestScope(unittest.TestCase):

    def test_lookup_local(self):
        scope = scope_with(x=1.0)
        self.assertEqual(scope.lookup("x"), NumberValue(1.0))

    def test_lookup_parent(self):
        parent = scope_with(a=5.0)
        child = Scope(parent)
        self.assertEqual(child.lookup("a"), NumberValue(5.0))

    def test_unknown_identifier(self):
        with self.assertRaises(UnknownIdentifierError) as cm:
            Scope(Scope()).lookup("nope")
        self.assertEqual(cm.exception.name, "nope")
        self.assertEqual(str(cm.exception), 'Unknown identifier "nope"')

    def test_define_is_local(self):
        parent = scope_with(a=5.0)
        child = Scope(parent)
        child.define("a", NumberValue(1.0))
        self.assertEqual(child.lookup("a"), NumberValue(1.0))
        self.assertEqual(parent.lookup("a"), NumberValue(5.0))

    def test_define_overwrites(self):
        scope = scope_with(a=5.0)
        scope.define("a", NumberValue(6.0))
        self.assertEqual(scope.lookup("a"), NumberValue(6.0))

    def test_set_parent(self):
        parent = scope_with(a=5.0)
        child = Scope()
        self.assertIs(child.set_parent(parent), child)
        self.assertIs(child.parent, parent)
        self.assertIn("a", child)
        child.set_parent(None)
        self.assertNotIn("a", child)

    def test_shared_parent(self):
        parent = scope_with(a=5.0)
        left, right = Scope(parent), Scope(parent)
        left.define("b", NumberValue(1.0))
        self.assertIn("a", right)
        self.assertNotIn("b", right)

    def test_default_scope_contents(self):
        scope = default_scope()
        self.assertEqual(scope.lookup("pi"), NumberValue(math.pi))
        self.assertEqual(scope.lookup("e"), NumberValue(math.e))
        for name in ("sin", "cos", "tan", "sqrt", "abs", "exp", "round", "floor", "ceil"):
            self.assertEqual(scope.lookup(name).arity, 1, name)
        for name in ("log", "max", "min"):
            self.assertEqual(scope.lookup(name).arity, 2, name)

    def test_default_scope_is_fresh(self):
        first = default_scope()
        first.define("pi", NumberValue(3.0))
        self.assertEqual(default_scope().lookup("pi"), NumberValue(math.pi))
        self.assertIsNone(default_scope().parent)

    def test_unary_arity_check(self):
        sqrt = default_scope().lookup("sqrt")
        with self.assertRaises(EvaluationError) as cm:
            sqrt.implementation([1.0, 2.0])
        self.assertEqual(str(cm.exception), "sqrt expects one number")

    def test_binary_arity_check(self):
        log = default_scope().lookup("log")
        with self.assertRaises(EvaluationError) as cm:
            log.implementation([8.0])
        self.assertEqual(str(cm.exception), "log expects two numbers")


# ═══════════════════════════════════════════════════════════════════════════════
# Evaluator Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestEvaluator(unittest.TestCase):

    def test_simple_number(self):
        self.assertEqual(compile_source("42"), 42.0)

    def test_simple_addition(self):
        self.assertEqual(compile_source("1 + 2"), 3.0)

    def test_operator_precedence(self):
        self.assertEqual(compile_source("2+3*4"), 14.0)

    def test_parentheses_grouping(self):
        self.assertEqual(compile_source("(2+3)*4"), 20.0)

    def test_exponentiation(self):
        self.assertEqual(compile_source("2 ^ 3"), 8.0)

    def test_exponentiation_associativity(self):
        self.assertEqual(compile_source("2^3^2"), 512.0)

    def test_left_associative_subtraction(self):
        self.assertEqual(compile_source("10-2-3"), 5.0)

    def test_left_associative_division(self):
        self.assertEqual(compile_source("10/2/5"), 1.0)

    def test_result_is_float(self):
        self.assertIsInstance(compile_source("1"), float)

    def test_constant_pi(self):
        self.assertEqual(compile_source("pi"), math.pi)

    def test_sin_function(self):
        self.assertAlmostEqual(compile_source("sin(pi / 2)"), 1.0, places=4)

    def test_sqrt_function(self):
        self.assertEqual(compile_source("sqrt(16)"), 4.0)

    def test_log_function(self):
        self.assertAlmostEqual(compile_source("log(8, 2)"), 3.0)

    def test_max_min_functions(self):
        self.assertEqual(compile_source("max(10, 20)"), 20.0)
        self.assertEqual(compile_source("min(10, 20)"), 10.0)

    def test_round_half_to_even(self):
        self.assertEqual(compile_source("round(2.5)"), 2.0)
        self.assertEqual(compile_source("round(3.5)"), 4.0)

    def test_floor_ceil_abs(self):
        self.assertEqual(compile_source("floor(2.7) + ceil(2.2)"), 5.0)
        self.assertEqual(compile_source("abs(0 - 3)"), 3.0)

    def test_implicit_call(self):
        expected = math.sin(math.cos(0))
        self.assertAlmostEqual(compile_source("sin(cos 0)"), expected)
        self.assertAlmostEqual(compile_source("sin cos 0"), expected)

    def test_complex_expression(self):
        self.assertAlmostEqual(compile_source("sqrt(16) + log(8, 2) * 2 ^ 2"), 16.0)

    def test_complex_combined_expression(self):
        self.assertAlmostEqual(compile_source("sqrt(16) + sin(pi/2) * (2 ^ 3 - 1)"), 11.0)

    # ── IEEE-754 behaviour ────────────────────────────────────────────────────

    def test_division_by_zero(self):
        self.assertEqual(compile_source("1/0"), math.inf)
        self.assertEqual(compile_source("(0 - 1) / 0"), -math.inf)
        self.assertTrue(math.isnan(compile_source("0/0")))

    def test_power_edge_cases(self):
        self.assertTrue(math.isnan(compile_source("(0 - 8) ^ (1 / 3)")))
        self.assertEqual(compile_source("0 ^ (0 - 1)"), math.inf)
        self.assertEqual(compile_source("10 ^ 400"), math.inf)
        self.assertEqual(compile_source("(0 - 10) ^ 401"), -math.inf)

    def test_sqrt_negative_is_nan(self):
        self.assertTrue(math.isnan(compile_source("sqrt(y)", scope_with(y=-4.0))))

    def test_builtins_do_not_raise_on_domain_errors(self):
        self.assertEqual(compile_source("log(0, 10)"), -math.inf)
        self.assertEqual(compile_source("exp 1000"), math.inf)
        self.assertEqual(compile_source("floor(1 / 0)"), math.inf)
        self.assertTrue(math.isnan(compile_source("max(0 / 0, 1)")))
        self.assertTrue(math.isnan(compile_source("log(8, 1)")))
        self.assertTrue(math.isnan(compile_source("log(8, 0)")))
        self.assertTrue(math.isnan(compile_source("log(8, 0 - 2)")))
        self.assertTrue(math.isnan(compile_source("log(0 - 8, 2)")))

    def test_integral_functions_keep_negative_zero(self):
        for src in ("round(0 - 0.4)", "ceil(0 - 0.5)", "floor(0 * (0 - 1))"):
            result = compile_source(src)
            self.assertEqual(result, 0.0, src)
            self.assertEqual(math.copysign(1.0, result), -1.0, src)
        self.assertEqual(compile_source("floor(0 - 0.5)"), -1.0)

    # ── Scopes ────────────────────────────────────────────────────────────────

    def test_expression_with_scope_variables(self):
        scope = scope_with(x=3.0, y=16.0)
        self.assertEqual(compile_source("(x+5)^2 - sqrt(y)", scope), 60.0)

    def test_non_integer_values(self):
        scope = scope_with(x=2.5, y=2.25)
        self.assertAlmostEqual(compile_source("(x+5)^2 - sqrt(y)", scope), 54.75)

    def test_missing_variable(self):
        with self.assertRaises(UnknownIdentifierError) as cm:
            compile_source("(x+5)^2 - sqrt(y)", scope_with(y=16.0))
        self.assertEqual(cm.exception.name, "x")

    def test_unknown_identifier(self):
        with self.assertRaises(EvaluationError) as cm:
            compile_source("unknownVar")
        self.assertIn("unknownVar", str(cm.exception))

    def test_function_as_identifier(self):
        with self.assertRaises(EvaluationError) as cm:
            compile_source("sqrt")
        self.assertEqual(str(cm.exception), "Can't use function as Identifier")

    def test_number_as_function(self):
        with self.assertRaises(EvaluationError) as cm:
            compile_source("pi(2)")
        self.assertEqual(str(cm.exception), "Can't use Number as Function")

    def test_number_literal_as_function(self):
        with self.assertRaises(EvaluationError):
            compile_source("42(1)")

    def test_too_many_arguments(self):
        with self.assertRaises(EvaluationError) as cm:
            compile_source("sqrt(1,2)")
        self.assertEqual(str(cm.exception), "sqrt expects one number")

    def test_missing_implicit_argument(self):
        with self.assertRaises(EvaluationError) as cm:
            compile_source("max 1")
        self.assertEqual(str(cm.exception), "max expects two numbers")

    def test_custom_function(self):
        scope = Scope()
        scope.define("f", FunctionValue(1, lambda args: args[0] * 3))
        self.assertEqual(compile_source("f(4)", scope), 12.0)
        self.assertEqual(compile_source("f 4", scope), 12.0)

    def test_custom_function_many_arguments(self):
        scope = Scope()
        scope.define("g", FunctionValue(2, lambda args: args[0] + args[1]))
        scope.define("h", FunctionValue(3, lambda args: args[0] - args[1] * args[2]))
        self.assertEqual(compile_source("g(7, 8)", scope), 15.0)
        self.assertEqual(compile_source("h(10, 2, 3)", scope), 4.0)

    def test_custom_function_sees_parent_scope(self):
        parent = scope_with(a=5.0)
        scope = Scope(parent)
        scope.define("f", FunctionValue(1, lambda args: args[0] + scope.lookup("a").value))
        self.assertEqual(compile_source("f(10)", scope), 15.0)

    def test_custom_function_result_coerced(self):
        scope = Scope()
        scope.define("seven", FunctionValue(1, lambda args: 7))
        result = compile_source("seven 0", scope)
        self.assertIsInstance(result, float)
        self.assertEqual(result, 7.0)

    def test_defaults_shadow_caller_bindings(self):
        self.assertEqual(compile_source("pi", scope_with(pi=3.0)), math.pi)

    def test_caller_scope_untouched(self):
        scope = scope_with(x=1.0)
        compile_source("x + sin 0", scope)
        self.assertNotIn("sin", scope)
        self.assertIsNone(scope.parent)

    def test_independent_of_scope_without_identifiers(self):
        for src in ("2+3*4", "2^3^2", "10/2/5", '"1 + 1" * 3'):
            self.assertEqual(compile_source(src), compile_source(src, scope_with(x=9.0)))

    def test_left_before_right(self):
        calls = []

        def record(args):
            calls.append(args[0])
            return args[0]

        scope = Scope()
        scope.define("tick", FunctionValue(1, record))
        compile_source("tick 1 + tick 2 * tick 3", scope)
        compile_source("max(tick 4, tick 5)", scope)
        self.assertEqual(calls, [1.0, 2.0, 3.0, 4.0, 5.0])

    # ── Nested expressions ────────────────────────────────────────────────────

    def test_nested_expression(self):
        self.assertEqual(compile_source('"2 + 3"'), 5.0)

    def test_nested_expression_with_function(self):
        self.assertEqual(compile_source('"sqrt(81)"'), 9.0)

    def test_nested_expression_with_whitespace(self):
        self.assertEqual(compile_source('" 3 + 4 * 2 "'), 11.0)

    def test_nested_expression_sees_bindings(self):
        self.assertEqual(compile_source('"x * 3" + 1', scope_with(x=2.0)), 7.0)

    def test_nested_expression_as_argument(self):
        self.assertEqual(compile_source('sqrt("8 * 2")'), 4.0)

    def test_nested_errors_unwrapped(self):
        with self.assertRaises(UnknownIdentifierError):
            compile_source('"unknownVar"')
        with self.assertRaises(ParseError):
            compile_source('"1 +"')
        with self.assertRaises(LexerError):
            compile_source('"@"')

    # ── Direct evaluator use ──────────────────────────────────────────────────

    def test_evaluate_tree(self):
        tree = BinaryOpNode(left=NumberNode(value=1.0), op=TokenType.PLUS, right=NumberNode(value=2.0))
        self.assertEqual(Evaluator(default_scope()).evaluate(tree), 3.0)

    def test_unknown_node(self):
        with self.assertRaises(EvaluationError):
            Evaluator(default_scope()).evaluate(ASTNode())

    def test_unknown_operator(self):
        tree = BinaryOpNode(left=NumberNode(value=1.0), op=TokenType.COMMA, right=NumberNode(value=2.0))
        with self.assertRaises(EvaluationError):
            Evaluator(default_scope()).evaluate(tree)


# ═══════════════════════════════════════════════════════════════════════════════
# Compiler Tests
# ═══════════════════════════════════════════════════════════════════════════════

class TestCompiler(unittest.TestCase):

    def test_error_hierarchy(self):
        for cls in (LexerError, ParseError, EvaluationError, UnknownIdentifierError):
            self.assertTrue(issubclass(cls, FormulaError), cls)

    def test_dump_ast(self):
        tree = json.loads(dump_ast(parse_source("1 + max(x, 2)")))
        self.assertEqual(tree["_type"], "BinaryOpNode")
        self.assertEqual(tree["op"], "PLUS")
        self.assertEqual(tree["left"], {"_type": "NumberNode", "value": 1.0})
        self.assertEqual(tree["right"]["_type"], "CallNode")
        self.assertEqual(tree["right"]["function"], "max")
        self.assertEqual(len(tree["right"]["arguments"]), 2)

    def test_compile_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "input.fx")
            with open(path, "w", encoding="utf-8") as f:
                f.write("x * 3\n")
            self.assertEqual(compile_file(path, scope_with(x=2.0)), 6.0)

    def test_debug_trace(self):
        err = io.StringIO()
        with redirect_stderr(err):
            compile_source('1 + "2"', debug=True)
        out = err.getvalue()
        self.assertIn("[formula] Phase 1", out)
        self.assertIn("[formula] Phase 2", out)
        self.assertIn("'2'", out)

    def test_no_trace_by_default(self):
        err = io.StringIO()
        with redirect_stderr(err):
            compile_source("1 + 2")
        self.assertEqual(err.getvalue(), "")


# ═══════════════════════════════════════════════════════════════════════════════
# CLI Tests
# ═══════════════════════════════════════════════════════════════════════════════

from formula.cli import main


class TestCLI(unittest.TestCase):

    def _run(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            main(list(argv))
        return out.getvalue(), err.getvalue()

    def _fail(self, *argv):
        err = io.StringIO()
        with redirect_stdout(io.StringIO()), redirect_stderr(err):
            with self.assertRaises(SystemExit) as cm:
                main(list(argv))
        return cm.exception.code, err.getvalue()

    def test_expression(self):
        out, _ = self._run("1 + 2")
        self.assertEqual(out.strip(), "3.0")

    def test_define(self):
        out, _ = self._run("x * y", "-D", "x=4", "--define", "y=2.5")
        self.assertEqual(out.strip(), "10.0")

    def test_emit_ast(self):
        out, _ = self._run("1 + 2", "--emit-ast")
        self.assertEqual(json.loads(out)["_type"], "BinaryOpNode")

    def test_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "input.fx")
            with open(path, "w", encoding="utf-8") as f:
                f.write("2 ^ 10\n")
            out, _ = self._run("-f", path)
        self.assertEqual(out.strip(), "1024.0")

    def test_debug_flag(self):
        _, err = self._run("1", "--debug")
        self.assertIn("[formula]", err)

    def test_evaluation_error_exit_code(self):
        code, err = self._fail("unknownVar")
        self.assertEqual(code, 1)
        self.assertIn("unknownVar", err)

    def test_missing_file(self):
        code, err = self._fail("-f", os.path.join(tempfile.gettempdir(), "no-such-formula.fx"))
        self.assertEqual(code, 1)
        self.assertIn("not found", err)

    def test_bad_definition(self):
        code, _ = self._fail("1", "-D", "x")
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main(verbosity=2)
