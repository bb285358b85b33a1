"""
Formula v0.1 - Command Line Interface

Usage:
    formula "sin(pi / 2) * x" -D x=3 [--debug] [--emit-ast]
    formula -f input.fx [-D name=value ...]
"""

import sys
import argparse


def _definition(text):
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not name.isalpha():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    try:
        return name, float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"value of {name!r} is not a number: {value!r}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="formula",
        description="Formula v0.1 — evaluate arithmetic expressions",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("expression", nargs="?", help="Expression to evaluate")
    source.add_argument("-f", "--file", help="Read the expression from a file")
    parser.add_argument(
        "-D", "--define",
        action="append",
        type=_definition,
        default=[],
        metavar="NAME=VALUE",
        help="Bind a number visible to the expression (repeatable)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print evaluation phase info to stderr",
    )
    parser.add_argument(
        "--emit-ast",
        action="store_true",
        dest="emit_ast",
        help="Print the parsed AST as JSON instead of evaluating it",
    )

    args = parser.parse_args(argv)

    from .compiler import compile_source, compile_file, parse_source, dump_ast
    from .errors import FormulaError
    from .scope import Scope, NumberValue

    scope = Scope()
    for name, value in args.define:
        scope.define(name, NumberValue(value))

    try:
        if args.emit_ast:
            if args.file:
                with open(args.file, "r", encoding="utf-8") as f:
                    text = f.read().strip()
            else:
                text = args.expression
            print(dump_ast(parse_source(text)))
        elif args.file:
            print(repr(compile_file(args.file, scope=scope, debug=args.debug)))
        else:
            print(repr(compile_source(args.expression, scope=scope, debug=args.debug)))
    except FileNotFoundError:
        print(f"[formula] Error: Input file not found: {args.file!r}", file=sys.stderr)
        sys.exit(1)
    except FormulaError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
