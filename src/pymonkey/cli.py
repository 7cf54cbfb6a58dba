#!/usr/bin/env python3
"""
Monkey Python CLI

A command-line interface for validating and evaluating Monkey AST documents.
Documents given together are evaluated in order against one shared root
environment, so later documents see the bindings of earlier ones.

Usage:
    python -m pymonkey.cli <path> [<path> ...] [options]
    pymonkey <path> [<path> ...] [options]

Examples:
    pymonkey examples/add.json
    pymonkey examples/fib.json --trace
    pymonkey examples/prelude.json examples/use_prelude.json --verbose
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from typing import Any, List, Optional

from pymonkey.ast import Program
from pymonkey.env import Environment, empty_environment
from pymonkey.errors import EvaluationFailure, MonkeyError
from pymonkey.evaluator import EvalOptions, Evaluator
from pymonkey.loader import load_document, validate_program
from pymonkey.types import Value, inspect


#==============================================================================
# CLI Output Formatting
#==============================================================================

class Colors:
    """ANSI color codes for terminal output"""
    RESET = "\x1b[0m"
    BOLD = "\x1b[1m"
    DIM = "\x1b[2m"
    RED = "\x1b[31m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"
    MAGENTA = "\x1b[35m"
    CYAN = "\x1b[36m"


def print_msg(msg: str, color: str = Colors.RESET, file: Any = None) -> None:
    """Print a message with optional color"""
    print(f"{color}{msg}{Colors.RESET}", file=file or sys.stdout)


def format_value(value: Value) -> str:
    """Format a value for display"""
    kind = value.kind
    if kind == "int":
        color = Colors.CYAN
    elif kind == "bool":
        color = Colors.MAGENTA
    elif kind == "fn":
        color = Colors.YELLOW
    else:
        color = Colors.DIM
    return f"{color}{inspect(value)}{Colors.RESET}"


def format_failure(error: MonkeyError) -> List[str]:
    """Render an evaluation error and its cause as display lines"""
    lines = [f"{error.code.value}: {error.message}"]
    cause = error.cause if isinstance(error, EvaluationFailure) else None
    if isinstance(cause, MonkeyError):
        lines.append(f"  caused by {cause.code.value}: {cause.message}")
    elif cause is not None:
        lines.append(f"  caused by {type(cause).__name__}: {cause}")
    return lines


#==============================================================================
# Document Loading
#==============================================================================

def load_program_file(path: str) -> Optional[Program]:
    """
    Load and validate one document, reporting problems on stderr.

    Returns:
        The Program, or None if the document could not be loaded or is invalid
    """
    doc = load_document(path)
    if doc is None:
        print_msg(f"Error: Could not load document: {path}", Colors.RED, sys.stderr)
        return None

    result = validate_program(doc)
    if not result.valid:
        print_msg(f"Validation failed: {path}", Colors.RED, sys.stderr)
        for error in result.errors:
            print_msg(f"  - {error.path}: {error.message}", Colors.RED, sys.stderr)
        return None
    return result.value


#==============================================================================
# Main CLI
#==============================================================================

def run_documents(
    paths: List[str],
    trace: bool = False,
    validate_only: bool = False,
    verbose: bool = False,
    max_depth: Optional[int] = None,
    env: Optional[Environment] = None,
) -> int:
    """
    Validate and evaluate documents in sequence.

    Args:
        paths: Document paths, evaluated in order
        trace: Enable trace logging of evaluation
        validate_only: Only validate, don't evaluate
        verbose: Show detailed output
        max_depth: Override the maximum call depth
        env: Shared root environment (a fresh one when omitted)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    programs: List[Program] = []
    for path in paths:
        program = load_program_file(path)
        if program is None:
            return 1
        programs.append(program)
        if verbose:
            print_msg(f"Validated {path} ({len(program.statements)} statements)", Colors.DIM)

    if validate_only:
        print_msg("✓ Validation passed", Colors.GREEN)
        return 0

    options = EvalOptions(trace=trace)
    if max_depth is not None:
        options.max_depth = max_depth
    evaluator = Evaluator(options)
    session = env if env is not None else empty_environment()

    for path, program in zip(paths, programs):
        try:
            value = evaluator.evaluate(program, session)
        except MonkeyError as e:
            print_msg(f"Evaluation failed: {path}", Colors.RED, sys.stderr)
            for line in format_failure(e):
                print_msg(line, Colors.RED, sys.stderr)
            if verbose:
                traceback.print_exc()
            return 1

        if verbose:
            print_msg(f"{path} =>", Colors.DIM)
        print(format_value(value))

    if verbose:
        print_msg(f"Bindings: {', '.join(session.names()) or '(none)'}", Colors.DIM)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pymonkey",
        description="Evaluate Monkey AST documents",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        metavar="path",
        help="AST document(s) to evaluate, in order, in one shared environment",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed output",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Only validate, don't evaluate",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Log every evaluated node (debug level)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        dest="max_depth",
        help="Maximum nested call depth before StackExhausted",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)

    if args.trace:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )

    return run_documents(
        args.paths,
        trace=args.trace,
        validate_only=args.validate,
        verbose=args.verbose,
        max_depth=args.max_depth,
    )


if __name__ == "__main__":
    sys.exit(main())
