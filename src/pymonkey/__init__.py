"""
Monkey Python Implementation

A tree-walking evaluator for the Monkey language: integers, booleans,
let/return statements, conditionals, and first-class functions with
lexical closures.

This module provides the public API.
"""

from __future__ import annotations

#==============================================================================
# AST
#==============================================================================

from pymonkey.ast import (
    Node,
    Program,
    Statement,
    Expression,
    LetStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
    Identifier,
    IntegerLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    # Node constructors
    ident,
    int_lit,
    bool_lit,
    prefix,
    infix,
    if_expr,
    fn_lit,
    call,
    let_stmt,
    return_stmt,
    expr_stmt,
    block,
    program,
)

#==============================================================================
# Values
#==============================================================================

from pymonkey.types import (
    Value,
    IntegerVal,
    BooleanVal,
    NullVal,
    FunctionVal,
    TRUE,
    FALSE,
    NULL,
    int_val,
    bool_val,
    null_val,
    inspect,
    is_truthy,
    type_name,
    values_equal,
)

#==============================================================================
# Environment, Errors, Evaluation
#==============================================================================

from pymonkey.env import Environment, empty_environment

from pymonkey.errors import (
    ErrorCodes,
    MonkeyError,
    EvaluationFailure,
    ValidationError,
    ValidationResult,
)

from pymonkey.evaluator import (
    EvalOptions,
    Evaluator,
    evaluate,
)

from pymonkey.loader import (
    load_document,
    load_program,
    validate_program,
)

__version__ = "0.1.0"

__all__ = [
    # AST
    "Node", "Program", "Statement", "Expression",
    "LetStatement", "ReturnStatement", "ExpressionStatement", "BlockStatement",
    "Identifier", "IntegerLiteral", "BooleanLiteral",
    "PrefixExpression", "InfixExpression", "IfExpression",
    "FunctionLiteral", "CallExpression",
    "ident", "int_lit", "bool_lit", "prefix", "infix", "if_expr", "fn_lit",
    "call", "let_stmt", "return_stmt", "expr_stmt", "block", "program",
    # Values
    "Value", "IntegerVal", "BooleanVal", "NullVal", "FunctionVal",
    "TRUE", "FALSE", "NULL",
    "int_val", "bool_val", "null_val",
    "inspect", "is_truthy", "type_name", "values_equal",
    # Environment
    "Environment", "empty_environment",
    # Errors
    "ErrorCodes", "MonkeyError", "EvaluationFailure",
    "ValidationError", "ValidationResult",
    # Evaluation
    "EvalOptions", "Evaluator", "evaluate",
    # Documents
    "load_document", "load_program", "validate_program",
]
