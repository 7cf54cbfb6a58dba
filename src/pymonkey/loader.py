# Monkey AST Document Loader
# Structural validation of JSON AST documents and construction of Program trees

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Optional

from pymonkey.ast import (
    Program, Statement, Expression, BlockStatement, Identifier,
    PREFIX_OPERATORS, INFIX_OPERATORS,
    ident, int_lit, bool_lit, prefix, infix, if_expr, fn_lit, call,
    let_stmt, return_stmt, expr_stmt, block, program,
)
from pymonkey.errors import (
    MonkeyError,
    ValidationError,
    invalid_result,
    valid_result,
    ValidationResult,
)
from pymonkey.types import in_int_range


#==============================================================================
# Validation Patterns
#==============================================================================

ID_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')
SEMVER_PATTERN = re.compile(r'^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$')


#==============================================================================
# Validation State
#==============================================================================

class ValidationState:
    """State tracking during validation"""

    def __init__(self) -> None:
        self.errors: list[ValidationError] = []
        self.path: list[str] = []

    def push_path(self, segment: str) -> None:
        """Push a path segment onto the validation path"""
        self.path.append(segment)

    def pop_path(self) -> None:
        """Pop the last path segment from the validation path"""
        self.path.pop()

    def current_path(self) -> str:
        """Get the current validation path as a dot-separated string"""
        return "$." + ".".join(self.path) if self.path else "$"

    def add_error(self, message: str, value: Any | None = None) -> None:
        """Add a validation error to the state"""
        self.errors.append(ValidationError(
            path=self.current_path(),
            message=message,
            value=value,
        ))


#==============================================================================
# Primitive Validators
#==============================================================================

def validate_array(value: Any) -> bool:
    """Check if value is a list"""
    return isinstance(value, list)


def validate_object(value: Any) -> bool:
    """Check if value is a dict (object)"""
    return isinstance(value, dict)


def validate_id(value: Any) -> bool:
    """Check if value is a valid identifier string"""
    return isinstance(value, str) and ID_PATTERN.match(value) is not None


def validate_version(value: Any) -> bool:
    """Check if value is a valid semantic version string"""
    return isinstance(value, str) and SEMVER_PATTERN.match(value) is not None


def validate_int(value: Any) -> bool:
    """Check if value is a JSON integer in the signed 64-bit range"""
    # bool is a subclass of int
    return isinstance(value, int) and not isinstance(value, bool) and in_int_range(value)


def _is_operator(value: Any, operators: frozenset[str]) -> bool:
    return isinstance(value, str) and value in operators


#==============================================================================
# Expression Building
#==============================================================================

def _child(state: ValidationState, segment: str, value: Any) -> Optional[Expression]:
    state.push_path(segment)
    result = build_expr(state, value)
    state.pop_path()
    return result


def build_expr(state: ValidationState, value: Any) -> Optional[Expression]:
    """Validate an Expression object and build its node; None when invalid"""
    if not validate_object(value):
        state.add_error("Expression must be an object", value)
        return None

    kind = value.get("kind")
    if not isinstance(kind, str):
        state.add_error("Expression must have 'kind' property", value)
        return None

    if kind == "ident":
        if not validate_id(value.get("name")):
            state.add_error("ident expression must have valid 'name' property", value.get("name"))
            return None
        return ident(value["name"])

    elif kind == "int":
        if not validate_int(value.get("value")):
            state.add_error("int expression must have a 64-bit integer 'value'", value.get("value"))
            return None
        return int_lit(value["value"])

    elif kind == "bool":
        if not isinstance(value.get("value"), bool):
            state.add_error("bool expression must have a boolean 'value'", value.get("value"))
            return None
        return bool_lit(value["value"])

    elif kind == "prefix":
        operator = value.get("operator")
        if not _is_operator(operator, PREFIX_OPERATORS):
            state.add_error(f"prefix operator must be one of {sorted(PREFIX_OPERATORS)}", operator)
        operand = _child(state, "operand", value.get("operand"))
        if not _is_operator(operator, PREFIX_OPERATORS) or operand is None:
            return None
        return prefix(operator, operand)

    elif kind == "infix":
        operator = value.get("operator")
        if not _is_operator(operator, INFIX_OPERATORS):
            state.add_error(f"infix operator must be one of {sorted(INFIX_OPERATORS)}", operator)
        left = _child(state, "left", value.get("left"))
        right = _child(state, "right", value.get("right"))
        if not _is_operator(operator, INFIX_OPERATORS) or left is None or right is None:
            return None
        return infix(left, operator, right)

    elif kind == "if":
        condition = _child(state, "condition", value.get("condition"))
        consequence = build_block(state, "consequence", value.get("consequence"))
        alternative = None
        if value.get("alternative") is not None:
            alternative = build_block(state, "alternative", value["alternative"])
            if alternative is None:
                return None
        if condition is None or consequence is None:
            return None
        return if_expr(condition, consequence, alternative)

    elif kind == "fn":
        params = build_params(state, value.get("params"))
        body = build_block(state, "body", value.get("body"))
        if params is None or body is None:
            return None
        return fn_lit(params, body)

    elif kind == "call":
        callee = _child(state, "callee", value.get("callee"))
        raw_args = value.get("args")
        if not validate_array(raw_args):
            state.add_error("call expression must have 'args' array", value)
            return None
        args = [_child(state, f"args[{i}]", arg) for i, arg in enumerate(raw_args)]
        if callee is None or any(arg is None for arg in args):
            return None
        return call(callee, *args)

    else:
        state.add_error(f"Unknown expression kind: {kind}", value)
        return None


def build_params(state: ValidationState, value: Any) -> Optional[list[Identifier]]:
    """Validate a parameter list: distinct identifiers"""
    state.push_path("params")
    try:
        if not validate_array(value):
            state.add_error("fn expression must have 'params' array", value)
            return None
        seen: set[str] = set()
        ok = True
        for i, param in enumerate(value):
            if not validate_id(param):
                state.add_error(f"params[{i}] must be a valid identifier", param)
                ok = False
            elif param in seen:
                state.add_error(f"duplicate parameter name: {param}", param)
                ok = False
            else:
                seen.add(param)
        return [ident(p) for p in value] if ok else None
    finally:
        state.pop_path()


#==============================================================================
# Statement Building
#==============================================================================

def build_statement(state: ValidationState, value: Any) -> Optional[Statement]:
    """Validate a Statement object and build its node; None when invalid"""
    if not validate_object(value):
        state.add_error("Statement must be an object", value)
        return None

    kind = value.get("kind")

    if kind == "let":
        if not validate_id(value.get("name")):
            state.add_error("let statement must have valid 'name' property", value.get("name"))
            return None
        if value.get("value") is None:
            return let_stmt(value["name"])
        initializer = _child(state, "value", value["value"])
        if initializer is None:
            return None
        return let_stmt(value["name"], initializer)

    elif kind == "return":
        if value.get("value") is None:
            return return_stmt()
        result = _child(state, "value", value["value"])
        if result is None:
            return None
        return return_stmt(result)

    elif kind == "expr":
        if "expression" not in value:
            state.add_error("expr statement must have 'expression' property", value)
            return None
        expression = _child(state, "expression", value["expression"])
        if expression is None:
            return None
        return expr_stmt(expression)

    else:
        state.add_error(f"Unknown statement kind: {kind}", value)
        return None


def build_statements(state: ValidationState, value: list[Any]) -> Optional[list[Statement]]:
    statements = []
    ok = True
    for i, raw in enumerate(value):
        state.push_path(f"[{i}]")
        statement = build_statement(state, raw)
        state.pop_path()
        if statement is None:
            ok = False
        else:
            statements.append(statement)
    return statements if ok else None


def build_block(state: ValidationState, segment: str, value: Any) -> Optional[BlockStatement]:
    """Validate a statement array used as a block"""
    state.push_path(segment)
    try:
        if not validate_array(value):
            state.add_error(f"'{segment}' must be an array of statements", value)
            return None
        statements = build_statements(state, value)
        return block(*statements) if statements is not None else None
    finally:
        state.pop_path()


#==============================================================================
# Document Validation
#==============================================================================

def validate_program(doc: Any) -> ValidationResult:
    """
    Validate an AST document and build its Program.

    Returns:
        Validation result; on success its value is the Program
    """
    state = ValidationState()

    if not validate_object(doc):
        state.add_error("Document must be an object", doc)
        return invalid_result(state.errors)

    if "version" in doc and not validate_version(doc["version"]):
        state.push_path("version")
        state.add_error("version must be a semantic version", doc["version"])
        state.pop_path()

    raw = doc.get("program")
    if not validate_array(raw):
        state.add_error("Document must have 'program' array", raw)
        return invalid_result(state.errors)

    state.push_path("program")
    mark = len(state.path)
    try:
        statements = build_statements(state, raw)
    except RecursionError:
        # Unwound frames left their segments behind
        del state.path[mark:]
        state.add_error("document nesting too deep")
        statements = None
    state.pop_path()

    # Paths like "program.[0]" read better as "program[0]"
    for error in state.errors:
        error.path = error.path.replace(".[", "[")

    if state.errors or statements is None:
        return invalid_result(state.errors)
    return valid_result(program(*statements))


def load_program(doc: Any) -> Program:
    """
    Build a Program from an AST document.

    Raises:
        MonkeyError: ValidationError listing every problem found
    """
    result = validate_program(doc)
    if not result.valid:
        first = result.errors[0]
        error = MonkeyError.validation(first.path, first.message, first.value)
        error.meta = {"errors": result.errors}
        raise error
    return result.value


def load_document(path: str) -> dict[str, Any] | None:
    """
    Load an AST document from a file path.

    Returns:
        Decoded JSON document, or None if it cannot be read or decoded
    """
    try:
        with open(Path(path), "r", encoding="utf-8") as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError, UnicodeDecodeError, RecursionError, OSError):
        return None
