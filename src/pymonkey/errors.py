# Monkey Error Types
# Error domain for evaluation and document validation errors

from __future__ import annotations

from enum import Enum
from typing import Any


#==============================================================================
# Error Codes
#==============================================================================

class ErrorCodes(str, Enum):
    """Error code constants for Monkey errors"""

    # Binding errors
    DUPLICATE_DECLARATION = "DuplicateDeclaration"
    UNBOUND_IDENTIFIER = "UnboundIdentifier"

    # Operator errors
    TYPE_MISMATCH = "TypeMismatch"
    UNKNOWN_OPERATOR = "UnknownOperator"

    # Call errors
    NOT_CALLABLE = "NotCallable"
    ARITY_MISMATCH = "ArityMismatch"

    # Integer domain errors
    DIVISION_BY_ZERO = "DivisionByZero"
    INTEGER_OVERFLOW = "IntegerOverflow"

    # Resource errors
    STACK_EXHAUSTED = "StackExhausted"

    # Program-level umbrella
    EVALUATION_FAILURE = "EvaluationFailure"

    # Document errors
    VALIDATION_ERROR = "ValidationError"


#==============================================================================
# Monkey Error Class
#==============================================================================

class MonkeyError(Exception):
    """Base exception class for all Monkey errors"""

    def __init__(self, code: ErrorCodes, message: str, meta: dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = meta

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"MonkeyError({self.code.value}, {self.message!r})"

    #---------------------------------------------------------------------------
    # Static factory methods for common errors
    #---------------------------------------------------------------------------

    @staticmethod
    def duplicate_declaration(name: str) -> "MonkeyError":
        """Create a DuplicateDeclaration error"""
        return MonkeyError(
            ErrorCodes.DUPLICATE_DECLARATION,
            f"identifier has already been declared: {name}",
            {"name": name},
        )

    @staticmethod
    def unbound_identifier(name: str) -> "MonkeyError":
        """Create an UnboundIdentifier error"""
        return MonkeyError(
            ErrorCodes.UNBOUND_IDENTIFIER,
            f"identifier not found: {name}",
            {"name": name},
        )

    @staticmethod
    def type_mismatch(left: str, operator: str, right: str) -> "MonkeyError":
        """Create a TypeMismatch error"""
        return MonkeyError(
            ErrorCodes.TYPE_MISMATCH,
            f"type mismatch: {left} {operator} {right}",
            {"operator": operator},
        )

    @staticmethod
    def unknown_operator(operator: str, *operand_types: str) -> "MonkeyError":
        """
        Create an UnknownOperator error.

        One operand type renders as a prefix form (``-BOOLEAN``), two as an
        infix form (``BOOLEAN + BOOLEAN``).
        """
        if len(operand_types) == 1:
            rendered = f"{operator}{operand_types[0]}"
        elif len(operand_types) == 2:
            rendered = f"{operand_types[0]} {operator} {operand_types[1]}"
        else:
            rendered = operator
        return MonkeyError(
            ErrorCodes.UNKNOWN_OPERATOR,
            f"unknown operator: {rendered}",
            {"operator": operator},
        )

    @staticmethod
    def not_callable(type_name: str) -> "MonkeyError":
        """Create a NotCallable error"""
        return MonkeyError(
            ErrorCodes.NOT_CALLABLE,
            f"not a function: {type_name}",
        )

    @staticmethod
    def arity_mismatch(expected: int, got: int) -> "MonkeyError":
        """Create an ArityMismatch error"""
        return MonkeyError(
            ErrorCodes.ARITY_MISMATCH,
            f"wrong number of arguments: expected {expected}, got {got}",
            {"expected": expected, "got": got},
        )

    @staticmethod
    def division_by_zero() -> "MonkeyError":
        """Create a DivisionByZero error"""
        return MonkeyError(ErrorCodes.DIVISION_BY_ZERO, "division by zero")

    @staticmethod
    def integer_overflow(operator: str) -> "MonkeyError":
        """Create an IntegerOverflow error"""
        return MonkeyError(
            ErrorCodes.INTEGER_OVERFLOW,
            f"integer overflow in '{operator}'",
            {"operator": operator},
        )

    @staticmethod
    def stack_exhausted(depth: int | None = None) -> "MonkeyError":
        """Create a StackExhausted error"""
        detail = f" (call depth {depth})" if depth is not None else ""
        return MonkeyError(
            ErrorCodes.STACK_EXHAUSTED,
            f"stack exhausted{detail}",
        )

    @staticmethod
    def validation(path: str, message: str, value: Any | None = None) -> "MonkeyError":
        """Create a ValidationError"""
        value_str = f" (value: {value!r})" if value is not None else ""
        return MonkeyError(
            ErrorCodes.VALIDATION_ERROR,
            f"Validation error at {path}: {message}{value_str}",
        )


class EvaluationFailure(MonkeyError):
    """
    Umbrella error raised when evaluation of a whole Program fails.

    The lower-level error is kept on ``cause`` and is also chained as
    ``__cause__`` by the evaluator.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(ErrorCodes.EVALUATION_FAILURE, message)
        self.cause = cause

    @property
    def cause_code(self) -> ErrorCodes | None:
        """Error code of the wrapped cause, when it is a MonkeyError"""
        if isinstance(self.cause, MonkeyError):
            return self.cause.code
        return None

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


#==============================================================================
# Validation Error Types
#==============================================================================

class ValidationError:
    """A single validation error"""

    def __init__(self, path: str, message: str, value: Any | None = None):
        self.path = path
        self.message = message
        self.value = value

    def __repr__(self) -> str:
        return f"ValidationError({self.path!r}, {self.message!r})"


class ValidationResult:
    """Result of a validation operation"""

    def __init__(self, valid: bool, errors: list[ValidationError], value: Any | None = None):
        self.valid = valid
        self.errors = errors
        self.value = value


def valid_result(value: Any) -> ValidationResult:
    """Create a successful validation result"""
    return ValidationResult(valid=True, errors=[], value=value)


def invalid_result(errors: list[ValidationError]) -> ValidationResult:
    """Create a failed validation result"""
    return ValidationResult(valid=False, errors=errors)


#==============================================================================
# Exhaustiveness Checking
#==============================================================================

def exhaustive(value: Any) -> None:
    """
    Asserts that a value is unreachable, ensuring exhaustive handling.
    Use in dispatch default branches so that a new node kind cannot be
    silently mishandled.

    Raises:
        AssertionError: If called (indicating unhandled case)

    Example:
        if node.kind == "int":
            return ...
        elif node.kind == "ident":
            return ...
        else:
            exhaustive(node)
    """
    raise AssertionError(f"Unexpected value: {value!r}")
