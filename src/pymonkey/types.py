"""
Monkey Runtime Values
Integer, Boolean, Null and Function (closure) values

Values are frozen dataclasses tagged with a Literal 'kind' field. Booleans
and null are canonical singletons (TRUE, FALSE, NULL) compared by identity;
functions compare by identity; integers compare by numeric value.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import (
    Literal,
    Tuple,
    TypeAlias,
    Union,
    TYPE_CHECKING,
)

from pymonkey.errors import exhaustive

if TYPE_CHECKING:
    from pymonkey.ast import BlockStatement, Identifier
    from pymonkey.env import Environment


#==============================================================================
# Integer Domain
#==============================================================================

INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1


def in_int_range(value: int) -> bool:
    """Check that a Python int fits the signed 64-bit range"""
    return INT_MIN <= value <= INT_MAX


#==============================================================================
# Value Domain
#==============================================================================

@dataclass(frozen=True)
class IntegerVal:
    """Integer value"""
    kind: Literal["int"]
    value: int


@dataclass(frozen=True)
class BooleanVal:
    """Boolean value; only TRUE and FALSE should exist"""
    kind: Literal["bool"]
    value: bool


@dataclass(frozen=True)
class NullVal:
    """Null value; only NULL should exist"""
    kind: Literal["null"]


@dataclass(frozen=True, eq=False)
class FunctionVal:
    """
    Closure value.

    The parameter list and body are shared with the FunctionLiteral that
    produced the closure; env is the environment active at that point and is
    held by reference.
    """
    kind: Literal["fn"]
    params: Tuple[Identifier, ...]
    body: BlockStatement = field(repr=False)
    env: Environment = field(repr=False)

    @property
    def arity(self) -> int:
        return len(self.params)


Value: TypeAlias = Union[
    IntegerVal,
    BooleanVal,
    NullVal,
    FunctionVal,
]


#==============================================================================
# Canonical Instances
#==============================================================================

TRUE = BooleanVal(kind="bool", value=True)
FALSE = BooleanVal(kind="bool", value=False)
NULL = NullVal(kind="null")


#==============================================================================
# Value Constructors
#==============================================================================

def int_val(value: int) -> IntegerVal:
    return IntegerVal(kind="int", value=value)


def bool_val(value: bool) -> BooleanVal:
    """Return the canonical Boolean for a native bool"""
    return TRUE if value else FALSE


def null_val() -> NullVal:
    return NULL


def function_val(params: Tuple[Identifier, ...], body: BlockStatement, env: Environment) -> FunctionVal:
    return FunctionVal(kind="fn", params=params, body=body, env=env)


#==============================================================================
# Type Guards and Utility Functions
#==============================================================================

def is_integer(v: Value) -> bool:
    """Check if value is an integer"""
    return v.kind == "int"


def is_boolean(v: Value) -> bool:
    """Check if value is a boolean"""
    return v.kind == "bool"


def is_null(v: Value) -> bool:
    """Check if value is null"""
    return v.kind == "null"


def is_function(v: Value) -> bool:
    """Check if value is a function"""
    return v.kind == "fn"


_TYPE_NAMES = {
    "int": "INTEGER",
    "bool": "BOOLEAN",
    "null": "NULL",
    "fn": "FUNCTION",
}


def type_name(v: Value) -> str:
    """Type tag used in error messages"""
    return _TYPE_NAMES[v.kind]


def is_truthy(v: Value) -> bool:
    """
    Truthiness used by `!` and `if`.

    Integers are truthy when non-zero, booleans are their own truth value,
    everything else (null, functions) is falsy.
    """
    if v.kind == "int":
        return v.value != 0
    if v.kind == "bool":
        return v.value
    return False


def values_equal(a: Value, b: Value) -> bool:
    """Value equality behind `==` and `!=`"""
    if a.kind == "int" and b.kind == "int":
        return a.value == b.value
    return a is b


def inspect(v: Value) -> str:
    """Display form of a value"""
    kind = v.kind
    if kind == "int":
        return str(v.value)
    elif kind == "bool":
        return "true" if v.value else "false"
    elif kind == "null":
        return "null"
    elif kind == "fn":
        params = ", ".join(p.name for p in v.params)
        return f"fn({params}) {{...}}"
    else:
        exhaustive(v)
        return ""
