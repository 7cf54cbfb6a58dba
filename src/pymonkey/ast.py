"""
Monkey AST Definitions
Statement and expression node variants consumed by the evaluator

Nodes are frozen dataclasses tagged with a Literal 'kind' field so the
evaluator can dispatch over a closed set of variants. Child sequences are
tuples; a tree is never mutated once built.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import (
    Iterable,
    Literal,
    Optional,
    Tuple,
    TypeAlias,
    Union,
)


#==============================================================================
# Expressions
#==============================================================================

@dataclass(frozen=True)
class Identifier:
    """Name reference"""
    kind: Literal["ident"]
    name: str


@dataclass(frozen=True)
class IntegerLiteral:
    """Integer literal"""
    kind: Literal["int"]
    value: int


@dataclass(frozen=True)
class BooleanLiteral:
    """Boolean literal"""
    kind: Literal["bool"]
    value: bool


@dataclass(frozen=True)
class PrefixExpression:
    """Unary operator applied to one operand (`!x`, `-x`)"""
    kind: Literal["prefix"]
    operator: str
    operand: Expression


@dataclass(frozen=True)
class InfixExpression:
    """Binary operator applied to two operands"""
    kind: Literal["infix"]
    operator: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class IfExpression:
    """Conditional with an optional alternative block"""
    kind: Literal["if"]
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None


@dataclass(frozen=True)
class FunctionLiteral:
    """Function literal; evaluates to a closure"""
    kind: Literal["fn"]
    params: Tuple[Identifier, ...]
    body: BlockStatement


@dataclass(frozen=True)
class CallExpression:
    """Call of a callee expression with positional arguments"""
    kind: Literal["call"]
    callee: Expression
    args: Tuple[Expression, ...]


Expression: TypeAlias = Union[
    Identifier,
    IntegerLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
]


#==============================================================================
# Statements
#==============================================================================

@dataclass(frozen=True)
class LetStatement:
    """Declaration with an optional initializer"""
    kind: Literal["let"]
    name: Identifier
    value: Optional[Expression] = None


@dataclass(frozen=True)
class ReturnStatement:
    """Return with an optional value"""
    kind: Literal["return"]
    value: Optional[Expression] = None


@dataclass(frozen=True)
class ExpressionStatement:
    """Expression evaluated for its value"""
    kind: Literal["expr"]
    expression: Expression


@dataclass(frozen=True)
class BlockStatement:
    """Statement sequence used as a function body or if-branch"""
    kind: Literal["block"]
    statements: Tuple[Statement, ...]


Statement: TypeAlias = Union[
    LetStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
]


#==============================================================================
# Program
#==============================================================================

@dataclass(frozen=True)
class Program:
    """Root node: ordered top-level statements"""
    kind: Literal["program"]
    statements: Tuple[Statement, ...]


Node: TypeAlias = Union[Program, Statement, Expression]

PREFIX_OPERATORS = frozenset({"!", "-"})
INFIX_OPERATORS = frozenset({"+", "-", "*", "/", "<", ">", "==", "!="})


#==============================================================================
# Node Constructors
#==============================================================================

def ident(name: str) -> Identifier:
    return Identifier(kind="ident", name=name)


def int_lit(value: int) -> IntegerLiteral:
    return IntegerLiteral(kind="int", value=value)


def bool_lit(value: bool) -> BooleanLiteral:
    return BooleanLiteral(kind="bool", value=value)


def prefix(operator: str, operand: Expression) -> PrefixExpression:
    return PrefixExpression(kind="prefix", operator=operator, operand=operand)


def infix(left: Expression, operator: str, right: Expression) -> InfixExpression:
    return InfixExpression(kind="infix", operator=operator, left=left, right=right)


def if_expr(condition: Expression,
            consequence: BlockStatement,
            alternative: Optional[BlockStatement] = None) -> IfExpression:
    return IfExpression(
        kind="if",
        condition=condition,
        consequence=consequence,
        alternative=alternative,
    )


def fn_lit(params: Iterable[Union[str, Identifier]], body: BlockStatement) -> FunctionLiteral:
    """Build a function literal; bare strings are promoted to identifiers."""
    return FunctionLiteral(
        kind="fn",
        params=tuple(ident(p) if isinstance(p, str) else p for p in params),
        body=body,
    )


def call(callee: Expression, *args: Expression) -> CallExpression:
    return CallExpression(kind="call", callee=callee, args=tuple(args))


def let_stmt(name: Union[str, Identifier], value: Optional[Expression] = None) -> LetStatement:
    return LetStatement(
        kind="let",
        name=ident(name) if isinstance(name, str) else name,
        value=value,
    )


def return_stmt(value: Optional[Expression] = None) -> ReturnStatement:
    return ReturnStatement(kind="return", value=value)


def expr_stmt(expression: Expression) -> ExpressionStatement:
    return ExpressionStatement(kind="expr", expression=expression)


def block(*statements: Statement) -> BlockStatement:
    return BlockStatement(kind="block", statements=tuple(statements))


def program(*statements: Statement) -> Program:
    return Program(kind="program", statements=tuple(statements))
