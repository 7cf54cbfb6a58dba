"""
Monkey Evaluator
Implements big-step evaluation: env |- node ⇓ v

This module walks an AST against a chained Environment. Expressions yield
runtime values; statements may additionally yield a ReturnSignal, which is
threaded back through blocks and consumed at the nearest call boundary (or
at the Program). Errors are raised as MonkeyError and wrapped into a single
EvaluationFailure when they escape a Program.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from pymonkey.ast import (
        Node, Program, Statement,
        LetStatement, ReturnStatement,
        PrefixExpression, InfixExpression, IfExpression,
        FunctionLiteral, CallExpression,
    )

from pymonkey.types import (
    Value, FunctionVal, NULL,
    int_val, bool_val, function_val,
    is_function, is_truthy, values_equal, type_name, in_int_range,
)
from pymonkey.errors import MonkeyError, EvaluationFailure, exhaustive
from pymonkey.env import Environment, empty_environment

logger = logging.getLogger(__name__)


#==============================================================================
# Evaluation Options
#==============================================================================

@dataclass
class EvalOptions:
    """Options for evaluation

    max_depth: nested call limit; None leaves only the host stack as bound
    """
    max_depth: Optional[int] = None
    trace: bool = False


#==============================================================================
# Evaluation Context
#==============================================================================

@dataclass
class EvalContext:
    """Internal evaluation state for tracking call depth and configuration"""
    depth: int = 0
    max_depth: Optional[int] = None
    trace: bool = False


#==============================================================================
# Return Signal
#==============================================================================

@dataclass(frozen=True)
class ReturnSignal:
    """
    Outcome of a `return`: carries the returned value up to the nearest
    call boundary. Never escapes the evaluator.
    """
    value: Value


# A statement yields a value, a return signal, or nothing (let).
Outcome = Union[Value, ReturnSignal, None]


def is_return(outcome: Outcome) -> bool:
    """Check if an outcome is a pending return"""
    return isinstance(outcome, ReturnSignal)


def unwrap_return(outcome: Outcome) -> Value:
    """Collapse an outcome into the value delivered to a caller"""
    if isinstance(outcome, ReturnSignal):
        return outcome.value
    if outcome is None:
        return NULL
    return outcome


#==============================================================================
# Integer Operators
#==============================================================================

def _int_div(a: int, b: int) -> int:
    """Signed division truncating toward zero"""
    if b == 0:
        raise MonkeyError.division_by_zero()
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


ARITHMETIC_OPERATORS: Dict[str, Callable[[int, int], int]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _int_div,
}

RELATIONAL_OPERATORS: Dict[str, Callable[[int, int], bool]] = {
    "<": lambda a, b: a < b,
    ">": lambda a, b: a > b,
}


def _checked_int(value: int, operator: str) -> Value:
    if not in_int_range(value):
        raise MonkeyError.integer_overflow(operator)
    return int_val(value)


#==============================================================================
# Evaluator Class
#==============================================================================

class Evaluator:
    """
    Big-step evaluator for Monkey programs.

    The evaluator implements the following rules:
    - E-Int:    env |- int(n) ⇓ n
    - E-Bool:   env |- bool(b) ⇓ TRUE | FALSE
    - E-Ident:  env(x) = v ⇒ env |- x ⇓ v
    - E-Let:    env.declare(x), env |- e ⇓ v, env[x := v]
    - E-Fn:     env |- fn(params) body ⇓ ⟨params, body, env⟩
    - E-Call:   env |- args[i] ⇓ vi, env |- f ⇓ ⟨params, body, env'⟩,
                env'' = child(env'), env''[params := vi] |- body ⇓ v
                ⇒ env |- f(args) ⇓ v
    - E-If:     env |- cond ⇓ c, truthy(c) selects the branch, else null
    - E-Return: env |- e ⇓ v ⇒ env |- return e ⇓ Return(v)
    """

    def __init__(self, options: Optional[EvalOptions] = None):
        """
        Initialize the evaluator.

        Args:
            options: Evaluation options (max_depth, trace)
        """
        self._options = options or EvalOptions()

    @property
    def options(self) -> EvalOptions:
        """Get the evaluation options"""
        return self._options

    def _new_state(self) -> EvalContext:
        return EvalContext(
            depth=0,
            max_depth=self._options.max_depth,
            trace=self._options.trace,
        )

    #---------------------------------------------------------------------------
    # Public Evaluation API
    #---------------------------------------------------------------------------

    def evaluate(self, node: Node, env: Optional[Environment] = None) -> Value:
        """
        Evaluate a node: env |- node ⇓ v

        Args:
            node: AST node to evaluate (usually a Program)
            env: Environment to evaluate in; a fresh root scope when omitted.
                 Passing the same environment across calls behaves like a
                 persistent REPL session.

        Returns:
            Result value

        Raises:
            EvaluationFailure: If a Program fails to evaluate
            MonkeyError: If any other node fails to evaluate
        """
        if env is None:
            env = empty_environment()
        state = self._new_state()
        if node.kind == "program":
            return self._eval_program(node, env, state)
        try:
            return unwrap_return(self._eval_node(node, env, state))
        except RecursionError:
            raise MonkeyError.stack_exhausted() from None

    def apply_function(self, fn: Value, args: Sequence[Value]) -> Value:
        """
        Call a Function value from host code.

        Raises:
            MonkeyError: NotCallable, ArityMismatch, or any error raised by the body
        """
        state = self._new_state()
        try:
            return self._apply_function(fn, list(args), state)
        except RecursionError:
            raise MonkeyError.stack_exhausted() from None

    #---------------------------------------------------------------------------
    # Node Evaluation (Dispatch)
    #---------------------------------------------------------------------------

    def _eval_node(
        self,
        node: Node,
        env: Environment,
        state: EvalContext
    ) -> Outcome:
        """
        Main dispatch based on node kind.

        Args:
            node: Node to evaluate
            env: Current environment
            state: Evaluation context

        Returns:
            Value, ReturnSignal, or None for statements without a value
        """
        kind = node.kind

        if state.trace:
            logger.debug("eval %s (depth=%d)", kind, state.depth)

        # Statements
        if kind == "program":
            return self._eval_program(node, env, state)
        elif kind == "expr":
            return self._eval_node(node.expression, env, state)
        elif kind == "block":
            return self._eval_statements(node.statements, env, state)
        elif kind == "let":
            return self._eval_let(node, env, state)
        elif kind == "return":
            return self._eval_return(node, env, state)

        # Expressions
        elif kind == "ident":
            return env.get_variable_value(node.name)
        elif kind == "int":
            return _checked_int(node.value, "literal")
        elif kind == "bool":
            return bool_val(node.value)
        elif kind == "prefix":
            return self._eval_prefix(node, env, state)
        elif kind == "infix":
            return self._eval_infix(node, env, state)
        elif kind == "if":
            return self._eval_if(node, env, state)
        elif kind == "fn":
            return self._eval_fn(node, env, state)
        elif kind == "call":
            return self._eval_call(node, env, state)

        else:
            exhaustive(node)

    #---------------------------------------------------------------------------
    # Statement Evaluation
    #---------------------------------------------------------------------------

    def _eval_program(
        self,
        program: Program,
        env: Environment,
        state: EvalContext
    ) -> Value:
        """
        Evaluate top-level statements; the last produced value (or the value
        of a top-level `return`) is the program's result.

        Any error escaping the program is wrapped into an EvaluationFailure.
        """
        try:
            outcome = self._eval_statements(program.statements, env, state)
        except RecursionError:
            cause = MonkeyError.stack_exhausted()
            raise EvaluationFailure("evaluating failed", cause) from cause
        except Exception as e:
            raise EvaluationFailure("evaluating failed", e) from e
        return unwrap_return(outcome)

    def _eval_statements(
        self,
        statements: Sequence[Statement],
        env: Environment,
        state: EvalContext
    ) -> Union[Value, ReturnSignal]:
        """
        Evaluate statements in order in the same environment.

        Blocks do not open a scope. A ReturnSignal aborts the remaining
        statements and is handed back unchanged.
        """
        result: Value = NULL
        for statement in statements:
            outcome = self._eval_node(statement, env, state)
            if is_return(outcome):
                return outcome
            if outcome is not None:
                result = outcome
        return result

    def _eval_let(
        self,
        stmt: LetStatement,
        env: Environment,
        state: EvalContext
    ) -> Optional[ReturnSignal]:
        """
        E-Let: declare first, then evaluate the initializer in the same
        environment and store it. Produces no value.
        """
        name = stmt.name.name
        env.declare_variable(name)
        if stmt.value is None:
            return None

        value = self._eval_node(stmt.value, env, state)
        if is_return(value):
            return value
        env.set_variable_value(name, value)
        return None

    def _eval_return(
        self,
        stmt: ReturnStatement,
        env: Environment,
        state: EvalContext
    ) -> ReturnSignal:
        if stmt.value is None:
            return ReturnSignal(NULL)
        value = self._eval_node(stmt.value, env, state)
        if is_return(value):
            return value
        return ReturnSignal(value)

    #---------------------------------------------------------------------------
    # Operator Evaluation
    #---------------------------------------------------------------------------

    def _eval_prefix(
        self,
        expr: PrefixExpression,
        env: Environment,
        state: EvalContext
    ) -> Union[Value, ReturnSignal]:
        operand = self._eval_node(expr.operand, env, state)
        if is_return(operand):
            return operand
        return self.apply_prefix(expr.operator, operand)

    @staticmethod
    def apply_prefix(operator: str, operand: Value) -> Value:
        """
        Apply a prefix operator to an evaluated operand.

        `!` negates truthiness; `-` negates an integer.
        """
        if operator == "!":
            return bool_val(not is_truthy(operand))
        if operator == "-":
            if operand.kind != "int":
                raise MonkeyError.unknown_operator("-", type_name(operand))
            return _checked_int(-operand.value, "-")
        raise MonkeyError.unknown_operator(operator, type_name(operand))

    def _eval_infix(
        self,
        expr: InfixExpression,
        env: Environment,
        state: EvalContext
    ) -> Union[Value, ReturnSignal]:
        left = self._eval_node(expr.left, env, state)
        if is_return(left):
            return left
        right = self._eval_node(expr.right, env, state)
        if is_return(right):
            return right
        return self.apply_infix(expr.operator, left, right)

    @staticmethod
    def apply_infix(operator: str, left: Value, right: Value) -> Value:
        """
        Apply an infix operator to two evaluated operands.

        Arithmetic and relational operators require two integers: operands of
        different types are a TypeMismatch, two non-integers of the same type
        an UnknownOperator. Equality accepts any pair of values.
        """
        if operator in ARITHMETIC_OPERATORS or operator in RELATIONAL_OPERATORS:
            if left.kind == "int" and right.kind == "int":
                if operator in ARITHMETIC_OPERATORS:
                    return _checked_int(
                        ARITHMETIC_OPERATORS[operator](left.value, right.value),
                        operator,
                    )
                return bool_val(RELATIONAL_OPERATORS[operator](left.value, right.value))
            if left.kind != right.kind:
                raise MonkeyError.type_mismatch(type_name(left), operator, type_name(right))
            raise MonkeyError.unknown_operator(operator, type_name(left), type_name(right))

        if operator == "==":
            return bool_val(values_equal(left, right))
        if operator == "!=":
            return bool_val(not values_equal(left, right))

        raise MonkeyError.unknown_operator(operator, type_name(left), type_name(right))

    #---------------------------------------------------------------------------
    # Control Flow and Functions
    #---------------------------------------------------------------------------

    def _eval_if(
        self,
        expr: IfExpression,
        env: Environment,
        state: EvalContext
    ) -> Union[Value, ReturnSignal]:
        """
        E-IfTrue:  truthy(cond) ⇒ consequence
        E-IfFalse: otherwise ⇒ alternative, or null when absent
        """
        condition = self._eval_node(expr.condition, env, state)
        if is_return(condition):
            return condition

        if is_truthy(condition):
            return self._eval_node(expr.consequence, env, state)
        if expr.alternative is not None:
            return self._eval_node(expr.alternative, env, state)
        return NULL

    def _eval_fn(
        self,
        expr: FunctionLiteral,
        env: Environment,
        state: EvalContext
    ) -> FunctionVal:
        """
        E-Fn: env |- fn(params) body ⇓ ⟨params, body, env⟩

        The current environment is captured by reference, not copied.
        """
        return function_val(expr.params, expr.body, env)

    def _eval_call(
        self,
        expr: CallExpression,
        env: Environment,
        state: EvalContext
    ) -> Union[Value, ReturnSignal]:
        """
        E-Call: arguments left to right, then the callee, then the body in a
        child of the closure's environment (not the caller's).
        """
        args: List[Value] = []
        for arg in expr.args:
            value = self._eval_node(arg, env, state)
            if is_return(value):
                return value
            args.append(value)

        callee = self._eval_node(expr.callee, env, state)
        if is_return(callee):
            return callee

        return self._apply_function(callee, args, state)

    def _apply_function(
        self,
        fn: Value,
        args: List[Value],
        state: EvalContext
    ) -> Value:
        if not is_function(fn):
            raise MonkeyError.not_callable(type_name(fn))
        if fn.arity != len(args):
            raise MonkeyError.arity_mismatch(fn.arity, len(args))

        call_env = Environment(parent=fn.env)
        for param, arg in zip(fn.params, args):
            call_env.define(param.name, arg)

        state.depth += 1
        try:
            if state.max_depth is not None and state.depth > state.max_depth:
                raise MonkeyError.stack_exhausted(state.depth)
            if state.trace:
                logger.debug("call fn/%d (depth=%d)", fn.arity, state.depth)
            outcome = self._eval_node(fn.body, call_env, state)
        finally:
            state.depth -= 1

        return unwrap_return(outcome)


#==============================================================================
# Public API
#==============================================================================

def evaluate(
    node: Node,
    env: Optional[Environment] = None,
    options: Optional[EvalOptions] = None
) -> Value:
    """
    Evaluate an AST node.

    Args:
        node: Node to evaluate, usually a Program
        env: Environment to evaluate in (defaults to a fresh root scope)
        options: Evaluation options

    Returns:
        Result value
    """
    return Evaluator(options).evaluate(node, env)
