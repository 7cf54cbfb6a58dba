import pytest

from pymonkey import Environment, EvaluationFailure, ErrorCodes, evaluate, expr_stmt, program


@pytest.fixture
def env():
    """A fresh root environment for each test."""
    return Environment()


def run(*statements, env=None, options=None):
    """Evaluate statements as a Program."""
    return evaluate(program(*statements), env, options)


def run_expr(expression, env=None):
    """Evaluate a single expression statement as a Program."""
    return run(expr_stmt(expression), env=env)


def assert_failure(statements, code: ErrorCodes, contains: str | None = None, env=None):
    """Evaluate a Program expecting an EvaluationFailure caused by `code`."""
    with pytest.raises(EvaluationFailure) as excinfo:
        run(*statements, env=env)
    failure = excinfo.value
    assert failure.code == ErrorCodes.EVALUATION_FAILURE
    assert failure.cause_code == code, f"expected {code}, got {failure.cause!r}"
    if contains is not None:
        assert contains in failure.cause.message
    return failure.cause
