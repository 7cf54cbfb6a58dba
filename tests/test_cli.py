import json
import logging
from pathlib import Path

import pytest

from pymonkey import Environment, int_val
from pymonkey.cli import build_parser, format_failure, main, run_documents
from pymonkey.errors import EvaluationFailure, MonkeyError


EXAMPLES = Path(__file__).parent.parent / "examples"


def example(name):
    return str(EXAMPLES / name)


@pytest.fixture
def write_doc(tmp_path):
    def write(name, doc):
        path = tmp_path / name
        path.write_text(json.dumps(doc), encoding="utf-8")
        return str(path)
    return write


def test_evaluates_document(capsys):
    assert main([example("add.json")]) == 0
    assert "5" in capsys.readouterr().out


def test_recursive_example(capsys):
    assert main([example("fib.json")]) == 0
    assert "55" in capsys.readouterr().out


def test_documents_share_one_environment(capsys):
    assert main([example("prelude.json"), example("use_prelude.json")]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert "null" in lines[0]
    assert "42" in lines[1]


def test_later_document_alone_fails(capsys):
    assert main([example("use_prelude.json")]) == 1
    err = capsys.readouterr().err
    assert "Evaluation failed" in err
    assert "UnboundIdentifier: identifier not found: double" in err


def test_caller_supplied_environment_persists():
    env = Environment()
    assert run_documents([example("prelude.json")], env=env) == 0
    assert "double" in env


def test_validate_only(capsys):
    assert main([example("fib.json"), "--validate"]) == 0
    out = capsys.readouterr().out
    assert "Validation passed" in out
    assert "55" not in out


def test_invalid_document_reports_paths(write_doc, capsys):
    path = write_doc("bad.json", {"program": [{"kind": "expr", "expression": {"kind": "int", "value": "1"}}]})
    assert main([path]) == 1
    err = capsys.readouterr().err
    assert "Validation failed" in err
    assert "$.program[0].expression" in err


def test_missing_document(tmp_path, capsys):
    assert main([str(tmp_path / "nope.json")]) == 1
    assert "Could not load document" in capsys.readouterr().err


def test_invalid_document_stops_before_evaluation(write_doc, capsys):
    bad = write_doc("bad.json", {"program": 3})
    assert main([example("add.json"), bad]) == 1
    assert "5" not in capsys.readouterr().out


def test_max_depth_option(write_doc, capsys):
    # let loop = fn(n) { loop(n) }; loop(0)
    loop = {"kind": "ident", "name": "loop"}
    path = write_doc("loop.json", {"program": [
        {"kind": "let", "name": "loop", "value": {
            "kind": "fn",
            "params": ["n"],
            "body": [{"kind": "expr", "expression": {
                "kind": "call", "callee": loop, "args": [{"kind": "ident", "name": "n"}],
            }}],
        }},
        {"kind": "expr", "expression": {"kind": "call", "callee": loop, "args": [{"kind": "int", "value": 0}]}},
    ]})
    assert main([path, "--max-depth", "3"]) == 1
    assert "StackExhausted" in capsys.readouterr().err


def test_trace_logs_evaluation(caplog, capsys):
    with caplog.at_level(logging.DEBUG, logger="pymonkey"):
        assert main([example("add.json"), "--trace"]) == 0
    assert any("call fn/2" in record.getMessage() for record in caplog.records)


def test_parser_requires_a_path():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_format_failure_lines():
    failure = EvaluationFailure("evaluating failed", MonkeyError.arity_mismatch(2, 1))
    assert format_failure(failure) == [
        "EvaluationFailure: evaluating failed",
        "  caused by ArityMismatch: wrong number of arguments: expected 2, got 1",
    ]
    assert format_failure(MonkeyError.division_by_zero()) == ["DivisionByZero: division by zero"]


def test_run_documents_returns_values_in_order(capsys):
    env = Environment()
    env.define("seed", int_val(1))
    assert run_documents([example("add.json")], verbose=True, env=env) == 0
    out = capsys.readouterr().out
    assert "add.json =>" in out
    assert "Bindings: seed, add" in out


def test_invalid_utf8_document(tmp_path, capsys):
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"program": [{"kind": "expr", "expression": {"kind": "ident", "name": "\xff"}}]}')
    assert main([str(path)]) == 1
    assert "Could not load document" in capsys.readouterr().err
