import pytest

from pymonkey import Environment, ErrorCodes, MonkeyError, NULL, int_val, empty_environment


@pytest.fixture
def root():
    env = Environment()
    env.define("a", int_val(1))
    return env


@pytest.fixture
def child(root):
    env = root.child()
    env.define("b", int_val(2))
    return env


def test_declare_binds_null(root):
    root.declare_variable("x")
    assert root.get_variable_value("x") is NULL


def test_declare_twice_in_same_scope_fails(root):
    with pytest.raises(MonkeyError) as excinfo:
        root.declare_variable("a")
    assert excinfo.value.code == ErrorCodes.DUPLICATE_DECLARATION


def test_shadowing_parent_binding_is_allowed(root, child):
    child.define("a", int_val(10))
    assert child.get_variable_value("a") == int_val(10)
    assert root.get_variable_value("a") == int_val(1)


def test_lookup_walks_parent_chain(child):
    assert child.get_variable_value("a") == int_val(1)
    assert child.get_variable_value("b") == int_val(2)


def test_parent_does_not_see_child_bindings(root, child):
    with pytest.raises(MonkeyError) as excinfo:
        root.get_variable_value("b")
    assert excinfo.value.code == ErrorCodes.UNBOUND_IDENTIFIER


def test_set_updates_nearest_binding(root, child):
    child.set_variable_value("a", int_val(5))
    assert root.get_variable_value("a") == int_val(5)
    assert "a" not in child.names()


def test_set_never_creates_binding(root):
    with pytest.raises(MonkeyError) as excinfo:
        root.set_variable_value("missing", int_val(1))
    assert excinfo.value.code == ErrorCodes.UNBOUND_IDENTIFIER
    assert "missing" not in root


def test_lookup_is_non_raising(child):
    assert child.lookup("a") == int_val(1)
    assert child.lookup("zzz") is None


def test_contains_and_len(root, child):
    assert "a" in child
    assert "b" in child
    assert "b" not in root
    assert len(child) == 1
    assert list(child) == ["b"]


def test_depth_and_parent(root, child):
    assert root.parent is None
    assert child.parent is root
    assert root.depth == 0
    assert child.child().depth == 2


def test_siblings_share_parent_but_not_bindings(root):
    left = root.child()
    right = root.child()
    left.define("x", int_val(1))
    assert "x" not in right
    right.define("x", int_val(2))
    assert left.get_variable_value("x") == int_val(1)


def test_empty_environment_is_root():
    env = empty_environment()
    assert env.parent is None
    assert env.names() == []


def test_repr_lists_names_only(root):
    assert repr(root) == "Environment(names=['a'], depth=0)"
