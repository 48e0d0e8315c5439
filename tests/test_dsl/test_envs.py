import pytest

from tscheme.compiler.dsl.envs import TypeEnv
from tscheme.compiler.dsl.ir_types import Num, Bool, Str
from tscheme.compiler.dsl.result import Ok, Failure


def test_empty_env_lookup_fails():
    r = TypeEnv.empty().lookup("x")
    assert isinstance(r, Failure)
    assert r.message == "Unbound identifier: x"


def test_extend_and_lookup():
    env = TypeEnv.empty().extend(["x", "y"], [Num, Bool])
    assert env.lookup("x") == Ok(Num)
    assert env.lookup("y") == Ok(Bool)
    assert "x" in env
    assert "z" not in env
    assert env["z"] is None


def test_extend_does_not_mutate_parent():
    outer = TypeEnv.empty().extend(["x"], [Num])
    inner = outer.extend(["y"], [Str])
    assert "y" in inner
    assert "y" not in outer
    assert inner.parent is outer


def test_innermost_binding_wins():
    outer = TypeEnv.empty().extend(["x"], [Num])
    inner = outer.extend(["x"], [Bool])
    assert inner.lookup("x") == Ok(Bool)
    assert outer.lookup("x") == Ok(Num)
    assert inner.names() == ["x"]


def test_lookup_walks_to_outer_frames():
    env = TypeEnv.empty().extend(["a"], [Num]).extend(["b"], [Bool]).extend(["c"], [Str])
    assert env.lookup("a") == Ok(Num)
    assert env.names() == ["c", "b", "a"]


def test_extend_arity_is_a_contract_error():
    with pytest.raises(ValueError):
        TypeEnv.empty().extend(["x", "y"], [Num])
