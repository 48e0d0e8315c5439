from tscheme.compiler.dsl.quoted import typeof_quoted
from tscheme.compiler.dsl.ir_types import Num, Bool, Str, Literal, EmptyTuple, PairT
from tscheme.compiler.dsl.result import Ok, Failure
from tscheme.compiler.dsl.values import SymbolSExp, EmptySExp, CompoundSExp, make_list, format_sexp


def test_top_level_atoms_are_literal():
    assert typeof_quoted(5, True) == Ok(Literal)
    assert typeof_quoted(True, True) == Ok(Literal)
    assert typeof_quoted("s", True) == Ok(Literal)
    assert typeof_quoted(SymbolSExp("a"), True) == Ok(Literal)


def test_nested_atoms_keep_their_type():
    assert typeof_quoted(5, False) == Ok(Num)
    assert typeof_quoted(2.5, False) == Ok(Num)
    assert typeof_quoted(False, False) == Ok(Bool)
    assert typeof_quoted("s", False) == Ok(Str)
    assert typeof_quoted(SymbolSExp("a"), False) == Ok(Literal)


def test_empty_list():
    assert typeof_quoted(EmptySExp(), True) == Ok(EmptyTuple)


def test_pairs():
    assert typeof_quoted(CompoundSExp(5, 6), True) == Ok(PairT(Num, Num))
    sv = make_list([1, SymbolSExp("a"), "s"])
    assert typeof_quoted(sv, True) == Ok(PairT(Num, PairT(Literal, PairT(Str, EmptyTuple))))


def test_unexpected_quoted_form():
    r = typeof_quoted(object(), True)
    assert isinstance(r, Failure)
    assert r.message.startswith("Unexpected quoted form")


def test_format_sexp():
    assert format_sexp(make_list([1, SymbolSExp("a")])) == "(1 a)"
    assert format_sexp(CompoundSExp(1, 2)) == "(1 . 2)"
    assert format_sexp(make_list([True, "x"], 3)) == '(#t "x" . 3)'
    assert format_sexp(EmptySExp()) == "()"
