from tscheme.compiler.dsl import ast
from tscheme.compiler.dsl.ir_types import Num, Bool, Void, EmptyTuple, PairT, ProcT, TVar
from tscheme.compiler.dsl.parser import read, parse_te, parse_exp_text, parse_program, DottedList
from tscheme.compiler.dsl.result import Ok, Failure
from tscheme.compiler.dsl.values import SymbolSExp, CompoundSExp, EmptySExp


def test_read_atoms():
    r = read('1 -2 3.5 #t #f "hi" foo + -> .5')
    assert isinstance(r, Ok)
    assert r.value == [1, -2, 3.5, True, False, "hi", SymbolSExp("foo"), SymbolSExp("+"), SymbolSExp("->"), 0.5]


def test_read_whole_tokens_only():
    # digits or a boolean prefix followed by more symbol characters form a symbol
    r = read("5x #tag")
    assert r.value == [SymbolSExp("5x"), SymbolSExp("#tag")]


def test_read_lists_quotes_and_comments():
    r = read("(a (b c)) 'd ; trailing comment\n()")
    assert r.value == [
        [SymbolSExp("a"), [SymbolSExp("b"), SymbolSExp("c")]],
        [SymbolSExp("quote"), SymbolSExp("d")],
        [],
    ]


def test_read_dotted_pair():
    r = read("(1 2 . 3)")
    [d] = r.value
    assert isinstance(d, DottedList)
    assert d.items == [1, 2]
    assert d.tail == 3


def test_read_errors():
    for text in ("(+ 1", ")", "(. 1)"):
        r = read(text)
        assert isinstance(r, Failure)
        assert r.message.startswith("Parse error")


def test_parse_te_atomic_and_compound():
    assert parse_te("number") == Ok(Num)
    assert parse_te("(number * number -> boolean)") == Ok(ProcT([Num, Num], Bool))
    assert parse_te("(Empty -> void)") == Ok(ProcT([], Void))
    assert parse_te("(Pair number (Pair boolean Empty))") == Ok(PairT(Num, PairT(Bool, EmptyTuple)))
    assert parse_te("((number -> number) -> number)") == Ok(ProcT([ProcT([Num], Num)], Num))


def test_parse_te_variables_are_fresh_per_call():
    r1 = parse_te("(T -> T)")
    r2 = parse_te("(T -> T)")
    T1 = r1.value
    T2 = r2.value
    assert isinstance(T1.returnT, TVar)
    assert T1.paramTs[0] is T1.returnT
    assert T1.returnT is not T2.returnT


def test_parse_te_errors():
    for text in ("(number number)", "(number * -> boolean)", "(number -> )", "(number + number -> number)", "->"):
        r = parse_te(text)
        assert isinstance(r, Failure), text


def test_parse_lambda():
    r = parse_exp_text("(lambda ((x : number) (y : boolean)) : number (if y x 0))")
    proc = r.value
    assert isinstance(proc, ast.ProcExp)
    assert [a.var for a in proc.args] == ["x", "y"]
    assert [a.texp for a in proc.args] == [Num, Bool]
    assert proc.returnTE is Num
    assert len(proc.body) == 1
    assert isinstance(proc.body[0], ast.IfExp)
    assert proc.proc_type is ProcT([Num, Bool], Num)


def test_unannotated_declarations_get_fresh_variables():
    proc = parse_exp_text("(lambda (x) x)").value
    assert isinstance(proc.args[0].texp, TVar)
    assert isinstance(proc.returnTE, TVar)
    assert proc.args[0].texp is not proc.returnTE


def test_type_variable_names_scoped_per_top_level_form():
    prog = parse_program("(define (f : (T -> T)) (lambda ((x : T)) : T x)) (define (g : (T -> T)) (lambda ((x : T)) : T x))").value
    f, g = prog.exps
    fT = f.var.texp
    assert f.val.returnTE is fT.returnT
    assert f.val.args[0].texp is fT.paramTs[0]
    assert g.var.texp.returnT is not fT.returnT


def test_parse_special_forms():
    let = parse_exp_text("(let (((x : number) 1)) x)").value
    assert isinstance(let, ast.LetExp)
    assert let.bindings[0].var.var == "x"
    letrec = parse_exp_text("(letrec (((f : (Empty -> number)) (lambda () : number 1))) (f))").value
    assert isinstance(letrec, ast.LetrecExp)
    assert isinstance(letrec.bindings[0].val, ast.ProcExp)
    s = parse_exp_text("(set! x 1)").value
    assert isinstance(s, ast.SetExp)
    assert s.var.var == "x"
    app = parse_exp_text("(+ 1 2)").value
    assert isinstance(app, ast.AppExp)
    assert isinstance(app.rator, ast.PrimOp)
    assert len(app.rands) == 2


def test_parse_quote():
    lit = parse_exp_text("'(1 a . 2)").value
    assert isinstance(lit, ast.LitExp)
    assert lit.val == CompoundSExp(1, CompoundSExp(SymbolSExp("a"), 2))
    assert parse_exp_text("(quote ())").value.val == EmptySExp()
    assert parse_exp_text("'x").value.val == SymbolSExp("x")


def test_define_only_at_top_level():
    assert isinstance(parse_exp_text("(define (x : number) 1)").value, ast.DefineExp)
    r = parse_exp_text("(let (((y : number) 1)) (define (x : number) 1))")
    assert isinstance(r, Failure)
    assert "only allowed at top level" in r.message


def test_parse_failures():
    for text in ("(if 1 2)", "()", "(lambda x x)", "(let x 1)", "1 2", "(define x)", "(quote)"):
        assert isinstance(parse_exp_text(text), Failure), text


def test_parse_program():
    prog = parse_program("(define (x : number) 1) (+ x 1)").value
    assert isinstance(prog, ast.Program)
    assert len(prog.exps) == 2
    assert isinstance(prog.exps[0], ast.DefineExp)


def test_parse_program_l5_wrapper():
    prog = parse_program("(L5 (define (x : number) 1) x)").value
    assert len(prog.exps) == 2


def test_parse_empty_program():
    prog = parse_program("  ; nothing here\n").value
    assert isinstance(prog, ast.Program)
    assert prog.exps == ()
