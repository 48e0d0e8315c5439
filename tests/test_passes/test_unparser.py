import re

import pytest

from tscheme.compiler.dsl import ast
from tscheme.compiler.dsl.parser import parse_exp_text, parse_program
from tscheme.compiler.dsl.result import Ok
from tscheme.compiler.passes import Context, PassManager
from tscheme.compiler.passes.analyses import (
    AnalysisObject, AstPrinterPass, PrintedAST, TypeCheckingPass, TypeCheckResult, unparse,
)
from tscheme.compiler.passes.pass_base import Analysis


@pytest.mark.parametrize("text", [
    "5",
    "#f",
    '"hi"',
    "(if #t 1 2)",
    "(lambda ((x : number)) : number (+ x 1))",
    "(lambda () : (Pair number string) (cons 1 \"a\"))",
    "(let (((x : number) 1) ((y : boolean) #t)) x)",
    "(letrec (((f : (number -> number)) (lambda ((n : number)) : number n))) (f 1))",
    "'(1 a . 2)",
    "(set! x 1)",
    "(define (x : number) 1)",
])
def test_unparse_reproduces_annotated_text(text):
    assert unparse(parse_exp_text(text).value) == Ok(text)


def test_unparse_writes_fresh_variables_for_missing_annotations():
    text = unparse(parse_exp_text("(lambda (x) x)").value).value
    assert re.fullmatch(r"\(lambda \(\(x : T_\d+\)\) : T_\d+ x\)", text)


def test_unparse_program():
    prog = parse_program("(define (x : number) 1) x").value
    assert unparse(prog) == Ok("(L5 (define (x : number) 1) x)")


def test_ast_printer():
    ctx = PassManager(AstPrinterPass()).run(parse_exp_text("(+ 1 2)").value)
    assert ctx.get(PrintedAST).text.splitlines() == [
        "AppExp",
        "│   PrimOp(op='+')",
        "│   Seq",
        "│   │   NumExp(val=1)",
        "│   │   NumExp(val=2)",
    ]


def test_ast_printer_shows_annotations():
    ctx = PassManager(AstPrinterPass()).run(parse_exp_text("(lambda ((x : number)) : boolean #t)").value)
    lines = ctx.get(PrintedAST).text.splitlines()
    assert lines[0] == "ProcExp(returnTE=boolean)"
    assert "│   │   VarDecl(var='x', texp=number)" in lines


class Typed(AnalysisObject):
    def __init__(self, ok):
        self.ok = ok

class NeedsTypes(Analysis):
    requires = (TypeCheckResult,)
    produces = (Typed,)
    name = "needs_types"

    def run(self, root, ctx):
        return Typed(ctx.get(TypeCheckResult).ok)


def test_pass_dependencies_are_enforced():
    with pytest.raises(RuntimeError, match="requires TypeCheckResult"):
        PassManager(NeedsTypes()).run(ast.NumExp(1))


def test_pass_dependencies_satisfied_in_order():
    ctx = PassManager(TypeCheckingPass(), NeedsTypes(), verbose=True).run(ast.NumExp(1))
    assert ctx.get(Typed).ok


def test_context_lookup():
    ctx = Context()
    with pytest.raises(KeyError):
        ctx.get(Typed)
    assert ctx.get(Typed, None) is None
    assert ctx.try_get(Typed) is None
