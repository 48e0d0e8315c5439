from tscheme.compiler.dsl import ir_types as irT
from tscheme.compiler.dsl.envs import TypeEnv
from tscheme.compiler.dsl.parser import parse_program
from tscheme.compiler.dsl.result import Ok, Failure
from tscheme.compiler.passes import Context, PassManager
from tscheme.compiler.passes.analyses import TypeCheckingPass, TypeCheckResult, TypeEnvObj
from tscheme.compiler.typecheck import typeof_exp, typeof_program_text


def test_define_then_use():
    assert typeof_program_text("(define (x : number) 5) (+ x 1)") == Ok("number")


def test_defines_accumulate():
    prog = """
    (define (x : number) 5)
    (define (inc : (number -> number)) (lambda ((n : number)) : number (+ n 1)))
    (define (y : number) (inc x))
    (> y x)
    """
    assert typeof_program_text(prog) == Ok("boolean")


def test_use_before_define():
    assert typeof_program_text("(+ x 1) (define (x : number) 5)") == Failure("Unbound identifier: x")


def test_define_last_is_void():
    assert typeof_program_text("(define (x : number) 5)") == Ok("void")


def test_expression_types_are_discarded_except_the_last():
    assert typeof_program_text('1 "two" #t') == Ok("boolean")


def test_failure_stops_the_sequence():
    r = typeof_program_text("(define (x : number) #t) (+ y 1)")
    assert r == Failure("Incompatible types: boolean and number in (define (x : number) #t)")


def test_empty_program():
    assert typeof_program_text("") == Failure("Program must contain at least one expression")


def test_l5_wrapper():
    assert typeof_program_text("(L5 (define (x : number) 5) x)") == Ok("number")


def test_recursive_define_is_unbound():
    prog = "(define (f : (number -> number)) (lambda ((n : number)) : number (f n)))"
    assert typeof_program_text(prog) == Failure("Unbound identifier: f")


def test_polymorphic_define_used_at_two_types():
    prog = """
    (define (id : (T -> T)) (lambda ((x : T)) : T x))
    (define (n : number) (id 3))
    (id #t)
    """
    assert typeof_program_text(prog) == Ok("boolean")


def test_define_procedure_mismatch():
    prog = "(define (f : (number -> boolean)) (lambda ((x : number)) : number x))"
    assert typeof_program_text(prog) == Failure(
        "Incompatible types: (number -> number) and (number -> boolean) in "
        "(define (f : (number -> boolean)) (lambda ((x : number)) : number x))"
    )


def test_parse_failure_is_reported():
    r = typeof_program_text("(define (x : number) 5")
    assert isinstance(r, Failure)
    assert r.message.startswith("Parse error")


def test_seeded_environment():
    prog = parse_program("(+ y 1)").value
    tenv = TypeEnv.empty().extend(["y"], [irT.Num])
    assert typeof_exp(prog, tenv) == Ok(irT.Num)
    assert typeof_exp(prog) == Failure("Unbound identifier: y")


def test_pass_manager_pipeline():
    prog = parse_program("(define (b : boolean) #f) (not b)").value
    ctx = Context(TypeEnvObj(TypeEnv.empty()))
    PassManager(TypeCheckingPass()).run(prog, ctx)
    res = ctx.get(TypeCheckResult)
    assert res.ok
    assert res.result == Ok(irT.Bool)
