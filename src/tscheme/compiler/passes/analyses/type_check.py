from __future__ import annotations
import typing as tp

from ..pass_base import Context, AnalysisObject, Analysis, handles
from ...dsl import ast, ir_types as irT
from ...dsl.envs import TypeEnv
from ...dsl.primitives import typeof_prim
from ...dsl.quoted import typeof_quoted
from ...dsl.result import Result, Failure, bind, make_ok, make_failure, map_result
from ...dsl.type_match import apply_substitution, equivalent_tes, match_tvars_in_tes
from .unparser import unparse

# Initial environment for a checking run (empty when absent from the Context)
class TypeEnvObj(AnalysisObject):
    def __init__(self, tenv: TypeEnv):
        self.tenv = tenv

class TypeCheckResult(AnalysisObject):
    def __init__(self, result: Result[irT.Type_]):
        self.result = result

    @property
    def ok(self) -> bool:
        return not isinstance(self.result, Failure)


def check_equal_type(te1: irT.Type_, te2: irT.Type_, exp: ast.Node) -> Result[bool]:
    """Succeed if te1 and te2 match; exp is only used in the failure message."""
    if equivalent_tes(te1, te2):
        return make_ok(True)
    return _incompatible(te1, te2, exp)

def _incompatible(te1: irT.Type_, te2: irT.Type_, exp: ast.Node) -> Result[bool]:
    return bind(unparse(exp), lambda es:
               make_failure(f"Incompatible types: {te1.render()} and {te2.render()} in {es}"))


class TypeCheckingPass(Analysis):
    """Computes the type of a fully annotated expression or program.

    Every handler takes the node and the type environment in which it is
    typed and returns a Result. Mismatches are reported as Failures carrying
    the rendered types and expression; the first failure in evaluation
    order is the one returned.
    """
    requires = ()
    produces = (TypeCheckResult,)
    name = "type_checking"

    def run(self, root: ast.Node, ctx: Context) -> AnalysisObject:
        tenv_obj = ctx.get(TypeEnvObj, None)
        tenv = tenv_obj.tenv if tenv_obj is not None else TypeEnv.empty()
        return TypeCheckResult(self.typeof(root, tenv))

    def typeof(self, node: ast.Node, tenv: TypeEnv) -> Result[irT.Type_]:
        return self.visit(node, tenv)

    # Unknown node kind
    def visit(self, node: ast.Node, tenv: TypeEnv) -> Result[irT.Type_]:
        return bind(unparse(node), lambda es: make_failure(f"Unknown type: {es}"))

    # Body sequence: one fixed environment, type of the last expression
    def typeof_exps(self, exps: tp.Sequence[ast.Node], tenv: TypeEnv) -> Result[irT.Type_]:
        if len(exps) == 0:
            return make_failure("Unexpected empty list of expressions")
        return bind(map_result(lambda e: self.typeof(e, tenv), exps), lambda Ts: make_ok(Ts[-1]))

    # Top-level sequence: each define extends the environment of what follows
    def typeof_program_exps(self, exps: tp.Sequence[ast.Node], tenv: TypeEnv) -> Result[irT.Type_]:
        if len(exps) == 0:
            return make_failure("Unexpected empty list of expressions in sequence")
        T = None
        for exp in exps:
            if isinstance(exp, ast.DefineExp):
                r = self.typeof(exp, tenv)
                if isinstance(r, Failure):
                    return r
                tenv = tenv.extend([exp.var.var], [exp.var.texp])
            elif ast.is_cexp(exp):
                r = self.typeof(exp, tenv)
                if isinstance(r, Failure):
                    return r
            else:
                return bind(unparse(exp), lambda es:
                           make_failure(f"Unexpected expression type in program sequence: {es}"))
            T = r.value
        return make_ok(T)

    ##############################
    ## Atomic expressions
    ##############################

    @handles(ast.NumExp)
    def _(self, node: ast.NumExp, tenv: TypeEnv):
        return make_ok(irT.Num)

    @handles(ast.BoolExp)
    def _(self, node: ast.BoolExp, tenv: TypeEnv):
        return make_ok(irT.Bool)

    @handles(ast.StrExp)
    def _(self, node: ast.StrExp, tenv: TypeEnv):
        return make_ok(irT.Str)

    @handles(ast.LitExp)
    def _(self, node: ast.LitExp, tenv: TypeEnv):
        return typeof_quoted(node.val, True)

    @handles(ast.PrimOp)
    def _(self, node: ast.PrimOp, tenv: TypeEnv):
        return typeof_prim(node.op)

    @handles(ast.VarRef)
    def _(self, node: ast.VarRef, tenv: TypeEnv):
        return tenv.lookup(node.var)

    ##############################
    ## Compound expressions
    ##############################

    # type<test> = boolean, type<then> = type<alt> = t  =>  type<(if test then alt)> = t
    @handles(ast.IfExp)
    def _(self, node: ast.IfExp, tenv: TypeEnv):
        testT = self.typeof(node.test, tenv)
        thenT = self.typeof(node.then, tenv)
        altT = self.typeof(node.alt, tenv)
        constraint1 = bind(testT, lambda T: check_equal_type(T, irT.Bool, node))
        constraint2 = bind(thenT, lambda T1:
                      bind(altT, lambda T2:
                          check_equal_type(T1, T2, node)))
        return bind(constraint1, lambda _c1:
               bind(constraint2, lambda _c2:
                   thenT))

    # type<body>(tenv + x1:t1..xn:tn) = t  =>  type<(lambda ((x1 : t1)..) : t body)> = (t1 * .. * tn -> t)
    @handles(ast.ProcExp)
    def _(self, node: ast.ProcExp, tenv: TypeEnv):
        argTs = [a.texp for a in node.args]
        ext_tenv = tenv.extend([a.var for a in node.args], argTs)
        constraint = bind(self.typeof_exps(node.body, ext_tenv), lambda bodyT:
                         check_equal_type(bodyT, node.returnTE, node))
        return bind(constraint, lambda _: make_ok(irT.ProcT(argTs, node.returnTE)))

    # type<rator> = (t1 * .. * tn -> t), type<randi> = ti  =>  type<(rator rand1..randn)> = t
    @handles(ast.AppExp)
    def _(self, node: ast.AppExp, tenv: TypeEnv):
        return bind(self.typeof(node.rator, tenv), lambda ratorT:
                   self._typeof_app(node, ratorT, tenv))

    def _typeof_app(self, node: ast.AppExp, ratorT: irT.Type_, tenv: TypeEnv) -> Result[irT.Type_]:
        if not irT.is_proc(ratorT):
            return bind(unparse(node), lambda es:
                       make_failure(f"Application of non-procedure: {ratorT.render()} in {es}"))
        rands = node.rands
        if len(rands) != len(ratorT.paramTs):
            return bind(unparse(node), lambda es:
                       make_failure(f"Wrong parameter numbers passed to proc: {es}"))

        # Each operand is typed and then matched before the next one is typed.
        # All matches share one substitution, so type variables shared between
        # parameters (and the return type) must agree across operands.
        sub = {}
        for rand, paramT in zip(rands, ratorT.paramTs):
            randT = self.typeof(rand, tenv)
            if isinstance(randT, Failure):
                return randT
            if match_tvars_in_tes([randT.value], [paramT], sub) is None:
                return _incompatible(randT.value, paramT, node)
        return make_ok(apply_substitution(ratorT.returnT, sub))

    # type<vali> = ti, type<body>(tenv + var1:t1..) = t  =>  type<(let ((var1 val1)..) body)> = t
    @handles(ast.LetExp)
    def _(self, node: ast.LetExp, tenv: TypeEnv):
        decls = [b.var for b in node.bindings]
        # values are typed in the outer environment
        constraints = map_result(lambda b: bind(self.typeof(b.val, tenv), lambda valT:
                                               check_equal_type(b.var.texp, valT, node)),
                                 node.bindings)
        ext_tenv = tenv.extend([d.var for d in decls], [d.texp for d in decls])
        return bind(constraints, lambda _: self.typeof_exps(node.body, ext_tenv))

    # tenv_body = tenv + p1:(t11*..->t1)..; type<bodyi>(tenv_body + xi1:ti1..) = ti
    # type<body>(tenv_body) = t  =>  type<(letrec ((p1 (lambda ..))..) body)> = t
    @handles(ast.LetrecExp)
    def _(self, node: ast.LetrecExp, tenv: TypeEnv):
        procs = [b.val for b in node.bindings]
        if not all(isinstance(p, ast.ProcExp) for p in procs):
            return bind(unparse(node), lambda es:
                       make_failure(f"letrec only supports procedure bindings: {es}"))
        names = [b.var.var for b in node.bindings]
        tenv_body = tenv.extend(names, [p.proc_type for p in procs])

        def check_proc(proc: ast.ProcExp):
            tenv_i = tenv_body.extend([a.var for a in proc.args], [a.texp for a in proc.args])
            return bind(self.typeof_exps(proc.body, tenv_i), lambda bodyT:
                       check_equal_type(bodyT, proc.returnTE, node))
        return bind(map_result(check_proc, procs), lambda _:
                   self.typeof_exps(node.body, tenv_body))

    # x bound to t, type<val> = t  =>  type<(set! x val)> = void
    @handles(ast.SetExp)
    def _(self, node: ast.SetExp, tenv: TypeEnv):
        return bind(tenv.lookup(node.var.var), lambda varT:
               bind(self.typeof(node.val, tenv), lambda valT:
               bind(check_equal_type(valT, varT, node), lambda _:
                   make_ok(irT.Void))))

    ##############################
    ## Top-level forms
    ##############################

    # type<val> = t  =>  type<(define (var : t) val)> = void
    @handles(ast.DefineExp)
    def _(self, node: ast.DefineExp, tenv: TypeEnv):
        declT = node.var.texp
        return bind(self.typeof(node.val, tenv), lambda valT:
               bind(check_equal_type(valT, declT, node), lambda _:
                   make_ok(irT.Void)))

    @handles(ast.Program)
    def _(self, node: ast.Program, tenv: TypeEnv):
        if len(node.exps) == 0:
            return make_failure("Program must contain at least one expression")
        return self.typeof_program_exps(node.exps, tenv)
