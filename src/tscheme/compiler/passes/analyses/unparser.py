from __future__ import annotations

from ..pass_base import Analysis, AnalysisObject, Context, handles
from ...dsl import ast
from ...dsl.result import Result, make_ok
from ...dsl.values import format_sexp

def unparse(node: ast.Node) -> Result[str]:
    ctx = Context()
    text = UnparserPass()(node, ctx).text
    return make_ok(text)

class UnparsedExpr(AnalysisObject):
    def __init__(self, text: str):
        self.text = text

class UnparserPass(Analysis):
    """Render an AST back to concrete syntax.

    Type annotations are always written out, so the text of a parsed
    expression re-reads to an equivalent expression (with fresh variables in
    place of missing annotations).
    """
    requires = ()
    produces = (UnparsedExpr,)
    name = "unparser"

    def run(self, root: ast.Node, ctx: Context) -> AnalysisObject:
        return UnparsedExpr(self.visit(root))

    def visit(self, node: ast.Node) -> str:
        return f"<{node.__class__.__name__}>"

    def _body(self, body) -> str:
        return " ".join(self.visit(e) for e in body)

    @handles()
    def _(self, node: ast.NumExp):
        return repr(node.val)

    @handles()
    def _(self, node: ast.BoolExp):
        return "#t" if node.val else "#f"

    @handles()
    def _(self, node: ast.StrExp):
        return format_sexp(node.val)

    @handles()
    def _(self, node: ast.PrimOp):
        return node.op

    @handles()
    def _(self, node: ast.VarRef):
        return node.var

    @handles()
    def _(self, node: ast.VarDecl):
        return f"({node.var} : {node.texp.render()})"

    @handles()
    def _(self, node: ast.LitExp):
        return f"'{format_sexp(node.val)}"

    @handles(ast.IfExp)
    def _(self, node: ast.IfExp):
        test, then, alt = self.visit_children(node)
        return f"(if {test} {then} {alt})"

    @handles(ast.ProcExp)
    def _(self, node: ast.ProcExp):
        args = " ".join(self.visit(a) for a in node.args)
        return f"(lambda ({args}) : {node.returnTE.render()} {self._body(node.body)})"

    @handles(ast.AppExp)
    def _(self, node: ast.AppExp):
        parts = [self.visit(node.rator)] + [self.visit(r) for r in node.rands]
        return "(" + " ".join(parts) + ")"

    @handles(ast.Binding)
    def _(self, node: ast.Binding):
        var, val = self.visit_children(node)
        return f"({var} {val})"

    @handles(ast.LetExp, ast.LetrecExp)
    def _(self, node: ast.LetExp):
        keyword = "let" if isinstance(node, ast.LetExp) else "letrec"
        bindings = " ".join(self.visit(b) for b in node.bindings)
        return f"({keyword} ({bindings}) {self._body(node.body)})"

    @handles(ast.SetExp)
    def _(self, node: ast.SetExp):
        var, val = self.visit_children(node)
        return f"(set! {var} {val})"

    @handles(ast.DefineExp)
    def _(self, node: ast.DefineExp):
        var, val = self.visit_children(node)
        return f"(define {var} {val})"

    @handles(ast.Program)
    def _(self, node: ast.Program):
        return f"(L5 {self._body(node.exps)})"
