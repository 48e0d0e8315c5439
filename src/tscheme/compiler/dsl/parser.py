from __future__ import annotations
import ast as pyast
import logging
import typing as tp

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import LarkError

from . import ast, ir_types as irT
from .result import Result, bind, make_ok, make_failure, map_result
from .values import SymbolSExp, make_list, format_sexp

logger = logging.getLogger(__name__)

##############################
## Reader: concrete syntax -> s-expressions
##############################

# Numbers, booleans and the dot must be whole tokens, otherwise "5x" or
# "#tag" would be split in two.
GRAMMAR = r"""
    start: sexp*

    ?sexp: NUMBER                   -> number
         | BOOLEAN                  -> boolean
         | STRING                   -> string
         | SYMBOL                   -> symbol
         | "(" sexp* (DOT sexp)? ")" -> list
         | "'" sexp                 -> quoted

    NUMBER.2: /[+-]?(\d+(\.\d*)?|\.\d+)(?![^\s()'";])/
    BOOLEAN.2: /#(true|false|t|f)(?![^\s()'";])/
    DOT.2: /\.(?![^\s()'";])/
    STRING: ESCAPED_STRING
    SYMBOL: /[^\s()'";]+/

    %import common.ESCAPED_STRING
    COMMENT: /;[^\n]*/
    %ignore COMMENT
    %ignore /\s+/
"""

_reader = Lark(GRAMMAR, parser="lalr")

class DottedList:
    """Improper list read from `(a b . c)`."""
    def __init__(self, items: tp.List[tp.Any], tail: tp.Any):
        self.items = items
        self.tail = tail

    def __repr__(self):
        return "(" + " ".join(show(i) for i in self.items) + " . " + show(self.tail) + ")"

QUOTE = SymbolSExp("quote")

@v_args(inline=True)
class SExpBuilder(Transformer):
    def number(self, tok):
        text = str(tok)
        if any(c in text for c in ".eE"):
            return float(text)
        return int(text)

    def boolean(self, tok):
        return str(tok) in ("#t", "#true")

    def string(self, tok):
        return pyast.literal_eval(str(tok))

    def symbol(self, tok):
        return SymbolSExp(str(tok))

    def quoted(self, sexp):
        return [QUOTE, sexp]

    def list(self, *items):
        items = list(items)
        for i, item in enumerate(items):
            if isinstance(item, Token) and item.type == "DOT":
                if i == 0:
                    raise ValueError("Dotted list needs at least one element before '.'")
                return DottedList(items[:i], items[i+1])
        return items

    def start(self, *sexps):
        return list(sexps)

_builder = SExpBuilder()

def show(sexp: tp.Any) -> str:
    if isinstance(sexp, list):
        return "(" + " ".join(show(s) for s in sexp) + ")"
    if isinstance(sexp, DottedList):
        return repr(sexp)
    return format_sexp(sexp)

def read(text: str) -> Result[tp.List[tp.Any]]:
    """Read every s-expression in text."""
    try:
        tree = _reader.parse(text)
        return make_ok(_builder.transform(tree))
    except LarkError as e:
        logger.debug("reader rejected input: %s", e)
        return make_failure(f"Parse error: {e}")


##############################
## Type expressions
##############################

TVarScope = tp.Dict[str, irT.TVar]

ARROW = SymbolSExp("->")
STAR = SymbolSExp("*")
COLON = SymbolSExp(":")

def _tvar_named(name: str, tvars: TVarScope) -> irT.TVar:
    if name not in tvars:
        tvars[name] = irT.fresh_tvar()
    return tvars[name]

def parse_te_sexp(sexp: tp.Any, tvars: TVarScope) -> Result[irT.Type_]:
    if isinstance(sexp, SymbolSExp):
        if sexp.val in irT.ATOMIC_TYPES:
            return make_ok(irT.ATOMIC_TYPES[sexp.val])
        if sexp.val == "Empty":
            return make_ok(irT.EmptyTuple)
        if sexp in (ARROW, STAR, COLON):
            return make_failure(f"Bad type expression: {show(sexp)}")
        return make_ok(_tvar_named(sexp.val, tvars))
    if isinstance(sexp, list) and ARROW in sexp:
        idx = sexp.index(ARROW)
        left, right = sexp[:idx], sexp[idx+1:]
        if len(right) != 1:
            return make_failure(f"Bad procedure type, expected one return type: {show(sexp)}")
        return bind(_parse_param_tes(left, sexp, tvars), lambda paramTs:
               bind(parse_te_sexp(right[0], tvars), lambda returnT:
                   make_ok(irT.ProcT(paramTs, returnT))))
    if isinstance(sexp, list) and len(sexp) == 3 and sexp[0] == SymbolSExp("Pair"):
        return bind(parse_te_sexp(sexp[1], tvars), lambda carT:
               bind(parse_te_sexp(sexp[2], tvars), lambda cdrT:
                   make_ok(irT.PairT(carT, cdrT))))
    return make_failure(f"Bad type expression: {show(sexp)}")

def _parse_param_tes(left: tp.List[tp.Any], whole: tp.Any, tvars: TVarScope) -> Result[tp.List[irT.Type_]]:
    if left == [SymbolSExp("Empty")]:
        return make_ok([])
    params, seps = left[0::2], left[1::2]
    if len(left) % 2 == 0 or any(s != STAR for s in seps):
        return make_failure(f"Bad parameter types in: {show(whole)}")
    return map_result(lambda p: parse_te_sexp(p, tvars), params)

def parse_te(text: str) -> Result[irT.Type_]:
    """Parse a textual type signature.

    Every named type variable in the text gets a brand-new TVar, shared by
    all occurrences of that name within this one signature.
    """
    def one(sexps):
        if len(sexps) != 1:
            return make_failure(f"Expected a single type expression in: {text!r}")
        return parse_te_sexp(sexps[0], {})
    return bind(read(text), one)


##############################
## Expressions
##############################

PRIMITIVE_OPS = frozenset([
    "+", "-", "*", "/", ">", "<", "=", "not", "and", "or", "eq?", "string=?",
    "cons", "car", "cdr", "list", "pair?", "list?", "number?", "boolean?",
    "symbol?", "string?", "display", "newline",
])

SPECIAL_FORMS = frozenset(["define", "lambda", "if", "let", "letrec", "quote", "set!"])

def sexp_to_value(sexp: tp.Any) -> tp.Any:
    if isinstance(sexp, list):
        return make_list([sexp_to_value(s) for s in sexp])
    if isinstance(sexp, DottedList):
        return make_list([sexp_to_value(s) for s in sexp.items], sexp_to_value(sexp.tail))
    return sexp

def _is_symbol(sexp: tp.Any, name: tp.Optional[str] = None) -> bool:
    return isinstance(sexp, SymbolSExp) and (name is None or sexp.val == name)

def parse_var_decl(sexp: tp.Any, tvars: TVarScope) -> Result[ast.VarDecl]:
    # x  or  (x : texp)
    if _is_symbol(sexp) and sexp.val not in SPECIAL_FORMS:
        return make_ok(ast.VarDecl(sexp.val, irT.fresh_tvar()))
    if isinstance(sexp, list) and len(sexp) == 3 and _is_symbol(sexp[0]) and sexp[1] == COLON:
        return bind(parse_te_sexp(sexp[2], tvars), lambda te:
                   make_ok(ast.VarDecl(sexp[0].val, te)))
    return make_failure(f"Bad variable declaration: {show(sexp)}")

def _parse_exps(sexps: tp.Sequence[tp.Any], tvars: TVarScope) -> Result[tp.List[ast.Node]]:
    return map_result(lambda s: parse_cexp(s, tvars), sexps)

def _parse_binding(sexp: tp.Any, tvars: TVarScope) -> Result[ast.Binding]:
    if not (isinstance(sexp, list) and len(sexp) == 2):
        return make_failure(f"Bad binding: {show(sexp)}")
    return bind(parse_var_decl(sexp[0], tvars), lambda decl:
           bind(parse_cexp(sexp[1], tvars), lambda val:
               make_ok(ast.Binding(decl, val))))

def _parse_lambda(sexp: tp.List[tp.Any], tvars: TVarScope) -> Result[ast.Node]:
    if len(sexp) < 2 or not isinstance(sexp[1], list):
        return make_failure(f"Bad lambda: {show(sexp)}")
    rest = sexp[2:]
    if len(rest) >= 2 and rest[0] == COLON:
        returnTE = parse_te_sexp(rest[1], tvars)
        body = rest[2:]
    else:
        returnTE = make_ok(irT.fresh_tvar())
        body = rest
    return bind(map_result(lambda p: parse_var_decl(p, tvars), sexp[1]), lambda args:
           bind(returnTE, lambda rte:
           bind(_parse_exps(body, tvars), lambda body_exps:
               make_ok(ast.ProcExp(args, body_exps, rte)))))

def _parse_let(sexp: tp.List[tp.Any], tvars: TVarScope, cls: tp.Type[ast._BindingExp]) -> Result[ast.Node]:
    if len(sexp) < 2 or not isinstance(sexp[1], list):
        return make_failure(f"Bad {sexp[0].val}: {show(sexp)}")
    return bind(map_result(lambda b: _parse_binding(b, tvars), sexp[1]), lambda bindings:
           bind(_parse_exps(sexp[2:], tvars), lambda body:
               make_ok(cls(bindings, body))))

def _parse_compound(sexp: tp.List[tp.Any], tvars: TVarScope) -> Result[ast.Node]:
    if len(sexp) == 0:
        return make_failure("Empty application: ()")
    head = sexp[0]
    if _is_symbol(head, "define"):
        return make_failure(f"define is only allowed at top level: {show(sexp)}")
    if _is_symbol(head, "lambda"):
        return _parse_lambda(sexp, tvars)
    if _is_symbol(head, "if"):
        if len(sexp) != 4:
            return make_failure(f"if needs test, then and else: {show(sexp)}")
        return bind(_parse_exps(sexp[1:], tvars), lambda exps:
                   make_ok(ast.IfExp(*exps)))
    if _is_symbol(head, "let"):
        return _parse_let(sexp, tvars, ast.LetExp)
    if _is_symbol(head, "letrec"):
        return _parse_let(sexp, tvars, ast.LetrecExp)
    if _is_symbol(head, "quote"):
        if len(sexp) != 2:
            return make_failure(f"Bad quote: {show(sexp)}")
        return make_ok(ast.LitExp(sexp_to_value(sexp[1])))
    if _is_symbol(head, "set!"):
        if len(sexp) != 3 or not _is_symbol(sexp[1]):
            return make_failure(f"Bad set!: {show(sexp)}")
        return bind(parse_cexp(sexp[2], tvars), lambda val:
                   make_ok(ast.SetExp(ast.VarRef(sexp[1].val), val)))
    return bind(parse_cexp(head, tvars), lambda rator:
           bind(_parse_exps(sexp[1:], tvars), lambda rands:
               make_ok(ast.AppExp(rator, rands))))

def parse_cexp(sexp: tp.Any, tvars: TVarScope) -> Result[ast.Node]:
    if isinstance(sexp, bool):
        return make_ok(ast.BoolExp(sexp))
    if isinstance(sexp, (int, float)):
        return make_ok(ast.NumExp(sexp))
    if isinstance(sexp, str):
        return make_ok(ast.StrExp(sexp))
    if isinstance(sexp, SymbolSExp):
        if sexp.val in PRIMITIVE_OPS:
            return make_ok(ast.PrimOp(sexp.val))
        if sexp.val in SPECIAL_FORMS:
            return make_failure(f"Unexpected keyword: {sexp.val}")
        return make_ok(ast.VarRef(sexp.val))
    if isinstance(sexp, list):
        return _parse_compound(sexp, tvars)
    return make_failure(f"Unexpected expression: {show(sexp)}")

def parse_top(sexp: tp.Any) -> Result[ast.Node]:
    """Parse one top-level form.

    All type annotations inside the form share one naming scope, so a type
    variable written twice in the form denotes the same TVar.
    """
    tvars: TVarScope = {}
    if isinstance(sexp, list) and len(sexp) > 0 and _is_symbol(sexp[0], "define"):
        if len(sexp) != 3:
            return make_failure(f"Bad define: {show(sexp)}")
        return bind(parse_var_decl(sexp[1], tvars), lambda decl:
               bind(parse_cexp(sexp[2], tvars), lambda val:
                   make_ok(ast.DefineExp(decl, val))))
    return parse_cexp(sexp, tvars)

def parse_exp_text(text: str) -> Result[ast.Node]:
    def one(sexps):
        if len(sexps) != 1:
            return make_failure(f"Expected a single expression, got {len(sexps)}")
        return parse_top(sexps[0])
    return bind(read(text), one)

def parse_program(text: str) -> Result[ast.Program]:
    def build(sexps):
        # Accept the (L5 <exp>+) wrapper
        if len(sexps) == 1 and isinstance(sexps[0], list) and len(sexps[0]) > 0 and _is_symbol(sexps[0][0], "L5"):
            sexps = sexps[0][1:]
        return bind(map_result(parse_top, sexps), lambda exps:
                   make_ok(ast.Program(*exps)))
    return bind(read(text), build)
