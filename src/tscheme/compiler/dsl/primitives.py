from __future__ import annotations
import typing as tp

from . import ir_types as irT
from .parser import parse_te
from .result import Result, make_failure

# Primitive signatures, as text. Each lookup parses its signature again, so
# every type variable in it is fresh and never captured by another call site.
PRIM_SIGNATURES: tp.Dict[str, str] = {
    "+": "(number * number -> number)",
    "-": "(number * number -> number)",
    "*": "(number * number -> number)",
    "/": "(number * number -> number)",
    ">": "(number * number -> boolean)",
    "<": "(number * number -> boolean)",
    "=": "(number * number -> boolean)",
    "and": "(boolean * boolean -> boolean)",
    "or": "(boolean * boolean -> boolean)",
    "not": "(boolean -> boolean)",
    "number?": "(T -> boolean)",
    "boolean?": "(T -> boolean)",
    "string?": "(T -> boolean)",
    "list?": "(T -> boolean)",
    "pair?": "(T -> boolean)",
    "symbol?": "(T -> boolean)",
    "eq?": "(T1 * T2 -> boolean)",
    "string=?": "(T1 * T2 -> boolean)",
    "display": "(T -> void)",
    "newline": "(Empty -> void)",
    "cons": "(T1 * T2 -> (Pair T1 T2))",
    "car": "((Pair T1 T2) -> T1)",
    "cdr": "((Pair T1 T2) -> T2)",
}

def typeof_prim(op: str) -> Result[irT.Type_]:
    sig = PRIM_SIGNATURES.get(op)
    if sig is None:
        return make_failure(f"Primitive not implemented: {op}")
    return parse_te(sig)
