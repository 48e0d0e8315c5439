from __future__ import annotations
import typing as tp

from . import ir_types as irT
from .result import Result, bind, make_ok, make_failure
from .values import CompoundSExp, EmptySExp, SymbolSExp, format_sexp

def typeof_quoted(sv: tp.Any, is_top: bool) -> Result[irT.Type_]:
    """Type of a quoted datum.

    A quoted atom on its own is opaque data (`literal`). Inside a quoted
    pair, numbers, booleans and strings keep their precise type.
    """
    if isinstance(sv, CompoundSExp):
        return bind(typeof_quoted(sv.val1, False), lambda carT:
               bind(typeof_quoted(sv.val2, False), lambda cdrT:
                   make_ok(irT.PairT(carT, cdrT))))
    if isinstance(sv, EmptySExp):
        return make_ok(irT.EmptyTuple)
    if isinstance(sv, SymbolSExp):
        return make_ok(irT.Literal)
    # bool before number: bool is an int subclass
    if isinstance(sv, bool):
        return make_ok(irT.Literal if is_top else irT.Bool)
    if isinstance(sv, (int, float)):
        return make_ok(irT.Literal if is_top else irT.Num)
    if isinstance(sv, str):
        return make_ok(irT.Literal if is_top else irT.Str)
    return make_failure(f"Unexpected quoted form: {format_sexp(sv)}")
