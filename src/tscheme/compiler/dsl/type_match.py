from __future__ import annotations
import typing as tp

from . import ir_types as irT

# A substitution binds type variables to type expressions for the duration of
# a single matching judgment. It is handed back to the caller and is never
# stored in a type environment.
Substitution = tp.Dict[irT.TVar, irT.Type_]

def _walk(T: irT.Type_, sub: Substitution) -> irT.Type_:
    while isinstance(T, irT.TVar) and T in sub:
        T = sub[T]
    return T

def _occurs(tv: irT.TVar, T: irT.Type_, sub: Substitution) -> bool:
    T = _walk(T, sub)
    if T is tv:
        return True
    if isinstance(T, irT.PairT):
        return _occurs(tv, T.carT, sub) or _occurs(tv, T.cdrT, sub)
    if isinstance(T, irT.ProcT):
        return any(_occurs(tv, P, sub) for P in T.paramTs + (T.returnT,))
    return False

def _match(T1: irT.Type_, T2: irT.Type_, sub: Substitution) -> bool:
    T1 = _walk(T1, sub)
    T2 = _walk(T2, sub)
    if T1 is T2:
        return True
    if isinstance(T1, irT.TVar):
        if _occurs(T1, T2, sub):
            return False
        sub[T1] = T2
        return True
    if isinstance(T2, irT.TVar):
        if _occurs(T2, T1, sub):
            return False
        sub[T2] = T1
        return True
    if isinstance(T1, irT.PairT) and isinstance(T2, irT.PairT):
        return _match(T1.carT, T2.carT, sub) and _match(T1.cdrT, T2.cdrT, sub)
    if isinstance(T1, irT.ProcT) and isinstance(T2, irT.ProcT):
        if len(T1.paramTs) != len(T2.paramTs):
            return False
        return all(_match(P1, P2, sub) for P1, P2 in zip(T1.paramTs, T2.paramTs)) and _match(T1.returnT, T2.returnT, sub)
    # Distinct base types (hash-consing makes equal ones identical)
    return False

def match_tvars_in_tes(tes1: tp.Sequence[irT.Type_], tes2: tp.Sequence[irT.Type_], sub: tp.Optional[Substitution] = None) -> tp.Optional[Substitution]:
    """Match two sequences of type expressions position by position.

    A type variable on either side matches any type expression, but each
    variable must denote the same type at every occurrence within this call.
    A variable never matches a type expression that contains it, so
    `T` against `(Pair T number)` fails.
    Returns the substitution built along the way, or None on mismatch.
    Passing `sub` continues an ongoing judgment with its bindings.
    """
    if len(tes1) != len(tes2):
        return None
    sub = {} if sub is None else sub
    for T1, T2 in zip(tes1, tes2):
        if not _match(T1, T2, sub):
            return None
    return sub

def equivalent_tes(T1: irT.Type_, T2: irT.Type_) -> bool:
    return match_tvars_in_tes([T1], [T2]) is not None

def apply_substitution(T: irT.Type_, sub: Substitution) -> irT.Type_:
    T = _walk(T, sub)
    if isinstance(T, irT.PairT):
        return irT.PairT(apply_substitution(T.carT, sub), apply_substitution(T.cdrT, sub))
    if isinstance(T, irT.ProcT):
        return irT.ProcT([apply_substitution(P, sub) for P in T.paramTs], apply_substitution(T.returnT, sub))
    return T
