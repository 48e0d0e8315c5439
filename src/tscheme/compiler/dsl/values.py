from __future__ import annotations
import typing as tp
from dataclasses import dataclass

# Data model of quoted literals.
# Atoms are plain python numbers, booleans and strings.

@dataclass(frozen=True)
class SymbolSExp:
    val: str
    def __repr__(self):
        return self.val

@dataclass(frozen=True)
class EmptySExp:
    def __repr__(self):
        return "()"

@dataclass(frozen=True)
class CompoundSExp:
    val1: tp.Any
    val2: tp.Any
    def __repr__(self):
        return format_sexp(self)

SExpValue = tp.Union[int, float, bool, str, SymbolSExp, EmptySExp, CompoundSExp]

def make_list(items: tp.Sequence[SExpValue], tail: SExpValue = EmptySExp()) -> SExpValue:
    sv = tail
    for item in reversed(items):
        sv = CompoundSExp(item, sv)
    return sv

def _format_atom(sv: tp.Any) -> str:
    if isinstance(sv, bool):
        return "#t" if sv else "#f"
    if isinstance(sv, str):
        return '"' + sv.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return repr(sv)

def format_sexp(sv: tp.Any) -> str:
    if not isinstance(sv, CompoundSExp):
        return _format_atom(sv)
    parts = []
    while isinstance(sv, CompoundSExp):
        parts.append(format_sexp(sv.val1))
        sv = sv.val2
    if isinstance(sv, EmptySExp):
        return "(" + " ".join(parts) + ")"
    return "(" + " ".join(parts) + " . " + format_sexp(sv) + ")"
