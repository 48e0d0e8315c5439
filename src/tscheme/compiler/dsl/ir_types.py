from __future__ import annotations
from abc import abstractmethod
import threading
import typing as tp

from .result import Result, make_ok

# Type expressions are hash-consed: constructing the same structure twice
# returns the same object, so `is` and `==` both mean structural equality.

class Type_:
    @abstractmethod
    def render(self) -> str:
        ...

    def __repr__(self):
        return self.render()

    def tvars(self) -> tp.Tuple[TVar, ...]:
        return ()

class _NumType(Type_):
    def render(self):
        return "number"
Num = _NumType()

class _BoolType(Type_):
    def render(self):
        return "boolean"
Bool = _BoolType()

class _StrType(Type_):
    def render(self):
        return "string"
Str = _StrType()

class _VoidType(Type_):
    def render(self):
        return "void"
Void = _VoidType()

# Opaque type of arbitrary quoted data
class _LiteralType(Type_):
    def render(self):
        return "literal"
Literal = _LiteralType()

# Type of the quoted empty list
class _EmptyTupleType(Type_):
    def render(self):
        return "Empty"
EmptyTuple = _EmptyTupleType()

ATOMIC_TYPES: tp.Dict[str, Type_] = {
    "number": Num,
    "boolean": Bool,
    "string": Str,
    "void": Void,
    "literal": Literal,
}

class PairT(Type_):
    _cache = {}
    __match_args__ = ("carT", "cdrT")
    carT: Type_
    cdrT: Type_
    def __new__(cls, carT: Type_, cdrT: Type_):
        if not (isinstance(carT, Type_) and isinstance(cdrT, Type_)):
            raise TypeError(f"PairT components must be types, got {carT}, {cdrT}")
        key = (carT, cdrT)
        if key not in cls._cache:
            instance = super().__new__(cls)
            instance.carT = carT
            instance.cdrT = cdrT
            cls._cache[key] = instance
        return cls._cache[key]

    def render(self):
        return f"(Pair {self.carT.render()} {self.cdrT.render()})"

    def tvars(self):
        return _dedup(self.carT.tvars() + self.cdrT.tvars())

class ProcT(Type_):
    _cache = {}
    __match_args__ = ("paramTs", "returnT")
    paramTs: tp.Tuple[Type_, ...]
    returnT: Type_
    def __new__(cls, paramTs: tp.Sequence[Type_], returnT: Type_):
        paramTs = tuple(paramTs)
        if not all(isinstance(T, Type_) for T in paramTs + (returnT,)):
            raise TypeError(f"ProcT components must be types, got {paramTs} -> {returnT}")
        key = (paramTs, returnT)
        if key not in cls._cache:
            instance = super().__new__(cls)
            instance.paramTs = paramTs
            instance.returnT = returnT
            cls._cache[key] = instance
        return cls._cache[key]

    def render(self):
        if len(self.paramTs) == 0:
            params = "Empty"
        else:
            params = " * ".join(T.render() for T in self.paramTs)
        return f"({params} -> {self.returnT.render()})"

    def tvars(self):
        tvs = ()
        for T in self.paramTs + (self.returnT,):
            tvs += T.tvars()
        return _dedup(tvs)

class TVar(Type_):
    _cache = {}
    __match_args__ = ("id",)
    id: int
    def __new__(cls, id: int):
        if id not in cls._cache:
            instance = super().__new__(cls)
            instance.id = id
            cls._cache[id] = instance
        return cls._cache[id]

    def render(self):
        return f"T_{self.id}"

    def tvars(self):
        return (self,)

def _dedup(tvs: tp.Tuple[TVar, ...]) -> tp.Tuple[TVar, ...]:
    return tuple(dict.fromkeys(tvs))


class TVarSupply:
    """Mints type variables with unique, monotonically increasing ids.

    The counter is only advanced under a lock so that concurrent checking
    sessions sharing one supply never hand out the same id twice.
    """
    def __init__(self, start: int = 0):
        self._next = start
        self._lock = threading.Lock()

    def fresh(self) -> TVar:
        with self._lock:
            id = self._next
            self._next += 1
        return TVar(id)

    @property
    def count(self) -> int:
        return self._next

# Process-wide supply
_SUPPLY = TVarSupply()

def fresh_tvar() -> TVar:
    return _SUPPLY.fresh()


def is_proc(T: Type_) -> bool:
    return isinstance(T, ProcT)

def unparse_texp(T: Type_) -> Result[str]:
    return make_ok(T.render())
