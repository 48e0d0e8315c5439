from __future__ import annotations
import typing as tp

from . import ir_types as irT
from .result import Result, make_ok, make_failure

class TypeEnv:
    """Immutable type environment.

    Each environment is one frame of (name, type) bindings plus a link to
    the enclosing environment. `extend` returns a new frame layered over
    this one and never modifies an existing frame.
    """
    def __init__(self, names: tp.Sequence[str] = (), types: tp.Sequence[irT.Type_] = (), parent: tp.Optional[TypeEnv] = None):
        names = tuple(names)
        types = tuple(types)
        if len(names) != len(types):
            raise ValueError(f"Cannot bind {len(names)} names to {len(types)} types")
        self._names = names
        self._types = types
        self.parent = parent

    @classmethod
    def empty(cls) -> TypeEnv:
        return cls()

    def extend(self, names: tp.Sequence[str], types: tp.Sequence[irT.Type_]) -> TypeEnv:
        return TypeEnv(names, types, parent=self)

    def _find(self, name: str) -> tp.Optional[irT.Type_]:
        env = self
        while env is not None:
            if name in env._names:
                return env._types[env._names.index(name)]
            env = env.parent
        return None

    def lookup(self, name: str) -> Result[irT.Type_]:
        T = self._find(name)
        if T is None:
            return make_failure(f"Unbound identifier: {name}")
        return make_ok(T)

    def __getitem__(self, name: str) -> tp.Optional[irT.Type_]:
        return self._find(name)

    def __contains__(self, name: str):
        return self._find(name) is not None

    def names(self) -> tp.List[str]:
        # Innermost first, shadowed names reported once
        seen = {}
        env = self
        while env is not None:
            for n in env._names:
                seen.setdefault(n, None)
            env = env.parent
        return list(seen)

    def __repr__(self):
        return "{" + ", ".join(f"{n}: {self[n]}" for n in self.names()) + "}"
