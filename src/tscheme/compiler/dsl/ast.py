from __future__ import annotations
import typing as tp

from . import ir_types as irT
from .values import SExpValue

class Node:
    """Base of every L5 syntax node.

    Subclasses list their non-node attributes in `_fields` and fix the number
    of child nodes with `_numc` (-1 for any number).
    """
    _fields: tp.Tuple[str, ...] = ()
    _numc: int = 0

    def __init__(self, *children: Node):
        bad = [c for c in children if not isinstance(c, Node)]
        if bad:
            raise TypeError(f"{type(self).__name__} children must be nodes, got {bad}")
        if self._numc != -1 and len(children) != self._numc:
            raise TypeError(f"{type(self).__name__} takes {self._numc} children, got {len(children)}")
        self._children: tp.Tuple[Node, ...] = children

    def __iter__(self) -> tp.Iterator[Node]:
        return iter(self._children)

    @property
    def field_dict(self) -> tp.Dict[str, tp.Any]:
        return {f: getattr(self, f) for f in self._fields}

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in self.field_dict.items())
        children = ", ".join(repr(c) for c in self._children)
        return f"{type(self).__name__}[{fields}]({children})" if fields else f"{type(self).__name__}({children})"


# Ordered group of nodes (parameters, bindings, operands, bodies)
class Seq(Node):
    _numc = -1
    def __len__(self):
        return len(self._children)

    def __getitem__(self, idx: int):
        return self._children[idx]


##############################
## Atomic expressions
##############################

class NumExp(Node):
    _fields = ("val",)
    _numc = 0
    def __init__(self, val: tp.Union[int, float]):
        self.val = val
        super().__init__()

class BoolExp(Node):
    _fields = ("val",)
    _numc = 0
    def __init__(self, val: bool):
        self.val = val
        super().__init__()

class StrExp(Node):
    _fields = ("val",)
    _numc = 0
    def __init__(self, val: str):
        self.val = val
        super().__init__()

class PrimOp(Node):
    _fields = ("op",)
    _numc = 0
    def __init__(self, op: str):
        self.op = op
        super().__init__()

class VarRef(Node):
    _fields = ("var",)
    _numc = 0
    def __init__(self, var: str):
        self.var = var
        super().__init__()

# Declaration of a variable with its type annotation
class VarDecl(Node):
    _fields = ("var", "texp")
    _numc = 0
    def __init__(self, var: str, texp: irT.Type_):
        if not isinstance(texp, irT.Type_):
            raise TypeError(f"VarDecl {var} needs a type expression, got {texp}")
        self.var = var
        self.texp = texp
        super().__init__()

# Quoted datum
class LitExp(Node):
    _fields = ("val",)
    _numc = 0
    def __init__(self, val: SExpValue):
        self.val = val
        super().__init__()


##############################
## Compound expressions
##############################

class IfExp(Node):
    _numc = 3
    def __init__(self, test: Node, then: Node, alt: Node):
        super().__init__(test, then, alt)

    @property
    def test(self) -> Node:
        return self._children[0]

    @property
    def then(self) -> Node:
        return self._children[1]

    @property
    def alt(self) -> Node:
        return self._children[2]

class ProcExp(Node):
    _fields = ("returnTE",)
    _numc = 2
    def __init__(self, args: tp.Sequence[VarDecl], body: tp.Sequence[Node], returnTE: irT.Type_):
        if not all(isinstance(a, VarDecl) for a in args):
            raise TypeError(f"ProcExp parameters must be VarDecls, got {args}")
        self.returnTE = returnTE
        super().__init__(Seq(*args), Seq(*body))

    @property
    def args(self) -> tp.Tuple[VarDecl, ...]:
        return tuple(self._children[0])

    @property
    def body(self) -> tp.Tuple[Node, ...]:
        return tuple(self._children[1])

    @property
    def proc_type(self) -> irT.ProcT:
        return irT.ProcT([a.texp for a in self.args], self.returnTE)

class AppExp(Node):
    _numc = 2
    def __init__(self, rator: Node, rands: tp.Sequence[Node]):
        super().__init__(rator, Seq(*rands))

    @property
    def rator(self) -> Node:
        return self._children[0]

    @property
    def rands(self) -> tp.Tuple[Node, ...]:
        return tuple(self._children[1])

class Binding(Node):
    _numc = 2
    def __init__(self, var: VarDecl, val: Node):
        if not isinstance(var, VarDecl):
            raise TypeError(f"Binding needs a VarDecl, got {var}")
        super().__init__(var, val)

    @property
    def var(self) -> VarDecl:
        return self._children[0]

    @property
    def val(self) -> Node:
        return self._children[1]

class _BindingExp(Node):
    def __init__(self, bindings: tp.Sequence[Binding], body: tp.Sequence[Node]):
        super().__init__(Seq(*bindings), Seq(*body))

    @property
    def bindings(self) -> tp.Tuple[Binding, ...]:
        return tuple(self._children[0])

    @property
    def body(self) -> tp.Tuple[Node, ...]:
        return tuple(self._children[1])

class LetExp(_BindingExp):
    _numc = 2

class LetrecExp(_BindingExp):
    _numc = 2

class SetExp(Node):
    _numc = 2
    def __init__(self, var: VarRef, val: Node):
        super().__init__(var, val)

    @property
    def var(self) -> VarRef:
        return self._children[0]

    @property
    def val(self) -> Node:
        return self._children[1]


##############################
## Top-level forms
##############################

class DefineExp(Node):
    _numc = 2
    def __init__(self, var: VarDecl, val: Node):
        if not isinstance(var, VarDecl):
            raise TypeError(f"DefineExp needs a VarDecl, got {var}")
        super().__init__(var, val)

    @property
    def var(self) -> VarDecl:
        return self._children[0]

    @property
    def val(self) -> Node:
        return self._children[1]

class Program(Node):
    _numc = -1
    @property
    def exps(self) -> tp.Tuple[Node, ...]:
        return self._children


def is_cexp(node: Node) -> bool:
    return not isinstance(node, (DefineExp, Program, Seq, VarDecl, Binding))
