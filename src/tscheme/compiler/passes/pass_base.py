from __future__ import annotations
from functools import singledispatchmethod
import inspect
import logging
import typing as tp
from typing import TYPE_CHECKING
from abc import ABC, abstractmethod

if TYPE_CHECKING:
    from ..dsl import ast

logger = logging.getLogger(__name__)

# Result of a pass, stored in a Context under its own class
class AnalysisObject(ABC): ...

class Context:
    def __init__(self, *objs: AnalysisObject):
        self._objs: tp.Dict[type, AnalysisObject] = {}
        for obj in objs:
            self.add(obj)

    def add(self, obj: AnalysisObject) -> None:
        self._objs[type(obj)] = obj

    def get(self, kind: tp.Type[AnalysisObject], *default) -> AnalysisObject:
        if len(default) > 1:
            raise ValueError("get takes at most one default")
        if kind in self._objs:
            return self._objs[kind]
        if default:
            return default[0]
        raise KeyError(f"Context has no {kind.__qualname__}")

    def try_get(self, kind: tp.Type[AnalysisObject]) -> tp.Optional[AnalysisObject]:
        return self._objs.get(kind)


class Pass(ABC):
    name: str
    requires: tp.Tuple[tp.Type[AnalysisObject], ...] = ()
    produces: tp.Tuple[tp.Type[AnalysisObject], ...] = ()

    def ensure_dependencies(self, ctx: Context):
        for dep in self.requires:
            if not issubclass(dep, AnalysisObject):
                raise TypeError(f"Pass {self.name} depends on {dep}, which is not an AnalysisObject")
        missing = [dep.__qualname__ for dep in self.requires if ctx.try_get(dep) is None]
        if missing:
            raise RuntimeError(f"Pass {self.name} requires {', '.join(missing)}")

    @abstractmethod
    def __call__(self, root: ast.Node, ctx: Context) -> AnalysisObject: ...


# Handlers collected per defining class until the class body is complete
_PENDING: tp.Dict[tp.Tuple[str, str], tp.List[tp.Tuple[tp.Callable, tp.Tuple[type, ...]]]] = {}

def _node_types_from_annotation(fn: tp.Callable) -> tp.Tuple[type, ...]:
    params = list(inspect.signature(fn).parameters)
    if len(params) < 2:
        raise TypeError(f"{fn.__qualname__} must take (self, node, ...)")
    try:
        hints = tp.get_type_hints(fn)
    except (NameError, TypeError):
        hints = fn.__annotations__
    ann = hints.get(params[1])
    if ann is None:
        raise TypeError(f"@handles() needs an annotated node parameter on {fn.__qualname__}")
    if tp.get_origin(ann) is tp.Union:
        return tp.get_args(ann)
    return (ann,)

def handles(*node_types: type):
    """Register the decorated method as the handler for the given node kinds.

    With no arguments the kinds come from the annotation of the node
    parameter. Handlers may all be named `_`; each one is queued under its
    class and wired into that class's dispatcher when the class is created.
    """
    def deco(fn: tp.Callable) -> tp.Callable:
        types = node_types or _node_types_from_annotation(fn)
        types = tuple(t for t in types if isinstance(t, type) and t is not type(None))
        if not types:
            raise TypeError(f"@handles on {fn.__qualname__} names no node classes")
        owner = fn.__qualname__.rsplit(".", 1)[0]
        _PENDING.setdefault((fn.__module__, owner), []).append((fn, types))
        return fn
    return deco


class Analysis(Pass):
    """Read-only pass over an AST producing an AnalysisObject.

    Handlers registered with @handles receive the node plus whatever extra
    arguments the pass threads through `visit` (e.g. a type environment).
    The class's own `visit` is the fallback for unregistered node kinds.
    """

    def __call__(self, root: ast.Node, ctx: Context) -> AnalysisObject:
        self.ensure_dependencies(ctx)
        obj = self.run(root, ctx)
        if not isinstance(obj, AnalysisObject):
            raise RuntimeError(f"Pass {self.name} returned {obj!r} instead of an AnalysisObject")
        return obj

    @abstractmethod
    def run(self, root: ast.Node, ctx: Context) -> AnalysisObject: ...

    def visit(self, node: ast.Node, *args) -> tp.Any:
        return self.visit_children(node, *args)

    def visit_children(self, node: ast.Node, *args) -> tp.Tuple[tp.Any, ...]:
        return tuple(self.visit(c, *args) for c in node._children)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "__call__" in cls.__dict__:
            raise ValueError(f"{cls.__name__} must not override __call__")
        if "run" not in cls.__dict__:
            raise ValueError(f"{cls.__name__} must define run")

        fallback = cls.__dict__.get("visit")
        if fallback is None:
            def fallback(self, node, *args):
                return super(cls, self).visit(node, *args)

        dispatcher = singledispatchmethod(lambda self, node, *args: fallback(self, node, *args))
        for fn, types in _PENDING.pop((cls.__module__, cls.__qualname__), []):
            for t in types:
                dispatcher.register(t)(fn)

        def visit(self, node: ast.Node, *args):
            return dispatcher.__get__(self, cls)(node, *args)
        cls.visit = visit


class PassManager:
    def __init__(self, *passes: Analysis, verbose: bool = False):
        self.passes = passes
        self.verbose = verbose

    def run(self, root: ast.Node, ctx: tp.Optional[Context] = None) -> Context:
        """Run every pass in order on root, adding each result to ctx."""
        if ctx is None:
            ctx = Context()
        for p in self.passes:
            if self.verbose:
                logger.debug("P: %s on %s", p.__class__.__name__, root.__class__.__name__)
            ctx.add(p(root, ctx))
        return ctx
