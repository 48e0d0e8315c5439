from __future__ import annotations
import typing as tp
from dataclasses import dataclass

# Typing judgments return a Result instead of raising.
# Failures are propagated verbatim by every combinator below.

T = tp.TypeVar("T")
U = tp.TypeVar("U")

@dataclass(frozen=True)
class Ok(tp.Generic[T]):
    value: T

@dataclass(frozen=True)
class Failure:
    message: str

    def __str__(self):
        return self.message

Result = tp.Union[Ok[T], Failure]

def make_ok(value: T) -> Ok[T]:
    return Ok(value)

def make_failure(message: str) -> Failure:
    return Failure(message)

def is_ok(r: Result) -> bool:
    return isinstance(r, Ok)

def is_failure(r: Result) -> bool:
    return isinstance(r, Failure)

def bind(r: Result[T], f: tp.Callable[[T], Result[U]]) -> Result[U]:
    if isinstance(r, Failure):
        return r
    return f(r.value)

def map_result(f: tp.Callable[[T], Result[U]], xs: tp.Iterable[T]) -> Result[tp.List[U]]:
    """Apply f left to right, stopping at the first failure."""
    vals = []
    for x in xs:
        r = f(x)
        if isinstance(r, Failure):
            return r
        vals.append(r.value)
    return Ok(vals)
