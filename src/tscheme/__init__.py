# Base types
from .compiler.dsl.ir_types import Num, Bool, Str, Void, Literal, EmptyTuple
_base_types = ['Num', 'Bool', 'Str', 'Void', 'Literal', 'EmptyTuple']

# type constructors
from .compiler.dsl.ir_types import PairT, ProcT, TVar, fresh_tvar
_constructors = ['PairT', 'ProcT', 'TVar', 'fresh_tvar']

# results
from .compiler.dsl.result import Ok, Failure, is_ok, is_failure
_results = ['Ok', 'Failure', 'is_ok', 'is_failure']

# entry points
from .compiler.dsl.parser import parse_program, parse_exp_text, parse_te
from .compiler.typecheck import typeof_exp, typeof_exp_text, typeof_program_text
_entry = ['parse_program', 'parse_exp_text', 'parse_te', 'typeof_exp', 'typeof_exp_text', 'typeof_program_text']

__all__ = [
    *_base_types,
    *_constructors,
    *_results,
    *_entry,
]
