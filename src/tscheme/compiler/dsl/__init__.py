from .ir_types import Num, Bool, Str, Void, Literal, EmptyTuple, PairT, ProcT, TVar
from .envs import TypeEnv
from .result import Ok, Failure, Result
from .parser import parse_program, parse_exp_text, parse_te
