"""Entry points: type a concrete expression or program from its text."""
from __future__ import annotations
import logging

from .dsl import ast, ir_types as irT
from .dsl.envs import TypeEnv
from .dsl.parser import parse_exp_text, parse_program
from .dsl.result import Result, bind
from .passes.pass_base import Context, PassManager
from .passes.analyses.type_check import TypeCheckingPass, TypeCheckResult, TypeEnvObj

logger = logging.getLogger(__name__)

def typeof_exp(exp: ast.Node, tenv: TypeEnv = None, verbose: bool = False) -> Result[irT.Type_]:
    ctx = Context(TypeEnvObj(tenv if tenv is not None else TypeEnv.empty()))
    PassManager(TypeCheckingPass(), verbose=verbose).run(exp, ctx)
    result = ctx.get(TypeCheckResult).result
    logger.debug("typed %s: %s", exp.__class__.__name__, result)
    return result

def typeof_exp_text(text: str) -> Result[str]:
    """Parse one expression, type it in the empty environment, render the type."""
    return bind(parse_exp_text(text), lambda exp:
           bind(typeof_exp(exp), irT.unparse_texp))

def typeof_program_text(text: str) -> Result[str]:
    """Parse a whole program, type it top-level form by top-level form, render the type."""
    return bind(parse_program(text), lambda program:
           bind(typeof_exp(program), irT.unparse_texp))
