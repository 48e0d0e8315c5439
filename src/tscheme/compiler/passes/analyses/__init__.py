# Import all the analysis passes and their corresponding Analysis Object
from .type_check import TypeCheckingPass, TypeCheckResult, TypeEnvObj, check_equal_type
from .unparser import UnparserPass, UnparsedExpr, unparse
from .ast_printer import AstPrinterPass, PrintedAST
from ..pass_base import AnalysisObject
