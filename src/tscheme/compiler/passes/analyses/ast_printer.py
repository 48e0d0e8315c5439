from __future__ import annotations

import typing as tp

from ..pass_base import Analysis, AnalysisObject, Context
from ...dsl import ast


class PrintedAST(AnalysisObject):
    def __init__(self, text: str):
        self.text = text


class AstPrinterPass(Analysis):
    """Produce an indented dump of the AST.

    - One node per line
    - Indentation corresponds to node depth
    - A vertical line segment at each indentation level ("│   ")
    - Each node shows its declarative fields (values, names, annotations)

    The result is stored in the context as a `PrintedAST` object.
    """
    requires = ()
    produces = (PrintedAST,)
    name = "ast_printer"

    def run(self, root: ast.Node, ctx: Context) -> AnalysisObject:
        lines: tp.List[str] = []
        self._emit_lines(root, 0, lines)
        return PrintedAST("\n".join(lines))

    def _emit_lines(self, node: ast.Node, depth: int, out_lines: tp.List[str]) -> None:
        prefix = "│   " * depth
        out_lines.append(f"{prefix}{self._format_node_label(node)}")
        for child in node:
            self._emit_lines(child, depth + 1, out_lines)

    def _format_node_label(self, node: ast.Node) -> str:
        cls_name = node.__class__.__name__
        field_snippets = [f"{field}={value!r}" for field, value in node.field_dict.items()]
        if field_snippets:
            return f"{cls_name}({', '.join(field_snippets)})"
        return cls_name
