"""
Renderers - Turn statement and expression nodes into gutter-aligned SQL
"""

from .expression_renderer import ExpressionRenderer
from .statement_renderer import StatementRenderer, render_statement
from .select_renderer import SelectRenderer
from .dml_renderer import DmlRenderer

__all__ = [
    "ExpressionRenderer",
    "StatementRenderer",
    "SelectRenderer",
    "DmlRenderer",
    "render_statement",
]
