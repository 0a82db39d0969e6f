"""
Statement Renderer - Entry point for rendering one statement node

Establishes the keyword gutter of a statement block, then dispatches to
the SELECT or DML renderer.
"""

from typing import Optional, TYPE_CHECKING

from ..config import FormatterOptions
from ..core import IndentContext, compute_keyword_width
from ..models import Delete, Insert, Select, Statement, Update, UnsupportedStatement
from .dml_renderer import DmlRenderer
from .select_renderer import SelectRenderer

if TYPE_CHECKING:
    from .expression_renderer import ExpressionRenderer

import logging
logger = logging.getLogger(__name__)


class StatementRenderer:
    """Dispatches statements to their renderer."""

    def __init__(self, expressions: "ExpressionRenderer"):
        self.expressions = expressions
        self.selects = SelectRenderer(expressions)
        self.dml = DmlRenderer(expressions)

    def render(
        self,
        statement: Statement,
        context: Optional[IndentContext] = None,
        establish_width: Optional[bool] = None,
    ) -> str:
        """
        Render a statement.

        Args:
            statement: Statement node
            context: Rendering context (root context if None)
            establish_width: Recompute the gutter width for this block.
                Defaults to True at the root of a statement, False for
                nested queries whose context already carries a width.

        Returns:
            Rendered text without terminator
        """
        if context is None:
            context = IndentContext()
        if establish_width is None:
            establish_width = context.nest_level == 0 and context.parent is None
        if establish_width:
            context = context.with_width(compute_keyword_width(statement))

        if isinstance(statement, Select):
            return self.selects.render(statement, context)
        if isinstance(statement, Update):
            return self.dml.render_update(statement, context)
        if isinstance(statement, Delete):
            return self.dml.render_delete(statement, context)
        if isinstance(statement, Insert):
            return self.dml.render_insert(statement, context)

        if isinstance(statement, UnsupportedStatement):
            if statement.text:
                return statement.text
            kind = statement.kind
        else:
            kind = type(statement).__name__
        logger.warning(f"No layout for statement kind '{kind}'")
        return f"/* unsupported statement: {kind} */"


def render_statement(
    statement: Statement,
    options: Optional[FormatterOptions] = None,
    compact_select: bool = False,
) -> str:
    """
    Render one statement with a fresh renderer.

    Args:
        statement: Statement node
        options: Formatter options (defaults if None)
        compact_select: Keep the first SELECT column on the keyword line

    Returns:
        Rendered text without terminator
    """
    from .expression_renderer import ExpressionRenderer

    renderer = ExpressionRenderer(options, compact_select=compact_select)
    return renderer.statements.render(statement)
