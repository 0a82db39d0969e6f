"""
DML Renderer - UPDATE, DELETE and INSERT around the keyword gutter
"""

from typing import TYPE_CHECKING

from ..core import IndentContext
from ..models import Delete, Insert, Update
from .layout import comma_lines, gutter

if TYPE_CHECKING:
    from .expression_renderer import ExpressionRenderer


class DmlRenderer:
    """Renders data-modifying statements with the same gutter rules as SELECT."""

    def __init__(self, expressions: "ExpressionRenderer"):
        self.expressions = expressions

    def kw(self, text: str) -> str:
        return self.expressions.kw(text)

    def _table(self, table, context: IndentContext) -> str:
        return self.expressions.statements.selects.render_source(table, context)

    def render_update(self, statement: Update, context: IndentContext) -> str:
        width = context.base_keyword_width
        lines = [f"{gutter(self.kw('UPDATE'), width)} {self._table(statement.table, context)}"]

        assignments = [
            f"{assignment.column} = {self.expressions.render(assignment.value, context)}"
            for assignment in statement.assignments
        ]
        if assignments:
            lines.append(f"{gutter(self.kw('SET'), width)} {assignments[0]}")
            lines.extend(comma_lines(assignments[1:], width))

        if statement.where is not None:
            lines.append(self.expressions.statements.selects.render_where(statement.where, context))
        return "\n".join(lines)

    def render_delete(self, statement: Delete, context: IndentContext) -> str:
        width = context.base_keyword_width
        lines = [f"{gutter(self.kw('DELETE FROM'), width)} {self._table(statement.table, context)}"]
        if statement.where is not None:
            lines.append(self.expressions.statements.selects.render_where(statement.where, context))
        return "\n".join(lines)

    def render_insert(self, statement: Insert, context: IndentContext) -> str:
        """
        INSERT INTO target [(columns)] followed by VALUES rows or a query.

        A source query shares the INSERT gutter.
        """
        width = context.base_keyword_width
        target = self._table(statement.table, context)
        if statement.columns:
            target += f" ({', '.join(statement.columns)})"
        lines = [f"{gutter(self.kw('INSERT INTO'), width)} {target}"]

        if statement.select is not None:
            lines.append(self.expressions.statements.render(statement.select, context, establish_width=False))
            return "\n".join(lines)

        rows = [
            "(" + ", ".join(self.expressions.render(value, context) for value in row) + ")"
            for row in statement.rows
        ]
        if rows:
            lines.append(f"{gutter(self.kw('VALUES'), width)} {rows[0]}")
            lines.extend(comma_lines(rows[1:], width))
        return "\n".join(lines)
