"""
Select Renderer - Compose the clauses of a SELECT statement around the keyword gutter
"""

from typing import List, TYPE_CHECKING

from ..constants import INVALID_CTE, MIN_DERIVED_TABLE_WIDTH
from ..core import ContextKind, IndentContext, compute_keyword_width
from ..models import (
    ColumnRef,
    DerivedTable,
    FromItem,
    Limit,
    Select,
    SelectColumn,
    Star,
    TableRef,
    UnknownTableSource,
    WithClause,
)
from .layout import comma_lines, gutter, indent_block, last_line

if TYPE_CHECKING:
    from .expression_renderer import ExpressionRenderer

import logging
logger = logging.getLogger(__name__)


class SelectRenderer:
    """
    Renders SELECT statements.

    Every clause keyword is right-aligned so it ends at the context's
    base keyword width; the rendered block starts at column 0 and the
    caller shifts it when the query is nested.
    """

    def __init__(self, expressions: "ExpressionRenderer"):
        self.expressions = expressions

    def kw(self, text: str) -> str:
        return self.expressions.kw(text)

    def render(self, select: Select, context: IndentContext) -> str:
        """
        Render a SELECT and every set-operation branch following it.

        Args:
            select: Statement to render
            context: Context whose width is already established for the block

        Returns:
            Rendered text without terminator
        """
        width = context.base_keyword_width
        parts = []

        if select.with_clause is not None:
            parts.append(self.render_with(select.with_clause, context))

        parts.append(self.render_columns(select, context))

        if select.from_items:
            parts.append(self.render_from(select.from_items, context))

        if select.where is not None:
            parts.append(self.render_where(select.where, context))

        if select.group_by:
            items = ", ".join(self.expressions.render(item, context) for item in select.group_by)
            parts.append(f"{gutter(self.kw('GROUP BY'), width)} {items}")

        if select.having is not None:
            having_context = context.derive_sibling(ContextKind.WHERE_CLAUSE)
            condition = self.expressions.render(select.having, having_context)
            parts.append(f"{gutter(self.kw('HAVING'), width)} {condition}")

        if select.order_by:
            items = ", ".join(self.expressions.render_order_item(item, context) for item in select.order_by)
            parts.append(f"{gutter(self.kw('ORDER BY'), width)} {items}")

        if select.limit is not None:
            limit = self.render_limit(select.limit, context)
            if limit:
                parts.append(limit)

        if select.next is not None and select.set_op:
            parts.append(gutter(self.kw(select.set_op), width))
            parts.append(self.expressions.statements.render(select.next, context, establish_width=False))

        return "\n".join(parts)

    # ------------------------------------------------------------------
    # WITH
    # ------------------------------------------------------------------

    def render_with(self, with_clause: WithClause, context: IndentContext) -> str:
        """
        Render the CTE list.

        CTE bodies share the gutter of the main query and render at
        nest level 0, so their keywords line up with the main body.
        """
        width = context.base_keyword_width
        keyword = self.kw("WITH RECURSIVE" if with_clause.recursive else "WITH")

        if with_clause.ctes is None:
            logger.warning("Malformed WITH clause, emitting placeholder")
            return f"{gutter(self.kw('WITH'), width)} {INVALID_CTE}"

        body_context = IndentContext(base_keyword_width=width)
        closing = " " * max(width - 1, 0) + ")"
        lines = []
        for index, cte in enumerate(with_clause.ctes):
            name = cte.name
            if cte.columns:
                name += f" ({', '.join(cte.columns)})"
            head = f"{name} {self.kw('AS')} ("
            if index == 0:
                lines.append(f"{gutter(keyword, width)} {head}")
            else:
                lines.extend(comma_lines([head], width))
            lines.append(self.expressions.statements.render(cte.statement, body_context, establish_width=False))
            lines.append(closing)
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # SELECT list
    # ------------------------------------------------------------------

    def render_column(self, column: SelectColumn, context: IndentContext) -> str:
        expression = column.expression
        if isinstance(expression, ColumnRef) and expression.column == "*" and not expression.table:
            return self.expressions.render(Star(), context)
        return self.expressions.render(expression, context)

    def _align_aliases(self, columns: List[SelectColumn], texts: List[str], start: int) -> List[str]:
        """
        Pad expressions so every AS starts in the same column.

        start is the column where each expression's first line begins;
        continuation lines already carry absolute indentation.
        """
        def end_column(text: str) -> int:
            if "\n" in text:
                return len(last_line(text))
            return start + len(text)

        aliased = [end_column(text) for column, text in zip(columns, texts) if column.alias]
        if not aliased:
            return texts

        target = max(aliased)
        result = []
        for column, text in zip(columns, texts):
            if column.alias:
                padding = " " * (target - end_column(text))
                text = f"{text}{padding} {self.kw('AS')} {column.alias}"
            result.append(text)
        return result

    def render_columns(self, select: Select, context: IndentContext) -> str:
        width = context.base_keyword_width
        keyword = gutter(self.kw("SELECT"), width)
        if select.distinct:
            keyword += f" {self.kw('DISTINCT')}"

        if not select.columns:
            return keyword

        select_context = context.derive_sibling(ContextKind.SELECT_CLAUSE)
        texts = [self.render_column(column, select_context) for column in select.columns]
        texts = self._align_aliases(select.columns, texts, width + 1)

        if len(texts) == 1:
            return f"{keyword} {texts[0]}"

        if self.expressions.compact_select:
            lines = [f"{keyword} {texts[0]}"]
        else:
            lines = [keyword, " " * (width + 1) + texts[0]]
        lines.extend(comma_lines(texts[1:], width))
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # FROM
    # ------------------------------------------------------------------

    def render_source(self, source, context: IndentContext) -> str:
        """
        Render one FROM source.

        Derived tables get a subquery context of their own, never
        narrower than MIN_DERIVED_TABLE_WIDTH.
        """
        if isinstance(source, DerivedTable):
            inner_width = max(compute_keyword_width(source.select), MIN_DERIVED_TABLE_WIDTH)
            sub_context = context.derive_subquery(inner_width)
            body = self.expressions.statements.render(source.select, sub_context, establish_width=False)
            width = context.base_keyword_width
            text = f"(\n{indent_block(body, width + 2)}\n{' ' * (width + 1)})"
            alias = source.alias
        elif isinstance(source, (TableRef, UnknownTableSource)):
            text = source.name
            alias = source.alias
        else:
            logger.debug(f"Unknown FROM source {type(source).__name__}")
            text = str(source)
            alias = None

        if alias:
            text += f" {self.kw('AS')} {alias}"
        return text

    def render_from(self, items: List[FromItem], context: IndentContext) -> str:
        width = context.base_keyword_width
        lines = [f"{gutter(self.kw('FROM'), width)} {self.render_source(items[0].source, context)}"]

        for item in items[1:]:
            source = self.render_source(item.source, context)
            if not item.join:
                lines.extend(comma_lines([source], width))
                continue

            line = f"{gutter(self.kw(item.join), width)} {source}"
            if item.using:
                line += f" {self.kw('USING')} ({', '.join(item.using)})"
            lines.append(line)

            if item.on is not None:
                lines.extend(self.render_join_condition(item, context))

        return "\n".join(lines)

    def render_join_condition(self, item: FromItem, context: IndentContext) -> List[str]:
        """One ON line, then one AND line per further top-level conjunct."""
        width = context.base_keyword_width
        join_context = context.derive_sibling(ContextKind.JOIN_CONDITION)
        lines = []
        for index, conjunct in enumerate(self.expressions.conjuncts(item.on)):
            keyword = self.kw("ON" if index == 0 else "AND")
            lines.append(f"{gutter(keyword, width)} {self.expressions.render(conjunct, join_context)}")
        return lines

    # ------------------------------------------------------------------
    # WHERE / LIMIT
    # ------------------------------------------------------------------

    def render_where(self, condition, context: IndentContext) -> str:
        where_context = context.derive_sibling(ContextKind.WHERE_CLAUSE)
        text = self.expressions.render(condition, where_context)
        return f"{gutter(self.kw('WHERE'), context.base_keyword_width)} {text}"

    def render_limit(self, limit: Limit, context: IndentContext) -> str:
        width = context.base_keyword_width
        if limit.count is not None:
            text = f"{gutter(self.kw('LIMIT'), width)} {self.expressions.render(limit.count, context)}"
            if limit.offset is not None:
                text += f" {self.kw('OFFSET')} {self.expressions.render(limit.offset, context)}"
            return text
        if limit.offset is not None:
            return f"{gutter(self.kw('OFFSET'), width)} {self.expressions.render(limit.offset, context)}"
        return ""
