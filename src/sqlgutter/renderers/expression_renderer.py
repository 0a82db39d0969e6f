"""
Expression Renderer - Render expression nodes as (possibly multi-line) SQL text

Each node kind has one render method; the indent context decides where
nested lines start. Rendering never raises: unknown nodes fall back to
their literal value or an inline placeholder comment.
"""

import re
from typing import List, Optional

from ..config import FormatterOptions
from ..constants import MAX_RENDER_DEPTH, NESTING_TOO_DEEP, UNSUPPORTED_EXPRESSION
from ..core import ContextKind, IndentContext, compute_keyword_width
from ..models import (
    AggregateCall,
    ArrayLiteral,
    Between,
    BinaryOp,
    BooleanLiteral,
    Case,
    Cast,
    CastSyntax,
    ColumnRef,
    Exists,
    Expression,
    ExpressionList,
    Extract,
    FunctionCall,
    InPredicate,
    Interval,
    KeywordLiteral,
    NullLiteral,
    NumberLiteral,
    OrderItem,
    Parameter,
    Paren,
    Quantified,
    Select,
    Star,
    StringLiteral,
    Subquery,
    TypedLiteral,
    UnaryOp,
    Unrecognized,
    WindowCall,
    WindowSpec,
    is_literal,
)
from .layout import indent_block, last_line

import logging
logger = logging.getLogger(__name__)


_HAS_LETTER = re.compile(r"[A-Za-z]")
_SIGN_OPERATORS = ("-", "+", "~")


class ExpressionRenderer:
    """
    Renders expression nodes.

    One instance serves one formatting call; it owns the statement
    renderer used for nested queries.
    """

    _DISPATCH = {
        ColumnRef: "_render_column",
        StringLiteral: "_render_string",
        NumberLiteral: "_render_number",
        BooleanLiteral: "_render_boolean",
        NullLiteral: "_render_null",
        TypedLiteral: "_render_typed_literal",
        KeywordLiteral: "_render_keyword_literal",
        Star: "_render_star",
        Parameter: "_render_parameter",
        Unrecognized: "_render_unrecognized",
        BinaryOp: "_render_binary",
        UnaryOp: "_render_unary",
        Paren: "_render_paren",
        Between: "_render_between",
        InPredicate: "_render_in",
        Exists: "_render_exists",
        Quantified: "_render_quantified",
        FunctionCall: "_render_function",
        AggregateCall: "_render_aggregate",
        WindowCall: "_render_window_call",
        Case: "_render_case",
        Cast: "_render_cast",
        ArrayLiteral: "_render_array",
        ExpressionList: "_render_expression_list",
        Interval: "_render_interval",
        Extract: "_render_extract",
        Subquery: "_render_subquery",
    }

    def __init__(self, options: Optional[FormatterOptions] = None, compact_select: bool = False):
        """
        Args:
            options: Formatter options (keyword casing)
            compact_select: Put the first SELECT column on the keyword line
                (used for statements that start with WITH)
        """
        from .statement_renderer import StatementRenderer

        self.options = options or FormatterOptions()
        self.compact_select = compact_select
        self.statements = StatementRenderer(self)
        self._depth = 0

    def kw(self, text: str) -> str:
        return self.options.keyword(text)

    def render(self, expression: Expression, context: IndentContext) -> str:
        """
        Render an expression in the given context.

        Args:
            expression: Node to render
            context: Position the text will be placed at

        Returns:
            SQL text; continuation lines carry absolute indentation
        """
        self._depth += 1
        try:
            if self._depth > MAX_RENDER_DEPTH:
                logger.warning("Expression nesting too deep, emitting placeholder")
                return NESTING_TOO_DEEP
            method = self._DISPATCH.get(type(expression))
            if method is None:
                logger.debug(f"No renderer for {type(expression).__name__}")
                return UNSUPPORTED_EXPRESSION
            return getattr(self, method)(expression, context)
        finally:
            self._depth -= 1

    # ------------------------------------------------------------------
    # Leaves
    # ------------------------------------------------------------------

    def _render_column(self, node: ColumnRef, context: IndentContext) -> str:
        if node.table:
            return f"{node.table}.{node.column}"
        return node.column

    def _render_string(self, node: StringLiteral, context: IndentContext) -> str:
        return node.style.value.format(node.value)

    def _render_number(self, node: NumberLiteral, context: IndentContext) -> str:
        return node.value

    def _render_boolean(self, node: BooleanLiteral, context: IndentContext) -> str:
        return self.kw("TRUE" if node.value else "FALSE")

    def _render_null(self, node: NullLiteral, context: IndentContext) -> str:
        return self.kw("NULL")

    def _render_typed_literal(self, node: TypedLiteral, context: IndentContext) -> str:
        return f"{self.kw(node.type_name)} '{node.value}'"

    def _render_keyword_literal(self, node: KeywordLiteral, context: IndentContext) -> str:
        return self.kw(node.value)

    def _render_star(self, node: Star, context: IndentContext) -> str:
        return "*"

    def _render_parameter(self, node: Parameter, context: IndentContext) -> str:
        return node.value

    def _render_unrecognized(self, node: Unrecognized, context: IndentContext) -> str:
        if node.value is not None:
            return node.value
        logger.debug(f"Unsupported expression: {node.kind or 'unknown'}")
        return UNSUPPORTED_EXPRESSION

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def operator(self, operator: str) -> str:
        """Word operators are keywords; symbols pass through."""
        if _HAS_LETTER.search(operator):
            return self.kw(operator)
        return operator

    def flatten(self, node: Expression, operator: str) -> List[Expression]:
        """Leaves of a chain of the same AND/OR operator, left to right."""
        leaves = []
        pending = [node]
        while pending:
            current = pending.pop()
            if isinstance(current, BinaryOp) and current.operator.upper() == operator:
                pending.append(current.right)
                pending.append(current.left)
            else:
                leaves.append(current)
        return leaves

    def conjuncts(self, node: Expression) -> List[Expression]:
        """
        Leaves of an AND chain.

        An OR directly under an AND can only come from an AST without
        parenthesis markers; it is parenthesized to keep its grouping.
        """
        leaves = self.flatten(node, "AND")
        return [
            Paren(leaf) if isinstance(leaf, BinaryOp) and leaf.operator.upper() == "OR" else leaf
            for leaf in leaves
        ]

    def _render_logical(self, node: BinaryOp, context: IndentContext) -> str:
        operator = node.operator.upper()
        leaves = self.conjuncts(node) if operator == "AND" else self.flatten(node, operator)
        keyword = self.kw(operator)

        if context.nest_level == 0 and context.kind is not ContextKind.CASE_WHEN:
            prefix = keyword.rjust(context.base_keyword_width)
            lines = [self.render(leaves[0], context)]
            lines.extend(f"{prefix} {self.render(leaf, context)}" for leaf in leaves[1:])
            return "\n".join(lines)

        return f" {keyword} ".join(self.render(leaf, context) for leaf in leaves)

    def _render_binary(self, node: BinaryOp, context: IndentContext) -> str:
        operator = node.operator.upper()
        if operator in ("AND", "OR"):
            return self._render_logical(node, context)

        left = self.render(node.left, context)

        if operator == "=" and isinstance(node.right, Case) and context.is_condition:
            # WHEN lines line up under the CASE keyword that follows "="
            anchor = context.base_keyword_width + len(last_line(left)) + 3
            return f"{left} = {self._render_case(node.right, context, anchor)}"

        if isinstance(node.right, Quantified):
            quantified = self._render_subquery_operator(
                self.kw(node.right.quantifier), node.right.subquery, context)
            return f"{left} {self.operator(node.operator)} {quantified}"

        right = self.render(node.right, context)
        return f"{left} {self.operator(node.operator)} {right}"

    def _render_unary(self, node: UnaryOp, context: IndentContext) -> str:
        operand = self.render(node.operand, context)
        operator = self.operator(node.operator)
        if node.postfix:
            return f"{operand} {operator}"
        if operator in _SIGN_OPERATORS and not operand.startswith(_SIGN_OPERATORS):
            return f"{operator}{operand}"
        return f"{operator} {operand}"

    def _render_paren(self, node: Paren, context: IndentContext) -> str:
        inner = self.render(node.expression, context.derive_child(context.kind))
        return f"({inner})"

    def _render_between(self, node: Between, context: IndentContext) -> str:
        keyword = self.kw("NOT BETWEEN" if node.negated else "BETWEEN")
        return (f"{self.render(node.value, context)} {keyword} "
                f"{self.render(node.low, context)} {self.kw('AND')} {self.render(node.high, context)}")

    # ------------------------------------------------------------------
    # Subqueries
    # ------------------------------------------------------------------

    def _render_nested_query(self, select: Select, context: IndentContext) -> tuple:
        """Render select in its own subquery context; returns (text, context)."""
        sub_context = context.derive_subquery(compute_keyword_width(select))
        return self.statements.render(select, sub_context), sub_context

    def _render_subquery_operator(self, keyword: str, select: Select, context: IndentContext) -> str:
        """
        KEYWORD ( nested query ).

        Conditions use the compact layout, anchored on the gutter of the
        enclosing statement; elsewhere the block follows the subquery's
        own indent.
        """
        body, sub_context = self._render_nested_query(select, context)
        if context.is_condition:
            shift = context.base_keyword_width + 1
            closing = max(context.base_keyword_width - 2, 0)
        else:
            shift = sub_context.indent_width()
            closing = shift
        return f"{keyword} (\n{indent_block(body, shift)}\n{' ' * closing})"

    def _render_in(self, node: InPredicate, context: IndentContext) -> str:
        value = self.render(node.value, context)
        keyword = self.kw("NOT IN" if node.negated else "IN")

        if node.subquery is not None:
            return f"{value} {self._render_subquery_operator(keyword, node.subquery, context)}"

        items = node.items
        if context.is_condition and len(items) >= 2 and all(is_literal(item) for item in items):
            width = context.base_keyword_width
            lines = [f"{value} {keyword} (", " " * (width + 3) + self.render(items[0], context)]
            lines.extend(" " * (width + 1) + ", " + self.render(item, context) for item in items[1:])
            lines.append(" " * (width + 1) + ")")
            return "\n".join(lines)

        return f"{value} {keyword} ({', '.join(self.render(item, context) for item in items)})"

    def _render_exists(self, node: Exists, context: IndentContext) -> str:
        keyword = self.kw("NOT EXISTS" if node.negated else "EXISTS")
        return self._render_subquery_operator(keyword, node.subquery, context)

    def _render_quantified(self, node: Quantified, context: IndentContext) -> str:
        return self._render_subquery_operator(self.kw(node.quantifier), node.subquery, context)

    def _render_subquery(self, node: Subquery, context: IndentContext) -> str:
        body, sub_context = self._render_nested_query(node.select, context)
        if context.is_condition:
            shift = context.base_keyword_width + 1
            closing = shift
        else:
            shift = sub_context.indent_width()
            closing = sub_context.closing_indent_width()
        return f"(\n{indent_block(body, shift)}\n{' ' * closing})"

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def _render_args(self, args: List[Expression], context: IndentContext) -> str:
        arg_context = context.derive_child(ContextKind.FUNCTION_ARG)
        return ", ".join(self.render(arg, arg_context) for arg in args)

    def render_order_item(self, item: OrderItem, context: IndentContext) -> str:
        """expr [ASC|DESC] [NULLS FIRST|LAST]"""
        text = self.render(item.expression, context)
        if item.direction:
            text += f" {self.kw(item.direction)}"
        if item.nulls:
            text += f" {self.kw('NULLS ' + item.nulls)}"
        return text

    def _render_over(self, spec: WindowSpec, context: IndentContext) -> str:
        arg_context = context.derive_child(ContextKind.FUNCTION_ARG)
        parts = []
        if spec.partition_by:
            partition = ", ".join(self.render(item, arg_context) for item in spec.partition_by)
            parts.append(f"{self.kw('PARTITION BY')} {partition}")
        if spec.order_by:
            order = ", ".join(self.render_order_item(item, arg_context) for item in spec.order_by)
            parts.append(f"{self.kw('ORDER BY')} {order}")
        return f"{self.kw('OVER')} ({' '.join(parts)})"

    def _render_function(self, node: FunctionCall, context: IndentContext) -> str:
        return f"{node.name}({self._render_args(node.args, context)})"

    def _render_aggregate(self, node: AggregateCall, context: IndentContext) -> str:
        args = self._render_args(node.args, context)
        if node.distinct:
            args = f"{self.kw('DISTINCT')} {args}"
        text = f"{node.name}({args})"
        if node.over is not None:
            text += f" {self._render_over(node.over, context)}"
        return text

    def _render_window_call(self, node: WindowCall, context: IndentContext) -> str:
        return f"{node.name}({self._render_args(node.args, context)}) {self._render_over(node.over, context)}"

    # ------------------------------------------------------------------
    # Compound expressions
    # ------------------------------------------------------------------

    def _render_case(self, node: Case, context: IndentContext, anchor: Optional[int] = None) -> str:
        """
        CASE on the current line, WHEN/ELSE lines indented, END closing.

        Args:
            anchor: Absolute column of the CASE keyword's operator; when
                given, WHEN sits at anchor+3 and END at anchor+1
        """
        if anchor is None:
            case_context = context.derive_sibling(ContextKind.CASE_WHEN)
            when_indent = " " * case_context.indent_width()
            end_indent = " " * context.indent_width()
        else:
            case_context = IndentContext(
                nest_level=context.nest_level,
                kind=ContextKind.CASE_WHEN,
                base_keyword_width=context.base_keyword_width,
                parent=context,
            )
            when_indent = " " * (anchor + 3)
            end_indent = " " * (anchor + 1)

        head = self.kw("CASE")
        if node.operand is not None:
            head += f" {self.render(node.operand, case_context)}"

        lines = [head]
        for branch in node.whens:
            lines.append(
                f"{when_indent}{self.kw('WHEN')} {self.render(branch.condition, case_context)} "
                f"{self.kw('THEN')} {self.render(branch.result, case_context)}"
            )
        if node.else_result is not None:
            lines.append(f"{when_indent}{self.kw('ELSE')} {self.render(node.else_result, case_context)}")
        lines.append(f"{end_indent}{self.kw('END')}")
        return "\n".join(lines)

    def _type_name(self, type_name: str) -> str:
        if '"' in type_name or "`" in type_name:
            return type_name
        return self.kw(type_name)

    def _render_cast(self, node: Cast, context: IndentContext) -> str:
        if node.syntax is CastSyntax.OPERATOR:
            operand = self.render(node.expression, context)
            if isinstance(node.expression, (BinaryOp, Between, InPredicate, UnaryOp)):
                operand = f"({operand})"
            return f"{operand}::{self._type_name(node.target_type)}"

        arg_context = context.derive_child(ContextKind.FUNCTION_ARG)
        return (f"{self.kw('CAST')}({self.render(node.expression, arg_context)} "
                f"{self.kw('AS')} {self._type_name(node.target_type)})")

    def _render_array(self, node: ArrayLiteral, context: IndentContext) -> str:
        return f"{self.kw('ARRAY')}[{self._render_args(node.items, context)}]"

    def _render_expression_list(self, node: ExpressionList, context: IndentContext) -> str:
        items = ", ".join(self.render(item, context) for item in node.items)
        if not node.parenthesized:
            return items
        if any(isinstance(item, Subquery) for item in node.items):
            return f"({items}\n{' ' * context.closing_indent_width()})"
        return f"({items})"

    def _render_interval(self, node: Interval, context: IndentContext) -> str:
        text = f"{self.kw('INTERVAL')} {self.render(node.expression, context)}"
        if node.unit:
            text += f" {self.kw(node.unit)}"
        return text

    def _render_extract(self, node: Extract, context: IndentContext) -> str:
        arg_context = context.derive_child(ContextKind.FUNCTION_ARG)
        return (f"{self.kw('EXTRACT')}({self.kw(node.field)} {self.kw('FROM')} "
                f"{self.render(node.source, arg_context)})")
