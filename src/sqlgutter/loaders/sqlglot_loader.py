"""
sqlglot Loader - Parse SQL text with sqlglot and convert it into the node model

sqlglot does the tokenizing and parsing; this module maps its expression
tree onto sqlgutter.models. Constructs that have no gutter layout are
kept as sqlglot-generated text (functions with special call syntax,
window frames, ...). Clauses whose loss would change the meaning of the
query and that cannot be kept as text (DISTINCT ON, QUALIFY, RETURNING,
...) raise SqlParseError so the caller can keep the original SQL.
"""

import re
from typing import Any, List, Optional

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError, SqlglotError

from .base import AstLoader, SqlParseError
from ..constants import DEFAULT_DIALECT, MAX_RENDER_DEPTH, NESTING_TOO_DEEP, UNNAMED_CTE
from ..models import (
    AggregateCall,
    ArrayLiteral,
    Assignment,
    Between,
    BinaryOp,
    BooleanLiteral,
    Case,
    CaseWhen,
    Cast,
    ColumnRef,
    CommonTableExpression,
    Delete,
    DerivedTable,
    Exists,
    Expression,
    ExpressionList,
    Extract,
    FromItem,
    FunctionCall,
    InPredicate,
    Insert,
    Interval,
    KeywordLiteral,
    Limit,
    NullLiteral,
    NumberLiteral,
    OrderItem,
    Parameter,
    Paren,
    Quantified,
    Select,
    SelectColumn,
    Star,
    Statement,
    StringLiteral,
    Subquery,
    TableRef,
    TableSource,
    UnaryOp,
    UnknownTableSource,
    Unrecognized,
    UnsupportedStatement,
    Update,
    WindowCall,
    WindowSpec,
    WithClause,
)

import logging
logger = logging.getLogger(__name__)


BINARY_OPERATORS = {
    exp.EQ: "=",
    exp.NEQ: "<>",
    exp.GT: ">",
    exp.GTE: ">=",
    exp.LT: "<",
    exp.LTE: "<=",
    exp.Add: "+",
    exp.Sub: "-",
    exp.Mul: "*",
    exp.Div: "/",
    exp.Mod: "%",
    exp.DPipe: "||",
    exp.Like: "LIKE",
    exp.ILike: "ILIKE",
    exp.Is: "IS",
    exp.BitwiseAnd: "&",
    exp.BitwiseOr: "|",
}

# Operators that read differently when negated, either wrapped in NOT or
# carrying negate=True (newer sqlglot releases)
NEGATED_OPERATORS = {
    exp.Is: "IS NOT",
    exp.Like: "NOT LIKE",
    exp.ILike: "NOT ILIKE",
}

SELECT_ARGS = {
    "expressions", "distinct", "from", "from_", "joins", "where", "group",
    "having", "order", "limit", "offset", "with", "with_",
}
SET_OPERATION_ARGS = {"this", "expression", "distinct", "order", "limit", "offset", "with", "with_"}
UPDATE_ARGS = {"this", "expressions", "where"}
DELETE_ARGS = {"this", "where"}
INSERT_ARGS = {"this", "expression"}

_FUNCTION_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.$]*$")
_BARE_KEYWORD = re.compile(r"^[A-Z][A-Z_]*$")


def _arg(node: exp.Expression, *names: str) -> Any:
    """First non-empty arg among names (arg keys differ across sqlglot releases)."""
    for name in names:
        value = node.args.get(name)
        if value is not None:
            return value
    return None


def _set_operation_types() -> tuple:
    # Intersect/Except first: older releases derive them from Union
    return (exp.Intersect, exp.Except, exp.Union)


class SqlglotLoader(AstLoader):
    """
    Loader that parses SQL text with sqlglot.

    Usage:
        loader = SqlglotLoader("postgres")
        statements = loader.load("select a from t")
    """

    name = "sqlglot"

    def __init__(self, dialect: Optional[str] = None):
        super().__init__(dialect or DEFAULT_DIALECT)
        self._depth = 0

    def load(self, source: str) -> List[Statement]:
        """
        Parse SQL text and convert every statement.

        Args:
            source: SQL text, one or more statements

        Returns:
            One statement node per parsed statement

        Raises:
            SqlParseError: If sqlglot rejects the text, or it uses a
                clause that cannot be re-rendered without loss
        """
        try:
            trees = sqlglot.parse(source, read=self.dialect)
        except ParseError as e:
            details = e.errors[0] if getattr(e, "errors", None) else {}
            raise SqlParseError(
                str(e), sql=source, line=details.get("line"), column=details.get("col")
            ) from e
        except SqlglotError as e:
            raise SqlParseError(str(e), sql=source) from e
        except RecursionError as e:
            raise SqlParseError("Query nesting too deep to parse", sql=source) from e

        return [self.convert_statement(tree) for tree in trees if tree is not None]

    def _sql(self, node: exp.Expression) -> str:
        return node.sql(dialect=self.dialect)

    def _unsupported(self, node: exp.Expression, what: str):
        raise SqlParseError(f"Unsupported {what}: {self._sql(node)[:80]}")

    def _require_only(self, node: exp.Expression, allowed: set, what: str):
        for key, value in node.args.items():
            if key not in allowed and value not in (None, False, []):
                self._unsupported(node, f"{what} clause '{key}'")

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def _identifier_text(self, node: Any) -> Optional[str]:
        if node is None:
            return None
        if isinstance(node, exp.Column) and not node.args.get("table"):
            node = node.this
        if isinstance(node, exp.Expression):
            return self._sql(node)
        return str(node)

    def _alias_text(self, node: exp.Expression) -> Optional[str]:
        alias = node.args.get("alias")
        if alias is None:
            return None
        if isinstance(alias, exp.TableAlias):
            name = self._identifier_text(alias.this) or ""
            columns = alias.args.get("columns") or []
            if columns:
                name += "({})".format(", ".join(self._identifier_text(c) for c in columns))
            return name or None
        return self._identifier_text(alias)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def convert_statement(self, node: exp.Expression) -> Statement:
        """Convert one parsed statement."""
        if isinstance(node, (exp.Select, exp.Subquery) + _set_operation_types()):
            return self._convert_query(node)
        if isinstance(node, exp.Update):
            return self._convert_update(node)
        if isinstance(node, exp.Delete):
            return self._convert_delete(node)
        if isinstance(node, exp.Insert):
            return self._convert_insert(node)

        logger.debug(f"No layout for statement type: {node.key}")
        return UnsupportedStatement(kind=node.key.upper(), text=self._sql(node))

    def _convert_query(self, node: exp.Expression) -> Select:
        while isinstance(node, exp.Subquery):
            node = node.this
        if isinstance(node, exp.Select):
            return self._convert_select(node)
        if isinstance(node, _set_operation_types()):
            return self._convert_set_operation(node)
        self._unsupported(node, "query")

    def _convert_select(self, node: exp.Select) -> Select:
        self._require_only(node, SELECT_ARGS, "SELECT")

        distinct = node.args.get("distinct")
        if distinct is not None and distinct.args.get("on") is not None:
            self._unsupported(node, "DISTINCT ON")

        select = Select(
            columns=[self._convert_column(column) for column in node.expressions],
            distinct=distinct is not None,
        )

        from_ = _arg(node, "from", "from_")
        if from_ is not None:
            sources = [from_.this] if from_.this is not None else list(from_.expressions)
            select.from_items.extend(FromItem(self._convert_table_source(s)) for s in sources)
        for join in node.args.get("joins") or []:
            select.from_items.append(self._convert_join(join))

        where = node.args.get("where")
        if where is not None:
            select.where = self.convert_expression(where.this)

        group = node.args.get("group")
        if group is not None:
            self._require_only(group, {"expressions"}, "GROUP BY")
            select.group_by = [self.convert_expression(e) for e in group.expressions]

        having = node.args.get("having")
        if having is not None:
            select.having = self.convert_expression(having.this)

        self._apply_modifiers(node, select)

        with_ = _arg(node, "with", "with_")
        if with_ is not None:
            select.with_clause = self._convert_with(with_)

        return select

    def _apply_modifiers(self, node: exp.Expression, select: Select):
        """ORDER BY / LIMIT / OFFSET of node onto select."""
        order = node.args.get("order")
        if order is not None:
            select.order_by = [self._convert_ordered(o) for o in order.expressions]

        limit = node.args.get("limit")
        offset = node.args.get("offset")
        count = None
        offset_value = None
        if limit is not None:
            count = _arg(limit, "expression", "this")
            offset_value = limit.args.get("offset")
        if offset is not None:
            offset_value = _arg(offset, "expression", "this")

        if count is not None or offset_value is not None:
            select.limit = Limit(
                count=self.convert_expression(count) if count is not None else None,
                offset=self.convert_expression(offset_value) if offset_value is not None else None,
            )

    def _set_op_keyword(self, node: exp.Expression) -> str:
        if isinstance(node, exp.Intersect):
            keyword = "INTERSECT"
        elif isinstance(node, exp.Except):
            keyword = "EXCEPT"
        else:
            keyword = "UNION"
        if node.args.get("distinct") is False:
            keyword += " ALL"
        return keyword

    def _convert_set_operation(self, node: exp.Expression) -> Select:
        self._require_only(node, SET_OPERATION_ARGS, "set operation")

        keywords = []
        branches = []
        current = node
        while isinstance(current, _set_operation_types()) and (
                current is node or not self._has_modifiers(current)):
            keywords.append(self._set_op_keyword(current))
            branches.append(current.expression)
            current = current.this

        first = self._convert_query(current)
        tail = self._tail(first)
        for keyword, branch in zip(reversed(keywords), reversed(branches)):
            converted = self._convert_query(branch)
            tail.set_op = keyword
            tail.next = converted
            tail = self._tail(converted)

        if self._has_modifiers(node):
            self._apply_modifiers(node, tail)

        with_ = _arg(node, "with", "with_")
        if with_ is not None:
            first.with_clause = self._convert_with(with_)
        return first

    def _has_modifiers(self, node: exp.Expression) -> bool:
        return any(node.args.get(key) is not None for key in ("order", "limit", "offset"))

    def _tail(self, select: Select) -> Select:
        while select.next is not None:
            select = select.next
        return select

    def _convert_with(self, node: exp.Expression) -> WithClause:
        ctes = []
        for cte in node.expressions:
            if cte.args.get("materialized") is not None:
                self._unsupported(cte, "MATERIALIZED CTE")
            alias = cte.args.get("alias")
            name = self._identifier_text(alias.this) if alias is not None else None
            columns = alias.args.get("columns") or [] if alias is not None else []
            ctes.append(CommonTableExpression(
                name=name or UNNAMED_CTE,
                statement=self.convert_statement(cte.this),
                columns=[self._identifier_text(c) for c in columns],
            ))
        return WithClause(ctes=ctes, recursive=bool(node.args.get("recursive")))

    def _convert_column(self, node: exp.Expression) -> SelectColumn:
        if isinstance(node, exp.Alias):
            return SelectColumn(
                self.convert_expression(node.this),
                self._identifier_text(node.args.get("alias")),
            )
        return SelectColumn(self.convert_expression(node))

    def _convert_table_source(self, node: exp.Expression) -> TableSource:
        alias = self._alias_text(node)

        if isinstance(node, exp.Subquery):
            return DerivedTable(self._convert_query(node.this), alias)

        if isinstance(node, exp.Table):
            if isinstance(node.this, exp.Identifier):
                parts = [node.args.get("catalog"), node.args.get("db"), node.this]
                name = ".".join(self._identifier_text(p) for p in parts if p is not None)
                return TableRef(name, alias)
            if node.this is not None:
                return UnknownTableSource(self._sql(node.this), alias)

        logger.debug(f"FROM source kept as text: {node.key}")
        return UnknownTableSource(self._sql(node))

    def _convert_join(self, node: exp.Join) -> FromItem:
        source = self._convert_table_source(node.this)
        words = [node.text(key).upper() for key in ("method", "side", "kind")]
        words = [word for word in words if word]
        on = node.args.get("on")
        using = node.args.get("using") or []

        if not words and on is None and not using:
            # FROM a, b
            return FromItem(source)

        return FromItem(
            source=source,
            join=" ".join(words + ["JOIN"]),
            on=self.convert_expression(on) if on is not None else None,
            using=[self._identifier_text(u) for u in using],
        )

    def _convert_ordered(self, node: exp.Expression) -> OrderItem:
        if not isinstance(node, exp.Ordered):
            return OrderItem(self.convert_expression(node))

        desc = node.args.get("desc")
        text = self._sql(node).upper().rstrip()
        nulls = None
        if text.endswith("NULLS FIRST"):
            nulls = "FIRST"
        elif text.endswith("NULLS LAST"):
            nulls = "LAST"

        return OrderItem(
            expression=self.convert_expression(node.this),
            direction="DESC" if desc else "ASC" if desc is False else None,
            nulls=nulls,
        )

    def _convert_update(self, node: exp.Update) -> Update:
        self._require_only(node, UPDATE_ARGS, "UPDATE")
        assignments = []
        for item in node.expressions:
            if isinstance(item, exp.EQ):
                assignments.append(Assignment(self._sql(item.this), self.convert_expression(item.expression)))
            else:
                self._unsupported(item, "SET item")

        where = node.args.get("where")
        return Update(
            table=self._convert_table_source(node.this),
            assignments=assignments,
            where=self.convert_expression(where.this) if where is not None else None,
        )

    def _convert_delete(self, node: exp.Delete) -> Delete:
        self._require_only(node, DELETE_ARGS, "DELETE")
        where = node.args.get("where")
        return Delete(
            table=self._convert_table_source(node.this),
            where=self.convert_expression(where.this) if where is not None else None,
        )

    def _convert_insert(self, node: exp.Insert) -> Insert:
        self._require_only(node, INSERT_ARGS, "INSERT")

        target = node.this
        columns = []
        if isinstance(target, exp.Schema):
            columns = [self._identifier_text(c) for c in target.expressions]
            target = target.this
        insert = Insert(table=self._convert_table_source(target), columns=columns)

        source = node.args.get("expression")
        if isinstance(source, exp.Values):
            for row in source.expressions:
                items = row.expressions if isinstance(row, exp.Tuple) else [row]
                insert.rows.append([self.convert_expression(item) for item in items])
        elif source is not None:
            insert.select = self._convert_query(source)
        return insert

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def convert_expression(self, node: Any) -> Expression:
        """
        Convert one sqlglot expression.

        Nesting deeper than MAX_RENDER_DEPTH is cut off with a placeholder.
        """
        self._depth += 1
        try:
            if self._depth > MAX_RENDER_DEPTH:
                logger.warning("Expression nesting too deep, truncating")
                return Unrecognized(value=NESTING_TOO_DEEP, kind="depth")
            return self._convert_expression(node)
        finally:
            self._depth -= 1

    def _convert_expression(self, node: Any) -> Expression:
        if node is None:
            return Unrecognized()
        if not isinstance(node, exp.Expression):
            return Unrecognized(value=str(node))

        if isinstance(node, (exp.Subquery, exp.Select) + _set_operation_types()):
            return Subquery(self._convert_query(node))
        if isinstance(node, exp.Paren):
            return Paren(self.convert_expression(node.this))
        if isinstance(node, exp.Alias):
            return self.convert_expression(node.this)
        if isinstance(node, exp.Literal):
            return self._convert_literal(node)
        if isinstance(node, exp.Boolean):
            return BooleanLiteral(bool(node.this))
        if isinstance(node, exp.Null):
            return NullLiteral()
        if isinstance(node, exp.Star):
            return Star()
        if isinstance(node, exp.Column):
            return self._convert_column_ref(node)
        if isinstance(node, exp.Identifier):
            return ColumnRef(self._identifier_text(node))
        if isinstance(node, (exp.Placeholder, exp.Parameter)):
            return Parameter(self._sql(node))
        if isinstance(node, exp.Not):
            return self._convert_not(node)
        if isinstance(node, exp.Neg):
            return UnaryOp("-", self.convert_expression(node.this))
        if isinstance(node, exp.BitwiseNot):
            return UnaryOp("~", self.convert_expression(node.this))
        if isinstance(node, exp.In):
            return self._convert_in(node)
        if isinstance(node, exp.Between):
            return Between(
                self.convert_expression(node.this),
                self.convert_expression(node.args.get("low")),
                self.convert_expression(node.args.get("high")),
            )
        if isinstance(node, exp.Exists):
            return Exists(self._convert_query(node.this))
        if isinstance(node, (exp.Any, exp.All)):
            return self._convert_quantified(node)
        if isinstance(node, exp.Case):
            return self._convert_case(node)
        if type(node) is exp.Cast and node.args.get("format") is None:
            return Cast(self.convert_expression(node.this), self._sql(node.args["to"]))
        if isinstance(node, exp.Array):
            return ArrayLiteral([self.convert_expression(e) for e in node.expressions])
        if isinstance(node, exp.Interval):
            unit = node.args.get("unit")
            return Interval(
                self.convert_expression(node.this),
                self._sql(unit).upper() if unit is not None else None,
            )
        if isinstance(node, exp.Extract):
            return Extract(node.this.name.upper(), self.convert_expression(node.expression))
        if isinstance(node, exp.Window):
            return self._convert_window(node)
        if isinstance(node, exp.Tuple):
            return ExpressionList([self.convert_expression(e) for e in node.expressions])
        if isinstance(node, exp.And):
            return self._convert_chain(node, exp.And, "AND")
        if isinstance(node, exp.Or):
            return self._convert_chain(node, exp.Or, "OR")
        if type(node) in BINARY_OPERATORS:
            return self._convert_comparison(node, negated=False)
        if isinstance(node, exp.Func):
            return self._convert_function(node)

        logger.debug(f"Expression kept as generated text: {node.key}")
        return Unrecognized(value=self._sql(node), kind=node.key)

    def _convert_literal(self, node: exp.Literal) -> Expression:
        if not node.is_string:
            return NumberLiteral(node.this)
        text = self._sql(node)
        if len(text) >= 2 and text.startswith("'") and text.endswith("'"):
            # Keep the escaped form: 'it''s'
            return StringLiteral(text[1:-1])
        return Unrecognized(value=text, kind="literal")

    def _convert_column_ref(self, node: exp.Column) -> ColumnRef:
        column = "*" if isinstance(node.this, exp.Star) else self._identifier_text(node.this)
        parts = [node.args.get(key) for key in ("catalog", "db", "table")]
        table = ".".join(self._identifier_text(p) for p in parts if p is not None)
        return ColumnRef(column, table or None)

    def _convert_not(self, node: exp.Not) -> Expression:
        inner = node.this
        if isinstance(inner, (exp.In, exp.Between)):
            predicate = self.convert_expression(inner)
            if isinstance(predicate, (InPredicate, Between)):
                predicate.negated = True
                return predicate
            return UnaryOp("NOT", predicate)
        if isinstance(inner, exp.Exists):
            return Exists(self._convert_query(inner.this), negated=True)
        if type(inner) in NEGATED_OPERATORS:
            return self._convert_comparison(inner, negated=True)
        return UnaryOp("NOT", self.convert_expression(inner))

    def _convert_comparison(self, node: exp.Expression, negated: bool) -> Expression:
        """
        Binary operator node, honouring its own negate flag.

        Args:
            node: Node whose type is in BINARY_OPERATORS
            negated: True when node sits under a NOT
        """
        if node.args.get("negate"):
            negated = not negated
        left = self.convert_expression(node.this)
        right = self.convert_expression(node.expression)
        if not negated:
            return BinaryOp(BINARY_OPERATORS[type(node)], left, right)
        if type(node) in NEGATED_OPERATORS:
            return BinaryOp(NEGATED_OPERATORS[type(node)], left, right)
        return UnaryOp("NOT", BinaryOp(BINARY_OPERATORS[type(node)], left, right))

    def _convert_in(self, node: exp.In) -> Expression:
        if node.args.get("unnest") is not None or node.args.get("field") is not None:
            return Unrecognized(value=self._sql(node), kind="in")

        value = self.convert_expression(node.this)
        query = node.args.get("query")
        if query is not None:
            return InPredicate(value, subquery=self._convert_query(query))
        return InPredicate(value, items=[self.convert_expression(e) for e in node.expressions])

    def _convert_quantified(self, node: exp.Expression) -> Expression:
        quantifier = "ANY" if isinstance(node, exp.Any) else "ALL"
        inner = node.this
        if isinstance(inner, (exp.Subquery, exp.Select) + _set_operation_types()):
            return Quantified(quantifier, self._convert_query(inner))
        return Unrecognized(value=self._sql(node), kind=node.key)

    def _convert_chain(self, node: exp.Expression, cls: type, operator: str) -> Expression:
        """Convert a left-deep AND/OR chain without recursing along its length."""
        spine = [node]
        current = node.this
        while type(current) is cls:
            spine.append(current)
            current = current.this

        result = self.convert_expression(current)
        for item in reversed(spine):
            result = BinaryOp(operator, result, self.convert_expression(item.expression))
        return result

    def _convert_case(self, node: exp.Case) -> Case:
        operand = node.this
        default = node.args.get("default")
        return Case(
            whens=[
                CaseWhen(
                    self.convert_expression(branch.this),
                    self.convert_expression(branch.args.get("true")),
                )
                for branch in node.args.get("ifs") or []
            ],
            operand=self.convert_expression(operand) if operand is not None else None,
            else_result=self.convert_expression(default) if default is not None else None,
        )

    def _convert_window(self, node: exp.Window) -> Expression:
        if node.args.get("spec") is not None or node.args.get("alias") is not None:
            return Unrecognized(value=self._sql(node), kind="window")

        order = node.args.get("order")
        spec = WindowSpec(
            partition_by=[self.convert_expression(e) for e in node.args.get("partition_by") or []],
            order_by=[self._convert_ordered(o) for o in order.expressions] if order is not None else [],
        )

        function = self.convert_expression(node.this)
        if isinstance(function, AggregateCall):
            function.over = spec
            return function
        if isinstance(function, FunctionCall):
            return WindowCall(function.name, function.args, spec)
        return Unrecognized(value=self._sql(node), kind="window")

    def _function_arguments(self, node: exp.Func) -> List[exp.Expression]:
        if isinstance(node, exp.Anonymous):
            return list(node.expressions)
        args = []
        for key in node.arg_types:
            value = node.args.get(key)
            if isinstance(value, list):
                args.extend(v for v in value if isinstance(v, exp.Expression))
            elif isinstance(value, exp.Expression):
                args.append(value)
        return args

    def _convert_function(self, node: exp.Func) -> Expression:
        """
        Convert a function call when sqlglot renders it as NAME(arg, ...).

        Anything else (CURRENT_DATE, SUBSTRING(x FROM 1), ...) is kept as
        the text sqlglot generates for it.
        """
        text = self._sql(node)
        args = self._function_arguments(node)
        name, paren, rest = text.partition("(")
        arg_text = ", ".join(self._sql(arg) for arg in args)

        if not paren or rest != f"{arg_text})" or not _FUNCTION_NAME.match(name):
            if _BARE_KEYWORD.match(text):
                return KeywordLiteral(text)
            return Unrecognized(value=text, kind=node.key)

        distinct = False
        if len(args) == 1 and isinstance(args[0], exp.Distinct) and args[0].args.get("on") is None:
            distinct = True
            args = list(args[0].expressions)

        converted = [self.convert_expression(arg) for arg in args]
        if distinct or isinstance(node, exp.AggFunc):
            return AggregateCall(name, converted, distinct=distinct)
        return FunctionCall(name, converted)
