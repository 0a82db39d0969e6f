"""
node-sql-parser Loader - Convert node-sql-parser JSON ASTs into the node model

node-sql-parser encodes the same construct in several shapes depending on
its version and on how the query was written (names as strings, as
{value} objects or as {name: [parts]}; NOT BETWEEN as one operator or as
a NOT wrapped around BETWEEN; subqueries attached directly or inside an
expr_list). Every variant is resolved here so renderers only ever see one
node per construct. Unknown shapes never raise: they become Unrecognized,
UnknownTableSource or UnsupportedStatement nodes.
"""

import json
import re
from typing import Any, Dict, List, Optional, Tuple

from .base import AstLoader, SqlParseError
from ..constants import (
    MAX_RENDER_DEPTH,
    NESTING_TOO_DEEP,
    UNKNOWN_COLUMN,
    UNKNOWN_FUNCTION,
    UNKNOWN_TABLE,
    UNNAMED_CTE,
)
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
    CastSyntax,
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
    QuoteStyle,
    Select,
    SelectColumn,
    Star,
    Statement,
    StringLiteral,
    Subquery,
    TableRef,
    TableSource,
    TypedLiteral,
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


STRING_STYLES = {
    "single_quote_string": QuoteStyle.SINGLE,
    "string": QuoteStyle.SINGLE,
    "double_quote_string": QuoteStyle.DOUBLE,
    "backticks_quote_string": QuoteStyle.BACKTICK,
    "regex_string": QuoteStyle.REGEX,
    "hex_string": QuoteStyle.HEX,
    "full_hex_string": QuoteStyle.HEX,
    "bit_string": QuoteStyle.BIT,
    "natural_string": QuoteStyle.NATIONAL,
}

TYPED_LITERALS = {"date", "time", "timestamp", "datetime"}

PREFIX_UNARY_OPERATORS = {"NOT", "-", "+", "~", "NOT EXISTS", "EXISTS"}

QUANTIFIERS = {"ANY", "ALL", "SOME"}

PARAMETER_SIGILS = (":", "$", "?", "@")

_PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")


def name_text(value: Any, default: Optional[str] = None) -> Optional[str]:
    """
    Resolve a name from any of the encodings node-sql-parser uses.

    Tries, in order: plain string, {name: [{value}, ...]} (dotted),
    {expr: {value}}, {value}, {name: "..."}.

    Args:
        value: Raw name payload
        default: Returned when nothing matches

    Returns:
        Name text or default
    """
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, dict):
        name = value.get("name")
        if isinstance(name, list):
            parts = [name_text(part) for part in name]
            parts = [part for part in parts if part]
            if parts:
                return ".".join(parts)
        expr = value.get("expr")
        if isinstance(expr, dict) and expr.get("value") is not None:
            return name_text(expr["value"], default)
        if value.get("value") is not None:
            return name_text(value["value"], default)
        if isinstance(name, str):
            return name
    return default


def alias_text(value: Any) -> Optional[str]:
    """Alias name, double-quoted when it is not a plain identifier."""
    alias = name_text(value)
    if not alias:
        return None
    if _PLAIN_IDENTIFIER.match(alias) or alias.startswith(('"', '`', '[')):
        return alias
    return '"{}"'.format(alias.replace('"', '""'))


def _is_distinct(value: Any) -> bool:
    if isinstance(value, str):
        return value.upper() == "DISTINCT"
    if isinstance(value, dict):
        return str(value.get("type") or "").upper() == "DISTINCT"
    return False


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


class NodeSqlParserLoader(AstLoader):
    """
    Loader for the JSON AST produced by node-sql-parser (astify).

    Usage:
        loader = NodeSqlParserLoader()
        statements = loader.load(ast_dict)
    """

    name = "node-sql-parser"
    accepts_sql = False

    def __init__(self, dialect: Optional[str] = None):
        super().__init__(dialect)
        self._depth = 0

    def load(self, source: Any) -> List[Statement]:
        """
        Convert an AST (dict, list of dicts, or their JSON text).

        Args:
            source: node-sql-parser AST, a parse() result holding "ast",
                or JSON text of either

        Returns:
            One statement node per AST entry

        Raises:
            SqlParseError: If JSON text cannot be decoded
        """
        if isinstance(source, (str, bytes)):
            try:
                source = json.loads(source)
            except ValueError as e:
                raise SqlParseError(f"Invalid AST JSON: {e}") from e

        if isinstance(source, dict) and "type" not in source and "ast" in source:
            source = source["ast"]

        return [self.convert_statement(item) for item in _as_list(source)]

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def convert_statement(self, node: Any) -> Statement:
        """Convert one statement node of any kind."""
        if not isinstance(node, dict):
            return UnsupportedStatement(kind=type(node).__name__.upper())

        kind = str(node.get("type") or "").lower()
        if kind == "select":
            return self.convert_select(node)
        if kind == "update":
            return self._convert_update(node)
        if kind == "delete":
            return self._convert_delete(node)
        if kind in ("insert", "replace"):
            return self._convert_insert(node)

        logger.debug(f"No layout for statement type: {kind or 'unknown'}")
        return UnsupportedStatement(kind=kind.upper() or "UNKNOWN")

    def convert_select(self, node: Dict[str, Any]) -> Select:
        """Convert a SELECT node, following its set-operation chain."""
        select = Select(
            columns=self._convert_columns(node.get("columns")),
            distinct=_is_distinct(node.get("distinct")),
            from_items=[self._convert_from_item(item) for item in _as_list(node.get("from"))],
            where=self._optional(node.get("where")),
            group_by=self._convert_group_by(node.get("groupby")),
            having=self._optional(node.get("having")),
            order_by=[self._convert_order_item(item) for item in _as_list(node.get("orderby"))],
            limit=self._convert_limit(node.get("limit")),
        )

        if node.get("with") is not None:
            select.with_clause = self._convert_with(node["with"])

        next_node = node.get("_next")
        if isinstance(next_node, dict):
            select.set_op = " ".join(str(node.get("set_op") or "union").upper().split())
            select.next = self.convert_select(next_node)

        return select

    def _convert_columns(self, columns: Any) -> List[SelectColumn]:
        if columns == "*":
            return [SelectColumn(Star())]

        result = []
        for column in _as_list(columns):
            if isinstance(column, dict) and "expr" in column and column.get("type") in (None, "expr"):
                result.append(SelectColumn(
                    expression=self.convert_expression(column["expr"]),
                    alias=alias_text(column.get("as")),
                ))
            else:
                result.append(SelectColumn(self.convert_expression(column)))
        return result

    def _convert_with(self, payload: Any) -> WithClause:
        if not isinstance(payload, list):
            logger.debug(f"Malformed WITH payload: {type(payload).__name__}")
            return WithClause(ctes=None)

        ctes = []
        recursive = False
        for item in payload:
            if not isinstance(item, dict):
                logger.debug("Skipping malformed CTE entry")
                continue
            stmt = item.get("stmt")
            body = stmt.get("ast", stmt) if isinstance(stmt, dict) else None
            ctes.append(CommonTableExpression(
                name=name_text(item.get("name"), UNNAMED_CTE),
                statement=self.convert_statement(body),
                columns=[name_text(c, UNKNOWN_COLUMN) for c in _as_list(item.get("columns"))],
            ))
            recursive = recursive or bool(item.get("recursive"))

        return WithClause(ctes=ctes, recursive=recursive)

    def _convert_from_item(self, item: Any) -> FromItem:
        if not isinstance(item, dict):
            return FromItem(UnknownTableSource(name_text(item, UNKNOWN_TABLE)))

        join = item.get("join")
        return FromItem(
            source=self._convert_table_source(item),
            join=" ".join(str(join).upper().split()) if join else None,
            on=self._optional(item.get("on")),
            using=[name_text(u, UNKNOWN_COLUMN) for u in _as_list(item.get("using"))],
        )

    def _convert_table_source(self, item: Dict[str, Any]) -> TableSource:
        alias = alias_text(item.get("as"))
        expr = item.get("expr")

        if isinstance(expr, dict):
            if isinstance(expr.get("ast"), dict):
                return DerivedTable(self.convert_select(expr["ast"]), alias)
            if expr.get("type") == "select":
                return DerivedTable(self.convert_select(expr), alias)

        table = name_text(item.get("table"))
        if table:
            schema = name_text(item.get("db")) or name_text(item.get("schema"))
            return TableRef(f"{schema}.{table}" if schema else table, alias)

        fallback = name_text(item.get("value")) or name_text(expr) or UNKNOWN_TABLE
        logger.debug(f"Unknown FROM source, using name: {fallback}")
        return UnknownTableSource(fallback, alias)

    def _convert_group_by(self, group_by: Any) -> List[Expression]:
        if isinstance(group_by, dict):
            group_by = group_by.get("columns")
        return [self.convert_expression(item) for item in _as_list(group_by)]

    def _convert_order_item(self, item: Any) -> OrderItem:
        if not isinstance(item, dict) or "expr" not in item:
            return OrderItem(self.convert_expression(item))

        direction = item.get("type")
        nulls = str(item.get("nulls") or "").upper()
        return OrderItem(
            expression=self.convert_expression(item["expr"]),
            direction=str(direction).upper() if direction else None,
            nulls="FIRST" if "FIRST" in nulls else "LAST" if "LAST" in nulls else None,
        )

    def _convert_limit(self, limit: Any) -> Optional[Limit]:
        if not isinstance(limit, dict):
            return None
        values = [self.convert_expression(v) for v in _as_list(limit.get("value"))]
        if not values:
            return None

        separator = str(limit.get("seperator") or limit.get("separator") or "").lower()
        if len(values) >= 2 and separator == "offset":
            return Limit(count=values[0], offset=values[1])
        if len(values) >= 2 and separator == ",":
            # MySQL LIMIT offset, count
            return Limit(count=values[1], offset=values[0])
        return Limit(count=values[0])

    def _first_table(self, tables: Any) -> TableSource:
        tables = _as_list(tables)
        if tables and isinstance(tables[0], dict):
            return self._convert_table_source(tables[0])
        return UnknownTableSource(UNKNOWN_TABLE)

    def _convert_update(self, node: Dict[str, Any]) -> Update:
        assignments = []
        for item in _as_list(node.get("set")):
            if not isinstance(item, dict):
                continue
            assignments.append(Assignment(
                column=name_text(item.get("column"), UNKNOWN_COLUMN),
                value=self.convert_expression(item.get("value")),
            ))
        return Update(
            table=self._first_table(node.get("table")),
            assignments=assignments,
            where=self._optional(node.get("where")),
        )

    def _convert_delete(self, node: Dict[str, Any]) -> Delete:
        tables = node.get("from") or node.get("table")
        return Delete(table=self._first_table(tables), where=self._optional(node.get("where")))

    def _convert_insert(self, node: Dict[str, Any]) -> Insert:
        columns = []
        for column in _as_list(node.get("columns")):
            if isinstance(column, dict) and "column" in column:
                column = column["column"]
            columns.append(name_text(column, UNKNOWN_COLUMN))

        insert = Insert(table=self._first_table(node.get("table")), columns=columns)

        values = node.get("values")
        if isinstance(values, dict) and values.get("type") == "select":
            insert.select = self.convert_select(values)
            return insert
        if isinstance(values, dict):
            values = values.get("values")

        for row in _as_list(values):
            items = row.get("value") if isinstance(row, dict) else row
            insert.rows.append([self.convert_expression(v) for v in _as_list(items)])
        return insert

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _optional(self, node: Any) -> Optional[Expression]:
        if node is None:
            return None
        return self.convert_expression(node)

    def convert_expression(self, node: Any) -> Expression:
        """
        Convert one expression node.

        Never raises; nesting deeper than MAX_RENDER_DEPTH is cut off with
        a placeholder.
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
        if isinstance(node, bool):
            return BooleanLiteral(node)
        if isinstance(node, (int, float)):
            return NumberLiteral(str(node))
        if isinstance(node, list):
            return ExpressionList([self.convert_expression(item) for item in node])
        if not isinstance(node, dict):
            return Unrecognized(value=str(node))

        kind = node.get("type")
        if kind is None:
            return self._convert_untyped(node)

        result = self._convert_typed(str(kind), node)
        if node.get("parentheses") and isinstance(result, (BinaryOp, UnaryOp, Between, InPredicate)):
            return Paren(result)
        return result

    def _convert_typed(self, kind: str, node: Dict[str, Any]) -> Expression:
        value = node.get("value")

        if kind == "column_ref":
            return self._convert_column_ref(node)
        if kind == "number":
            return NumberLiteral(str(value))
        if kind in STRING_STYLES:
            return StringLiteral("" if value is None else str(value), STRING_STYLES[kind])
        if kind in ("bool", "boolean"):
            if isinstance(value, str):
                return BooleanLiteral(value.upper() == "TRUE")
            return BooleanLiteral(bool(value))
        if kind == "null":
            return NullLiteral()
        if kind in TYPED_LITERALS:
            return TypedLiteral(kind.upper(), str(value))
        if kind == "star":
            return Star()
        if kind in ("origin", "default"):
            return KeywordLiteral(str(value))
        if kind == "param":
            text = str(value)
            return Parameter(text if text.startswith(PARAMETER_SIGILS) else f":{text}")
        if kind == "var":
            return Parameter(f"{node.get('prefix') or ''}{name_text(node.get('name'), '')}")
        if kind == "binary_expr":
            return self._convert_binary(node)
        if kind == "unary_expr":
            return self._convert_unary(node)
        if kind == "function":
            return self._convert_function(node)
        if kind == "aggr_func":
            return self._convert_aggregate(node)
        if kind == "window_func":
            return WindowCall(
                name=name_text(node.get("name"), UNKNOWN_FUNCTION),
                args=self._convert_args(node.get("args")),
                over=self._convert_over(node.get("over")) or WindowSpec(),
            )
        if kind == "case":
            return self._convert_case(node)
        if kind == "cast":
            return self._convert_cast(node)
        if kind == "array":
            items = value.get("value") if isinstance(value, dict) else value
            return ArrayLiteral([self.convert_expression(v) for v in _as_list(items)])
        if kind == "expr_list":
            return self._convert_expr_list(node)
        if kind == "interval":
            unit = node.get("unit")
            return Interval(self.convert_expression(node.get("expr")), str(unit).upper() if unit else None)
        if kind == "extract":
            return self._convert_extract(node)
        if kind == "select":
            return Subquery(self.convert_select(node))

        logger.debug(f"Unsupported expression type: {kind}")
        if value is not None and not isinstance(value, (dict, list)):
            return Unrecognized(value=str(value), kind=kind)
        return Unrecognized(kind=kind)

    def _convert_untyped(self, node: Dict[str, Any]) -> Expression:
        if isinstance(node.get("ast"), dict):
            return Subquery(self.convert_select(node["ast"]))
        if isinstance(node.get("columns"), list):
            return ExpressionList(
                [self.convert_expression(column) for column in node["columns"]],
                parenthesized=False,
            )
        if "expr" in node:
            return self.convert_expression(node["expr"])

        value = node.get("value")
        logger.debug("Expression without type")
        if value is not None and not isinstance(value, (dict, list)):
            return Unrecognized(value=str(value))
        return Unrecognized()

    def _convert_column_ref(self, node: Dict[str, Any]) -> ColumnRef:
        column = node.get("column")
        table = name_text(node.get("table"))
        schema = name_text(node.get("db")) or name_text(node.get("schema"))
        if table and schema:
            table = f"{schema}.{table}"
        return ColumnRef(name_text(column, UNKNOWN_COLUMN), table)

    def find_subquery(self, node: Any) -> Optional[Select]:
        """
        Locate a SELECT attached directly or wrapped in a one-item list.

        Returns:
            Converted Select, or None when node holds no subquery
        """
        if isinstance(node, list):
            return self.find_subquery(node[0]) if len(node) == 1 else None
        if not isinstance(node, dict):
            return None
        if isinstance(node.get("ast"), dict):
            return self.convert_select(node["ast"])
        if node.get("type") == "select":
            return self.convert_select(node)
        if node.get("type") == "expr_list":
            return self.find_subquery(node.get("value"))
        return None

    def _list_items(self, node: Any) -> List[Expression]:
        if isinstance(node, dict) and node.get("type") == "expr_list":
            node = node.get("value")
        return [self.convert_expression(item) for item in _as_list(node)]

    def _between_bounds(self, node: Any) -> Tuple[Expression, Expression]:
        items = self._list_items(node)
        if len(items) >= 2:
            return items[0], items[1]
        logger.debug("BETWEEN without two bounds")
        low = items[0] if items else Unrecognized()
        return low, Unrecognized()

    def _in_predicate(self, left: Any, right: Any, negated: bool) -> InPredicate:
        value = self.convert_expression(left)
        subquery = self.find_subquery(right)
        if subquery is not None:
            return InPredicate(value, subquery=subquery, negated=negated)
        return InPredicate(value, items=self._list_items(right), negated=negated)

    def _quantified(self, node: Any) -> Optional[Quantified]:
        if not isinstance(node, dict) or node.get("type") != "function":
            return None
        name = (name_text(node.get("name")) or "").upper()
        if name not in QUANTIFIERS:
            return None
        subquery = self.find_subquery(self._raw_args(node.get("args")))
        if subquery is None:
            return None
        return Quantified(name, subquery)

    def _convert_binary(self, node: Dict[str, Any]) -> Expression:
        operator = " ".join(str(node.get("operator") or "").upper().split())
        left, right = node.get("left"), node.get("right")

        if operator in ("BETWEEN", "NOT BETWEEN"):
            low, high = self._between_bounds(right)
            return Between(self.convert_expression(left), low, high, negated=operator == "NOT BETWEEN")

        if operator in ("IN", "NOT IN"):
            return self._in_predicate(left, right, negated=operator == "NOT IN")

        if operator == "NOT" and isinstance(right, dict):
            inner = " ".join(str(right.get("operator") or "").upper().split())
            value = left if left is not None else right.get("left")
            if inner == "BETWEEN":
                low, high = self._between_bounds(right.get("right"))
                return Between(self.convert_expression(value), low, high, negated=True)
            if inner == "IN":
                return self._in_predicate(value, right.get("right"), negated=True)

        if operator in ("AND", "OR"):
            return self._convert_chain(node, operator)

        quantified = self._quantified(right)
        return BinaryOp(
            operator,
            self.convert_expression(left),
            quantified if quantified is not None else self.convert_expression(right),
        )

    def _convert_chain(self, node: Dict[str, Any], operator: str) -> Expression:
        """Convert a left-deep AND/OR chain without recursing along its length."""
        spine = [node]
        current = node.get("left")
        while (isinstance(current, dict) and current.get("type") == "binary_expr"
               and str(current.get("operator") or "").upper() == operator
               and not current.get("parentheses")):
            spine.append(current)
            current = current.get("left")

        result = self.convert_expression(current)
        for item in reversed(spine):
            result = BinaryOp(operator, result, self.convert_expression(item.get("right")))
        return result

    def _exists_subquery(self, node: Any) -> Optional[Select]:
        if not isinstance(node, dict):
            return None
        if node.get("type") == "function" and (name_text(node.get("name")) or "").upper() == "EXISTS":
            return self.find_subquery(self._raw_args(node.get("args")))
        return None

    def _convert_unary(self, node: Dict[str, Any]) -> Expression:
        operator = " ".join(str(node.get("operator") or "").upper().split())
        inner = node.get("expr")

        if operator == "NOT" and isinstance(inner, dict):
            if inner.get("type") == "binary_expr":
                inner_op = " ".join(str(inner.get("operator") or "").upper().split())
                if inner_op == "BETWEEN":
                    low, high = self._between_bounds(inner.get("right"))
                    return Between(self.convert_expression(inner.get("left")), low, high, negated=True)
                if inner_op == "IN":
                    return self._in_predicate(inner.get("left"), inner.get("right"), negated=True)
            subquery = self._exists_subquery(inner)
            if subquery is not None:
                return Exists(subquery, negated=True)

        if operator in ("EXISTS", "NOT EXISTS"):
            subquery = self.find_subquery(inner)
            if subquery is not None:
                return Exists(subquery, negated=operator == "NOT EXISTS")

        return UnaryOp(
            operator,
            self.convert_expression(inner),
            postfix=operator not in PREFIX_UNARY_OPERATORS,
        )

    def _raw_args(self, args: Any) -> List[Any]:
        """Argument payloads: {value: [...]}, {expr: ...} or a bare list."""
        if isinstance(args, dict):
            if "value" in args:
                return _as_list(args["value"])
            if "expr" in args:
                return _as_list(args["expr"])
            return []
        return _as_list(args)

    def _convert_args(self, args: Any) -> List[Expression]:
        return [self.convert_expression(arg) for arg in self._raw_args(args)]

    def _convert_function(self, node: Dict[str, Any]) -> Expression:
        name = name_text(node.get("name"), UNKNOWN_FUNCTION)
        upper = name.upper()

        if upper == "EXISTS":
            subquery = self.find_subquery(self._raw_args(node.get("args")))
            if subquery is not None:
                return Exists(subquery)
        if upper in QUANTIFIERS:
            quantified = self._quantified(node)
            if quantified is not None:
                return quantified

        args = self._convert_args(node.get("args"))
        over = self._convert_over(node.get("over"))
        if over is not None:
            return WindowCall(name, args, over)
        return FunctionCall(name, args)

    def _convert_aggregate(self, node: Dict[str, Any]) -> AggregateCall:
        args = node.get("args")
        distinct = False
        items: List[Any] = []
        if isinstance(args, dict):
            distinct = _is_distinct(args.get("distinct"))
            expr = args.get("expr")
            if isinstance(expr, dict) and expr.get("type") == "expr_list":
                items = _as_list(expr.get("value"))
            elif expr is not None:
                items = [expr]
        else:
            items = _as_list(args)

        return AggregateCall(
            name=name_text(node.get("name"), UNKNOWN_FUNCTION),
            args=[self.convert_expression(item) for item in items],
            distinct=distinct,
            over=self._convert_over(node.get("over")),
        )

    def _convert_over(self, over: Any) -> Optional[WindowSpec]:
        if not isinstance(over, dict):
            return None
        spec = over.get("as_window_specification", over)
        if isinstance(spec, dict):
            spec = spec.get("window_specification", spec)
        if not isinstance(spec, dict):
            return WindowSpec()

        partition_by = []
        for item in _as_list(spec.get("partitionby")):
            if isinstance(item, dict) and "expr" in item and item.get("type") in (None, "expr"):
                item = item["expr"]
            partition_by.append(self.convert_expression(item))

        return WindowSpec(
            partition_by=partition_by,
            order_by=[self._convert_order_item(item) for item in _as_list(spec.get("orderby"))],
        )

    def _convert_case(self, node: Dict[str, Any]) -> Case:
        case = Case(whens=[], operand=self._optional(node.get("expr")))
        for arg in _as_list(node.get("args")):
            if not isinstance(arg, dict):
                continue
            if arg.get("type") == "when":
                case.whens.append(CaseWhen(
                    condition=self.convert_expression(arg.get("cond")),
                    result=self.convert_expression(arg.get("result")),
                ))
            elif arg.get("type") == "else":
                case.else_result = self.convert_expression(arg.get("result"))
        return case

    def _data_type_text(self, target: Any) -> str:
        if isinstance(target, list):
            target = target[0] if target else None
        if isinstance(target, str):
            return target
        if not isinstance(target, dict):
            return "unknown"

        text = str(target.get("dataType") or target.get("type") or "unknown")
        length = target.get("length")
        scale = target.get("scale")
        if length is not None and scale is not None:
            text += f"({length}, {scale})"
        elif length is not None:
            text += f"({length})"
        return text

    def _convert_cast(self, node: Dict[str, Any]) -> Cast:
        symbol = node.get("symbol") or node.get("operator")
        return Cast(
            expression=self.convert_expression(node.get("expr")),
            target_type=self._data_type_text(node.get("target")),
            syntax=CastSyntax.OPERATOR if symbol == "::" else CastSyntax.CALL,
        )

    def _convert_expr_list(self, node: Dict[str, Any]) -> Expression:
        items = self._list_items(node)
        if len(items) == 1 and isinstance(items[0], Subquery):
            return items[0]
        return ExpressionList(items)

    def _convert_extract(self, node: Dict[str, Any]) -> Expression:
        args = node.get("args") if isinstance(node.get("args"), dict) else node
        field = name_text(args.get("field"), "")
        return Extract(str(field).upper(), self.convert_expression(args.get("source")))
