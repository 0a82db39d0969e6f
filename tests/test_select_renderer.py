"""
Layout tests for SELECT statements, fed with node-sql-parser ASTs.
"""
import pytest

from ast_builders import (
    binary,
    case,
    col,
    column,
    cte,
    expr_list,
    num,
    select,
    table,
    text,
)
from sqlgutter import render_ast
from sqlgutter.config import FormatterOptions, KeywordCase
from sqlgutter.constants import INVALID_CTE


def lines(*parts):
    return "\n".join(parts)


class TestSelectList:
    """Test the SELECT clause."""

    def test_two_columns_standard_mode(self):
        """Test keyword alone, then one column per line."""
        ast = select([column(col("id")), column(col("name"))], [table("users")])
        assert render_ast(ast) == lines(
            "SELECT",
            "       id",
            "     , name",
            "  FROM users;",
        )

    def test_two_columns_compact_mode(self):
        """Test that compact mode keeps the first column on the keyword line."""
        ast = select([column(col("id")), column(col("name"))], [table("users")])
        assert render_ast(ast, compact_select=True) == lines(
            "SELECT id",
            "     , name",
            "  FROM users;",
        )

    def test_single_column_is_inline(self):
        """Test that one column stays on the keyword line."""
        ast = select([column(col("id"))], [table("users")])
        assert render_ast(ast) == "SELECT id\n  FROM users;"

    def test_star(self):
        """Test SELECT *."""
        ast = select("*", [table("users")])
        assert render_ast(ast) == "SELECT *\n  FROM users;"

    def test_distinct(self):
        """Test SELECT DISTINCT."""
        ast = select([column(col("id"))], [table("users")], distinct="DISTINCT")
        assert render_ast(ast) == "SELECT DISTINCT id\n  FROM users;"

    def test_aliases_are_aligned(self):
        """Test that every AS lands in the same column."""
        ast = select(
            [column(col("id"), "ident"), column(col("name")), column(col("created_at"), "c")],
            [table("users")],
        )
        rendered = render_ast(ast).split("\n")
        assert rendered[1] == "       id         AS ident"
        assert rendered[2] == "     , name"
        assert rendered[3] == "     , created_at AS c"
        assert rendered[1].index(" AS ") == rendered[3].index(" AS ")

    def test_alias_after_multiline_expression(self):
        """Test that a CASE column gets its alias after END."""
        ast = select(
            [column(case([(binary("=", col("a"), num(1)), text("x"))], text("y")), "label")],
            [table("t")],
        )
        assert render_ast(ast) == lines(
            "SELECT CASE",
            "         WHEN a = 1 THEN 'x'",
            "         ELSE 'y'",
            "       END AS label",
            "  FROM t;",
        )

    def test_scalar_subquery_column(self):
        """Test the deep layout of a subquery in the SELECT list."""
        inner = select(
            [column({"type": "aggr_func", "name": "MAX", "args": {"expr": col("x")}})],
            [table("u")],
        )
        ast = select([column({"ast": inner}, "m")], [table("t")])
        assert render_ast(ast) == lines(
            "SELECT (",
            "         SELECT MAX(x)",
            "           FROM u",
            "        ) AS m",
            "  FROM t;",
        )


class TestFromAndJoins:
    """Test FROM, joins and derived tables."""

    def test_join_with_conditions(self):
        """Test join keyword, ON and AND all right-aligned to the join width."""
        on = binary("AND", binary("=", col("id", "u"), col("user_id", "o")), binary("=", col("status", "o"), text("x")))
        ast = select(
            [column(col("id", "u")), column(col("total", "o"))],
            [table("users", "u"), table("orders", "o", join="INNER JOIN", on=on)],
        )
        assert render_ast(ast) == lines(
            "    SELECT",
            "           u.id",
            "         , o.total",
            "      FROM users AS u",
            "INNER JOIN orders AS o",
            "        ON u.id = o.user_id",
            "       AND o.status = 'x';",
        )

    def test_comma_separated_tables(self):
        """Test that extra non-joined tables are comma-prefixed."""
        ast = select([column(col("a"))], [table("t"), table("u")])
        assert render_ast(ast) == lines(
            "SELECT a",
            "  FROM t",
            "     , u;",
        )

    def test_join_using(self):
        """Test JOIN ... USING."""
        item = table("u", join="LEFT JOIN")
        item["using"] = ["id"]
        ast = select([column(col("a"))], [table("t"), item])
        assert render_ast(ast) == lines(
            "   SELECT a",
            "     FROM t",
            "LEFT JOIN u USING (id);",
        )

    def test_derived_table(self):
        """Test a FROM subquery with a minimum inner width of 8."""
        inner = select([column(col("x"))], [table("t")])
        ast = select([column(col("x"))], [{"expr": {"ast": inner}, "as": "sub"}])
        assert render_ast(ast) == lines(
            "SELECT x",
            "  FROM (",
            "          SELECT x",
            "            FROM t",
            "       ) AS sub;",
        )

    def test_qualified_table_name(self):
        """Test schema-qualified tables."""
        ast = select([column(col("a"))], [{"db": "public", "table": "t", "as": None}])
        assert render_ast(ast) == "SELECT a\n  FROM public.t;"


class TestConditions:
    """Test WHERE layouts."""

    def test_and_chain(self):
        """Test one line per conjunct."""
        where = binary("AND", binary("AND", binary("=", col("a"), num(1)), binary("=", col("b"), num(2))),
                       binary("=", col("c"), num(3)))
        ast = select([column(col("a"))], [table("t")], where)
        assert render_ast(ast) == lines(
            "SELECT a",
            "  FROM t",
            " WHERE a = 1",
            "   AND b = 2",
            "   AND c = 3;",
        )

    def test_parenthesized_or_stays_inline(self):
        """Test that a parenthesized OR inside an AND stays on one line."""
        where = binary(
            "AND",
            binary("=", col("a"), num(1)),
            binary("OR", binary("=", col("b"), num(2)), binary("=", col("c"), num(3)), parentheses=True),
        )
        ast = select([column(col("a"))], [table("t")], where)
        assert render_ast(ast).endswith(" WHERE a = 1\n   AND (b = 2 OR c = 3);")

    def test_in_list_is_vertical(self):
        """Test the three-value IN list layout."""
        ast = select([column(col("a"))], [table("t")], binary("IN", col("a"), expr_list(num(1), num(2), num(3))))
        assert render_ast(ast) == lines(
            "SELECT a",
            "  FROM t",
            " WHERE a IN (",
            "         1",
            "       , 2",
            "       , 3",
            "       );",
        )

    @pytest.mark.parametrize("where", [
        binary("NOT BETWEEN", col("a"), expr_list(num(1), num(5))),
        {"type": "unary_expr", "operator": "NOT",
         "expr": binary("BETWEEN", col("a"), expr_list(num(1), num(5)))},
        binary("NOT", col("a"), {"type": "binary_expr", "operator": "BETWEEN", "right": expr_list(num(1), num(5))}),
    ])
    def test_not_between_encodings_render_identically(self, where):
        """Test that the three NOT BETWEEN encodings give the same text."""
        ast = select([column(col("a"))], [table("t")], where)
        assert render_ast(ast) == "SELECT a\n  FROM t\n WHERE a NOT BETWEEN 1 AND 5;"

    def test_exists_subquery(self):
        """Test the compact EXISTS layout."""
        inner = select([column(num(1))], [table("u")], binary("=", col("id", "u"), col("id", "t")))
        exists = {"type": "function", "name": "EXISTS", "args": expr_list({"ast": inner})}
        ast = select([column(col("a"))], [table("t")], exists)
        assert render_ast(ast) == lines(
            "SELECT a",
            "  FROM t",
            " WHERE EXISTS (",
            "       SELECT 1",
            "         FROM u",
            "        WHERE u.id = t.id",
            "    );",
        )


class TestClauses:
    """Test GROUP BY, HAVING, ORDER BY and LIMIT."""

    def test_all_trailing_clauses(self):
        """Test that every clause keyword ends at the gutter."""
        ast = select(
            [column(col("dept"))],
            [table("emp")],
            groupby={"columns": [col("dept")]},
            having=binary(">", col("cnt"), num(1)),
            orderby=[{"expr": col("dept"), "type": "DESC"}],
            limit={"seperator": "offset", "value": [num(10), num(5)]},
        )
        assert render_ast(ast) == lines(
            "  SELECT dept",
            "    FROM emp",
            "GROUP BY dept",
            "  HAVING cnt > 1",
            "ORDER BY dept DESC",
            "   LIMIT 10 OFFSET 5;",
        )

    def test_mysql_limit_offset_form(self):
        """Test that LIMIT offset, count is rendered with OFFSET."""
        ast = select([column(col("a"))], [table("t")], limit={"seperator": ",", "value": [num(20), num(10)]})
        assert render_ast(ast).endswith(" LIMIT 10 OFFSET 20;")

    def test_empty_limit_is_skipped(self):
        """Test that a LIMIT without values is dropped."""
        ast = select([column(col("a"))], [table("t")], limit={"seperator": "", "value": []})
        assert render_ast(ast) == "SELECT a\n  FROM t;"


class TestWithAndSetOperations:
    """Test CTE blocks and set operations."""

    def test_cte_shares_the_main_width(self):
        """Test that CTE body and main query align to one gutter."""
        body = select([column(col("id"))], [table("users")], binary("=", col("active"), num(1)))
        ast = select([column(col("id"))], [table("active_users")], binary(">", col("id"), num(10)),
                     **{"with": [cte("active_users", body)]})
        assert render_ast(ast) == lines(
            "  WITH active_users AS (",
            "SELECT id",
            "  FROM users",
            " WHERE active = 1",
            "     )",
            "SELECT id",
            "  FROM active_users",
            " WHERE id > 10;",
        )

    def test_second_cte_is_comma_prefixed(self):
        """Test the separator between CTEs."""
        first = select([column(col("a"))], [table("t")])
        second = select([column(col("a"))], [table("u")], orderby=[{"expr": col("a"), "type": "ASC"}])
        ast = select([column(col("a"))], [table("b")], **{"with": [cte("a", first), cte("b", second)]})
        assert render_ast(ast) == lines(
            "    WITH a AS (",
            "  SELECT a",
            "    FROM t",
            "       )",
            "       , b AS (",
            "  SELECT a",
            "    FROM u",
            "ORDER BY a ASC",
            "       )",
            "  SELECT a",
            "    FROM b;",
        )

    def test_malformed_with_renders_placeholder(self):
        """Test that a non-list WITH payload does not fail the statement."""
        ast = select([column(col("a"))], [table("t")], **{"with": "garbage"})
        assert render_ast(ast) == f"  WITH {INVALID_CTE}\nSELECT a\n  FROM t;"

    def test_union(self):
        """Test the set operator alone on a right-aligned line."""
        second = select([column(col("a"))], [table("u")])
        ast = select([column(col("a"))], [table("t")], set_op="union", _next=second)
        assert render_ast(ast) == lines(
            "SELECT a",
            "  FROM t",
            " UNION",
            "SELECT a",
            "  FROM u;",
        )

    def test_set_operator_wider_than_gutter(self):
        """Test that a long set operator starts at column 0."""
        second = select([column(col("a"))], [table("u")])
        ast = select([column(col("a"))], [table("t")], set_op="union all", _next=second)
        assert render_ast(ast).split("\n")[2] == "UNION ALL"


class TestKeywordCase:
    """Test keyword casing."""

    def test_lower_case_keywords(self):
        """Test that no keyword keeps an upper-case letter."""
        options = FormatterOptions(keyword_case=KeywordCase.LOWER)
        ast = select(
            [column(col("id"), "i"), column({"type": "null", "value": None})],
            [table("users", "u")],
            binary("AND", binary("IS", col("a"), {"type": "null", "value": None}), binary("=", col("b"), num(1))),
        )
        assert render_ast(ast, options) == lines(
            "select",
            "       id as i",
            "     , null",
            "  from users as u",
            " where a is null",
            "   and b = 1;",
        )

    def test_terminator_can_be_disabled(self):
        """Test insert_terminator=False."""
        options = FormatterOptions(insert_terminator=False)
        ast = select([column(col("a"))], [table("t")])
        assert render_ast(ast, options) == "SELECT a\n  FROM t"

    def test_multiple_statements_are_separated_by_blank_line(self):
        """Test that each statement is terminated and separated."""
        ast = [select([column(col("a"))], [table("t")]), select([column(col("b"))], [table("u")])]
        assert render_ast(ast) == "SELECT a\n  FROM t;\n\nSELECT b\n  FROM u;"
