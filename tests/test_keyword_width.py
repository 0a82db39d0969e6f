"""
Unit tests for the keyword width analyzer.
"""
from sqlgutter.constants import DEFAULT_KEYWORD_WIDTH
from sqlgutter.core import (
    collect_block_keywords,
    collect_statement_keywords,
    compute_keyword_width,
    count_and_keywords,
)
from sqlgutter.models import (
    BinaryOp,
    ColumnRef,
    CommonTableExpression,
    Delete,
    FromItem,
    Insert,
    Limit,
    NumberLiteral,
    OrderItem,
    Select,
    SelectColumn,
    TableRef,
    UnsupportedStatement,
    Update,
    WithClause,
)


def _eq(name, value):
    return BinaryOp("=", ColumnRef(name), NumberLiteral(str(value)))


def _simple_select(**clauses):
    return Select(
        columns=[SelectColumn(ColumnRef("a"))],
        from_items=[FromItem(TableRef("t"))],
        **clauses
    )


class TestCountAndKeywords:
    """Test counting of gutter AND keywords."""

    def test_counts_each_and_node(self):
        """Test that a chain of three conditions yields two ANDs."""
        condition = BinaryOp("AND", BinaryOp("AND", _eq("a", 1), _eq("b", 2)), _eq("c", 3))
        assert count_and_keywords(condition) == ["AND", "AND"]

    def test_or_branches_are_not_counted(self):
        """Test that ANDs under an OR are ignored."""
        condition = BinaryOp("OR", BinaryOp("AND", _eq("a", 1), _eq("b", 2)), _eq("c", 3))
        assert count_and_keywords(condition) == []

    def test_none_condition(self):
        """Test that a missing condition counts nothing."""
        assert count_and_keywords(None) == []


class TestStatementKeywords:
    """Test keyword collection per statement kind."""

    def test_select_always_has_select(self):
        """Test that a bare SELECT still yields SELECT."""
        assert collect_statement_keywords(Select()) == ["SELECT"]

    def test_select_clauses(self):
        """Test that each present clause contributes its keyword."""
        select = _simple_select(
            where=_eq("a", 1),
            group_by=[ColumnRef("a")],
            having=_eq("b", 2),
            order_by=[OrderItem(ColumnRef("a"))],
            limit=Limit(NumberLiteral("10"), NumberLiteral("5")),
        )
        keywords = collect_statement_keywords(select)
        for keyword in ("SELECT", "FROM", "WHERE", "GROUP BY", "HAVING", "ORDER BY", "LIMIT", "OFFSET"):
            assert keyword in keywords

    def test_join_keywords(self):
        """Test that joins add their keyword, ON and one AND per conjunct."""
        select = Select(
            columns=[SelectColumn(ColumnRef("a"))],
            from_items=[
                FromItem(TableRef("t")),
                FromItem(
                    TableRef("u"),
                    join="LEFT OUTER JOIN",
                    on=BinaryOp("AND", _eq("a", 1), _eq("b", 2)),
                ),
            ],
        )
        keywords = collect_statement_keywords(select)
        assert "LEFT OUTER JOIN" in keywords
        assert "ON" in keywords
        assert keywords.count("AND") == 1
        assert compute_keyword_width(select) == len("LEFT OUTER JOIN")

    def test_dml_keywords(self):
        """Test the fixed keyword sets of UPDATE, DELETE and INSERT."""
        assert collect_statement_keywords(Update(TableRef("t"), where=_eq("a", 1))) == ["UPDATE", "SET", "WHERE"]
        assert collect_statement_keywords(Delete(TableRef("t"))) == ["DELETE FROM"]
        assert collect_statement_keywords(Insert(TableRef("t"))) == ["INSERT INTO", "VALUES"]

    def test_insert_select_includes_query_keywords(self):
        """Test that INSERT ... SELECT shares the query's keywords."""
        insert = Insert(TableRef("t"), select=_simple_select(order_by=[OrderItem(ColumnRef("a"))]))
        keywords = collect_statement_keywords(insert)
        assert "ORDER BY" in keywords
        assert "VALUES" not in keywords

    def test_unsupported_statement_has_no_keywords(self):
        """Test that unknown statements fall back to the default width."""
        statement = UnsupportedStatement("CREATE")
        assert collect_statement_keywords(statement) == []
        assert compute_keyword_width(statement) == DEFAULT_KEYWORD_WIDTH


class TestBlockWidth:
    """Test width sharing across CTEs and set operations."""

    def test_simple_select_width_is_six(self):
        """Test that SELECT sets the width of a simple query."""
        assert compute_keyword_width(_simple_select(where=_eq("a", 1))) == 6

    def test_cte_keywords_widen_main_query(self):
        """Test that a CTE body's ORDER BY widens the whole block."""
        body = _simple_select(order_by=[OrderItem(ColumnRef("a"))])
        main = _simple_select(
            with_clause=WithClause([CommonTableExpression("c", body)])
        )
        keywords = collect_block_keywords(main)
        assert "WITH" in keywords
        assert "ORDER BY" in keywords
        assert compute_keyword_width(main) == 8

    def test_set_operation_branches_share_width(self):
        """Test that the continuation of a UNION contributes its keywords."""
        second = _simple_select(group_by=[ColumnRef("a")])
        first = _simple_select(set_op="UNION", next=second)
        assert compute_keyword_width(first) == 8

    def test_malformed_with_is_tolerated(self):
        """Test that a WITH clause without CTE list still counts WITH."""
        main = _simple_select(with_clause=WithClause(ctes=None))
        assert "WITH" in collect_block_keywords(main)
        assert compute_keyword_width(main) == 6
