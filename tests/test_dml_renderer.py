"""
Layout tests for UPDATE, DELETE and INSERT.
"""
from ast_builders import binary, col, column, expr_list, num, select, table, text
from sqlgutter import render_ast
from sqlgutter.config import FormatterOptions, KeywordCase


class TestUpdate:
    """Test UPDATE layout."""

    def test_update_with_where(self):
        """Test SET assignments continued with commas."""
        ast = {
            "type": "update",
            "table": [table("t")],
            "set": [{"column": "a", "value": num(1)}, {"column": "b", "value": text("x")}],
            "where": binary("=", col("id"), num(5)),
        }
        assert render_ast(ast) == "UPDATE t\n   SET a = 1\n     , b = 'x'\n WHERE id = 5;"

    def test_update_without_where(self):
        """Test that the width is still taken from UPDATE."""
        ast = {"type": "update", "table": [table("t")], "set": [{"column": "a", "value": num(1)}], "where": None}
        assert render_ast(ast) == "UPDATE t\n   SET a = 1;"


class TestDelete:
    """Test DELETE layout."""

    def test_delete_with_where(self):
        """Test that WHERE ends under DELETE FROM."""
        ast = {"type": "delete", "from": [table("t")], "where": binary("=", col("id"), num(5))}
        assert render_ast(ast) == "DELETE FROM t\n      WHERE id = 5;"

    def test_delete_lower_case(self):
        """Test keyword casing of the two-word keyword."""
        ast = {"type": "delete", "from": [table("t")], "where": None}
        options = FormatterOptions(keyword_case=KeywordCase.LOWER)
        assert render_ast(ast, options) == "delete from t;"


class TestInsert:
    """Test INSERT layout."""

    def test_insert_values(self):
        """Test one VALUES row per line."""
        ast = {
            "type": "insert",
            "table": [table("t")],
            "columns": ["a", "b"],
            "values": [expr_list(num(1), text("x")), expr_list(num(2), text("y"))],
        }
        assert render_ast(ast) == lines(
            "INSERT INTO t (a, b)",
            "     VALUES (1, 'x')",
            "          , (2, 'y');",
        )

    def test_insert_values_wrapped_payload(self):
        """Test the {type: values, values: [...]} encoding."""
        ast = {
            "type": "insert",
            "table": [table("t")],
            "columns": None,
            "values": {"type": "values", "values": [expr_list(num(1))]},
        }
        assert render_ast(ast) == "INSERT INTO t\n     VALUES (1);"

    def test_insert_select_shares_gutter(self):
        """Test that the source query aligns to INSERT INTO."""
        ast = {
            "type": "insert",
            "table": [table("t")],
            "columns": ["a"],
            "values": select([column(col("a"))], [table("u")]),
        }
        assert render_ast(ast) == lines(
            "INSERT INTO t (a)",
            "     SELECT a",
            "       FROM u;",
        )


class TestUnsupportedStatement:
    """Test statements without a layout."""

    def test_placeholder_comment(self):
        """Test that unknown statement kinds render a placeholder."""
        assert render_ast({"type": "create"}) == "/* unsupported statement: CREATE */;"


def lines(*parts):
    return "\n".join(parts)
