"""
SQL Formatter - Orchestrates one formatting call

text -> split statements -> take hint out -> parse -> render -> terminator
-> put hint back. Rendering never raises; parse failures surface as
SqlParseError, or as the unchanged input through format_sql.
"""

from typing import Any, List, Optional

from .config import FormatterOptions
from .constants import STATEMENT_SEPARATOR, STATEMENT_TERMINATOR
from .loaders import AstLoader, LoaderFactory, NodeSqlParserLoader, SqlParseError
from .models import Statement
from .renderers import render_statement
from .utils import SQLStatement, extract_hint, has_comments, restore_hint, split_sql_statements

import logging
logger = logging.getLogger(__name__)


class SqlFormatter:
    """
    Formats SQL text or parser ASTs into gutter-aligned SQL.

    Usage:
        formatter = SqlFormatter(FormatterOptions(keyword_case=KeywordCase.LOWER))
        text = formatter.format("select id, name from users")
    """

    def __init__(self, options: Optional[FormatterOptions] = None):
        """
        Initialize the formatter.

        Args:
            options: Formatting options (defaults if None)

        Raises:
            ValueError: If options.parser names no registered loader
        """
        self.options = options or FormatterOptions()
        loader = LoaderFactory.create(self.options.parser, self.options.dialect)
        if loader is None:
            raise ValueError(
                f"Unknown parser '{self.options.parser}', "
                f"expected one of: {', '.join(LoaderFactory.supported_types())}"
            )
        self.loader: AstLoader = loader

    def format(self, sql: str) -> str:
        """
        Format SQL text.

        With an AST-only loader configured, sql is taken to be the JSON
        text of a parsed AST.

        Args:
            sql: One or more SQL statements

        Returns:
            Formatted statements separated by a blank line

        Raises:
            SqlParseError: If a statement cannot be parsed
        """
        if not sql or not sql.strip():
            return sql

        if not self.loader.accepts_sql:
            return self.format_ast(sql)

        pieces = split_sql_statements(sql, self.options.dialect)
        return STATEMENT_SEPARATOR.join(self._format_piece(piece) for piece in pieces)

    def _format_piece(self, piece: SQLStatement) -> str:
        hint = extract_hint(piece.text)
        if has_comments(hint.sql):
            logger.warning(
                f"Comments in statement at line {piece.line_start} are not kept in the output"
            )

        statements = self.loader.load(hint.sql)
        rendered = self._render_all(statements, compact_select=piece.starts_with_with)
        return restore_hint(rendered, hint.comment)

    def format_ast(self, ast: Any, compact_select: bool = False) -> str:
        """
        Format an already parsed node-sql-parser AST.

        Args:
            ast: AST dict, list of dicts, or their JSON text
            compact_select: Keep the first SELECT column on the keyword line

        Returns:
            Formatted statements separated by a blank line

        Raises:
            SqlParseError: If JSON text cannot be decoded
        """
        loader = self.loader
        if loader.accepts_sql:
            loader = NodeSqlParserLoader(self.options.dialect)
        return self._render_all(loader.load(ast), compact_select=compact_select)

    def _render_all(self, statements: List[Statement], compact_select: bool) -> str:
        rendered = []
        for statement in statements:
            text = render_statement(statement, self.options, compact_select=compact_select)
            if self.options.insert_terminator and not text.endswith(STATEMENT_TERMINATOR):
                text += STATEMENT_TERMINATOR
            rendered.append(text)
        return STATEMENT_SEPARATOR.join(rendered)


def format_sql(
    sql: str,
    options: Optional[FormatterOptions] = None,
    fallback_to_original: bool = True,
) -> str:
    """
    Format SQL text.

    Args:
        sql: SQL text
        options: Formatting options (defaults if None)
        fallback_to_original: Return sql unchanged when it cannot be
            parsed instead of raising

    Returns:
        Formatted SQL, or sql itself on a parse failure with fallback

    Raises:
        SqlParseError: If parsing fails and fallback_to_original is False
    """
    try:
        return SqlFormatter(options).format(sql)
    except SqlParseError as e:
        if not fallback_to_original:
            raise
        logger.warning(f"Could not parse SQL, returning it unchanged: {e}")
        return sql


def render_ast(ast: Any, options: Optional[FormatterOptions] = None, compact_select: bool = False) -> str:
    """Format a node-sql-parser AST; see SqlFormatter.format_ast."""
    return SqlFormatter(options).format_ast(ast, compact_select=compact_select)
