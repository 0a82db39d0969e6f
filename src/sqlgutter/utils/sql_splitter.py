"""
SQL Splitter - Split SQL text into individual statements before formatting.

Handles:
- Standard semicolon-delimited statements
- T-SQL GO batch separator
- Comments (single-line -- and multi-line /* */)
- Strings with embedded semicolons (via sqlparse)
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

import sqlparse
from sqlparse import tokens as T
from sqlparse.lexer import tokenize

import logging
logger = logging.getLogger(__name__)


@dataclass
class SQLStatement:
    """Represents a single SQL statement."""
    text: str           # The SQL text, terminator included when present
    line_start: int     # Starting line number (1-based)
    line_end: int       # Ending line number (1-based)
    first_keyword: str  # Upper-cased first word, comments skipped

    @property
    def starts_with_with(self) -> bool:
        """True for statements opening with a CTE list."""
        return self.first_keyword == "WITH"


def split_sql_statements(sql_text: str, dialect: str = "postgres") -> List[SQLStatement]:
    """
    Split SQL text into individual statements.

    Args:
        sql_text: Full SQL text with one or more statements
        dialect: SQL dialect; "tsql" also splits on GO lines

    Returns:
        List of SQLStatement objects
    """
    if not sql_text or not sql_text.strip():
        return []

    statements = []

    # For SQL Server, first split on GO statements
    if dialect == "tsql":
        batches = _split_on_go(sql_text)
    else:
        batches = [(sql_text, 1)]

    for batch_text, batch_start_line in batches:
        for position, end in _statement_spans(batch_text):
            stmt_text = batch_text[position:end]
            line_start = batch_start_line + batch_text.count("\n", 0, position)
            statements.append(SQLStatement(
                text=stmt_text,
                line_start=line_start,
                line_end=line_start + stmt_text.count("\n"),
                first_keyword=first_keyword(stmt_text),
            ))

    logger.debug(f"Split input into {len(statements)} statement(s)")
    return statements


def _statement_spans(batch_text: str) -> List[Tuple[int, int]]:
    """
    Locate each sqlparse statement inside batch_text.

    Recent sqlparse releases also end a statement at a GO keyword. GO is
    only a separator on its own line in tsql (see _split_on_go), so such
    pieces are joined back onto the statement that follows.

    Returns:
        List of (start, end) offsets into batch_text
    """
    spans = []
    search_from = 0
    join_next = False
    for stmt_text in sqlparse.split(batch_text):
        stmt_text = stmt_text.strip()
        if not stmt_text:
            continue

        position = batch_text.find(stmt_text, search_from)
        if position < 0:
            position = search_from
        end = position + len(stmt_text)
        search_from = end

        if join_next:
            spans[-1] = (spans[-1][0], end)
        else:
            spans.append((position, end))
        join_next = _ends_with_go(stmt_text)

    return spans


def _ends_with_go(stmt_text: str) -> bool:
    """True when the last code token is a GO keyword (comments ignored)."""
    last = None
    for ttype, value in tokenize(stmt_text):
        if ttype in T.Whitespace or ttype in T.Comment:
            continue
        last = (ttype, value)
    if last is None or last[0] not in T.Keyword:
        return False
    return last[1].split()[0].upper() == "GO"


def _split_on_go(sql_text: str) -> List[Tuple[str, int]]:
    """
    Split T-SQL text on GO batch separators.

    GO must be on its own line (possibly with whitespace).

    Returns:
        List of (batch_text, start_line) tuples
    """
    # Matches: "GO", "  GO  ", "go", but not "GOING" or "ERGO"
    go_pattern = re.compile(r'^\s*GO\s*$', re.IGNORECASE)

    batches = []
    current_batch_lines = []
    current_start_line = 1

    for i, line in enumerate(sql_text.split('\n'), 1):
        if go_pattern.match(line):
            if current_batch_lines:
                batches.append(('\n'.join(current_batch_lines), current_start_line))
            current_batch_lines = []
            current_start_line = i + 1
        else:
            current_batch_lines.append(line)

    if current_batch_lines:
        batches.append(('\n'.join(current_batch_lines), current_start_line))

    return batches


def first_keyword(stmt_text: str) -> str:
    """
    Return the first word of a statement in upper case.

    Comments are stripped first, so a leading hint or header comment
    does not hide the keyword.
    """
    cleaned = sqlparse.format(stmt_text, strip_comments=True).strip()
    if not cleaned:
        return ""
    match = re.match(r'\(*\s*(\w+)', cleaned)
    return match.group(1).upper() if match else ""
