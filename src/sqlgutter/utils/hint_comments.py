"""
Hint Comments - Keep an optimizer hint attached to the first keyword

A block comment directly after the first keyword of the input (for
example SELECT /*+ INDEX(t idx) */ ...) is taken out before parsing,
since parsers drop comments, and put back after the first keyword of
the formatted output.
"""

import re
from dataclasses import dataclass
from typing import Optional

from sqlparse import tokens as T
from sqlparse.lexer import tokenize

import logging
logger = logging.getLogger(__name__)


_FIRST_WORD = re.compile(r"^(\s*)(\w+)")


@dataclass
class HintComment:
    """Result of hint extraction."""
    sql: str                    # Input without the hint
    comment: Optional[str]      # The hint text, None when there was none


def extract_hint(sql: str) -> HintComment:
    """
    Remove a block comment that immediately follows the first keyword.

    Args:
        sql: Original SQL text

    Returns:
        HintComment with the cleaned SQL and the comment (or None)
    """
    tokens = list(tokenize(sql))

    index = 0
    while index < len(tokens) and tokens[index][0] in T.Whitespace:
        index += 1
    if index >= len(tokens) or not (tokens[index][0] in T.Keyword or tokens[index][0] in T.Name):
        return HintComment(sql=sql, comment=None)

    index += 1
    while index < len(tokens) and tokens[index][0] in T.Whitespace:
        index += 1
    if index >= len(tokens):
        return HintComment(sql=sql, comment=None)

    ttype, value = tokens[index]
    if ttype not in T.Comment or not value.startswith("/*"):
        return HintComment(sql=sql, comment=None)

    cleaned = "".join(token_value for _, token_value in tokens[:index])
    cleaned += "".join(token_value for _, token_value in tokens[index + 1:])
    logger.debug(f"Extracted hint comment {value!r}")
    return HintComment(sql=cleaned, comment=value)


def restore_hint(formatted: str, comment: Optional[str]) -> str:
    """
    Insert the comment right after the first keyword of formatted text.

    Args:
        formatted: Formatted SQL
        comment: Comment returned by extract_hint

    Returns:
        Formatted SQL with the comment restored
    """
    if not comment:
        return formatted
    match = _FIRST_WORD.match(formatted)
    if match is None:
        return f"{comment} {formatted}"
    return f"{match.group(0)} {comment}{formatted[match.end():]}"


def has_comments(sql: str) -> bool:
    """True when sql contains any comment token."""
    return any(ttype in T.Comment for ttype, _ in tokenize(sql))
