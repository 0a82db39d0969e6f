"""
Keyword Width Analyzer - Scan a statement for the keywords that sit in the gutter

The gutter width of a statement block is the length of its longest
clause keyword. Scanning happens before any rendering so the width can
be shared by the main query, its CTE bodies and set-operation branches.
"""

from typing import List, Optional

from ..constants import DEFAULT_KEYWORD_WIDTH
from ..models import (
    BinaryOp,
    Delete,
    Expression,
    Insert,
    Select,
    Statement,
    Update,
)

import logging
logger = logging.getLogger(__name__)


def count_and_keywords(condition: Optional[Expression]) -> List[str]:
    """
    Return one "AND" per AND node reachable through AND nodes only.

    OR branches stop the descent: an AND under an OR renders inline and
    never reaches the gutter.
    """
    keywords = []
    pending = [condition]
    while pending:
        node = pending.pop()
        if isinstance(node, BinaryOp) and node.operator.upper() == "AND":
            keywords.append("AND")
            pending.append(node.right)
            pending.append(node.left)
    return keywords


def _select_keywords(select: Select) -> List[str]:
    keywords = ["SELECT"]

    if select.from_items:
        keywords.append("FROM")
    if select.where is not None:
        keywords.append("WHERE")
    if select.group_by:
        keywords.append("GROUP BY")
    if select.having is not None:
        keywords.append("HAVING")
    if select.order_by:
        keywords.append("ORDER BY")
    if select.limit is not None:
        if select.limit.count is not None:
            keywords.append("LIMIT")
        if select.limit.offset is not None:
            keywords.append("OFFSET")

    for item in select.from_items:
        if not item.join:
            continue
        keywords.append(item.join.upper())
        if item.on is not None:
            keywords.append("ON")
            keywords.extend(count_and_keywords(item.on))

    return keywords


def collect_statement_keywords(statement: Statement) -> List[str]:
    """
    Collect the gutter keywords of a single statement.

    Args:
        statement: Any statement node

    Returns:
        Keyword texts in upper case, duplicates kept
    """
    if isinstance(statement, Select):
        return _select_keywords(statement)

    if isinstance(statement, Update):
        keywords = ["UPDATE", "SET"]
        if statement.where is not None:
            keywords.append("WHERE")
        return keywords

    if isinstance(statement, Delete):
        keywords = ["DELETE FROM"]
        if statement.where is not None:
            keywords.append("WHERE")
        return keywords

    if isinstance(statement, Insert):
        keywords = ["INSERT INTO"]
        if statement.select is not None:
            keywords.extend(collect_block_keywords(statement.select))
        else:
            keywords.append("VALUES")
        return keywords

    return []


def collect_block_keywords(statement: Statement) -> List[str]:
    """
    Collect the keywords of a statement block.

    A block is a statement plus every CTE body feeding it and every
    set-operation branch following it; they all share one gutter.
    """
    keywords = []
    current = statement
    while current is not None:
        keywords.extend(collect_statement_keywords(current))

        if isinstance(current, Select):
            with_clause = current.with_clause
            if with_clause is not None:
                keywords.append("WITH")
                for cte in with_clause.ctes or []:
                    keywords.extend(collect_block_keywords(cte.statement))
            current = current.next
        else:
            current = None

    return keywords


def compute_keyword_width(statement: Statement) -> int:
    """
    Compute the gutter width of a statement block.

    Returns:
        Length of the longest keyword, or DEFAULT_KEYWORD_WIDTH when the
        block has none
    """
    keywords = collect_block_keywords(statement)
    if not keywords:
        return DEFAULT_KEYWORD_WIDTH
    width = max(len(keyword) for keyword in keywords)
    logger.debug(f"Keyword width {width} from {sorted(set(keywords))}")
    return width
