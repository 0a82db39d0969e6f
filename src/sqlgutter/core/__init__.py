"""
Core layout primitives: indent contexts and keyword-width analysis
"""

from .indent_context import ContextKind, IndentContext, root_context
from .keyword_width import (
    collect_block_keywords,
    collect_statement_keywords,
    compute_keyword_width,
    count_and_keywords,
)

__all__ = [
    "ContextKind",
    "IndentContext",
    "root_context",
    "collect_block_keywords",
    "collect_statement_keywords",
    "compute_keyword_width",
    "count_and_keywords",
]
