"""Utility helpers around the formatting core."""

from .sql_splitter import SQLStatement, first_keyword, split_sql_statements
from .hint_comments import HintComment, extract_hint, has_comments, restore_hint
from .format_error_handler import FormatErrorInfo, format_parse_error, parse_format_error

__all__ = [
    "SQLStatement",
    "first_keyword",
    "split_sql_statements",
    "HintComment",
    "extract_hint",
    "has_comments",
    "restore_hint",
    "FormatErrorInfo",
    "format_parse_error",
    "parse_format_error",
]
