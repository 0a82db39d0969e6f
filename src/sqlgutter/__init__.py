"""
SQL Gutter - SQL formatter that right-aligns keywords into a shared gutter
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("sql-gutter")
except PackageNotFoundError:
    # Package not installed (running from a source checkout)
    __version__ = "0.1.0"

from .config import FormatterOptions, KeywordCase
from .formatter import SqlFormatter, format_sql, render_ast
from .loaders import SqlFormatError, SqlParseError
from .renderers import render_statement
from .main import main

__all__ = [
    "FormatterOptions",
    "KeywordCase",
    "SqlFormatter",
    "SqlFormatError",
    "SqlParseError",
    "format_sql",
    "render_ast",
    "render_statement",
    "main",
    "__version__",
]
